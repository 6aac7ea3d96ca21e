"""数据模型定义"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ObjectiveData:
    """一次运行要填入表单的数据，运行期间不可变"""
    firstName: str
    lastName: str
    dateOfBirth: Optional[str] = None
    medicalId: Optional[str] = None
    gender: Optional[str] = None
    bloodType: Optional[str] = None
    allergies: Optional[str] = None
    currentMedications: Optional[str] = None
    emergencyContactName: Optional[str] = None
    emergencyContactPhone: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ObjectiveData":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, str]:
        """只保留有值的字段，空字段不发送给模型"""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name)}


@dataclass(frozen=True)
class ElementSnapshot:
    """单个页面元素的快照"""
    tag: str  # input|textarea|select|button|a|h2
    type: str
    name: str
    value: str
    label: str

    def render(self) -> str:
        return (
            f'<{self.tag} type="{self.type}" name="{self.name}" '
            f'value="{self.value}">{self.label}</{self.tag}>'
        )


class ActionKind(str, Enum):
    FILL = "fill"
    CLICK = "click"
    SELECT = "select"
    FINISH = "finish"
    UNKNOWN = "unknown"


@dataclass
class Action:
    """模型输出解析后的结构化动作"""
    kind: ActionKind
    label: Optional[str] = None
    value: Optional[str] = None
    role: Optional[str] = None
    name: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Action":
        try:
            kind = ActionKind(data.get("action"))
        except (ValueError, TypeError):
            kind = ActionKind.UNKNOWN
        return cls(
            kind=kind,
            label=data.get("label"),
            value=data.get("value"),
            role=data.get("role"),
            name=data.get("name"),
            raw=data,
        )

    def describe(self) -> str:
        if self.kind in (ActionKind.FILL, ActionKind.SELECT):
            return f"{self.kind.value} {self.label!r} = {self.value!r}"
        if self.kind == ActionKind.CLICK:
            return f"click {self.role} {self.name!r}"
        if self.kind == ActionKind.UNKNOWN:
            return f"unknown {self.raw.get('action')!r}"
        return self.kind.value


class StepSignal(str, Enum):
    """Controller 执行动作后返回给主循环的控制信号"""
    CONTINUE = "continue"
    FINISH = "finish"


class RunOutcome(str, Enum):
    FINISHED = "finished"
    EXHAUSTED = "exhausted"


@dataclass
class RunResult:
    """一次运行的结果"""
    outcome: RunOutcome
    steps: int
    messages: List[Dict[str, str]] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.outcome == RunOutcome.FINISHED
