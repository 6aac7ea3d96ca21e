"""Form Agent 包

包含各个模块：
- models: 数据模型
- perception: 感知模块（页面快照）
- parser: 解析模块（从模型回复中提取动作）
- planner: 规划模块（调用 LLM）
- controller: 执行模块
- memory: 记忆模块（对话历史）
- core: 核心 Agent 类
"""

from .models import (
    Action,
    ActionKind,
    ElementSnapshot,
    ObjectiveData,
    RunOutcome,
    RunResult,
    StepSignal,
)
from .errors import (
    ActionParseError,
    DispatchError,
    ElementNotFoundError,
    FormAgentError,
    UpstreamError,
)
from .config import Settings
from .perception import Perception
from .parser import parse_action
from .planner import Planner
from .controller import Controller
from .memory import ConversationMemory
from .core import FormAgent, run_workflow

__all__ = [
    "Action",
    "ActionKind",
    "ElementSnapshot",
    "ObjectiveData",
    "RunOutcome",
    "RunResult",
    "StepSignal",
    "ActionParseError",
    "DispatchError",
    "ElementNotFoundError",
    "FormAgentError",
    "UpstreamError",
    "Settings",
    "Perception",
    "parse_action",
    "Planner",
    "Controller",
    "ConversationMemory",
    "FormAgent",
    "run_workflow",
]
