"""记忆模块：保存整个运行期间的对话历史"""

from typing import Dict, List, Optional

from . import prompts
from .models import ObjectiveData


class ConversationMemory:
    """
    记忆模块：只追加的对话历史。

    一条 system 消息（目标 + 规则），之后每一步追加一条 user（页面快照）
    和一条 assistant（模型原始回复）。解析失败时再追加一条纠正用的 user 消息，
    不删除错误的 assistant 回复，让模型看到自己的错误。
    """

    def __init__(
        self,
        objective: ObjectiveData,
        submit_button_name: str = "Submit",
        window: Optional[int] = None,
    ):
        self.objective = objective
        self.submit_button_name = submit_button_name
        self.window = window
        self.history: List[Dict[str, str]] = [
            {"role": "system", "content": prompts.build_system_prompt(objective, submit_button_name)}
        ]

    def __len__(self) -> int:
        return len(self.history)

    def add_perception(self, page_state: str):
        """记录当前页面快照"""
        self._append("user", prompts.build_step_prompt(self.objective, page_state))

    def add_reply(self, text: str):
        """记录模型原始回复"""
        self._append("assistant", text)

    def add_correction(self, content: str = prompts.INVALID_RESPONSE_PROMPT):
        self._append("user", content)

    def add_premature_finish_correction(self):
        self._append("user", prompts.build_premature_finish_prompt(self.submit_button_name))

    def messages(self) -> List[Dict[str, str]]:
        """
        返回发送给模型的消息。

        默认完整回放；设置了 window 时只保留 system 消息 + 最近 window 条，
        history 本身不会被截断。
        """
        if not self.window or len(self.history) - 1 <= self.window:
            return [dict(m) for m in self.history]
        return [dict(self.history[0])] + [dict(m) for m in self.history[-self.window:]]

    def _append(self, role: str, content: str):
        self.history.append({"role": role, "content": content})
