"""表单填写智能体核心类：感知 → 决策 → 执行 主循环"""

import asyncio
import logging
from typing import AsyncContextManager, Callable, Dict, Optional, Union

from playwright.async_api import Page

from .config import Settings
from .controller import Controller
from .errors import ActionParseError
from .memory import ConversationMemory
from .models import ActionKind, ObjectiveData, RunOutcome, RunResult, StepSignal
from .parser import parse_action
from .perception import Perception
from .planner import Planner
from .session import browser_session

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncContextManager[Page]]


class FormAgent:
    """
    表单填写智能体。

    每次 run() 都独占一个浏览器会话和一份对话历史，多次 run() 可以并发执行，
    彼此之间没有共享的可变状态。
    """

    def __init__(
        self,
        planner: Planner,
        settings: Optional[Settings] = None,
        session_factory: Optional[SessionFactory] = None,
    ):
        self.planner = planner
        self.settings = settings or Settings()
        self.perception = Perception()
        self.session_factory = session_factory or self._default_session

    @classmethod
    def from_settings(cls, settings: Settings) -> "FormAgent":
        return cls(Planner.from_settings(settings), settings)

    def _default_session(self) -> AsyncContextManager[Page]:
        return browser_session(self.settings.form_url, headless=self.settings.headless)

    async def run(self, objective: Union[ObjectiveData, Dict]) -> RunResult:
        """
        执行一次完整的运行。

        - 模型给出 finish：返回 outcome=finished
        - 步数耗尽：正常返回 outcome=exhausted，不抛异常
        - 元素定位失败或上游调用失败：异常向上抛出
        浏览器会话在所有退出路径上都会被关闭。
        """
        if isinstance(objective, dict):
            objective = ObjectiveData.from_dict(objective)

        max_steps = self.settings.max_steps
        logger.info("开始运行：%s %s（最多 %d 步）", objective.firstName, objective.lastName, max_steps)

        try:
            async with self.session_factory() as page:
                return await self._loop(page, objective, max_steps)
        except Exception:
            logger.exception("运行失败")
            raise

    async def _loop(self, page: Page, objective: ObjectiveData, max_steps: int) -> RunResult:
        memory = ConversationMemory(
            objective,
            submit_button_name=self.settings.submit_button_name,
            window=self.settings.history_window,
        )
        controller = Controller(page, submit_button_name=self.settings.submit_button_name)

        for step in range(1, max_steps + 1):
            logger.info("--- Step %d / %d ---", step, max_steps)

            # 1. 感知
            _, page_state = await self.perception.extract_elements(page)
            memory.add_perception(page_state)

            # 2. 决策
            text = await self.planner.complete(memory.messages())
            memory.add_reply(text)
            logger.info("LLM 回复: %s", text)

            try:
                action = parse_action(text)
            except ActionParseError as e:
                logger.warning("解析失败: %s，原始回复: %s", e, text)
                memory.add_correction()
                continue

            if action.kind == ActionKind.FINISH and not controller.submitted:
                logger.warning("模型在点击 %r 之前给出了 finish", self.settings.submit_button_name)
                if self.settings.enforce_submit_before_finish:
                    memory.add_premature_finish_correction()
                    continue

            # 3. 执行
            logger.info("动作: %s", action.describe())
            signal = await controller.dispatch(action)

            if signal == StepSignal.FINISH:
                await asyncio.sleep(self.settings.finish_settle_seconds)
                logger.info("✓✓✓ 任务完成（共 %d 步）", step)
                return RunResult(RunOutcome.FINISHED, step, memory.history)

        logger.info("已达到最大步骤数 %d，结束运行", max_steps)
        return RunResult(RunOutcome.EXHAUSTED, max_steps, memory.history)


async def run_workflow(
    objective: Union[ObjectiveData, Dict], settings: Optional[Settings] = None
) -> RunResult:
    """按环境配置构造智能体并执行一次运行"""
    settings = settings or Settings.from_env()
    return await FormAgent.from_settings(settings).run(objective)
