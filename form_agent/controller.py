"""执行模块：把解析后的动作作用到页面上"""

import logging
from typing import Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Locator, Page

from .errors import DispatchError, ElementNotFoundError, UpstreamError
from .models import Action, ActionKind, StepSignal

logger = logging.getLogger(__name__)


class Controller:
    """执行模块：fill / click / select / finish"""

    def __init__(self, page: Page, submit_button_name: str = "Submit"):
        self.page = page
        self.submit_button_name = submit_button_name
        # 只有点击过提交按钮后才置为 True
        self.submitted = False

    async def dispatch(self, action: Action) -> StepSignal:
        """
        执行动作，返回控制信号。

        元素定位失败抛出 ElementNotFoundError，Playwright 本身的失败抛出
        UpstreamError，两者都会终止本次运行。
        """
        if action.kind == ActionKind.FILL:
            await self._fill(action)
        elif action.kind == ActionKind.CLICK:
            await self._click(action)
        elif action.kind == ActionKind.SELECT:
            await self._select(action)
        elif action.kind == ActionKind.FINISH:
            logger.info("✓ 模型判断任务完成")
            return StepSignal.FINISH
        else:
            logger.warning("❌ 未知 action: %r，跳过本步骤", action.raw.get("action"))
        return StepSignal.CONTINUE

    async def _fill(self, action: Action):
        """填充输入框"""
        label = _require(action, "label")
        value = _require(action, "value")
        locator = await self._resolve(self.page.get_by_label(label, exact=True), f"label={label!r}")
        try:
            await locator.fill(str(value))
        except PlaywrightError as e:
            raise UpstreamError(f"填充 {label!r} 失败: {e}") from e
        logger.info("✓ 填充 %s = %r", label, value)

    async def _click(self, action: Action):
        """按 role + 可访问名称点击元素"""
        name = _require(action, "name")
        role = action.role or "button"
        locator = await self._resolve(
            self.page.get_by_role(role, name=name, exact=True), f"role={role} name={name!r}"
        )
        try:
            await locator.click()
        except PlaywrightError as e:
            raise UpstreamError(f"点击 {name!r} 失败: {e}") from e
        logger.info("✓ 点击 [%s] %s", role, name)

        if self.is_submit(name):
            self.submitted = True

    async def _select(self, action: Action):
        """按 option 的可见文本选择下拉项"""
        label = _require(action, "label")
        value = _require(action, "value")
        locator = await self._resolve(self.page.get_by_label(label, exact=True), f"label={label!r}")
        try:
            await locator.select_option(label=str(value))
        except PlaywrightError as e:
            raise UpstreamError(f"选择 {label!r} = {value!r} 失败: {e}") from e
        logger.info("✓ 选择 %s = %r", label, value)

    async def _resolve(self, locator: Locator, description: str) -> Locator:
        """要求精确匹配到唯一一个元素"""
        try:
            count = await locator.count()
        except PlaywrightError as e:
            raise UpstreamError(f"查询 {description} 失败: {e}") from e
        if count != 1:
            raise ElementNotFoundError(description, count)
        return locator

    def is_submit(self, name: Optional[str]) -> bool:
        if not name or not self.submit_button_name:
            return False
        return name.strip().casefold() == self.submit_button_name.strip().casefold()


def _require(action: Action, field_name: str):
    value = getattr(action, field_name)
    if value is None:
        raise DispatchError(f"{action.kind.value} 动作缺少字段 {field_name!r}: {action.raw}")
    return value
