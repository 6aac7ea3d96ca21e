"""浏览器会话：每次运行独占一个浏览器，退出时无条件关闭"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page, async_playwright

from .errors import UpstreamError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def browser_session(url: str, headless: bool = False) -> AsyncIterator[Page]:
    """
    启动 Chromium，打开新页面并访问 url。

    无论正常结束还是抛出异常，离开 async with 时浏览器都会被关闭且只关闭一次。
    """
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless, args=["--no-sandbox"])
        try:
            page = await browser.new_page()
            try:
                await page.goto(url)
            except PlaywrightError as e:
                raise UpstreamError(f"打开页面 {url} 失败: {e}") from e
            logger.info("已打开页面：%s", url)
            yield page
        finally:
            await browser.close()
            logger.info("浏览器已关闭")
