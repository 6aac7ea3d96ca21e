"""规划模块：把完整对话历史发给 LLM，拿回原始文本"""

import logging
from typing import Dict, List

from openai import AsyncOpenAI, DefaultAsyncHttpxClient, OpenAIError

from .config import Settings
from .errors import UpstreamError

logger = logging.getLogger(__name__)


class Planner:
    """规划模块：调用 LLM 决策下一步"""

    def __init__(self, client: AsyncOpenAI, model: str):
        self.client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> "Planner":
        return cls(create_client(settings), settings.model)

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        """
        返回模型的原始回复文本。

        不要求 response_format=json_object，回复里可能带解释性文字，
        由 parser 负责从中提取 JSON。
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                temperature=0,
                messages=messages,
            )
        except OpenAIError as e:
            raise UpstreamError(f"调用 LLM 失败: {e}") from e

        return response.choices[0].message.content or ""


def create_client(settings: Settings) -> AsyncOpenAI:
    """构造 OpenAI 客户端；代理只作用于这个客户端的 HTTP 传输层"""
    if not settings.openai_api_key:
        raise ValueError("请设置环境变量 OPENAI_API_KEY，例如：export OPENAI_API_KEY='sk-...'")

    http_client = None
    if settings.http_proxy:
        logger.info("LLM 客户端使用代理 %s", settings.http_proxy)
        http_client = DefaultAsyncHttpxClient(proxy=settings.http_proxy)

    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        http_client=http_client,
    )
