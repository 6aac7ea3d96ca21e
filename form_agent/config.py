"""配置：从 .env 和环境变量读取"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_FORM_URL = "https://magical-medical-form.netlify.app/"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def configure_logging(level: int = logging.INFO):
    """入口处调用；已经配置过 root logger 时不会重复添加 handler"""
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _env_bool(key: str, default: bool) -> bool:
    raw = os.environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _env_int(key: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(key)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


@dataclass
class Settings:
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    model: str = "gpt-4o"
    http_proxy: Optional[str] = None

    form_url: str = DEFAULT_FORM_URL
    headless: bool = False
    max_steps: int = 20
    # finish 之后等待页面跳转/确认信息出现的秒数
    finish_settle_seconds: float = 5.0
    submit_button_name: str = "Submit"
    enforce_submit_before_finish: bool = False
    # None 表示每次都完整回放对话历史
    history_window: Optional[int] = None

    api_host: str = "127.0.0.1"
    api_port: int = 3000
    schedule_interval_seconds: float = 300.0

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        return cls(
            openai_api_key=os.environ.get("OPENAI_API_KEY"),
            openai_base_url=os.environ.get("OPENAI_BASE_URL") or None,
            model=os.environ.get("OPENAI_MODEL", "gpt-4o"),
            http_proxy=os.environ.get("HTTP_PROXY") or None,
            form_url=os.environ.get("FORM_URL", DEFAULT_FORM_URL),
            headless=_env_bool("HEADLESS", False),
            max_steps=_env_int("MAX_STEPS", 20),
            finish_settle_seconds=float(os.environ.get("FINISH_SETTLE_SECONDS", "5")),
            submit_button_name=os.environ.get("SUBMIT_BUTTON_NAME", "Submit"),
            enforce_submit_before_finish=_env_bool("ENFORCE_SUBMIT_BEFORE_FINISH", False),
            history_window=_env_int("HISTORY_WINDOW", None),
            api_host=os.environ.get("API_HOST", "127.0.0.1"),
            api_port=_env_int("API_PORT", 3000),
            schedule_interval_seconds=float(os.environ.get("SCHEDULE_INTERVAL_SECONDS", "300")),
        )
