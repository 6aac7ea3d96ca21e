"""解析模块：从模型的自由文本回复中提取 JSON 动作"""

import json
import re

from .errors import ActionParseError
from .models import Action


# 贪婪匹配第一个 "{" 到最后一个 "}"，容忍前后的解释性文字
JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def extract_json(text: str) -> str:
    """返回回复中被花括号包围的 JSON 子串"""
    match = JSON_OBJECT_PATTERN.search(text or "")
    if not match:
        raise ActionParseError("回复中没有找到 JSON 对象", raw=text)
    return match.group(0)


def parse_action(text: str) -> Action:
    """
    把模型回复解析成 Action。

    只检查 JSON 是否合法；字段是否齐全留给 Controller 在执行时判断，
    不认识的 action 会被解析成 ActionKind.UNKNOWN。
    """
    candidate = extract_json(text)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ActionParseError(f"JSON 解析失败: {e}", raw=text) from e

    if not isinstance(data, dict):
        raise ActionParseError("JSON 不是对象", raw=text)

    return Action.from_dict(data)
