"""异常定义"""


class FormAgentError(Exception):
    """所有 form_agent 异常的基类"""


class ActionParseError(FormAgentError):
    """模型输出中没有可解析的 JSON 动作（可恢复，下一步重新提示）"""

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw


class DispatchError(FormAgentError):
    """动作无法执行，终止本次运行"""


class ElementNotFoundError(DispatchError):
    """无法唯一定位目标元素"""

    def __init__(self, description: str, matches: int):
        super().__init__(f"找不到唯一元素 {description}（匹配 {matches} 个）")
        self.description = description
        self.matches = matches


class UpstreamError(FormAgentError):
    """模型或浏览器本身调用失败"""
