from contextlib import asynccontextmanager
from typing import Callable, Dict, List, Optional, Union

import pytest
from playwright.async_api import Error as PlaywrightError

from form_agent.config import Settings
from form_agent.core import FormAgent


class FakeElement:
    def __init__(self, tag, label="", type="", name="", value="", options=None, role=None):
        self.tag = tag
        self.label = label
        self.type = type
        self.name = name
        self.value = value
        self.options = options or []
        self.role = role or ("button" if tag in ("button", "a") else None)
        self.clicks = 0
        if self.tag == "select" and self.options and not self.value:
            self.value = self.options[0]

    def to_dict(self) -> Dict[str, Optional[str]]:
        """与浏览器端 JS 返回的原始数据结构一致"""
        is_field = self.tag in ("input", "textarea", "select")
        return {
            "tag": self.tag,
            "type": self.type or None,
            "name": self.name or None,
            "fieldValue": self.value if self.tag in ("input", "textarea") else None,
            "selectedText": self.value if self.tag == "select" else None,
            "labelForText": self.label if is_field else None,
            # select 的 textContent 是所有 option 文本拼在一起
            "ownText": "".join(self.options) if is_field else f"\n  {self.label}\n",
        }


class FakeLocator:
    def __init__(self, matches: List[FakeElement], on_click: Optional[Callable] = None):
        self.matches = matches
        self.on_click = on_click

    async def count(self) -> int:
        return len(self.matches)

    async def fill(self, value: str):
        self.matches[0].value = value

    async def click(self):
        self.matches[0].clicks += 1
        if self.on_click:
            self.on_click(self.matches[0])

    async def select_option(self, label: str):
        element = self.matches[0]
        if label not in element.options:
            raise PlaywrightError(f"option {label!r} not found")
        element.value = label


class FakePage:
    """只实现 Perception / Controller 用到的 Page 接口"""

    def __init__(self, elements: List[FakeElement]):
        self.elements = elements
        self.evaluations = 0
        self.submitted = False

    async def evaluate(self, js_code, arg=None):
        self.evaluations += 1
        return [el.to_dict() for el in self.elements]

    def get_by_label(self, label, exact=True):
        matches = [
            el for el in self.elements
            if el.tag in ("input", "textarea", "select") and el.label == label
        ]
        return FakeLocator(matches)

    def get_by_role(self, role, name=None, exact=True):
        matches = [el for el in self.elements if el.role == role and el.label == name]
        return FakeLocator(matches, on_click=self._clicked)

    def field(self, label) -> FakeElement:
        return next(el for el in self.elements if el.label == label)

    def _clicked(self, element: FakeElement):
        if element.label == "Submit":
            self.submitted = True


def medical_form() -> List[FakeElement]:
    return [
        FakeElement("h2", label="Patient Information"),
        FakeElement("input", label="First Name", type="text", name="firstName"),
        FakeElement("input", label="Last Name", type="text", name="lastName"),
        FakeElement("input", label="Date of Birth", type="date", name="dateOfBirth"),
        FakeElement("select", label="Gender", name="gender", options=["Select...", "Male", "Female", "Other"]),
        FakeElement("textarea", label="Allergies", name="allergies"),
        FakeElement("button", label="Submit", type="submit"),
    ]


class FakeSession:
    """记录打开/关闭次数的会话工厂"""

    def __init__(self, page: FakePage):
        self.page = page
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def __call__(self):
        self.opened += 1
        try:
            yield self.page
        finally:
            self.closed += 1


class ScriptedPlanner:
    """按顺序返回预设回复；回复用完后重复最后一条"""

    def __init__(self, replies: Union[List[str], Callable[[int], str]]):
        self.replies = replies
        self.calls: List[List[Dict[str, str]]] = []

    async def complete(self, messages):
        self.calls.append(messages)
        index = len(self.calls) - 1
        if callable(self.replies):
            return self.replies(index)
        return self.replies[min(index, len(self.replies) - 1)]


@pytest.fixture
def page():
    return FakePage(medical_form())


@pytest.fixture
def session(page):
    return FakeSession(page)


@pytest.fixture
def settings():
    return Settings(finish_settle_seconds=0, max_steps=20)


@pytest.fixture
def make_agent(session, settings):
    def _make(replies, **overrides):
        for key, value in overrides.items():
            setattr(settings, key, value)
        planner = ScriptedPlanner(replies)
        return FormAgent(planner, settings, session_factory=session), planner

    return _make
