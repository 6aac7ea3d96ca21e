from types import SimpleNamespace

import pytest
from openai import APIConnectionError
import httpx

from form_agent.config import Settings
from form_agent.errors import UpstreamError
from form_agent.planner import Planner, create_client


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


async def test_complete_returns_raw_text():
    completions = FakeCompletions('Here: {"action": "finish"}')
    messages = [{"role": "system", "content": "x"}, {"role": "user", "content": "y"}]

    text = await Planner(fake_client(completions), "gpt-4o").complete(messages)

    assert text == 'Here: {"action": "finish"}'
    assert completions.kwargs["model"] == "gpt-4o"
    assert completions.kwargs["messages"] == messages
    assert "response_format" not in completions.kwargs


async def test_empty_content_becomes_empty_string():
    text = await Planner(fake_client(FakeCompletions(None)), "m").complete([])
    assert text == ""


async def test_client_errors_become_upstream_errors():
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    completions = FakeCompletions(error=APIConnectionError(request=request))

    with pytest.raises(UpstreamError):
        await Planner(fake_client(completions), "m").complete([])


def test_create_client_requires_api_key():
    with pytest.raises(ValueError):
        create_client(Settings(openai_api_key=None))


def test_create_client_uses_base_url():
    client = create_client(Settings(openai_api_key="sk-test", openai_base_url="http://localhost:8000/v1/"))
    assert str(client.base_url) == "http://localhost:8000/v1/"


def test_create_client_with_proxy():
    client = create_client(Settings(openai_api_key="sk-test", http_proxy="http://127.0.0.1:7897"))
    assert client.api_key == "sk-test"
