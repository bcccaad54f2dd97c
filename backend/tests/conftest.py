"""
Shared fixtures for the test suite.

Key design decisions:
- Settings are rebuilt from a patched environment for every test.
- The route's chat model factory is swapped for scripted fake models, so no
  test talks to the real Anthropic API (respx covers the HTTP-level tests).
- The FastAPI app is driven in-process through httpx's ASGITransport.
"""
import json
from typing import Any, List

import httpx
import pytest
import pytest_asyncio
from pydantic import Field
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, AIMessageChunk, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatGenerationChunk, ChatResult

from chat_relay.config import get_settings

TEST_API_KEY = "sk-ant-test-0123456789"


# ── Environment ──


@pytest.fixture(autouse=True)
def relay_env(monkeypatch):
    """A known-good environment; individual tests remove pieces of it."""
    monkeypatch.setenv("ANTHROPIC_API_KEY", TEST_API_KEY)
    for name in ("ANTHROPIC_MODEL", "ANTHROPIC_API_URL", "ANTHROPIC_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    get_settings.cache_clear()


# ── Fake chat models ──


class ScriptedChatModel(BaseChatModel):
    """
    Chat model that streams a fixed script.

    String items become text-delta chunks, AIMessageChunk items are passed
    through unchanged, and Exception items are raised at that position.
    """

    script: List[Any] = Field(default_factory=list)
    prompts: List[List[BaseMessage]] = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "scripted"

    def _generate(self, messages, stop=None, run_manager=None, **kwargs) -> ChatResult:
        text = "".join(item for item in self.script if isinstance(item, str))
        return ChatResult(generations=[ChatGeneration(message=AIMessage(content=text))])

    async def _astream(self, messages, stop=None, run_manager=None, **kwargs):
        self.prompts.append(list(messages))
        for item in self.script:
            if isinstance(item, Exception):
                raise item
            message = item if isinstance(item, AIMessageChunk) else AIMessageChunk(content=item)
            yield ChatGenerationChunk(message=message)


@pytest.fixture
def use_model(monkeypatch):
    """Install a ScriptedChatModel as the route's chat model; returns it."""
    import chat_relay.routes.chat as chat_mod

    def _install(*script: Any) -> ScriptedChatModel:
        model = ScriptedChatModel(script=list(script))
        monkeypatch.setattr(chat_mod, "get_chat_model", lambda settings, api_key: model)
        return model

    return _install


# ── HTTP client ──


@pytest_asyncio.fixture
async def client():
    from chat_relay.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def parse_events(body: str) -> List[dict]:
    """Split an SSE body into its JSON payloads, checking the line framing."""
    events = []
    for block in body.split("\n\n"):
        if not block:
            continue
        assert block.startswith("data: "), block
        events.append(json.loads(block[len("data: "):]))
    assert body.endswith("\n\n")
    return events


def chat_payload(*turns) -> dict:
    return {"messages": [{"role": role, "content": content} for role, content in turns]}
