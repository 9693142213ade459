import json
import sys
import types
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Union

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from toolchat.conversation import ToolCallRequest, Turn  # noqa: E402
from toolchat.errors import ProtocolError  # noqa: E402
from toolchat.tools import ToolDescriptor, ToolRegistry, ToolSpec  # noqa: E402


class DummyToolCall:
    def __init__(self, call_id: str, name: str, arguments: str):
        self.id = call_id
        self.type = "function"
        self.function = types.SimpleNamespace(name=name, arguments=arguments)


class DummyChoice:
    def __init__(self, content: Optional[str], tool_calls: Optional[List[DummyToolCall]] = None):
        self.message = types.SimpleNamespace(content=content, tool_calls=tool_calls)


class DummyCompletion:
    def __init__(self, content: Optional[str], tool_calls: Optional[List[DummyToolCall]] = None):
        self.choices = [DummyChoice(content, tool_calls)]


class DummyGroq:
    """
    Minimal mock for groq.Groq that supports:
    client.chat.completions.create(...)

    Each reply is a string, a DummyCompletion or an exception to raise.
    """
    def __init__(self, *replies: Union[str, DummyCompletion, Exception]):
        self._replies = list(replies)
        self.requests: List[Dict[str, Any]] = []
        self.chat = types.SimpleNamespace(
            completions=types.SimpleNamespace(create=self._create)
        )

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, str):
            return DummyCompletion(reply)
        return reply


class ScriptedCompletion:
    """CompletionClient double returning prepared turns and recording what it was sent."""

    def __init__(self, *replies: Union[Turn, Exception]):
        self._replies = list(replies)
        self.calls: List[Sequence[Turn]] = []
        self.tool_names: List[List[str]] = []

    def complete(self, turns: Sequence[Turn], tools: Sequence[ToolDescriptor]) -> Turn:
        self.calls.append(tuple(turns))
        self.tool_names.append([tool.name for tool in tools])
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def tool_call(call_id: str, name: str, **arguments: Any) -> ToolCallRequest:
    return ToolCallRequest(id=call_id, name=name, raw_arguments=json.dumps(arguments).encode("utf-8"))


def feed(*lines: str) -> Callable[[], Optional[str]]:
    """Input function yielding the given lines, then None (end of stream)."""
    it = iter(lines)
    return lambda: next(it, None)


def make_registry(handlers: Dict[str, Callable[[bytes], str]]) -> ToolRegistry:
    specs: Iterable[ToolSpec] = [
        ToolSpec(
            descriptor=ToolDescriptor(name=name, description=f"{name} tool", parameters={"type": "object"}),
            fn=fn,
        )
        for name, fn in handlers.items()
    ]
    return ToolRegistry(specs)


@pytest.fixture(autouse=True)
def set_env(monkeypatch):
    """
    Automatically set the model and credential env vars for all tests.
    """
    monkeypatch.setenv("GROQ_MODEL", "dummy-model")
    monkeypatch.setenv("GROQ_API_KEY", "dummy-key")
    monkeypatch.delenv("GROQ_BASE_URL", raising=False)
    monkeypatch.delenv("GROQ_MAX_TOKENS", raising=False)
    monkeypatch.delenv("TOOLCHAT_ABORT_ON_ERROR", raising=False)
    yield


@pytest.fixture
def protocol_error():
    return ProtocolError("completion request failed: boom")
