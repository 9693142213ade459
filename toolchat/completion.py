"""
Completion client backed by Groq chat completions.

Design
- Dependency injection for Groq client and model name.
- Turns in, one assistant turn out; every failure surfaces as ProtocolError.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from groq import Groq, GroqError

from toolchat.config import DEFAULT_MAX_TOKENS, get_base_url, get_groq_api_key, get_model
from toolchat.conversation import Role, ToolCallRequest, Turn
from toolchat.errors import ProtocolError
from toolchat.tools import ToolDescriptor

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    """Anything that turns a transcript plus tool descriptors into one assistant turn."""

    def complete(self, turns: Sequence[Turn], tools: Sequence[ToolDescriptor]) -> Turn:
        ...


def build_client() -> Groq:
    """Build and return a Groq client from the environment (can be mocked)."""
    return Groq(api_key=get_groq_api_key(), base_url=get_base_url())


def turn_to_message(turn: Turn) -> Dict[str, Any]:
    """Render a turn as an OpenAI-compatible chat message."""
    if turn.role is Role.TOOL:
        return {"role": "tool", "content": turn.content, "tool_call_id": turn.tool_call_id}
    if turn.role is Role.ASSISTANT and turn.tool_calls:
        return {
            "role": "assistant",
            "content": turn.content or None,
            "tool_calls": [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": call.arguments_text()},
                }
                for call in turn.tool_calls
            ],
        }
    return {"role": turn.role.value, "content": turn.content}


def descriptor_to_tool(descriptor: ToolDescriptor) -> Dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": descriptor.name,
            "description": descriptor.description,
            "parameters": descriptor.parameters,
        },
    }


def _parse_message(message: Any) -> Turn:
    """Convert an SDK message object into an assistant turn."""
    try:
        content = message.content or ""
        calls = [
            ToolCallRequest(
                id=call.id,
                name=call.function.name,
                raw_arguments=(call.function.arguments or "").encode("utf-8"),
            )
            for call in (message.tool_calls or [])
        ]
    except AttributeError as exc:
        raise ProtocolError(f"malformed completion message: {exc}") from exc
    for call in calls:
        if not call.id or not isinstance(call.id, str):
            raise ProtocolError(f"tool call '{call.name}' has no id")
    return Turn.assistant(content, tuple(calls))


class GroqCompletionClient:
    """Completion client talking to the Groq chat completions API."""

    def __init__(
        self,
        client: Optional[Groq] = None,
        model: Optional[str] = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self._client = client
        self.model = model or get_model()
        self.max_tokens = max_tokens

    @property
    def client(self) -> Groq:
        if self._client is None:
            self._client = build_client()
        return self._client

    def complete(self, turns: Sequence[Turn], tools: Sequence[ToolDescriptor]) -> Turn:
        """
        Request the next assistant turn.

        Parameters
        ----------
        turns : Sequence[Turn]
            Full transcript, oldest first.
        tools : Sequence[ToolDescriptor]
            Tools the model may call.

        Returns
        -------
        Turn
            Assistant turn with text and/or tool calls.

        Raises
        ------
        ProtocolError
            If the API call fails or the response cannot be interpreted.
        """
        messages: List[Dict[str, Any]] = [turn_to_message(turn) for turn in turns]
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": self.max_tokens,
        }
        if tools:
            request["tools"] = [descriptor_to_tool(tool) for tool in tools]
            request["tool_choice"] = "auto"

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Requesting completion: model=%s messages=%d tools=%d", self.model, len(messages), len(tools))
        try:
            completion = self.client.chat.completions.create(**request)
        except GroqError as exc:
            raise ProtocolError(f"completion request failed: {exc}") from exc

        choices = getattr(completion, "choices", None)
        if not choices:
            raise ProtocolError("completion returned no choices")
        message = getattr(choices[0], "message", None)
        if message is None:
            raise ProtocolError("completion choice has no message")

        turn = _parse_message(message)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Completion returned %d tool call(s)", len(turn.tool_calls))
        return turn
