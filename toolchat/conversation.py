"""Transcript data model: turns, tool-call requests and the append-only conversation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from toolchat.errors import ConversationError


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True, slots=True)
class ToolCallRequest:
    """A tool call emitted by the model, consumed by the loop in the same round."""

    id: str
    name: str
    raw_arguments: bytes

    def arguments_text(self) -> str:
        return self.raw_arguments.decode("utf-8", errors="replace")


@dataclass(frozen=True, slots=True)
class Turn:
    """One message of the transcript."""

    role: Role
    content: str = ""
    tool_calls: Tuple[ToolCallRequest, ...] = field(default_factory=tuple)
    tool_call_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.tool_calls and self.role is not Role.ASSISTANT:
            raise ConversationError("Only assistant turns may carry tool calls.")
        if (self.tool_call_id is not None) != (self.role is Role.TOOL):
            raise ConversationError("Tool result turns, and only those, need a tool_call_id.")

    @classmethod
    def user(cls, text: str) -> "Turn":
        return cls(role=Role.USER, content=text)

    @classmethod
    def assistant(cls, text: str, tool_calls: Tuple[ToolCallRequest, ...] = ()) -> "Turn":
        return cls(role=Role.ASSISTANT, content=text, tool_calls=tuple(tool_calls))

    @classmethod
    def tool_result(cls, tool_call_id: str, content: str) -> "Turn":
        return cls(role=Role.TOOL, content=content, tool_call_id=tool_call_id)


class Conversation:
    """
    Ordered, append-only sequence of turns.

    Every tool call of an assistant turn must be answered by exactly one tool
    result turn before any other user or assistant turn is appended, and tool
    results may only answer calls of the most recent assistant turn.
    """

    def __init__(self) -> None:
        self._turns: List[Turn] = []
        self._pending: List[str] = []

    # ------------------------------------------------------------------ append
    def append(self, turn: Turn) -> None:
        if turn.role is Role.TOOL:
            if turn.tool_call_id not in self._pending:
                raise ConversationError(
                    f"Tool result for '{turn.tool_call_id}' does not answer a pending tool call."
                )
            self._pending.remove(turn.tool_call_id)
        elif self._pending:
            raise ConversationError(
                f"Cannot append a {turn.role.value} turn while tool calls are pending: {', '.join(self._pending)}"
            )

        self._turns.append(turn)
        if turn.role is Role.ASSISTANT:
            self._pending = [call.id for call in turn.tool_calls]

    # ------------------------------------------------------------------ access
    @property
    def turns(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def last(self) -> Optional[Turn]:
        return self._turns[-1] if self._turns else None

    def pending_tool_call_ids(self) -> Tuple[str, ...]:
        return tuple(self._pending)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(tuple(self._turns))
