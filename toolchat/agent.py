"""Dispatch loop alternating between user input, model completion and tool execution."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Optional

from toolchat.completion import CompletionClient
from toolchat.conversation import Conversation, Role, ToolCallRequest, Turn
from toolchat.errors import ProtocolError, ToolError, UnknownToolError
from toolchat.tools import ToolRegistry

logger = logging.getLogger(__name__)

#: Returns the next user line, or None once the input source is exhausted.
InputFn = Callable[[], Optional[str]]

#: Receives (kind, text) where kind is "assistant", "tool" or "error".
DisplayFn = Callable[[str, str], None]


class LoopState(str, Enum):
    AWAITING_USER_INPUT = "awaiting_user_input"
    AWAITING_COMPLETION = "awaiting_completion"
    DISPATCHING_TOOLS = "dispatching_tools"
    TERMINATED = "terminated"


def _no_input() -> Optional[str]:
    return None


def _no_display(kind: str, text: str) -> None:
    return None


class Agent:
    """
    Conversational agent driving one transcript against a completion client.

    After the model requests tools, their results are appended and the model is
    asked again without new user input; control returns to the user only once
    the model answers in plain text.
    """

    def __init__(
        self,
        completion_client: CompletionClient,
        registry: ToolRegistry,
        read_input: Optional[InputFn] = None,
        display: Optional[DisplayFn] = None,
        abort_on_completion_error: bool = False,
    ) -> None:
        self.completion_client = completion_client
        self.registry = registry
        self.read_input = read_input or _no_input
        self.display = display or _no_display
        self.abort_on_completion_error = abort_on_completion_error
        self._conversation = Conversation()
        self._state = LoopState.AWAITING_USER_INPUT
        self._handlers: Dict[LoopState, Callable[[], LoopState]] = {
            LoopState.AWAITING_USER_INPUT: self._await_user_input,
            LoopState.AWAITING_COMPLETION: self._await_completion,
            LoopState.DISPATCHING_TOOLS: self._dispatch_tools,
        }

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def conversation(self) -> Conversation:
        return self._conversation

    # --------------------------------------------------------------------- run
    def run(self) -> None:
        """Drive the loop until the input source is exhausted.

        Raises
        ------
        ProtocolError
            Only when ``abort_on_completion_error`` is set and a completion fails.
        """
        while self._state is not LoopState.TERMINATED:
            self._step()
        logger.info("Conversation ended after %d turns", len(self._conversation))

    def respond(self, text: str) -> Optional[str]:
        """
        Submit one user message and run until the model answers in plain text.

        Returns
        -------
        Optional[str]
            The assistant's reply, or None when the completion call failed.
        """
        if self._state is LoopState.TERMINATED:
            raise RuntimeError("The conversation has already terminated.")
        self._submit(text)
        while self._state not in (LoopState.AWAITING_USER_INPUT, LoopState.TERMINATED):
            self._step()

        last = self._conversation.last
        if last is not None and last.role is Role.ASSISTANT and not last.tool_calls:
            return last.content
        return None

    def _step(self) -> None:
        self._state = self._handlers[self._state]()

    def _submit(self, text: str) -> None:
        self._conversation.append(Turn.user(text))
        self._state = LoopState.AWAITING_COMPLETION

    # ------------------------------------------------------------ user input
    def _await_user_input(self) -> LoopState:
        text = self.read_input()
        if text is None:
            return LoopState.TERMINATED
        self._conversation.append(Turn.user(text))
        return LoopState.AWAITING_COMPLETION

    # ------------------------------------------------------------ completion
    def _await_completion(self) -> LoopState:
        try:
            turn = self.completion_client.complete(self._conversation.turns, self.registry.descriptors())
        except ProtocolError as exc:
            logger.error("Completion failed: %s", exc)
            self.display("error", str(exc))
            if self.abort_on_completion_error:
                self._state = LoopState.TERMINATED
                raise
            return LoopState.AWAITING_USER_INPUT

        self._conversation.append(turn)
        if turn.tool_calls:
            return LoopState.DISPATCHING_TOOLS

        self.display("assistant", turn.content)
        return LoopState.AWAITING_USER_INPUT

    # ---------------------------------------------------------------- tools
    def _dispatch_tools(self) -> LoopState:
        last = self._conversation.last
        calls = last.tool_calls if last is not None else ()
        for call in calls:
            result = self._execute(call)
            self._conversation.append(Turn.tool_result(call.id, result))
        return LoopState.AWAITING_COMPLETION

    def _execute(self, call: ToolCallRequest) -> str:
        """Invoke a tool from the registry and return its result text."""
        try:
            spec = self.registry.require(call.name)
        except UnknownToolError as exc:
            logger.warning("Model requested unknown tool '%s'", call.name)
            return str(exc)

        self.display("tool", f"{call.name}({call.arguments_text()})")
        try:
            return spec.fn(call.raw_arguments)
        except ToolError as exc:
            logger.info("Tool %s failed: %s", call.name, exc)
            return str(exc)
        except Exception as exc:
            logger.exception("Tool %s raised unexpectedly", call.name)
            return str(exc) or type(exc).__name__
