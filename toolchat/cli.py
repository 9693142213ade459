"""
Terminal REPL entry-point.

Reads one line per user turn from stdin and prints assistant replies, tool
traces and errors with coloured labels.
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from toolchat import config
from toolchat.agent import Agent
from toolchat.completion import GroqCompletionClient, build_client
from toolchat.errors import ProtocolError
from toolchat.tools.registry import build_tool_registry

logger = logging.getLogger(__name__)

BANNER = "Chat with Groq (use 'ctrl-c' to quit)"

_LABELS = {
    "assistant": "\u001b[93mGroq\u001b[0m",
    "tool": "\u001b[92mtool\u001b[0m",
    "error": "\u001b[91mError\u001b[0m",
}


def make_reader(stream: TextIO, out: TextIO):
    """Return an input function printing the ``You`` prompt and yielding None at EOF."""

    def read_line() -> Optional[str]:
        out.write("\u001b[94mYou\u001b[0m: ")
        out.flush()
        line = stream.readline()
        if not line:
            return None
        return line.rstrip("\r\n")

    return read_line


def make_display(out: TextIO):
    def display(kind: str, text: str) -> None:
        out.write(f"{_LABELS.get(kind, kind)}: {text}\n")
        out.flush()

    return display


def build_agent(stream: Optional[TextIO] = None, out: Optional[TextIO] = None) -> Agent:
    if stream is None:
        stream = sys.stdin
    if out is None:
        out = sys.stdout
    completion_client = GroqCompletionClient(
        client=build_client(),
        model=config.get_model(),
        max_tokens=config.get_max_tokens(),
    )
    return Agent(
        completion_client=completion_client,
        registry=build_tool_registry(),
        read_input=make_reader(stream, out),
        display=make_display(out),
        abort_on_completion_error=config.abort_on_completion_error(),
    )


def main() -> None:
    try:
        logging.basicConfig(
            level=config.get_log_level(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
        agent = build_agent()
    except RuntimeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(BANNER)
    try:
        agent.run()
    except ProtocolError as exc:
        logger.error("Aborting after completion failure: %s", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        print()


if __name__ == "__main__":
    main()
