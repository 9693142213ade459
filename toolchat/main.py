"""
Streamlit entry-point for toolchat.

Responsibilities
- Keep one Agent (and so one transcript) per browser session
- Run each query through the dispatch loop until the model answers
- Render the chat history, tool traces and errors
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import streamlit as st

# Ensure absolute `toolchat.*` imports work even when Streamlit sets cwd to the package dir
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from toolchat import config
from toolchat.agent import Agent
from toolchat.completion import GroqCompletionClient
from toolchat.tools.registry import build_tool_registry

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class _EventBuffer:
    """Collects display events emitted while the agent works on one query."""

    def __init__(self) -> None:
        self.events: List[Tuple[str, str]] = []

    def __call__(self, kind: str, text: str) -> None:
        self.events.append((kind, text))

    def drain(self) -> List[Tuple[str, str]]:
        events, self.events = self.events, []
        return events


def _build_agent(buffer: _EventBuffer) -> Agent:
    completion_client = GroqCompletionClient(model=config.get_model(), max_tokens=config.get_max_tokens())
    return Agent(completion_client=completion_client, registry=build_tool_registry(), display=buffer)


def _get_agent() -> Tuple[Agent, _EventBuffer]:
    if "agent_instance" not in st.session_state:
        buffer = _EventBuffer()
        st.session_state["agent_events"] = buffer
        st.session_state["agent_instance"] = _build_agent(buffer)
    return st.session_state["agent_instance"], st.session_state["agent_events"]


def ask(query: str, agent: Optional[Agent] = None, buffer: Optional[_EventBuffer] = None) -> str:
    """
    Run a query through the agent and return the text to show.

    Parameters
    ----------
    query : str
        User's free-text message.
    agent, buffer : optional
        Injected agent and its event buffer; the session's pair is used otherwise.

    Returns
    -------
    str
        Tool traces as code lines followed by the assistant answer, or the error.
    """
    if agent is None or buffer is None:
        agent, buffer = _get_agent()

    reply = agent.respond(query)
    lines: List[str] = []
    for kind, text in buffer.drain():
        if kind == "tool":
            lines.append(f"`{text}`")
        elif kind == "error":
            lines.append(f"Sorry, something went wrong: {text}")
    if reply:
        lines.append(reply)
    return "\n\n".join(lines) if lines else "(no response)"


def main() -> None:
    """Run the Streamlit chat UI."""
    st.title("toolchat")

    if "messages" not in st.session_state:
        st.session_state["messages"] = []

    for message in st.session_state.messages:
        with st.chat_message(message["role"]):
            st.markdown(message["content"])  # type: ignore[arg-type]

    query = st.chat_input("Ask me to read, edit or run something")  # type: ignore[assignment]
    if not query:
        return

    with st.chat_message("user"):
        st.markdown(query)
    st.session_state.messages.append({"role": "user", "content": query})

    try:
        response = ask(query)
    except Exception as exc:
        logger.exception("Error while handling query: %s", exc)
        response = "Sorry, something went wrong while handling your request."

    with st.chat_message("assistant"):
        st.markdown(response)
    st.session_state.messages.append({"role": "assistant", "content": response})


if __name__ == "__main__":
    main()
