"""Chat with a Groq-hosted model that can read, write and run things on this machine."""

from toolchat.agent import Agent, LoopState
from toolchat.conversation import Conversation, Role, ToolCallRequest, Turn

__all__ = ["Agent", "Conversation", "LoopState", "Role", "ToolCallRequest", "Turn"]

__version__ = "0.1.0"
