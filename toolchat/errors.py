"""Exception hierarchy shared by the tool handlers, the completion client and the loop."""

from __future__ import annotations


class ToolchatError(Exception):
    """Base class for every error raised by this package."""


class ConversationError(ToolchatError):
    """A turn was appended that would break the transcript ordering rules."""


class ProtocolError(ToolchatError):
    """The completion call failed or returned data we could not interpret."""


class ToolError(ToolchatError):
    """A tool handler failed; the message is sent back to the model as-is."""


class ValidationError(ToolError):
    """Missing or invalid tool arguments. Raised before any I/O happens."""


class NotFoundError(ToolError):
    """The target path does not exist where existence is required."""


class ToolIOError(ToolError):
    """The underlying OS operation failed."""


class ToolTimeoutError(ToolError):
    """A process exceeded its time limit and was killed."""


class UnknownToolError(ToolError):
    """The model asked for a tool name that is not registered."""
