"""Shell command execution tool with a hard timeout."""

from __future__ import annotations

import logging
import math
import os
import signal
import subprocess
from typing import List, Optional, Union

from toolchat.config import DEFAULT_COMMAND_TIMEOUT, MAX_COMMAND_TIMEOUT
from toolchat.errors import ToolIOError, ToolTimeoutError, ValidationError
from toolchat.tools import ToolDescriptor, ToolSpec
from toolchat.tools._args import decode_arguments, object_schema, require_str, string_property

logger = logging.getLogger(__name__)

_IS_WINDOWS = os.name == "nt"


def _shell_argv(command: str) -> List[str]:
    if _IS_WINDOWS:
        return ["powershell", "-Command", command]
    return ["sh", "-c", command]


def _resolve_timeout(value: object) -> Union[int, float]:
    """Use the caller's timeout when it is a positive number, else the default."""
    if value is None:
        return DEFAULT_COMMAND_TIMEOUT
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("parameter 'timeout' must be a number of seconds")
    if not math.isfinite(value) or value > MAX_COMMAND_TIMEOUT:
        raise ValidationError(f"parameter 'timeout' must be at most {MAX_COMMAND_TIMEOUT} seconds")
    if value <= 0:
        return DEFAULT_COMMAND_TIMEOUT
    return value


def _kill(process: subprocess.Popen) -> None:
    """Kill the shell and everything it started."""
    if _IS_WINDOWS:
        process.kill()
        return
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def _decode(output: Optional[bytes]) -> str:
    return (output or b"").decode("utf-8", errors="replace")


def terminal_run(raw_arguments: bytes) -> str:
    """
    Run a command through the host shell.

    Returns
    -------
    str
        ``Command``, ``Exit Code`` and combined stdout/stderr, also for a
        non-zero exit code.

    Raises
    ------
    ToolTimeoutError
        When the command outlives its timeout; the process group is killed.
    ToolIOError
        When the shell itself cannot be started.
    """
    args = decode_arguments(raw_arguments)
    command = require_str(args, "command")
    timeout = _resolve_timeout(args.get("timeout"))

    try:
        process = subprocess.Popen(
            _shell_argv(command),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            start_new_session=not _IS_WINDOWS,
        )
    except OSError as exc:
        raise ToolIOError(f"failed to start command: {exc}") from exc

    try:
        output, _ = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill(process)
        output, _ = process.communicate()
        logger.warning("Command timed out after %ss: %s", timeout, command)
        partial = _decode(output)
        message = f"command timed out after {timeout} seconds: {command}"
        if partial:
            message += f"\nPartial output:\n{partial}"
        raise ToolTimeoutError(message) from None
    except BaseException:
        _kill(process)
        process.wait()
        raise

    result = f"Command: {command}\n"
    result += f"Exit Code: {process.returncode}\n"
    result += f"Output:\n{_decode(output)}"
    return result


TERMINAL_RUN = ToolSpec(
    descriptor=ToolDescriptor(
        name="terminal_run",
        description=(
            "Execute a terminal/command line command and return its output. "
            "Use with caution as this can execute any system command."
        ),
        parameters=object_schema(
            {
                "command": string_property("The command to execute in the terminal"),
                "timeout": {
                    "type": "integer",
                    "description": f"Timeout in seconds (default: {DEFAULT_COMMAND_TIMEOUT})",
                },
            },
            ["command"],
        ),
    ),
    fn=terminal_run,
)
