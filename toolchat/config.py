"""
Central configuration for toolchat.
Loads environment variables from a .env file at import time.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv

# --- Load .env early so everything importing config sees the vars ---
# This looks for a .env in the current working dir or parents.
load_dotenv()

#: Environment variable names
GROQ_API_KEY_ENV = "GROQ_API_KEY"
GROQ_BASE_URL_ENV = "GROQ_BASE_URL"
GROQ_MODEL_ENV = "GROQ_MODEL"
GROQ_MAX_TOKENS_ENV = "GROQ_MAX_TOKENS"
ABORT_ON_ERROR_ENV = "TOOLCHAT_ABORT_ON_ERROR"
LOG_LEVEL_ENV = "TOOLCHAT_LOG_LEVEL"

#: Llama 3.3 70B on Groq.
DEFAULT_MODEL = "llama-3.3-70b-versatile"

#: Upper bound on tokens per completion; long file contents need headroom.
DEFAULT_MAX_TOKENS = 4000

#: Seconds a terminal_run command may take when the model gives no timeout.
DEFAULT_COMMAND_TIMEOUT = 30

#: Largest timeout the model may ask for.
MAX_COMMAND_TIMEOUT = 3600

DEFAULT_LOG_LEVEL = "WARNING"

_TRUTHY = {"1", "true", "yes", "on"}


def require_env(var_name: str) -> str:
    """
    Return the value of an environment variable or raise a clear error.

    Raises
    ------
    RuntimeError
        If the environment variable is missing or empty.
    """
    try:
        value = os.environ[var_name]
    except KeyError as exc:
        raise RuntimeError(f"Required environment variable '{var_name}' is not set.") from exc
    if not value:
        raise RuntimeError(f"Environment variable '{var_name}' is empty.")
    return value


def get_groq_api_key() -> str:
    """
    Convenience accessor specifically for the Groq API key.
    """
    return require_env(GROQ_API_KEY_ENV)


def get_base_url() -> Optional[str]:
    """Endpoint override; ``None`` lets the Groq SDK use its default."""
    return os.environ.get(GROQ_BASE_URL_ENV) or None


def get_model() -> str:
    return os.environ.get(GROQ_MODEL_ENV) or DEFAULT_MODEL


def get_max_tokens() -> int:
    """
    Completion token limit.

    Raises
    ------
    RuntimeError
        If the variable is set but is not a positive integer.
    """
    raw = os.environ.get(GROQ_MAX_TOKENS_ENV)
    if not raw:
        return DEFAULT_MAX_TOKENS
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"Environment variable '{GROQ_MAX_TOKENS_ENV}' must be an integer, got {raw!r}.") from exc
    if value <= 0:
        raise RuntimeError(f"Environment variable '{GROQ_MAX_TOKENS_ENV}' must be positive, got {value}.")
    return value


def abort_on_completion_error() -> bool:
    """Whether a failed completion call ends the session instead of returning to the user."""
    return os.environ.get(ABORT_ON_ERROR_ENV, "").strip().lower() in _TRUTHY


def get_log_level() -> int:
    name = (os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise RuntimeError(f"Unknown log level {name!r} in '{LOG_LEVEL_ENV}'.")
    return level
