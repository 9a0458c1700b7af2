# switchboard/utils/logging.py
"""Structured logging with JSON format and invocation ID support.

Provides:
- JSON-formatted log output for structured logging
- Invocation correlation ID via ContextVar, so every line logged while
  one command or component is being dispatched carries the same id
- Centralized logger configuration
"""

import json
import logging
import uuid
from contextvars import ContextVar, Token
from typing import Any

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

invocation_id_var: ContextVar[str] = ContextVar("invocation_id", default="")


def new_invocation_id() -> str:
    """Generate a short random invocation id."""
    return uuid.uuid4().hex[:12]


def set_invocation_id(invocation_id: str) -> Token[str]:
    """Set the invocation correlation ID for the current context.

    Args:
        invocation_id: Identifier for the invocation being dispatched.

    Returns:
        Token that can be passed to reset_invocation_id().
    """
    return invocation_id_var.set(invocation_id)


def reset_invocation_id(token: Token[str]) -> None:
    """Restore the invocation id that was active before set_invocation_id()."""
    invocation_id_var.reset(token)


def get_invocation_id() -> str:
    """Get the invocation correlation ID for the current context.

    Returns:
        Current invocation ID, or empty string if not set.
    """
    return invocation_id_var.get()


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Outputs log records as JSON with timestamp, level, logger name,
    message, and optional invocation_id for correlation.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        invocation_id = get_invocation_id()
        if invocation_id:
            log_data["invocation_id"] = invocation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(level: int | str = logging.INFO, structured: bool = False) -> None:
    """Configure logging for the application.

    Sets up a StreamHandler on the root logger using either the JSON
    StructuredFormatter or the plain text format.

    Args:
        level: Logging level name or number (default: logging.INFO).
        structured: Emit JSON lines instead of plain text.
    """
    handler = logging.StreamHandler()
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    logging.root.addHandler(handler)
    logging.root.setLevel(level.upper() if isinstance(level, str) else level)
