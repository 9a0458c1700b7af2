"""Utility functions for the dispatch engine."""

from switchboard.utils.logging import (
    StructuredFormatter,
    configure_logging,
    get_invocation_id,
    new_invocation_id,
    reset_invocation_id,
    set_invocation_id,
)

__all__ = [
    "StructuredFormatter",
    "configure_logging",
    "get_invocation_id",
    "new_invocation_id",
    "reset_invocation_id",
    "set_invocation_id",
]
