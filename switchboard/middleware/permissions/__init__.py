# switchboard/middleware/permissions/__init__.py
"""Permission pipeline for commands.

Example:
    >>> from switchboard.middleware.permissions import Denied, PermissionEvaluator
    >>> evaluator = PermissionEvaluator(owner_ids={"U01OWNER"})
    >>> result = evaluator.evaluate(command.permissions, context)
    >>> if isinstance(result, Denied):
    ...     await context.reply(result.reason, ephemeral=True)
"""

from switchboard.middleware.permissions.core import (
    Allowed,
    Denied,
    PermissionResult,
    PermissionStage,
    evaluate,
)
from switchboard.middleware.permissions.enforcer import PermissionEvaluator

__all__ = [
    "Allowed",
    "Denied",
    "PermissionEvaluator",
    "PermissionResult",
    "PermissionStage",
    "evaluate",
]
