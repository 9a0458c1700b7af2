# switchboard/middleware/permissions/core.py
"""Ordered permission checks for commands.

Stages run in a fixed order and stop at the first failure, so a caller can
always tell "not the owner" apart from "missing a role":

1. owner_only       - author must be a configured owner
2. guild_only/dm_only - invocation must (not) happen in a group context
3. role_ids         - member must hold any listed role (group context only)
4. user_permissions - member must hold every listed capability flag
5. bot_permissions  - the bot must hold every listed capability flag

A stage whose rule is unset is satisfied automatically.

Example:
    >>> rules = PermissionRules(owner_only=True, user_permissions={"X"})
    >>> result = evaluate(rules, context, owner_ids={"U1"})
    >>> if isinstance(result, Denied):
    ...     print(result.stage, result.reason)
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from switchboard.core.commands.models import PermissionRules
from switchboard.core.context import InvocationContext

logger = logging.getLogger(__name__)


class PermissionStage(str, Enum):
    """Permission pipeline stage that produced a denial."""

    OWNER_ONLY = "owner_only"
    GUILD_ONLY = "guild_only"
    DM_ONLY = "dm_only"
    ROLES = "roles"
    USER_PERMISSIONS = "user_permissions"
    BOT_PERMISSIONS = "bot_permissions"


@dataclass(frozen=True)
class Allowed:
    """Every stage passed."""


@dataclass(frozen=True)
class Denied:
    """A stage failed.

    Attributes:
        stage: The first failing stage.
        reason: User-facing explanation.
    """

    stage: PermissionStage
    reason: str


PermissionResult = Allowed | Denied

Stage = Callable[[PermissionRules, InvocationContext, frozenset[str]], Denied | None]


# ============================================================================
# Stages
# ============================================================================


def check_owner(
    rules: PermissionRules, context: InvocationContext, owner_ids: frozenset[str]
) -> Denied | None:
    if rules.owner_only and context.author_id not in owner_ids:
        return Denied(
            PermissionStage.OWNER_ONLY,
            "This command can only be used by the bot owner.",
        )
    return None


def check_location(
    rules: PermissionRules, context: InvocationContext, owner_ids: frozenset[str]
) -> Denied | None:
    if rules.guild_only and not context.in_guild:
        return Denied(
            PermissionStage.GUILD_ONLY, "This command can only be used in servers."
        )
    if rules.dm_only and context.in_guild:
        return Denied(
            PermissionStage.DM_ONLY,
            "This command can only be used in direct messages.",
        )
    return None


def check_roles(
    rules: PermissionRules, context: InvocationContext, owner_ids: frozenset[str]
) -> Denied | None:
    if not rules.role_ids or not context.in_guild:
        return None

    member = context.member
    if member is None or not member.has_any_role(rules.role_ids):
        return Denied(
            PermissionStage.ROLES,
            "You don't have the required role to use this command.",
        )
    return None


def check_user_permissions(
    rules: PermissionRules, context: InvocationContext, owner_ids: frozenset[str]
) -> Denied | None:
    if not rules.user_permissions:
        return None

    member = context.member
    if member is None or not member.has_all(rules.user_permissions):
        return Denied(
            PermissionStage.USER_PERMISSIONS,
            "You need the following permissions to use this command: "
            + ", ".join(sorted(rules.user_permissions)),
        )
    return None


def check_bot_permissions(
    rules: PermissionRules, context: InvocationContext, owner_ids: frozenset[str]
) -> Denied | None:
    if not rules.bot_permissions:
        return None

    bot_member = context.bot_member
    if bot_member is None or not bot_member.has_all(rules.bot_permissions):
        return Denied(
            PermissionStage.BOT_PERMISSIONS,
            "I need the following permissions to execute this command: "
            + ", ".join(sorted(rules.bot_permissions)),
        )
    return None


STAGES: tuple[Stage, ...] = (
    check_owner,
    check_location,
    check_roles,
    check_user_permissions,
    check_bot_permissions,
)


def evaluate(
    rules: PermissionRules | None,
    context: InvocationContext,
    owner_ids: frozenset[str] = frozenset(),
) -> PermissionResult:
    """Run the permission stages in order.

    Args:
        rules: The command's rules, or None for an unrestricted command.
        context: The invocation being authorized.
        owner_ids: User ids treated as bot owners.

    Returns:
        Allowed, or Denied from the first failing stage. Later stages are
        not evaluated after a denial.
    """
    if rules is None:
        return Allowed()

    for stage in STAGES:
        denied = stage(rules, context, owner_ids)
        if denied is not None:
            logger.info(
                "PERMISSION DENIED: %s for %s (%s)",
                context.command_name,
                context.author_id,
                denied.stage.value,
            )
            return denied
    return Allowed()
