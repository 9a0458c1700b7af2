# switchboard/core/commands/registry.py
"""Registration of command definitions.

Handler modules declare commands with the @command decorator. At startup the
collected declarations are turned into CommandDefinition objects; malformed
ones are skipped with a warning instead of failing startup.

Usage:
    from switchboard.core.commands.registry import command

    @command(aliases={"latency"}, cooldown=5, category="Utility")
    async def ping(invocation: Invocation) -> None:
        '''Check the bot's latency.'''
        await invocation.context.reply("Pong!")
"""

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from switchboard.core.commands.models import (
    ArgumentSpec,
    CommandDefinition,
    PermissionRules,
    SchemaError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Declarations collected by @command, in import order
_registered_commands: list[dict[str, Any]] = []


def command(
    name: str | None = None,
    *,
    description: str | None = None,
    aliases: Iterable[str] = (),
    arguments: Iterable[ArgumentSpec] = (),
    cooldown: float = 0,
    category: str | None = None,
    interaction_only: bool = False,
    message_only: bool = False,
    permissions: PermissionRules | None = None,
) -> Callable[[F], F]:
    """Decorator declaring a function as a command handler.

    The command name defaults to the function name and the description to
    the first line of its docstring.

    Returns:
        Decorator returning the original function unchanged.
    """

    def decorator(func: F) -> F:
        doc = inspect.getdoc(func) or ""
        _registered_commands.append(
            {
                "name": name or func.__name__,
                "handler": func,
                "description": description
                if description is not None
                else (doc.splitlines()[0] if doc else ""),
                "aliases": frozenset(aliases),
                "arguments": tuple(arguments),
                "cooldown_seconds": cooldown,
                "category": category,
                "interaction_only": interaction_only,
                "message_only": message_only,
                "permissions": permissions,
            }
        )
        logger.debug("Registered command via decorator: %s", name or func.__name__)
        return func

    return decorator


def registered_commands() -> list[dict[str, Any]]:
    """Get the declarations collected by @command so far."""
    return list(_registered_commands)


def build_commands(candidates: Iterable[Any]) -> list[CommandDefinition]:
    """Turn declarations into command definitions.

    Accepts CommandDefinition objects as-is and mappings of
    CommandDefinition fields. Anything missing a name or handler, or
    failing schema validation, is skipped with a warning.

    Args:
        candidates: Definitions or declaration mappings.

    Returns:
        Valid definitions in input order.
    """
    definitions: list[CommandDefinition] = []
    for candidate in candidates:
        if isinstance(candidate, CommandDefinition):
            definitions.append(candidate)
            continue

        if not isinstance(candidate, Mapping):
            logger.warning("Skipping command declaration of type %s", type(candidate))
            continue

        if not candidate.get("name") or not candidate.get("handler"):
            logger.warning(
                "Skipping command declaration without name or handler: %r",
                candidate.get("name"),
            )
            continue

        try:
            definitions.append(CommandDefinition(**candidate))
        except (SchemaError, TypeError) as e:
            logger.warning("Skipping malformed command %r: %s", candidate["name"], e)

    logger.info("Loaded %d command definition(s)", len(definitions))
    return definitions
