# switchboard/core/outcomes.py
"""Outcome records for command and component dispatch.

Expected failures (unknown command, cooldown, permission denial, argument
violations) are returned as these records instead of being raised.
"""

from dataclasses import dataclass, field

from switchboard.core.commands.models import CommandDefinition, MissingArgument


# ============================================================================
# Command Outcomes
# ============================================================================


@dataclass(frozen=True)
class Ignored:
    """Dropped without any reply (bot author, empty name, wrong mode)."""

    reason: str


@dataclass(frozen=True)
class NotFound:
    """No command matched the invoked name."""

    name: str
    suggestions: tuple[str, ...] = ()


@dataclass(frozen=True)
class Cooldowned:
    """The user must wait before invoking the command again."""

    command: CommandDefinition
    remaining: int


@dataclass(frozen=True)
class PermissionDenied:
    """A permission stage rejected the invocation."""

    command: CommandDefinition
    reason: str


@dataclass(frozen=True)
class InvalidArguments:
    """Message-mode arguments failed coercion."""

    command: CommandDefinition
    violations: tuple[MissingArgument, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Invoked:
    """The command handler ran to completion."""

    command: CommandDefinition


DispatchOutcome = (
    Ignored | NotFound | Cooldowned | PermissionDenied | InvalidArguments | Invoked
)


# ============================================================================
# Component Outcomes
# ============================================================================


@dataclass(frozen=True)
class Unhandled:
    """No component handler matched the identifier."""

    identifier: str


@dataclass(frozen=True)
class ComponentCooldowned:
    component_id: str
    remaining: int


@dataclass(frozen=True)
class ComponentInvoked:
    component_id: str
    params: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComponentFailed:
    """The component handler raised; the error was contained."""

    component_id: str
    error: str


ComponentOutcome = Unhandled | ComponentCooldowned | ComponentInvoked | ComponentFailed
