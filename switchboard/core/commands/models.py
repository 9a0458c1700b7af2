# switchboard/core/commands/models.py
"""Command definition data model.

This module defines the immutable CommandDefinition and its argument
schema, the tagged argument values handed to command handlers, and the
violation records produced when message-mode arguments fail coercion.
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from switchboard.core.context import InvocationContext


class SchemaError(ValueError):
    """Raised when a command or argument schema is malformed."""


class ArgumentKind(str, Enum):
    """Type of a command argument."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    USER = "user"
    CHANNEL = "channel"
    ROLE = "role"
    MENTIONABLE = "mentionable"
    ATTACHMENT = "attachment"
    SUBCOMMAND = "subcommand"

    @property
    def is_reference(self) -> bool:
        return self in REFERENCE_KINDS


REFERENCE_KINDS = frozenset(
    {
        ArgumentKind.USER,
        ArgumentKind.CHANNEL,
        ArgumentKind.ROLE,
        ArgumentKind.MENTIONABLE,
    }
)


class ViolationReason(str, Enum):
    """Why an argument failed coercion or validation."""

    ABSENT = "absent"
    INVALID = "invalid"
    CHOICE_MISMATCH = "choice_mismatch"
    TOO_LONG = "too_long"
    TOO_SHORT = "too_short"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class ArgumentSpec:
    """Declaration of one command argument.

    Attributes:
        name: Argument name, key of the coerced argument mapping.
        kind: Argument type.
        required: Whether the argument must be supplied.
        description: Human-readable description.
        choices: Closed set of allowed values (string kind).
        min_length: Minimum string length.
        max_length: Maximum string length.
        min_value: Minimum numeric value.
        max_value: Maximum numeric value.
    """

    name: str
    kind: ArgumentKind
    required: bool = False
    description: str = ""
    choices: tuple[str, ...] | None = None
    min_length: int | None = None
    max_length: int | None = None
    min_value: float | None = None
    max_value: float | None = None

    def __post_init__(self) -> None:
        if self.choices is not None:
            object.__setattr__(self, "choices", tuple(self.choices))
        if not self.name:
            raise SchemaError("Argument name must not be empty")
        if self.choices is not None and self.kind is not ArgumentKind.STRING:
            raise SchemaError(f"Argument '{self.name}': choices require string kind")
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise SchemaError(f"Argument '{self.name}': min_length > max_length")
        if (
            self.min_value is not None
            and self.max_value is not None
            and self.min_value > self.max_value
        ):
            raise SchemaError(f"Argument '{self.name}': min_value > max_value")


@dataclass(frozen=True)
class PermissionRules:
    """Authorization requirements of a command.

    Attributes:
        owner_only: Only configured bot owners may invoke.
        guild_only: Only usable inside a group context.
        dm_only: Only usable in direct messages.
        role_ids: Member must hold at least one of these roles.
        user_permissions: Member must hold all of these capability flags.
        bot_permissions: The bot must hold all of these capability flags.
    """

    owner_only: bool = False
    guild_only: bool = False
    dm_only: bool = False
    role_ids: frozenset[str] = field(default_factory=frozenset)
    user_permissions: frozenset[str] = field(default_factory=frozenset)
    bot_permissions: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        for name in ("role_ids", "user_permissions", "bot_permissions"):
            object.__setattr__(self, name, frozenset(getattr(self, name)))


# ============================================================================
# Argument Values
# ============================================================================


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class IntegerValue:
    value: int


@dataclass(frozen=True)
class NumberValue:
    value: float


@dataclass(frozen=True)
class BooleanValue:
    value: bool


@dataclass(frozen=True)
class ReferenceValue:
    """Raw identifier of a user, channel, role or mentionable.

    The referenced entity is not looked up; handlers resolve it if needed.
    """

    kind: ArgumentKind
    id: str


@dataclass(frozen=True)
class OptionValue:
    """Interaction-mode value of a kind without a dedicated wrapper."""

    kind: ArgumentKind
    value: Any


ArgumentValue = Union[
    StringValue, IntegerValue, NumberValue, BooleanValue, ReferenceValue, OptionValue
]


@dataclass(frozen=True)
class MissingArgument:
    """One argument that failed coercion or validation.

    Attributes:
        argument_name: Name of the failing argument.
        kind: Declared argument kind.
        reason: Violation tag.
        choices: Allowed values, set for choice mismatches.
    """

    argument_name: str
    kind: ArgumentKind
    reason: ViolationReason
    choices: tuple[str, ...] | None = None


# ============================================================================
# Command Definition
# ============================================================================


@dataclass(frozen=True)
class Invocation:
    """What a command handler receives.

    Attributes:
        context: The invocation context.
        command: The resolved command definition.
        args: Coerced arguments keyed by argument name.
    """

    context: "InvocationContext"
    command: "CommandDefinition"
    args: Mapping[str, ArgumentValue] = field(default_factory=dict)


CommandHandler = Callable[[Invocation], Awaitable[Any] | Any]


@dataclass(frozen=True)
class CommandDefinition:
    """Immutable description of one command.

    Attributes:
        name: Unique, case-sensitive command name.
        handler: Callable invoked with an Invocation, sync or async.
        description: Short description shown by help.
        aliases: Alternate names accepted in message mode.
        arguments: Ordered argument schema, required specs first.
        cooldown_seconds: Per-user cooldown, 0 disables it.
        category: Grouping used by help; None means the default category.
        interaction_only: Reject message-mode invocations.
        message_only: Reject interaction-mode invocations.
        permissions: Optional authorization rules.

    Raises:
        SchemaError: If the definition is inconsistent.
    """

    name: str
    handler: CommandHandler
    description: str = ""
    aliases: frozenset[str] = field(default_factory=frozenset)
    arguments: tuple[ArgumentSpec, ...] = ()
    cooldown_seconds: float = 0
    category: str | None = None
    interaction_only: bool = False
    message_only: bool = False
    permissions: PermissionRules | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "aliases", frozenset(self.aliases))
        object.__setattr__(self, "arguments", tuple(self.arguments))

        if not self.name:
            raise SchemaError("Command name must not be empty")
        if not callable(self.handler):
            raise SchemaError(f"Command '{self.name}': handler is not callable")
        if self.interaction_only and self.message_only:
            raise SchemaError(
                f"Command '{self.name}': interaction_only and message_only are exclusive"
            )
        if self.cooldown_seconds < 0:
            raise SchemaError(f"Command '{self.name}': negative cooldown")

        seen_optional = False
        names: set[str] = set()
        for spec in self.arguments:
            if spec.name in names:
                raise SchemaError(
                    f"Command '{self.name}': duplicate argument '{spec.name}'"
                )
            names.add(spec.name)
            if spec.required and seen_optional:
                raise SchemaError(
                    f"Command '{self.name}': required argument '{spec.name}' "
                    "follows an optional one"
                )
            if not spec.required:
                seen_optional = True
            if (
                spec.kind is ArgumentKind.ATTACHMENT
                and spec.required
                and not self.interaction_only
            ):
                raise SchemaError(
                    f"Command '{self.name}': required attachment '{spec.name}' "
                    "cannot be supplied in message mode"
                )

    @property
    def message_aliases(self) -> frozenset[str]:
        """Aliases usable in message mode (none for interaction-only commands)."""
        return frozenset() if self.interaction_only else self.aliases
