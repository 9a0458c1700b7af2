# switchboard/core/components/models.py
"""Component definitions for UI callbacks (buttons, select menus, modals)."""

import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from switchboard.core.context import InvocationContext


class ComponentKind(str, Enum):
    """Kind of UI element a callback came from."""

    BUTTON = "button"
    STRING_SELECT = "string_select"
    USER_SELECT = "user_select"
    ROLE_SELECT = "role_select"
    CHANNEL_SELECT = "channel_select"
    MENTIONABLE_SELECT = "mentionable_select"
    MODAL = "modal"


ComponentHandler = Callable[[InvocationContext], Awaitable[Any] | Any]
PatternComponentHandler = Callable[[InvocationContext, Sequence[str]], Awaitable[Any] | Any]


@dataclass(frozen=True)
class ComponentDefinition:
    """Handler for callbacks whose identifier equals ``id``.

    Attributes:
        id: Exact callback identifier.
        kind: UI element kind.
        handler: Called with the invocation context.
        cooldown_seconds: Per-user cooldown, 0 disables it.
        category: Free-text grouping.
    """

    id: str
    kind: ComponentKind
    handler: ComponentHandler
    cooldown_seconds: float = 0
    category: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Component id must not be empty")
        if not callable(self.handler):
            raise ValueError(f"Component '{self.id}': handler is not callable")


@dataclass(frozen=True)
class PatternComponentDefinition:
    """Handler for callbacks whose identifier matches ``pattern``.

    The handler receives the pattern's capture groups, in order, as its
    second argument.

    Attributes:
        pattern: Compiled regular expression (strings are compiled).
        kind: UI element kind.
        handler: Called with the invocation context and captured groups.
        cooldown_seconds: Per-user cooldown, 0 disables it.
        category: Free-text grouping.
    """

    pattern: re.Pattern[str]
    kind: ComponentKind
    handler: PatternComponentHandler
    cooldown_seconds: float = 0
    category: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", re.compile(self.pattern))
        if not callable(self.handler):
            raise ValueError(
                f"Component '{self.pattern.pattern}': handler is not callable"
            )

    @property
    def id(self) -> str:
        """Identifier used for logging and cooldown keys: the regex source."""
        return self.pattern.pattern


AnyComponentDefinition = ComponentDefinition | PatternComponentDefinition
