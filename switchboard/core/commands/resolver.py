# switchboard/core/commands/resolver.py
"""Command registry with exact, alias and typo-tolerant lookup."""

import logging
from collections.abc import Iterable

from switchboard.core.commands.models import CommandDefinition
from switchboard.core.distance import damerau_levenshtein

logger = logging.getLogger(__name__)

# Unknown names longer than this are not considered typos
MAX_SUGGESTION_INPUT_LENGTH = 10
MAX_SUGGESTION_DISTANCE = 2
MAX_SUGGESTIONS = 3


class CommandResolver:
    """Name-keyed command registry.

    Registration happens once at startup; lookups never mutate state.

    Attributes:
        default_category: Category reported for commands without one.
    """

    def __init__(
        self,
        definitions: Iterable[CommandDefinition] = (),
        default_category: str = "General",
    ) -> None:
        self.default_category = default_category
        self._commands: dict[str, CommandDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: CommandDefinition) -> None:
        """Add a command, replacing any command with the same name."""
        if definition.name in self._commands:
            logger.warning(
                "Command '%s' already registered. Overwriting.", definition.name
            )
        self._commands[definition.name] = definition

    @property
    def commands(self) -> dict[str, CommandDefinition]:
        """Registered commands keyed by name (a copy)."""
        return dict(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def resolve(self, name: str) -> CommandDefinition | None:
        """Find a command by exact name, then by message-mode alias.

        Aliases of interaction-only commands are never matched.

        Args:
            name: Invoked command name (case-sensitive).

        Returns:
            The matching definition, or None.
        """
        command = self._commands.get(name)
        if command is not None:
            return command

        for definition in self._commands.values():
            if name in definition.message_aliases:
                return definition
        return None

    def suggest(self, name: str) -> list[str]:
        """Suggest registered command names close to an unknown name.

        Only names of at most MAX_SUGGESTION_INPUT_LENGTH characters get
        suggestions. Candidates within MAX_SUGGESTION_DISTANCE edits are
        ordered by distance, then alphabetically.

        Args:
            name: The unknown command name.

        Returns:
            Up to MAX_SUGGESTIONS command names.
        """
        if len(name) > MAX_SUGGESTION_INPUT_LENGTH:
            return []

        candidates: list[tuple[int, str]] = []
        for command_name in self._commands:
            distance = damerau_levenshtein(command_name, name)
            if distance <= MAX_SUGGESTION_DISTANCE:
                candidates.append((distance, command_name))

        candidates.sort()
        return [command_name for _, command_name in candidates[:MAX_SUGGESTIONS]]

    def category_of(self, definition: CommandDefinition) -> str:
        return definition.category or self.default_category

    def categories(self) -> dict[str, list[str]]:
        """Group command names by category.

        Returns:
            Mapping of category to sorted command names, categories sorted.
        """
        grouped: dict[str, list[str]] = {}
        for definition in self._commands.values():
            grouped.setdefault(self.category_of(definition), []).append(definition.name)
        return {category: sorted(grouped[category]) for category in sorted(grouped)}


# Singleton instance
_resolver: CommandResolver | None = None


def get_resolver() -> CommandResolver:
    """Get the process-wide CommandResolver.

    Returns:
        The resolver installed with set_resolver(), or an empty one.
    """
    global _resolver
    if _resolver is None:
        _resolver = CommandResolver()
    return _resolver


def set_resolver(resolver: CommandResolver | None) -> None:
    """Install the process-wide CommandResolver (None resets it)."""
    global _resolver
    _resolver = resolver
