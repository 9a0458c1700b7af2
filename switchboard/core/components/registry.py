# switchboard/core/components/registry.py
r"""Exact-id and pattern registries for component callbacks.

Usage:
    from switchboard.core.components.registry import component_pattern

    @component_pattern(r"^page_(\d+)_of_(\d+)$", cooldown=1)
    async def turn_page(context, params):
        page, total = params
"""

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from switchboard.core.components.models import (
    AnyComponentDefinition,
    ComponentDefinition,
    ComponentKind,
    PatternComponentDefinition,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Declarations collected by @component / @component_pattern, in import order
_registered_components: list[dict[str, Any]] = []


class ComponentRegistry:
    """Per-kind component registries.

    Each kind has an exact-id map and an ordered pattern list. Both are
    filled at startup and only grow afterwards.
    """

    def __init__(self, definitions: Iterable[AnyComponentDefinition] = ()) -> None:
        self._exact: dict[ComponentKind, dict[str, ComponentDefinition]] = {
            kind: {} for kind in ComponentKind
        }
        self._patterns: dict[ComponentKind, list[PatternComponentDefinition]] = {
            kind: [] for kind in ComponentKind
        }
        for definition in definitions:
            self.register(definition)

    def register(self, definition: AnyComponentDefinition) -> "ComponentRegistry":
        """Register an exact or pattern component.

        Re-registering an exact id of the same kind overwrites the previous
        handler with a warning.
        """
        if isinstance(definition, PatternComponentDefinition):
            self._patterns[definition.kind].append(definition)
            return self

        exact = self._exact[definition.kind]
        if definition.id in exact:
            logger.warning(
                "Component with ID %s already exists. Overwriting.", definition.id
            )
        exact[definition.id] = definition
        return self

    def get(self, kind: ComponentKind, component_id: str) -> ComponentDefinition | None:
        """Get an exact component by kind and id."""
        return self._exact[kind].get(component_id)

    def match(
        self, kind: ComponentKind, identifier: str
    ) -> tuple[AnyComponentDefinition, tuple[str, ...]] | None:
        """Find the handler for a callback identifier.

        The exact map wins. Otherwise patterns are tried in registration
        order and the first one found anywhere in the identifier wins.

        Returns:
            (definition, captured groups) or None. Exact matches and
            patterns without groups yield an empty tuple; groups that did
            not participate in the match are returned as "".
        """
        exact = self._exact[kind].get(identifier)
        if exact is not None:
            return exact, ()

        for definition in self._patterns[kind]:
            found = definition.pattern.search(identifier)
            if found:
                return definition, tuple(group or "" for group in found.groups())
        return None

    def __len__(self) -> int:
        return sum(len(m) for m in self._exact.values()) + sum(
            len(p) for p in self._patterns.values()
        )


# ============================================================================
# Registration Decorators
# ============================================================================


def component(
    component_id: str,
    *,
    kind: ComponentKind = ComponentKind.BUTTON,
    cooldown: float = 0,
    category: str | None = None,
) -> Callable[[F], F]:
    """Decorator declaring an exact-id component handler."""

    def decorator(func: F) -> F:
        _registered_components.append(
            {
                "id": component_id,
                "kind": kind,
                "handler": func,
                "cooldown_seconds": cooldown,
                "category": category,
            }
        )
        return func

    return decorator


def component_pattern(
    pattern: str | re.Pattern[str],
    *,
    kind: ComponentKind = ComponentKind.BUTTON,
    cooldown: float = 0,
    category: str | None = None,
) -> Callable[[F], F]:
    """Decorator declaring a pattern component handler."""

    def decorator(func: F) -> F:
        _registered_components.append(
            {
                "pattern": pattern,
                "kind": kind,
                "handler": func,
                "cooldown_seconds": cooldown,
                "category": category,
            }
        )
        return func

    return decorator


def registered_components() -> list[dict[str, Any]]:
    """Get the declarations collected by the component decorators so far."""
    return list(_registered_components)


def build_components(candidates: Iterable[Any]) -> list[AnyComponentDefinition]:
    """Turn declarations into component definitions.

    Definition objects pass through; mappings with a "pattern" key become
    pattern components, others exact components. Malformed declarations
    are skipped with a warning.
    """
    definitions: list[AnyComponentDefinition] = []
    for candidate in candidates:
        if isinstance(candidate, (ComponentDefinition, PatternComponentDefinition)):
            definitions.append(candidate)
            continue

        if not isinstance(candidate, Mapping) or not candidate.get("handler"):
            logger.warning("Skipping component declaration without handler")
            continue

        try:
            if "pattern" in candidate:
                definitions.append(PatternComponentDefinition(**candidate))
            else:
                definitions.append(ComponentDefinition(**candidate))
        except (ValueError, TypeError, re.error) as e:
            logger.warning("Skipping malformed component declaration: %s", e)

    logger.info("Loaded %d component definition(s)", len(definitions))
    return definitions
