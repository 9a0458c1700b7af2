"""Component registries and dispatch for UI callbacks.

This module provides:
- ComponentKind, ComponentDefinition, PatternComponentDefinition: data model
- ComponentRegistry: exact-then-pattern matching with capture groups
- ComponentDispatcher: cooldown and exception-contained invocation
- component, component_pattern: registration decorators
"""

from switchboard.core.components.dispatcher import ComponentDispatcher
from switchboard.core.components.models import (
    ComponentDefinition,
    ComponentKind,
    PatternComponentDefinition,
)
from switchboard.core.components.registry import (
    ComponentRegistry,
    build_components,
    component,
    component_pattern,
    registered_components,
)

__all__ = [
    "ComponentDefinition",
    "ComponentDispatcher",
    "ComponentKind",
    "ComponentRegistry",
    "PatternComponentDefinition",
    "build_components",
    "component",
    "component_pattern",
    "registered_components",
]
