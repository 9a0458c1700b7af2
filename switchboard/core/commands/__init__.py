"""Command module for definition, resolution and dispatch.

This module provides:
- CommandDefinition, ArgumentSpec, PermissionRules: immutable data model
- parse_message: prefix stripping and tokenization for message mode
- coerce: message-mode argument coercion against a typed schema
- CommandResolver: exact/alias lookup and typo suggestions
- command, build_commands: registration helpers

CommandDispatcher is imported from switchboard.core.commands.dispatcher.
"""

from switchboard.core.commands.arguments import (
    ArgumentViolations,
    CoercedArguments,
    coerce,
    wrap_options,
)
from switchboard.core.commands.models import (
    ArgumentKind,
    ArgumentSpec,
    ArgumentValue,
    BooleanValue,
    CommandDefinition,
    IntegerValue,
    Invocation,
    MissingArgument,
    NumberValue,
    OptionValue,
    PermissionRules,
    ReferenceValue,
    SchemaError,
    StringValue,
    ViolationReason,
)
from switchboard.core.commands.parser import ParsedMessage, parse_message
from switchboard.core.commands.registry import (
    build_commands,
    command,
    registered_commands,
)
from switchboard.core.commands.resolver import CommandResolver

__all__ = [
    "ArgumentKind",
    "ArgumentSpec",
    "ArgumentValue",
    "ArgumentViolations",
    "BooleanValue",
    "CoercedArguments",
    "CommandDefinition",
    "CommandResolver",
    "IntegerValue",
    "Invocation",
    "MissingArgument",
    "NumberValue",
    "OptionValue",
    "ParsedMessage",
    "PermissionRules",
    "ReferenceValue",
    "SchemaError",
    "StringValue",
    "ViolationReason",
    "build_commands",
    "coerce",
    "command",
    "parse_message",
    "registered_commands",
    "wrap_options",
]
