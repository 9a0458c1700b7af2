# switchboard/core/commands/arguments.py
"""Message-mode argument coercion.

Free-text tokens are matched against a command's ordered argument schema,
one token per argument, and converted into tagged ArgumentValue objects.
Every argument is evaluated even after an earlier one failed, so a single
call reports all problems at once.

Interaction-mode options arrive already typed from the platform; they are
only wrapped into ArgumentValue objects by wrap_options(), never validated.
"""

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from switchboard.core.commands.models import (
    ArgumentKind,
    ArgumentSpec,
    ArgumentValue,
    BooleanValue,
    IntegerValue,
    MissingArgument,
    NumberValue,
    OptionValue,
    ReferenceValue,
    SchemaError,
    StringValue,
    ViolationReason,
)

TRUTHY_TOKENS = frozenset({"true", "yes", "1"})

# Discord snowflakes or Slack-style uppercase ids (U…, C…, S…)
RAW_ID_PATTERN = re.compile(r"^(?:\d{17,20}|[A-Z][A-Z0-9]{6,})$")

_USER_MENTION = r"<@!?(?P<id>\d+)>|<@(?P<sid>[UW][A-Z0-9]+)(?:\|[^>]*)?>"
_ROLE_MENTION = r"<@&(?P<id>\d+)>|<!subteam\^(?P<sid>S[A-Z0-9]+)(?:\|[^>]*)?>"
_CHANNEL_MENTION = r"<#(?P<id>\d+)>|<#(?P<sid>[CGD][A-Z0-9]+)(?:\|[^>]*)?>"

MENTION_PATTERNS: dict[ArgumentKind, tuple[re.Pattern[str], ...]] = {
    ArgumentKind.USER: (re.compile(_USER_MENTION),),
    ArgumentKind.ROLE: (re.compile(_ROLE_MENTION),),
    ArgumentKind.CHANNEL: (re.compile(_CHANNEL_MENTION),),
    ArgumentKind.MENTIONABLE: (re.compile(_USER_MENTION), re.compile(_ROLE_MENTION)),
}


@dataclass(frozen=True)
class CoercedArguments:
    """Successful coercion: argument values keyed by argument name."""

    args: Mapping[str, ArgumentValue] = field(default_factory=dict)


@dataclass(frozen=True)
class ArgumentViolations:
    """Failed coercion: every argument that did not validate, in schema order."""

    violations: tuple[MissingArgument, ...]


CoercionResult = CoercedArguments | ArgumentViolations


def extract_reference_id(kind: ArgumentKind, token: str) -> str | None:
    """Strip mention syntax from a token and return the raw identifier.

    Args:
        kind: Reference kind the token should name.
        token: Raw token, either a mention or a bare identifier.

    Returns:
        The identifier, or None if the token is neither a mention of the
        right kind nor something shaped like a platform id.
    """
    for pattern in MENTION_PATTERNS[kind]:
        match = pattern.fullmatch(token)
        if match:
            return match.group("id") or match.group("sid")

    if RAW_ID_PATTERN.match(token):
        return token
    return None


def _out_of_range(spec: ArgumentSpec, value: float) -> bool:
    if spec.min_value is not None and value < spec.min_value:
        return True
    if spec.max_value is not None and value > spec.max_value:
        return True
    return False


def _coerce_string(
    spec: ArgumentSpec, token: str
) -> tuple[ArgumentValue | None, ViolationReason | None]:
    value = token
    if spec.choices:
        folded = {choice.casefold(): choice for choice in spec.choices}
        if token.casefold() not in folded:
            return None, ViolationReason.CHOICE_MISMATCH
        value = folded[token.casefold()]

    if spec.max_length is not None and len(value) > spec.max_length:
        return None, ViolationReason.TOO_LONG
    if spec.min_length is not None and len(value) < spec.min_length:
        return None, ViolationReason.TOO_SHORT
    return StringValue(value), None


def _coerce_token(
    spec: ArgumentSpec, token: str
) -> tuple[ArgumentValue | None, ViolationReason | None]:
    """Convert a single token for one spec.

    Returns:
        (value, None) on success, (None, reason) on a violation, and
        (None, None) when an optional argument is silently left unset.
    """
    kind = spec.kind

    if kind is ArgumentKind.BOOLEAN:
        return BooleanValue(token.casefold() in TRUTHY_TOKENS), None

    if kind is ArgumentKind.INTEGER:
        try:
            number = int(token)
        except ValueError:
            return None, ViolationReason.INVALID
        if _out_of_range(spec, number):
            return None, ViolationReason.OUT_OF_RANGE
        return IntegerValue(number), None

    if kind is ArgumentKind.NUMBER:
        try:
            real = float(token)
        except ValueError:
            return None, ViolationReason.INVALID
        if not math.isfinite(real):
            return None, ViolationReason.INVALID
        if _out_of_range(spec, real):
            return None, ViolationReason.OUT_OF_RANGE
        return NumberValue(real), None

    if kind is ArgumentKind.STRING:
        return _coerce_string(spec, token)

    if kind.is_reference:
        ref_id = extract_reference_id(kind, token)
        if ref_id is None:
            return None, ViolationReason.INVALID if spec.required else None
        return ReferenceValue(kind=kind, id=ref_id), None

    # Subcommand: the token names the subcommand to run
    return StringValue(token), None


def coerce(schema: Sequence[ArgumentSpec], tokens: Sequence[str]) -> CoercionResult:
    """Coerce message tokens against an ordered argument schema.

    Tokens are consumed left to right, one per argument. A string argument
    that is the last argument of the schema consumes all remaining tokens,
    joined with single spaces. Missing optional arguments are left unset;
    missing required ones are reported as ABSENT.

    Args:
        schema: Argument specs in declaration order, required specs first.
        tokens: Message tokens following the command name.

    Returns:
        CoercedArguments when every argument validated, otherwise
        ArgumentViolations listing every failing argument.

    Raises:
        SchemaError: If the schema declares a required attachment, which
            free text can never satisfy.
    """
    args: dict[str, ArgumentValue] = {}
    violations: list[MissingArgument] = []
    index = 0
    last_position = len(schema) - 1

    for position, spec in enumerate(schema):
        if spec.kind is ArgumentKind.ATTACHMENT:
            if spec.required:
                raise SchemaError(
                    f"Argument '{spec.name}': required attachments cannot be "
                    "parsed from message text"
                )
            continue

        if index >= len(tokens):
            if spec.required:
                violations.append(
                    MissingArgument(spec.name, spec.kind, ViolationReason.ABSENT)
                )
            continue

        if spec.kind is ArgumentKind.STRING and position == last_position:
            token = " ".join(tokens[index:])
            index = len(tokens)
        else:
            token = tokens[index]
            index += 1

        value, reason = _coerce_token(spec, token)
        if reason is not None:
            choices = spec.choices if reason is ViolationReason.CHOICE_MISMATCH else None
            violations.append(MissingArgument(spec.name, spec.kind, reason, choices))
        elif value is not None:
            args[spec.name] = value

    if violations:
        return ArgumentViolations(tuple(violations))
    return CoercedArguments(args)


def wrap_options(
    schema: Sequence[ArgumentSpec], options: Mapping[str, Any]
) -> dict[str, ArgumentValue]:
    """Wrap pre-typed interaction options into ArgumentValue objects.

    Options not declared in the schema, and options set to None, are dropped.
    """
    wrapped: dict[str, ArgumentValue] = {}
    for spec in schema:
        value = options.get(spec.name)
        if value is None:
            continue

        match spec.kind:
            case ArgumentKind.STRING:
                wrapped[spec.name] = StringValue(str(value))
            case ArgumentKind.INTEGER:
                wrapped[spec.name] = IntegerValue(int(value))
            case ArgumentKind.NUMBER:
                wrapped[spec.name] = NumberValue(float(value))
            case ArgumentKind.BOOLEAN:
                wrapped[spec.name] = BooleanValue(bool(value))
            case _ if spec.kind.is_reference:
                wrapped[spec.name] = ReferenceValue(kind=spec.kind, id=str(value))
            case _:
                wrapped[spec.name] = OptionValue(kind=spec.kind, value=value)
    return wrapped
