"""Plain-text rendering of dispatch outcomes.

The dispatchers decide whether to reply and with which outcome record;
this module turns the record into text and sends it through the context.
Platform adapters may pass their own responder instead.
"""

from collections.abc import Awaitable, Callable
from typing import Any

from switchboard.core.commands.models import ArgumentKind, MissingArgument, ViolationReason
from switchboard.core.context import InvocationContext, InvocationMode
from switchboard.core.outcomes import (
    ComponentCooldowned,
    ComponentFailed,
    Cooldowned,
    InvalidArguments,
    NotFound,
    PermissionDenied,
)

Responder = Callable[[InvocationContext, Any], Awaitable[None]]

GENERIC_FAILURE = "There was an error executing this component."

KIND_LABELS: dict[ArgumentKind, str] = {
    ArgumentKind.STRING: "Text",
    ArgumentKind.INTEGER: "Integer",
    ArgumentKind.NUMBER: "Number",
    ArgumentKind.BOOLEAN: "Boolean",
    ArgumentKind.USER: "User",
    ArgumentKind.CHANNEL: "Channel",
    ArgumentKind.ROLE: "Role",
    ArgumentKind.MENTIONABLE: "Mentionable",
    ArgumentKind.ATTACHMENT: "Attachment",
    ArgumentKind.SUBCOMMAND: "Subcommand",
}

REASON_LABELS: dict[ViolationReason, str] = {
    ViolationReason.ABSENT: "missing",
    ViolationReason.INVALID: "invalid",
    ViolationReason.CHOICE_MISMATCH: "not one of the allowed choices",
    ViolationReason.TOO_LONG: "too long",
    ViolationReason.TOO_SHORT: "too short",
    ViolationReason.OUT_OF_RANGE: "out of range",
}


def _describe_violation(violation: MissingArgument) -> str:
    line = (
        f"- `{violation.argument_name}` ({KIND_LABELS[violation.kind]}): "
        f"{REASON_LABELS[violation.reason]}"
    )
    if violation.choices:
        line += f" [{', '.join(violation.choices)}]"
    return line


def render_outcome(outcome: Any) -> str | None:
    """Render an outcome record as reply text.

    Returns:
        The text to send, or None for outcomes that get no reply.
    """
    match outcome:
        case NotFound(name=name, suggestions=suggestions):
            text = f":x: I couldn't find the command `{name}`."
            if suggestions:
                text += f" Did you mean `{suggestions[0]}`?"
            return text
        case Cooldowned(remaining=remaining) | ComponentCooldowned(remaining=remaining):
            return (
                f":hourglass: You are on cooldown! Wait {remaining} more "
                f"second{'s' if remaining != 1 else ''} before using this again."
            )
        case PermissionDenied(reason=reason):
            return f":no_entry: {reason}"
        case InvalidArguments(violations=violations):
            lines = [":x: Some arguments are missing or invalid:"]
            lines.extend(_describe_violation(v) for v in violations)
            return "\n".join(lines)
        case ComponentFailed():
            return GENERIC_FAILURE
        case _:
            return None


def make_responder(notice_ttl_seconds: float | None = 15.0) -> Responder:
    """Create the default responder replying through the invocation context.

    Permission denials and component notices are always ephemeral. In
    message mode, not-found and cooldown notices delete themselves after
    ``notice_ttl_seconds``; argument violations stay visible.
    """

    async def respond(context: InvocationContext, outcome: Any) -> None:
        text = render_outcome(outcome)
        if text is None:
            return

        if context.mode is InvocationMode.MESSAGE and isinstance(
            outcome, (NotFound, Cooldowned)
        ):
            await context.reply(text, delete_after=notice_ttl_seconds)
        elif isinstance(outcome, InvalidArguments):
            await context.reply(text)
        else:
            await context.reply(text, ephemeral=True)

    return respond
