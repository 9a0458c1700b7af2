# switchboard/core/context.py
"""Invocation context contract shared by commands and components.

Platform adapters wrap each inbound event in an object satisfying
InvocationContext. The dispatch core only reads the attributes declared here
and answers through ``reply``, ``defer`` and ``edit``; it never touches
platform payloads directly.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class InvocationMode(str, Enum):
    """How a command invocation reached the bot."""

    INTERACTION = "interaction"
    MESSAGE = "message"


class ReplyState(str, Enum):
    """Whether the invocation has already been answered."""

    NOT_REPLIED = "not_replied"
    DEFERRED = "deferred"
    REPLIED = "replied"


class BotAuthorPolicy(str, Enum):
    """Which bot-authored invocations are dropped before resolution."""

    ALL = "all"
    SELF = "self"


@dataclass(frozen=True)
class MemberView:
    """Pre-resolved view of a member inside a group context.

    Attributes:
        role_ids: Roles held by the member.
        permissions: Capability flags the member effectively holds.
    """

    role_ids: frozenset[str] = field(default_factory=frozenset)
    permissions: frozenset[str] = field(default_factory=frozenset)

    def has_all(self, flags: frozenset[str]) -> bool:
        return flags <= self.permissions

    def has_any_role(self, role_ids: frozenset[str]) -> bool:
        return not self.role_ids.isdisjoint(role_ids)


@dataclass(frozen=True)
class Button:
    """Clickable button attached to a reply.

    Attributes:
        label: Text shown on the button.
        action_id: Component identifier sent back when clicked.
        disabled: Rendered inactive, or omitted where the platform cannot.
    """

    label: str
    action_id: str
    disabled: bool = False


@runtime_checkable
class InvocationContext(Protocol):
    """What the dispatch core needs to know about one invocation."""

    mode: InvocationMode
    command_name: str
    author_id: str
    author_is_bot: bool
    tokens: Sequence[str]
    options: Mapping[str, Any]
    in_guild: bool
    member: MemberView | None
    bot_member: MemberView | None
    reply_state: ReplyState

    async def reply(
        self,
        text: str,
        *,
        ephemeral: bool = False,
        delete_after: float | None = None,
        buttons: Sequence[Button] = (),
    ) -> None:
        """Send a reply for this invocation."""
        ...

    async def defer(self) -> None:
        """Acknowledge the invocation without replying yet.

        Moves reply_state from NOT_REPLIED to DEFERRED; a no-op otherwise.
        """
        ...

    async def edit(self, text: str, *, buttons: Sequence[Button] = ()) -> None:
        """Replace the invocation's reply with new content.

        Defers first when nothing has been sent yet, so the edit always has
        a reply to update.
        """
        ...
