# switchboard/interfaces/slack/context.py
"""InvocationContext implementation backed by the Slack Web API."""

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from slack_sdk.errors import SlackApiError

from switchboard.core.context import Button, InvocationMode, MemberView, ReplyState
from switchboard.interfaces.slack.slack_api import (
    build_blocks,
    schedule_delete,
    slack_call,
)

logger = logging.getLogger(__name__)

# Capability flags derived from a Slack user's account type
MEMBER_CAPABILITIES = frozenset({"send_messages", "use_commands"})
ADMIN_CAPABILITIES = frozenset(
    {"administrator", "manage_messages", "manage_channels", "kick_members"}
)
OWNER_CAPABILITIES = frozenset({"manage_workspace"})


def is_direct_channel(channel_id: str) -> bool:
    """Check whether a channel id names a direct-message conversation."""
    return channel_id.startswith("D")


async def fetch_member(client: Any, user_id: str) -> MemberView:
    """Build a MemberView for a Slack user.

    Capability flags come from the account type (admin, owner); role ids are
    the user groups the user belongs to. Workspaces that do not grant the
    usergroups:read scope yield no role ids.

    Args:
        client: Slack AsyncWebClient instance.
        user_id: Slack user ID.

    Returns:
        The member view.
    """
    result = await slack_call(client.users_info, user=user_id)
    user = result.get("user", {})

    permissions = set(MEMBER_CAPABILITIES)
    if user.get("is_admin") or user.get("is_owner"):
        permissions |= ADMIN_CAPABILITIES
    if user.get("is_owner"):
        permissions |= OWNER_CAPABILITIES

    role_ids: set[str] = set()
    try:
        groups = await slack_call(client.usergroups_list, include_users=True)
    except SlackApiError as e:
        logger.debug("User groups unavailable: %s", e.response.get("error"))
    else:
        for group in groups.get("usergroups", []):
            if user_id in group.get("users", []):
                role_ids.add(group["id"])

    return MemberView(role_ids=frozenset(role_ids), permissions=frozenset(permissions))


@dataclass
class SlackInvocationContext:
    """One Slack invocation (message, slash command, action or submission).

    Replies go through ``respond`` (the response_url of slash commands and
    actions) when present, otherwise through chat.postMessage or
    chat.postEphemeral in ``channel_id``.

    Attributes:
        client: Slack AsyncWebClient instance.
        channel_id: Conversation the invocation came from.
        thread_ts: Thread to reply in, if any.
        values: Selected values of select menus and submitted modal fields.
        respond: Bolt respond function, if the payload has a response_url.
        message_channel: Channel of the message ``edit`` updates.
        message_ts: Timestamp of the message ``edit`` updates: the last
            posted reply, or the message holding a clicked component.
    """

    client: Any
    channel_id: str
    mode: InvocationMode = InvocationMode.MESSAGE
    command_name: str = ""
    author_id: str = ""
    author_is_bot: bool = False
    tokens: Sequence[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)
    in_guild: bool = True
    member: MemberView | None = None
    bot_member: MemberView | None = None
    reply_state: ReplyState = ReplyState.NOT_REPLIED
    thread_ts: str | None = None
    values: list[str] = field(default_factory=list)
    respond: Callable[..., Awaitable[Any]] | None = None
    message_channel: str | None = None
    message_ts: str | None = None

    def _remember(self, result: Any) -> None:
        self.message_channel = result.get("channel", self.channel_id)
        self.message_ts = result["ts"]

    async def reply(
        self,
        text: str,
        *,
        ephemeral: bool = False,
        delete_after: float | None = None,
        buttons: Sequence[Button] = (),
    ) -> None:
        """Send a reply for this invocation.

        Messages sent through ``respond`` cannot be deleted later, so a
        self-deleting reply is sent there as an ephemeral one instead.

        Args:
            text: Message text (Slack mrkdwn).
            ephemeral: Only show the reply to the invoking user.
            delete_after: Delete a public reply after this many seconds.
            buttons: Buttons rendered below the text.
        """
        blocks = build_blocks(text, buttons) if buttons else None

        if self.respond is not None:
            private = ephemeral or bool(delete_after)
            await self.respond(
                text=text,
                blocks=blocks,
                response_type="ephemeral" if private else "in_channel",
                replace_original=False,
            )
        elif ephemeral and not self.channel_id.startswith(("U", "W")):
            await slack_call(
                self.client.chat_postEphemeral,
                channel=self.channel_id,
                user=self.author_id,
                text=text,
                blocks=blocks,
                thread_ts=self.thread_ts,
            )
        else:
            result = await slack_call(
                self.client.chat_postMessage,
                channel=self.channel_id,
                text=text,
                blocks=blocks,
                thread_ts=self.thread_ts,
            )
            self._remember(result)
            if delete_after:
                schedule_delete(
                    self.client, self.message_channel, self.message_ts, delete_after
                )

        self.reply_state = ReplyState.REPLIED

    async def defer(self) -> None:
        """Mark the invocation as acknowledged.

        Bolt listeners ack every payload before dispatching, so there is
        nothing left to send to Slack.
        """
        if self.reply_state is ReplyState.NOT_REPLIED:
            self.reply_state = ReplyState.DEFERRED

    async def edit(self, text: str, *, buttons: Sequence[Button] = ()) -> None:
        """Replace the reply, or the message a clicked component belongs to.

        Uses ``respond`` with replace_original when available, otherwise
        chat.update on ``message_ts``. Without a message to update the text
        is posted as a new message.

        Args:
            text: New message text (Slack mrkdwn).
            buttons: Buttons rendered below the text.
        """
        if self.reply_state is ReplyState.NOT_REPLIED:
            await self.defer()

        blocks = build_blocks(text, buttons) if buttons else None

        if self.respond is not None:
            await self.respond(text=text, blocks=blocks, replace_original=True)
        elif self.message_ts is not None:
            await slack_call(
                self.client.chat_update,
                channel=self.message_channel or self.channel_id,
                ts=self.message_ts,
                text=text,
                blocks=blocks,
            )
        else:
            result = await slack_call(
                self.client.chat_postMessage,
                channel=self.channel_id,
                text=text,
                blocks=blocks,
                thread_ts=self.thread_ts,
            )
            self._remember(result)

        self.reply_state = ReplyState.REPLIED
