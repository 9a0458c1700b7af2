# switchboard/interfaces/slack/handlers.py
"""Slack listeners translating Bolt payloads into invocations.

Provides handlers for:
- Prefixed channel and direct messages (message event)
- Slash commands (treated as message-mode invocations, Slack has no typed
  command options)
- Block actions from buttons and select menus
- Modal view submissions
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from switchboard.core.commands.dispatcher import CommandDispatcher
from switchboard.core.commands.parser import parse_message
from switchboard.core.components.dispatcher import ComponentDispatcher
from switchboard.core.components.models import ComponentKind
from switchboard.core.context import InvocationMode, MemberView
from switchboard.core.outcomes import ComponentOutcome, DispatchOutcome
from switchboard.interfaces.slack.context import (
    SlackInvocationContext,
    fetch_member,
    is_direct_channel,
)

logger = logging.getLogger(__name__)

# Message subtypes that still carry a user-authored text
COMMAND_SUBTYPES = frozenset({None, "bot_message", "file_share", "thread_broadcast"})

ACTION_KINDS: dict[str, ComponentKind] = {
    "button": ComponentKind.BUTTON,
    "static_select": ComponentKind.STRING_SELECT,
    "external_select": ComponentKind.STRING_SELECT,
    "multi_static_select": ComponentKind.STRING_SELECT,
    "multi_external_select": ComponentKind.STRING_SELECT,
    "overflow": ComponentKind.STRING_SELECT,
    "radio_buttons": ComponentKind.STRING_SELECT,
    "checkboxes": ComponentKind.STRING_SELECT,
    "users_select": ComponentKind.USER_SELECT,
    "multi_users_select": ComponentKind.USER_SELECT,
    "conversations_select": ComponentKind.CHANNEL_SELECT,
    "multi_conversations_select": ComponentKind.CHANNEL_SELECT,
    "channels_select": ComponentKind.CHANNEL_SELECT,
    "multi_channels_select": ComponentKind.CHANNEL_SELECT,
}


def extract_action_values(action: dict[str, Any]) -> list[str]:
    """Get the selected or submitted values of one block element payload."""
    if "selected_options" in action:
        return [option["value"] for option in action["selected_options"] or []]
    if action.get("selected_option"):
        return [action["selected_option"]["value"]]
    for key in ("selected_user", "selected_conversation", "selected_channel"):
        if action.get(key):
            return [action[key]]
    for key in ("selected_users", "selected_conversations", "selected_channels"):
        if key in action:
            return list(action[key] or [])
    if action.get("value") is not None:
        return [action["value"]]
    return []


def extract_view_values(view: dict[str, Any]) -> list[str]:
    """Flatten the submitted input values of a modal, in block order."""
    values: list[str] = []
    for block in view.get("state", {}).get("values", {}).values():
        for element in block.values():
            values.extend(extract_action_values(element))
    return values


class SlackEventRouter:
    """Bolt listeners bound to the command and component dispatchers.

    Attributes:
        commands: Dispatcher for message-mode invocations.
        components: Dispatcher for block actions and view submissions.
        prefix: Command prefix for message events.
        bot_capabilities: Capability flags of the bot's own member view.
    """

    def __init__(
        self,
        commands: CommandDispatcher,
        components: ComponentDispatcher,
        *,
        prefix: str = "!",
        bot_capabilities: frozenset[str] = frozenset(),
    ) -> None:
        self.commands = commands
        self.components = components
        self.prefix = prefix
        self.bot_capabilities = bot_capabilities

    def needs_member(self, name: str) -> bool:
        """Check whether a command's rules read the invoking member.

        Only role and user capability requirements do; unknown commands and
        commands without such rules are dispatched without a member lookup.
        """
        command = self.commands.resolver.resolve(name)
        if command is None or command.permissions is None:
            return False
        rules = command.permissions
        return bool(rules.role_ids or rules.user_permissions)

    async def _command_context(
        self,
        client: Any,
        *,
        channel_id: str,
        name: str,
        tokens: list[str],
        author_id: str,
        author_is_bot: bool = False,
        thread_ts: str | None = None,
        respond: Callable[..., Awaitable[Any]] | None = None,
    ) -> SlackInvocationContext:
        in_guild = not is_direct_channel(channel_id)
        member = None
        bot_member = None
        if in_guild and not author_is_bot and self.needs_member(name):
            member = await fetch_member(client, author_id)
        if in_guild:
            bot_member = MemberView(permissions=self.bot_capabilities)

        return SlackInvocationContext(
            client=client,
            channel_id=channel_id,
            mode=InvocationMode.MESSAGE,
            command_name=name,
            author_id=author_id,
            author_is_bot=author_is_bot,
            tokens=tokens,
            in_guild=in_guild,
            member=member,
            bot_member=bot_member,
            thread_ts=thread_ts,
            respond=respond,
        )

    async def handle_message(self, event: dict[str, Any], client: Any) -> None:
        """Handle message events starting with the command prefix."""
        if event.get("subtype") not in COMMAND_SUBTYPES:
            return

        parsed = parse_message(event.get("text") or "", self.prefix)
        if parsed is None:
            return

        author_is_bot = (
            bool(event.get("bot_id")) or event.get("subtype") == "bot_message"
        )
        author_id = event.get("user") or event.get("bot_id") or ""
        if self.commands.ignores_author(author_id, author_is_bot):
            return

        context = await self._command_context(
            client,
            channel_id=event["channel"],
            name=parsed.name,
            tokens=parsed.tokens,
            author_id=author_id,
            author_is_bot=author_is_bot,
            thread_ts=event.get("thread_ts"),
        )
        await self._dispatch_command(context)

    async def handle_slash_command(
        self,
        ack: Callable[..., Awaitable[Any]],
        command: dict[str, Any],
        client: Any,
        respond: Callable[..., Awaitable[Any]],
    ) -> None:
        """Handle a slash command as a message-mode invocation."""
        await ack()

        context = await self._command_context(
            client,
            channel_id=command["channel_id"],
            name=command["command"].lstrip("/"),
            tokens=(command.get("text") or "").split(),
            author_id=command["user_id"],
            respond=respond,
        )
        await self._dispatch_command(context)

    async def _dispatch_command(
        self, context: SlackInvocationContext
    ) -> DispatchOutcome:
        outcome = await self.commands.dispatch(context)
        logger.debug("%s -> %s", context.command_name, type(outcome).__name__)
        return outcome

    async def handle_block_action(
        self,
        ack: Callable[..., Awaitable[Any]],
        body: dict[str, Any],
        action: dict[str, Any],
        client: Any,
        respond: Callable[..., Awaitable[Any]],
    ) -> None:
        """Route a button click or menu selection to the component dispatcher."""
        await ack()

        kind = ACTION_KINDS.get(action.get("type", ""))
        if kind is None:
            logger.debug("Ignoring unsupported action type %s", action.get("type"))
            return

        container = body.get("container") or {}
        channel_id = (body.get("channel") or {}).get("id") or container.get(
            "channel_id", ""
        )
        context = SlackInvocationContext(
            client=client,
            channel_id=channel_id or body["user"]["id"],
            mode=InvocationMode.INTERACTION,
            command_name=action["action_id"],
            author_id=body["user"]["id"],
            in_guild=bool(channel_id) and not is_direct_channel(channel_id),
            values=extract_action_values(action),
            respond=respond if body.get("response_url") else None,
            message_channel=channel_id or None,
            message_ts=(body.get("message") or {}).get("ts")
            or container.get("message_ts"),
        )
        await self._dispatch_component(kind, action["action_id"], context)

    async def handle_view_submission(
        self,
        ack: Callable[..., Awaitable[Any]],
        body: dict[str, Any],
        view: dict[str, Any],
        client: Any,
    ) -> None:
        """Route a modal submission to the component dispatcher."""
        await ack()

        user_id = body["user"]["id"]
        channel_id = view.get("private_metadata") or user_id
        context = SlackInvocationContext(
            client=client,
            channel_id=channel_id,
            mode=InvocationMode.INTERACTION,
            command_name=view["callback_id"],
            author_id=user_id,
            in_guild=not channel_id.startswith(("U", "W", "D")),
            values=extract_view_values(view),
        )
        await self._dispatch_component(
            ComponentKind.MODAL, view["callback_id"], context
        )

    async def _dispatch_component(
        self, kind: ComponentKind, identifier: str, context: SlackInvocationContext
    ) -> ComponentOutcome:
        outcome = await self.components.handle(kind, identifier, context)
        logger.debug("%s %s -> %s", kind.value, identifier, type(outcome).__name__)
        return outcome


async def handle_error(error: Exception, body: dict[str, Any]) -> None:
    """Log exceptions escaping a listener (command handler faults)."""
    logger.error(
        "Unhandled error for %s payload: %s",
        body.get("type") or body.get("event", {}).get("type", "unknown"),
        error,
        exc_info=error,
    )
