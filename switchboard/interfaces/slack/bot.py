# switchboard/interfaces/slack/bot.py
"""Slack bot wiring with AsyncApp and AsyncSocketModeHandler.

Discovers the handler package, builds the command and component
dispatchers from the collected declarations and registers Bolt listeners
for messages, slash commands, block actions and view submissions.
"""

import asyncio
import logging
import re

from dotenv import load_dotenv
from slack_bolt.async_app import AsyncApp

# Load environment variables from .env file
load_dotenv()
from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler

from switchboard.config import Settings, settings
from switchboard.core.commands.dispatcher import CommandDispatcher
from switchboard.core.commands.registry import build_commands, registered_commands
from switchboard.core.commands.resolver import CommandResolver, set_resolver
from switchboard.core.components.dispatcher import ComponentDispatcher
from switchboard.core.components.registry import (
    ComponentRegistry,
    build_components,
    registered_components,
)
from switchboard.core.context import BotAuthorPolicy
from switchboard.core.cooldowns import CooldownLedger
from switchboard.core.discovery import discover
from switchboard.core.responses import make_responder
from switchboard.interfaces.slack.handlers import SlackEventRouter, handle_error
from switchboard.middleware.permissions import PermissionEvaluator
from switchboard.utils.logging import configure_logging

logger = logging.getLogger(__name__)

HANDLER_PACKAGE = "switchboard.handlers"


def build_router(
    app_settings: Settings = settings, handler_package: str = HANDLER_PACKAGE
) -> SlackEventRouter:
    """Discover handlers and build the dispatchers behind the Slack listeners.

    Args:
        app_settings: Settings to configure the dispatchers with.
        handler_package: Package whose modules declare the handlers.

    Returns:
        Router holding both dispatchers.
    """
    discover(handler_package)

    resolver = CommandResolver(
        build_commands(registered_commands()),
        default_category=app_settings.default_category,
    )
    set_resolver(resolver)
    registry = ComponentRegistry(build_components(registered_components()))

    # Commands and components share one ledger; component keys are prefixed
    ledger = CooldownLedger()
    responder = make_responder(app_settings.notice_ttl_seconds)

    commands = CommandDispatcher(
        resolver,
        evaluator=PermissionEvaluator(app_settings.owner_id_set),
        ledger=ledger,
        responder=responder,
        bot_user_id=app_settings.bot_user_id,
        bot_author_policy=BotAuthorPolicy(app_settings.bot_author_policy.lower()),
    )
    components = ComponentDispatcher(registry, ledger=ledger, responder=responder)

    logger.info(
        "Dispatch ready: %d command(s), %d component(s)", len(resolver), len(registry)
    )
    return SlackEventRouter(
        commands,
        components,
        prefix=app_settings.prefix,
        bot_capabilities=app_settings.bot_capability_set,
    )


def register_listeners(app: AsyncApp, router: SlackEventRouter) -> AsyncApp:
    """Register the router's listeners on a Bolt app."""
    app.event("message")(router.handle_message)
    app.command(re.compile(r"^/.+"))(router.handle_slash_command)
    app.action(re.compile(r".+"))(router.handle_block_action)
    app.view(re.compile(r".+"))(router.handle_view_submission)
    app.error(handle_error)
    return app


# ============================================================================
# Bot Factory and Startup Functions
# ============================================================================


def create_bot(
    bot_token: str | None = None, app_token: str | None = None
) -> tuple[AsyncApp, AsyncSocketModeHandler]:
    """Create and configure the Slack bot.

    Args:
        bot_token: Slack bot token (xoxb-*). Defaults to SLACK_BOT_TOKEN env var.
        app_token: Slack app token (xapp-*). Defaults to SLACK_APP_TOKEN env var.

    Returns:
        Tuple of (AsyncApp instance, AsyncSocketModeHandler instance).
    """
    app = AsyncApp(token=bot_token or settings.slack_bot_token)
    register_listeners(app, build_router())
    handler = AsyncSocketModeHandler(app, app_token or settings.slack_app_token)
    return app, handler


async def start_bot(bot_token: str | None = None, app_token: str | None = None) -> None:
    """Start the Slack bot with Socket Mode."""
    _, handler = create_bot(bot_token, app_token)

    logger.info("Starting Slack bot with Socket Mode...")
    try:
        await handler.start_async()
    except asyncio.CancelledError:
        logger.info("Received shutdown signal")
    finally:
        await handler.close_async()
        logger.info("Slack bot stopped")


def main() -> None:
    """Entry point with graceful shutdown handling."""
    configure_logging(settings.log_level, structured=settings.log_structured)

    try:
        asyncio.run(start_bot())
    except KeyboardInterrupt:
        logger.info("Shutdown complete")


if __name__ == "__main__":
    main()
