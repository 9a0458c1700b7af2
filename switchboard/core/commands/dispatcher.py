# switchboard/core/commands/dispatcher.py
"""Command dispatcher: resolve, cooldown, permissions, arguments, invoke.

This module provides the CommandDispatcher which routes both interaction-mode
and message-mode invocations to their command handlers.
"""

import inspect
import logging

from switchboard.core.commands.arguments import ArgumentViolations, coerce, wrap_options
from switchboard.core.commands.models import ArgumentValue, Invocation
from switchboard.core.commands.resolver import CommandResolver
from switchboard.core.context import BotAuthorPolicy, InvocationContext, InvocationMode
from switchboard.core.cooldowns import CooldownLedger
from switchboard.core.outcomes import (
    Cooldowned,
    DispatchOutcome,
    Ignored,
    InvalidArguments,
    Invoked,
    NotFound,
    PermissionDenied,
)
from switchboard.core.responses import Responder, make_responder
from switchboard.middleware.permissions import Denied, PermissionEvaluator
from switchboard.utils.logging import (
    new_invocation_id,
    reset_invocation_id,
    set_invocation_id,
)

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Routes invocations to command handlers.

    Each invocation goes through resolution, cooldown, permission and (in
    message mode) argument coercion before the handler runs. Every stage
    that stops an invocation produces an outcome record and a reply through
    the responder. Exceptions raised by command handlers are not caught.

    Attributes:
        resolver: Registry of command definitions.
        evaluator: Permission pipeline.
        ledger: Cooldown ledger owned by this dispatcher.
        bot_user_id: The bot's own user id.
        bot_author_policy: Which bot-authored invocations to drop.

    Example:
        >>> dispatcher = CommandDispatcher(CommandResolver([ping]))
        >>> outcome = await dispatcher.dispatch(context)
        >>> if isinstance(outcome, NotFound):
        ...     print(outcome.suggestions)
    """

    def __init__(
        self,
        resolver: CommandResolver,
        *,
        evaluator: PermissionEvaluator | None = None,
        ledger: CooldownLedger | None = None,
        responder: Responder | None = None,
        bot_user_id: str = "",
        bot_author_policy: BotAuthorPolicy = BotAuthorPolicy.ALL,
    ) -> None:
        self.resolver = resolver
        self.evaluator = evaluator or PermissionEvaluator()
        self.ledger = ledger or CooldownLedger()
        self.responder = responder or make_responder()
        self.bot_user_id = bot_user_id
        self.bot_author_policy = bot_author_policy

    def ignores_author(self, author_id: str, author_is_bot: bool) -> bool:
        """Check whether an author must be ignored under the bot policy."""
        if self.bot_user_id and author_id == self.bot_user_id:
            return True
        return self.bot_author_policy is BotAuthorPolicy.ALL and author_is_bot

    async def dispatch(self, context: InvocationContext) -> DispatchOutcome:
        """Dispatch one invocation.

        Args:
            context: The wrapped inbound invocation.

        Returns:
            The terminal outcome. Invoked means the handler completed.

        Raises:
            Exception: Whatever the command handler raises.
        """
        token = set_invocation_id(new_invocation_id())
        try:
            return await self._dispatch(context)
        finally:
            reset_invocation_id(token)

    async def _dispatch(self, context: InvocationContext) -> DispatchOutcome:
        if self.ignores_author(context.author_id, context.author_is_bot):
            return Ignored("bot author")

        name = context.command_name.strip()
        if not name:
            return Ignored("empty command name")

        command = self.resolver.resolve(name)
        if command is None:
            outcome = NotFound(name, tuple(self.resolver.suggest(name)))
            logger.debug("Unknown command %r, suggestions=%s", name, outcome.suggestions)
            await self.responder(context, outcome)
            return outcome

        if context.mode is InvocationMode.MESSAGE and command.interaction_only:
            return Ignored("interaction-only command")
        if context.mode is InvocationMode.INTERACTION and command.message_only:
            return Ignored("message-only command")

        if command.cooldown_seconds > 0:
            cooldown = self.ledger.apply(
                command.name, context.author_id, command.cooldown_seconds
            )
            if cooldown.active:
                outcome = Cooldowned(command, cooldown.remaining)
                logger.debug(
                    "%s on cooldown for %s (%ss)",
                    command.name,
                    context.author_id,
                    cooldown.remaining,
                )
                await self.responder(context, outcome)
                return outcome

        permission = self.evaluator.evaluate(command.permissions, context)
        if isinstance(permission, Denied):
            outcome = PermissionDenied(command, permission.reason)
            await self.responder(context, outcome)
            return outcome

        args: dict[str, ArgumentValue]
        if context.mode is InvocationMode.MESSAGE:
            coerced = coerce(command.arguments, context.tokens)
            if isinstance(coerced, ArgumentViolations):
                outcome = InvalidArguments(command, coerced.violations)
                logger.debug(
                    "%s rejected %d argument(s)", command.name, len(coerced.violations)
                )
                await self.responder(context, outcome)
                return outcome
            args = dict(coerced.args)
        else:
            args = wrap_options(command.arguments, context.options)

        logger.info(
            "Invoking %s for %s (%s)", command.name, context.author_id, context.mode.value
        )
        result = command.handler(Invocation(context=context, command=command, args=args))
        if inspect.isawaitable(result):
            await result
        return Invoked(command)
