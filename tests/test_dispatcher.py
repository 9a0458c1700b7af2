"""Tests for the command dispatcher."""

from unittest.mock import AsyncMock

import pytest

from switchboard.core.commands.dispatcher import CommandDispatcher
from switchboard.core.commands.models import (
    ArgumentKind,
    ArgumentSpec,
    CommandDefinition,
    IntegerValue,
    PermissionRules,
    StringValue,
    ViolationReason,
)
from switchboard.core.commands.resolver import CommandResolver
from switchboard.core.context import BotAuthorPolicy, InvocationMode
from switchboard.core.cooldowns import CooldownLedger
from switchboard.core.outcomes import (
    Cooldowned,
    Ignored,
    InvalidArguments,
    Invoked,
    NotFound,
    PermissionDenied,
)
from switchboard.middleware.permissions import PermissionEvaluator

BOT_ID = "U_BOT"


def build(definitions, clock=None, **kwargs) -> CommandDispatcher:
    ledger = CooldownLedger(clock=clock) if clock else CooldownLedger()
    return CommandDispatcher(
        CommandResolver(definitions), ledger=ledger, bot_user_id=BOT_ID, **kwargs
    )


class TestDispatchResolution:
    """Author filtering, resolution and mode gating."""

    @pytest.mark.asyncio
    async def test_invokes_handler(self, make_context) -> None:
        handler = AsyncMock()
        ping = CommandDefinition(name="ping", handler=handler)
        context = make_context(command_name="ping")

        outcome = await build([ping]).dispatch(context)

        assert outcome == Invoked(ping)
        invocation = handler.call_args.args[0]
        assert invocation.context is context
        assert invocation.command is ping
        assert invocation.args == {}

    @pytest.mark.asyncio
    async def test_sync_handler(self, make_context) -> None:
        calls = []
        ping = CommandDefinition(name="ping", handler=calls.append)

        outcome = await build([ping]).dispatch(make_context(command_name="ping"))

        assert outcome == Invoked(ping)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_alias(self, make_context) -> None:
        handler = AsyncMock()
        ping = CommandDefinition(name="ping", handler=handler, aliases={"latency"})

        outcome = await build([ping]).dispatch(make_context(command_name="latency"))

        assert outcome == Invoked(ping)

    @pytest.mark.asyncio
    async def test_not_found_with_suggestion(self, make_context) -> None:
        ping = CommandDefinition(name="ping", handler=AsyncMock())
        context = make_context(command_name="pnig")

        outcome = await build([ping]).dispatch(context)

        assert outcome == NotFound("pnig", ("ping",))
        assert len(context.replies) == 1
        assert "`ping`" in context.replies[0].text
        assert context.replies[0].delete_after == 15.0

    @pytest.mark.asyncio
    async def test_not_found_interaction_is_ephemeral(self, make_context) -> None:
        context = make_context(command_name="nope", mode=InvocationMode.INTERACTION)

        await build([]).dispatch(context)

        assert context.replies[0].ephemeral is True

    @pytest.mark.asyncio
    async def test_bare_prefix_ignored(self, make_context) -> None:
        context = make_context(command_name="")

        outcome = await build([]).dispatch(context)

        assert isinstance(outcome, Ignored)
        assert context.replies == []

    @pytest.mark.asyncio
    async def test_bot_authors_ignored(self, make_context) -> None:
        handler = AsyncMock()
        ping = CommandDefinition(name="ping", handler=handler)
        dispatcher = build([ping])

        other_bot = make_context(command_name="ping", author_id="U_OTHER", author_is_bot=True)
        itself = make_context(command_name="ping", author_id=BOT_ID, author_is_bot=True)

        assert isinstance(await dispatcher.dispatch(other_bot), Ignored)
        assert isinstance(await dispatcher.dispatch(itself), Ignored)
        assert other_bot.replies == []
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_self_policy_allows_other_bots(self, make_context) -> None:
        ping = CommandDefinition(name="ping", handler=AsyncMock())
        dispatcher = build([ping], bot_author_policy=BotAuthorPolicy.SELF)

        other_bot = make_context(command_name="ping", author_id="U_OTHER", author_is_bot=True)
        itself = make_context(command_name="ping", author_id=BOT_ID, author_is_bot=True)

        assert await dispatcher.dispatch(other_bot) == Invoked(ping)
        assert isinstance(await dispatcher.dispatch(itself), Ignored)

    @pytest.mark.asyncio
    async def test_interaction_only_ignored_in_message_mode(self, make_context) -> None:
        handler = AsyncMock()
        slash = CommandDefinition(name="slash", handler=handler, interaction_only=True)
        context = make_context(command_name="slash")

        outcome = await build([slash]).dispatch(context)

        assert isinstance(outcome, Ignored)
        assert context.replies == []
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_message_only_ignored_in_interaction_mode(self, make_context) -> None:
        legacy = CommandDefinition(name="legacy", handler=AsyncMock(), message_only=True)
        context = make_context(command_name="legacy", mode=InvocationMode.INTERACTION)

        assert isinstance(await build([legacy]).dispatch(context), Ignored)


class TestDispatchGuards:
    """Cooldown, permission and argument stages."""

    @pytest.mark.asyncio
    async def test_cooldown(self, make_context, clock) -> None:
        handler = AsyncMock()
        ping = CommandDefinition(name="ping", handler=handler, cooldown_seconds=5)
        dispatcher = build([ping], clock=clock)

        assert await dispatcher.dispatch(make_context(command_name="ping")) == Invoked(ping)

        clock.advance(2)
        context = make_context(command_name="ping")
        outcome = await dispatcher.dispatch(context)

        assert outcome == Cooldowned(ping, 3)
        assert handler.call_count == 1
        assert "3 more seconds" in context.replies[0].text
        assert context.replies[0].delete_after == 15.0

    @pytest.mark.asyncio
    async def test_cooldown_shared_by_alias(self, make_context, clock) -> None:
        ping = CommandDefinition(
            name="ping", handler=AsyncMock(), aliases={"latency"}, cooldown_seconds=5
        )
        dispatcher = build([ping], clock=clock)

        await dispatcher.dispatch(make_context(command_name="ping"))
        outcome = await dispatcher.dispatch(make_context(command_name="latency"))

        assert isinstance(outcome, Cooldowned)

    @pytest.mark.asyncio
    async def test_permission_denied(self, make_context) -> None:
        handler = AsyncMock()
        admin = CommandDefinition(
            name="admin",
            handler=handler,
            permissions=PermissionRules(owner_only=True, user_permissions={"X"}),
        )
        dispatcher = build([admin], evaluator=PermissionEvaluator({"U_OWNER"}))
        context = make_context(command_name="admin", author_id="U2")

        outcome = await dispatcher.dispatch(context)

        assert outcome == PermissionDenied(
            admin, "This command can only be used by the bot owner."
        )
        assert context.replies[0].ephemeral is True
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_cooldown_checked_before_permissions(self, make_context, clock) -> None:
        admin = CommandDefinition(
            name="admin",
            handler=AsyncMock(),
            cooldown_seconds=10,
            permissions=PermissionRules(owner_only=True),
        )
        dispatcher = build([admin], clock=clock)

        first = await dispatcher.dispatch(make_context(command_name="admin"))
        second = await dispatcher.dispatch(make_context(command_name="admin"))

        assert isinstance(first, PermissionDenied)
        assert isinstance(second, Cooldowned)

    @pytest.mark.asyncio
    async def test_argument_violations(self, make_context) -> None:
        handler = AsyncMock()
        give = CommandDefinition(
            name="give",
            handler=handler,
            arguments=[
                ArgumentSpec("amount", ArgumentKind.INTEGER, required=True, min_value=1)
            ],
        )
        context = make_context(command_name="give", tokens=["abc"])

        outcome = await build([give]).dispatch(context)

        assert isinstance(outcome, InvalidArguments)
        assert outcome.violations[0].argument_name == "amount"
        assert outcome.violations[0].reason is ViolationReason.INVALID
        assert "`amount`" in context.replies[0].text
        handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_coerced_arguments_reach_handler(self, make_context) -> None:
        handler = AsyncMock()
        give = CommandDefinition(
            name="give",
            handler=handler,
            arguments=[
                ArgumentSpec("amount", ArgumentKind.INTEGER, required=True),
                ArgumentSpec("note", ArgumentKind.STRING),
            ],
        )

        await build([give]).dispatch(
            make_context(command_name="give", tokens=["5", "for", "lunch"])
        )

        invocation = handler.call_args.args[0]
        assert invocation.args == {
            "amount": IntegerValue(5),
            "note": StringValue("for lunch"),
        }

    @pytest.mark.asyncio
    async def test_interaction_options_wrapped(self, make_context) -> None:
        handler = AsyncMock()
        give = CommandDefinition(
            name="give",
            handler=handler,
            arguments=[ArgumentSpec("amount", ArgumentKind.INTEGER, required=True)],
        )
        context = make_context(
            command_name="give",
            mode=InvocationMode.INTERACTION,
            tokens=["ignored"],
            options={"amount": 7},
        )

        assert await build([give]).dispatch(context) == Invoked(give)
        assert handler.call_args.args[0].args == {"amount": IntegerValue(7)}

    @pytest.mark.asyncio
    async def test_handler_exception_propagates(self, make_context) -> None:
        boom = CommandDefinition(name="boom", handler=AsyncMock(side_effect=RuntimeError("x")))

        with pytest.raises(RuntimeError):
            await build([boom]).dispatch(make_context(command_name="boom"))

    @pytest.mark.asyncio
    async def test_custom_responder(self, make_context) -> None:
        responder = AsyncMock()
        dispatcher = build([], responder=responder)
        context = make_context(command_name="nope")

        outcome = await dispatcher.dispatch(context)

        responder.assert_awaited_once_with(context, outcome)
        assert context.replies == []
