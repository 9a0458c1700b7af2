"""Tests for component registries and dispatch."""

import re
from unittest.mock import AsyncMock, MagicMock

import pytest

from switchboard.core.components.dispatcher import ComponentDispatcher
from switchboard.core.components.models import (
    ComponentDefinition,
    ComponentKind,
    PatternComponentDefinition,
)
from switchboard.core.components.registry import ComponentRegistry
from switchboard.core.context import InvocationMode, ReplyState
from switchboard.core.cooldowns import CooldownLedger
from switchboard.core.outcomes import (
    ComponentCooldowned,
    ComponentFailed,
    ComponentInvoked,
    Unhandled,
)
from switchboard.core.responses import GENERIC_FAILURE


def exact(component_id: str, handler=None, **kwargs) -> ComponentDefinition:
    return ComponentDefinition(
        id=component_id,
        kind=kwargs.pop("kind", ComponentKind.BUTTON),
        handler=handler or AsyncMock(),
        **kwargs,
    )


def pattern(regex: str, handler=None, **kwargs) -> PatternComponentDefinition:
    return PatternComponentDefinition(
        pattern=re.compile(regex),
        kind=kwargs.pop("kind", ComponentKind.BUTTON),
        handler=handler or AsyncMock(),
        **kwargs,
    )


@pytest.fixture
def interaction(make_context):
    def factory(**kwargs):
        return make_context(mode=InvocationMode.INTERACTION, **kwargs)

    return factory


class TestComponentRegistry:
    """Matching order and per-kind separation."""

    def test_exact_before_pattern(self) -> None:
        close_menu = exact("close_menu")
        close_any = pattern(r"^close_.*$")
        registry = ComponentRegistry([close_any, close_menu])

        assert registry.match(ComponentKind.BUTTON, "close_menu") == (close_menu, ())
        assert registry.match(ComponentKind.BUTTON, "close_other") == (close_any, ())

    def test_first_pattern_wins(self) -> None:
        first = pattern(r"^page_(\d+)")
        second = pattern(r"^page_(\d+)_of_(\d+)$")
        registry = ComponentRegistry([first, second])

        assert registry.match(ComponentKind.BUTTON, "page_3_of_10") == (first, ("3",))

    def test_capture_groups(self) -> None:
        page = pattern(r"^page_(\d+)_of_(\d+)$")
        registry = ComponentRegistry([page])

        assert registry.match(ComponentKind.BUTTON, "page_3_of_10") == (page, ("3", "10"))

    def test_unmatched_optional_group_is_empty(self) -> None:
        page = pattern(r"^tab_(\w+)(?::(\d+))?$")
        registry = ComponentRegistry([page])

        assert registry.match(ComponentKind.BUTTON, "tab_main") == (page, ("main", ""))

    def test_kinds_are_separate(self) -> None:
        button = exact("confirm")
        registry = ComponentRegistry([button])

        assert registry.match(ComponentKind.MODAL, "confirm") is None
        assert registry.get(ComponentKind.BUTTON, "confirm") is button
        assert registry.get(ComponentKind.MODAL, "confirm") is None

    def test_exact_overwrite_warns(self, caplog) -> None:
        replacement = exact("confirm")
        registry = ComponentRegistry([exact("confirm"), replacement])

        assert registry.get(ComponentKind.BUTTON, "confirm") is replacement
        assert "Overwriting" in caplog.text
        assert len(registry) == 1

    def test_pattern_id_is_regex_source(self) -> None:
        definition = PatternComponentDefinition(
            pattern=r"^help_page:(\d+):(\d+)$",
            kind=ComponentKind.BUTTON,
            handler=AsyncMock(),
        )
        assert isinstance(definition.pattern, re.Pattern)
        assert definition.id == r"^help_page:(\d+):(\d+)$"

    def test_invalid_definitions(self) -> None:
        with pytest.raises(ValueError):
            ComponentDefinition(id="", kind=ComponentKind.BUTTON, handler=AsyncMock())
        with pytest.raises(ValueError):
            ComponentDefinition(id="x", kind=ComponentKind.BUTTON, handler=None)


class TestComponentDispatcher:
    """Invocation, cooldown and exception containment."""

    @pytest.mark.asyncio
    async def test_exact_handler_receives_context(self, interaction) -> None:
        handler = AsyncMock()
        dispatcher = ComponentDispatcher(ComponentRegistry([exact("ok", handler)]))
        context = interaction()

        outcome = await dispatcher.handle(ComponentKind.BUTTON, "ok", context)

        assert outcome == ComponentInvoked("ok")
        handler.assert_awaited_once_with(context)

    @pytest.mark.asyncio
    async def test_pattern_handler_receives_params(self, interaction) -> None:
        handler = AsyncMock()
        page = pattern(r"^page_(\d+)_of_(\d+)$", handler)
        dispatcher = ComponentDispatcher(ComponentRegistry([page]))
        context = interaction()

        outcome = await dispatcher.handle(ComponentKind.BUTTON, "page_3_of_10", context)

        assert outcome == ComponentInvoked(page.id, ("3", "10"))
        handler.assert_awaited_once_with(context, ["3", "10"])

    @pytest.mark.asyncio
    async def test_exact_wins_over_pattern(self, interaction) -> None:
        exact_handler = AsyncMock()
        pattern_handler = AsyncMock()
        registry = ComponentRegistry(
            [pattern(r"^close_.*$", pattern_handler), exact("close_menu", exact_handler)]
        )

        await ComponentDispatcher(registry).handle(
            ComponentKind.BUTTON, "close_menu", interaction()
        )

        exact_handler.assert_awaited_once()
        pattern_handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_sync_handler(self, interaction) -> None:
        handler = MagicMock(return_value=None)
        dispatcher = ComponentDispatcher(ComponentRegistry([exact("ok", handler)]))

        outcome = await dispatcher.handle(ComponentKind.BUTTON, "ok", interaction())

        assert outcome == ComponentInvoked("ok")
        handler.assert_called_once()

    @pytest.mark.asyncio
    async def test_unhandled(self, interaction) -> None:
        context = interaction()
        outcome = await ComponentDispatcher(ComponentRegistry()).handle(
            ComponentKind.BUTTON, "nothing", context
        )

        assert outcome == Unhandled("nothing")
        assert context.replies == []

    @pytest.mark.asyncio
    async def test_cooldown(self, interaction, clock) -> None:
        handler = AsyncMock()
        ledger = CooldownLedger(clock=clock)
        dispatcher = ComponentDispatcher(
            ComponentRegistry([exact("vote", handler, cooldown_seconds=3)]), ledger=ledger
        )

        await dispatcher.handle(ComponentKind.BUTTON, "vote", interaction())
        clock.advance(1)
        context = interaction()
        outcome = await dispatcher.handle(ComponentKind.BUTTON, "vote", context)

        assert outcome == ComponentCooldowned("vote", 2)
        assert handler.await_count == 1
        assert context.replies[0].ephemeral is True
        assert ledger.check_remaining("component:vote", context.author_id) == 2

    @pytest.mark.asyncio
    async def test_pattern_cooldown_keyed_by_source(self, interaction, clock) -> None:
        ledger = CooldownLedger(clock=clock)
        page = pattern(r"^page_(\d+)$", cooldown_seconds=1)
        dispatcher = ComponentDispatcher(ComponentRegistry([page]), ledger=ledger)

        await dispatcher.handle(ComponentKind.BUTTON, "page_1", interaction())
        outcome = await dispatcher.handle(ComponentKind.BUTTON, "page_2", interaction())

        assert outcome == ComponentCooldowned(page.id, 1)

    @pytest.mark.asyncio
    async def test_exception_contained_and_acknowledged(self, interaction) -> None:
        handler = AsyncMock(side_effect=KeyError("secret detail"))
        dispatcher = ComponentDispatcher(ComponentRegistry([exact("bad", handler)]))
        context = interaction()

        outcome = await dispatcher.handle(ComponentKind.BUTTON, "bad", context)

        assert outcome == ComponentFailed("bad", "KeyError")
        assert len(context.replies) == 1
        assert context.replies[0].text == GENERIC_FAILURE
        assert context.replies[0].ephemeral is True
        assert "secret" not in context.replies[0].text

    @pytest.mark.asyncio
    async def test_no_acknowledgment_after_reply(self, interaction) -> None:
        async def replies_then_fails(context) -> None:
            await context.reply("working on it")
            raise RuntimeError("late failure")

        dispatcher = ComponentDispatcher(
            ComponentRegistry([exact("bad", replies_then_fails)])
        )
        context = interaction()

        outcome = await dispatcher.handle(ComponentKind.BUTTON, "bad", context)

        assert isinstance(outcome, ComponentFailed)
        assert [reply.text for reply in context.replies] == ["working on it"]

    @pytest.mark.asyncio
    async def test_no_acknowledgment_when_deferred(self, interaction) -> None:
        handler = AsyncMock(side_effect=RuntimeError("x"))
        dispatcher = ComponentDispatcher(ComponentRegistry([exact("bad", handler)]))
        context = interaction(reply_state=ReplyState.DEFERRED)

        await dispatcher.handle(ComponentKind.BUTTON, "bad", context)

        assert context.replies == []

    @pytest.mark.asyncio
    async def test_failed_acknowledgment_logged(self, interaction, caplog) -> None:
        handler = AsyncMock(side_effect=RuntimeError("x"))
        responder = AsyncMock(side_effect=ConnectionError("gone"))
        dispatcher = ComponentDispatcher(
            ComponentRegistry([exact("bad", handler)]), responder=responder
        )

        outcome = await dispatcher.handle(ComponentKind.BUTTON, "bad", interaction())

        assert isinstance(outcome, ComponentFailed)
        assert "Failed to acknowledge error" in caplog.text

    @pytest.mark.asyncio
    async def test_later_callbacks_unaffected(self, interaction) -> None:
        good = AsyncMock()
        registry = ComponentRegistry(
            [exact("bad", AsyncMock(side_effect=RuntimeError("x"))), exact("good", good)]
        )
        dispatcher = ComponentDispatcher(registry)

        await dispatcher.handle(ComponentKind.BUTTON, "bad", interaction())
        outcome = await dispatcher.handle(ComponentKind.BUTTON, "good", interaction())

        assert outcome == ComponentInvoked("good")
        good.assert_awaited_once()
