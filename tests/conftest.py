# tests/conftest.py
"""Shared pytest fixtures for all test modules.

Provides common fixtures for:
- A recording fake invocation context
- A controllable clock for cooldown tests
- Isolation of the decorator registries and the resolver singleton
"""

from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from typing import Any

import pytest

from switchboard.core.context import Button, InvocationMode, MemberView, ReplyState


@dataclass
class Reply:
    text: str
    ephemeral: bool = False
    delete_after: float | None = None
    buttons: tuple[Button, ...] = ()


@dataclass
class FakeContext:
    """InvocationContext that records replies and edits instead of sending them."""

    mode: InvocationMode = InvocationMode.MESSAGE
    command_name: str = ""
    author_id: str = "U1"
    author_is_bot: bool = False
    tokens: list[str] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)
    in_guild: bool = True
    member: MemberView | None = None
    bot_member: MemberView | None = None
    reply_state: ReplyState = ReplyState.NOT_REPLIED
    replies: list[Reply] = field(default_factory=list)
    edits: list[Reply] = field(default_factory=list)
    deferred: bool = False

    async def reply(
        self,
        text: str,
        *,
        ephemeral: bool = False,
        delete_after: float | None = None,
        buttons: Any = (),
    ) -> None:
        self.replies.append(Reply(text, ephemeral, delete_after, tuple(buttons)))
        self.reply_state = ReplyState.REPLIED

    async def defer(self) -> None:
        self.deferred = True
        if self.reply_state is ReplyState.NOT_REPLIED:
            self.reply_state = ReplyState.DEFERRED

    async def edit(self, text: str, *, buttons: Any = ()) -> None:
        if self.reply_state is ReplyState.NOT_REPLIED:
            await self.defer()
        self.edits.append(Reply(text, buttons=tuple(buttons)))
        self.reply_state = ReplyState.REPLIED


class FakeClock:
    """Manually advanced clock returning seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def make_context() -> Callable[..., FakeContext]:
    """Factory for FakeContext instances.

    Example:
        ctx = make_context(command_name="ping", tokens=["a"])
    """

    def factory(**kwargs: Any) -> FakeContext:
        return FakeContext(**kwargs)

    return factory


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def isolated_registries() -> Generator[None, None, None]:
    """Snapshot and restore the decorator registries and resolver singleton."""
    from switchboard.core.commands import registry as command_registry
    from switchboard.core.commands import resolver as resolver_module
    from switchboard.core.components import registry as component_registry

    saved_commands = list(command_registry._registered_commands)
    saved_components = list(component_registry._registered_components)
    saved_resolver = resolver_module._resolver

    command_registry._registered_commands.clear()
    component_registry._registered_components.clear()

    yield

    command_registry._registered_commands[:] = saved_commands
    component_registry._registered_components[:] = saved_components
    resolver_module._resolver = saved_resolver
