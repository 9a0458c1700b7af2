# switchboard/core/components/dispatcher.py
"""Component dispatcher for UI callbacks.

Unlike command handlers, component handler exceptions are contained here:
they are logged and acknowledged with a generic ephemeral message so one
broken callback cannot disturb the callbacks that follow.
"""

import inspect
import logging

from switchboard.core.components.models import ComponentKind, PatternComponentDefinition
from switchboard.core.components.registry import ComponentRegistry
from switchboard.core.context import InvocationContext, ReplyState
from switchboard.core.cooldowns import CooldownLedger, component_key
from switchboard.core.outcomes import (
    ComponentCooldowned,
    ComponentFailed,
    ComponentInvoked,
    ComponentOutcome,
    Unhandled,
)
from switchboard.core.responses import Responder, make_responder
from switchboard.utils.logging import (
    new_invocation_id,
    reset_invocation_id,
    set_invocation_id,
)

logger = logging.getLogger(__name__)


class ComponentDispatcher:
    """Routes UI callbacks to component handlers.

    Attributes:
        registry: Exact and pattern component registries.
        ledger: Cooldown ledger, keyed by "component:" + component id.
        responder: Sends cooldown and failure notices.
    """

    def __init__(
        self,
        registry: ComponentRegistry,
        *,
        ledger: CooldownLedger | None = None,
        responder: Responder | None = None,
    ) -> None:
        self.registry = registry
        self.ledger = ledger or CooldownLedger()
        self.responder = responder or make_responder()

    async def handle(
        self, kind: ComponentKind, identifier: str, context: InvocationContext
    ) -> ComponentOutcome:
        """Dispatch one UI callback.

        Args:
            kind: Kind of UI element that fired.
            identifier: The element's callback identifier.
            context: The wrapped callback invocation.

        Returns:
            The outcome; handler exceptions become ComponentFailed.
        """
        token = set_invocation_id(new_invocation_id())
        try:
            return await self._handle(kind, identifier, context)
        finally:
            reset_invocation_id(token)

    async def _handle(
        self, kind: ComponentKind, identifier: str, context: InvocationContext
    ) -> ComponentOutcome:
        found = self.registry.match(kind, identifier)
        if found is None:
            logger.debug("No handler found for %s ID: %s", kind.value, identifier)
            return Unhandled(identifier)

        definition, params = found

        if definition.cooldown_seconds > 0:
            cooldown = self.ledger.apply(
                component_key(definition.id),
                context.author_id,
                definition.cooldown_seconds,
            )
            if cooldown.active:
                outcome = ComponentCooldowned(definition.id, cooldown.remaining)
                await self.responder(context, outcome)
                return outcome

        try:
            if isinstance(definition, PatternComponentDefinition):
                result = definition.handler(context, list(params))
            else:
                result = definition.handler(context)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.exception("Error executing component %s", definition.id)
            outcome = ComponentFailed(definition.id, type(e).__name__)
            if context.reply_state is ReplyState.NOT_REPLIED:
                try:
                    await self.responder(context, outcome)
                except Exception:
                    logger.warning(
                        "Failed to acknowledge error for component %s",
                        definition.id,
                        exc_info=True,
                    )
            return outcome

        return ComponentInvoked(definition.id, params)
