# switchboard/interfaces/slack/slack_api.py
"""Slack API helpers: retried calls, block building, delayed deletion."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import aiohttp
import tenacity
from slack_sdk.errors import SlackApiError

from switchboard.core.context import Button

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3

# Keeps pending deletion tasks referenced until they finish
_pending_deletions: set[asyncio.Task[None]] = set()


@tenacity.retry(
    stop=tenacity.stop_after_attempt(MAX_ATTEMPTS),
    wait=tenacity.wait_exponential(multiplier=1, min=1, max=4),
    retry=tenacity.retry_if_exception_type(
        (TimeoutError, aiohttp.ClientConnectionError)
    ),
    reraise=True,
)
async def slack_call(method: Callable[..., Awaitable[Any]], **kwargs: Any) -> Any:
    """Call a Slack Web API method, retrying on timeouts and connection errors.

    Args:
        method: Bound AsyncWebClient method (e.g., client.chat_postMessage).
        **kwargs: Arguments forwarded to the method.

    Returns:
        The Slack API response.
    """
    return await method(**kwargs)


def build_blocks(text: str, buttons: Sequence[Button] = ()) -> list[dict[str, Any]]:
    """Build Block Kit blocks for a text reply with optional buttons.

    Disabled buttons are omitted since Slack buttons have no disabled state.
    """
    blocks: list[dict[str, Any]] = [
        {"type": "section", "text": {"type": "mrkdwn", "text": text}}
    ]
    elements = [
        {
            "type": "button",
            "text": {"type": "plain_text", "text": button.label},
            "action_id": button.action_id,
            "value": button.action_id,
        }
        for button in buttons
        if not button.disabled
    ]
    if elements:
        blocks.append({"type": "actions", "elements": elements})
    return blocks


async def _delete_after(client: Any, channel: str, ts: str, delay: float) -> None:
    await asyncio.sleep(delay)
    try:
        await slack_call(client.chat_delete, channel=channel, ts=ts)
    except SlackApiError as e:
        logger.warning(
            "Failed to delete expired notice %s: %s", ts, e.response.get("error")
        )


def schedule_delete(
    client: Any, channel: str, ts: str, delay: float
) -> asyncio.Task[None]:
    """Delete a posted message after ``delay`` seconds, in the background."""
    task = asyncio.create_task(_delete_after(client, channel, ts, delay))
    _pending_deletions.add(task)
    task.add_done_callback(_pending_deletions.discard)
    return task
