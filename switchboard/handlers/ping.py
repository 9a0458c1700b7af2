# switchboard/handlers/ping.py
"""ping command."""

import time

from switchboard.core.commands.models import Invocation
from switchboard.core.commands.registry import command


@command(aliases={"latency"}, cooldown=5, category="Utility")
async def ping(invocation: Invocation) -> None:
    """Check the bot's latency."""
    started = time.perf_counter()
    await invocation.context.reply("Pinging...")
    elapsed_ms = round((time.perf_counter() - started) * 1000)
    await invocation.context.edit(
        f"Pong! :table_tennis_paddle_and_ball:\nBot Latency: {elapsed_ms}ms"
    )
