# switchboard/handlers/help.py
"""help command: one page per command category, paged with buttons."""

import logging
from collections.abc import Sequence

from switchboard.config import settings
from switchboard.core.commands.models import ArgumentKind, ArgumentSpec, Invocation
from switchboard.core.commands.registry import command
from switchboard.core.commands.resolver import CommandResolver, get_resolver
from switchboard.core.components.registry import component_pattern
from switchboard.core.context import Button, InvocationContext

logger = logging.getLogger(__name__)

PAGE_ACTION_PREFIX = "help_page"


def page_action_id(page: int, total: int) -> str:
    return f"{PAGE_ACTION_PREFIX}:{page}:{total}"


def render_page(
    resolver: CommandResolver, page: int, prefix: str = "!"
) -> tuple[str, int]:
    """Render one help page.

    Args:
        resolver: Registry whose commands are listed.
        page: 1-based page number, clamped to the available pages.
        prefix: Message-mode prefix shown in front of command names.

    Returns:
        (page text, total number of pages).
    """
    categories = resolver.categories()
    if not categories:
        return "No commands are registered.", 1

    names = list(categories)
    total = len(names)
    page = min(max(page, 1), total)
    category = names[page - 1]

    commands = resolver.commands
    lines = [f"*Help Menu - Page {page}/{total}*", f"*{category}*"]
    for name in categories[category]:
        definition = commands[name]
        line = f"`{prefix}{name}`"
        if definition.description:
            line += f" - {definition.description}"
        if definition.message_aliases:
            line += f" (aliases: {', '.join(sorted(definition.message_aliases))})"
        lines.append(line)
    return "\n".join(lines), total


def page_buttons(page: int, total: int) -> list[Button]:
    """Previous/Next buttons for a page, disabled at the edges."""
    if total <= 1:
        return []
    return [
        Button(
            "Previous", page_action_id(max(1, page - 1), total), disabled=page <= 1
        ),
        Button(
            "Next", page_action_id(min(total, page + 1), total), disabled=page >= total
        ),
    ]


def render_command(
    resolver: CommandResolver, name: str, prefix: str = "!"
) -> str | None:
    """Render the detail view of one command, or None if it is unknown."""
    definition = resolver.resolve(name)
    if definition is None:
        return None

    lines = [f"*{prefix}{definition.name}*"]
    if definition.description:
        lines.append(definition.description)
    lines.append(f"Category: {resolver.category_of(definition)}")
    if definition.message_aliases:
        lines.append(f"Aliases: {', '.join(sorted(definition.message_aliases))}")
    if definition.cooldown_seconds:
        lines.append(f"Cooldown: {definition.cooldown_seconds:g}s")
    for spec in definition.arguments:
        marker = "required" if spec.required else "optional"
        line = f"- `{spec.name}` ({spec.kind.value}, {marker})"
        if spec.description:
            line += f": {spec.description}"
        lines.append(line)
    return "\n".join(lines)


@command(
    "help",
    description="This shows the help menu of the bot.",
    arguments=[
        ArgumentSpec(
            "command",
            ArgumentKind.STRING,
            description="Show details for a single command",
        )
    ],
    category="Information",
)
async def help_command(invocation: Invocation) -> None:
    resolver = get_resolver()
    context = invocation.context

    requested = invocation.args.get("command")
    if requested is not None:
        detail = render_command(resolver, requested.value, settings.prefix)
        if detail is None:
            await context.reply(f":x: I couldn't find the command `{requested.value}`.")
            return
        await context.reply(detail)
        return

    text, total = render_page(resolver, 1, settings.prefix)
    await context.reply(text, buttons=page_buttons(1, total))


@component_pattern(
    rf"^{PAGE_ACTION_PREFIX}:(\d+):(\d+)$", cooldown=1, category="Utility"
)
async def turn_help_page(context: InvocationContext, params: Sequence[str]) -> None:
    page = int(params[0])
    text, total = render_page(get_resolver(), page, settings.prefix)
    page = min(max(page, 1), total)
    logger.debug("Help page %d/%d for %s", page, total, context.author_id)
    await context.edit(text, buttons=page_buttons(page, total))
