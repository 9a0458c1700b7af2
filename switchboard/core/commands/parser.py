"""Pure function-based parser splitting prefixed messages into name and tokens."""

from dataclasses import dataclass, field


@dataclass
class ParsedMessage:
    """Represents a prefixed message split into command name and tokens.

    Attributes:
        name: The command name, case preserved.
        tokens: Whitespace-separated tokens following the name.
    """

    name: str
    tokens: list[str] = field(default_factory=list)


def parse_message(text: str, prefix: str) -> ParsedMessage | None:
    """Parse a message-mode invocation.

    The text must start with ``prefix`` (leading whitespace is ignored).
    Everything after the prefix is split on runs of whitespace; the first
    part is the command name and the rest are argument tokens. Command names
    keep their case because command lookup is case-sensitive.

    Args:
        text: Raw message content.
        prefix: Configured command prefix.

    Returns:
        ParsedMessage if the text starts with the prefix, otherwise None.
        A bare prefix yields a ParsedMessage with an empty name.

    Examples:
        >>> parse_message("!ban <@123> being rude", "!")
        ParsedMessage(name='ban', tokens=['<@123>', 'being', 'rude'])

        >>> parse_message("!", "!")
        ParsedMessage(name='', tokens=[])

        >>> parse_message("hello", "!") is None
        True
    """
    if not prefix:
        return None

    text = text.strip()
    if not text.startswith(prefix):
        return None

    parts = text[len(prefix) :].split()
    if not parts:
        return ParsedMessage(name="")

    return ParsedMessage(name=parts[0], tokens=parts[1:])
