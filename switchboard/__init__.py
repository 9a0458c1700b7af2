"""Command and component dispatch engine for chat bots."""

__version__ = "0.1.0"
