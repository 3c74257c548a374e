"""Shared Rich console instance for CLI output."""

from rich.console import Console
from rich.theme import Theme

# Chip styles for rendered mentions and the suggestion panel
MENTION_THEME = Theme(
    {
        "mention.resolved": "bold blue",
        "mention.unknown": "dim",
        "mention.marker": "dim italic",
        "suggestion.selected": "reverse",
        "suggestion.role": "cyan",
        "suggestion.handle": "dim",
    }
)

console = Console(theme=MENTION_THEME)

__all__ = ["console", "MENTION_THEME"]
