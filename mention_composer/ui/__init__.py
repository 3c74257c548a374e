"""Terminal UI components for rendering and composing @mentions."""

from .completion import MentionCompleter
from .display import highlight_segments
from .display import mention_chip
from .display import mention_summary
from .display import suggestion_table

__all__ = [
    "MentionCompleter",
    "highlight_segments",
    "mention_chip",
    "mention_summary",
    "suggestion_table",
]
