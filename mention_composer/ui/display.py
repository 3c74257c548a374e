"""Rich rendering of mention segments and the suggestion panel.

Single source of truth for how mentions look in the terminal. Used by the
CLI render/search/compose commands.
"""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Sequence

from rich.table import Table
from rich.text import Text

from ..models import MentionableUser
from ..models import MentionSegment
from ..models import Segment


def mention_chip(segment: MentionSegment) -> Text:
    """Render one mention chip.

    Resolved mentions show the user's display name; unknown handles keep the
    typed literal with a trailing ``?`` marker.
    """
    if segment.user is not None:
        return Text(f"@{segment.user.display_name or segment.username}", style="mention.resolved")

    chip = Text(segment.text, style="mention.unknown")
    chip.append("?", style="mention.marker")
    return chip


def highlight_segments(segments: Iterable[Segment]) -> Text:
    """Join segments into one styled Text, plain text left unstyled."""
    text = Text()
    for segment in segments:
        if isinstance(segment, MentionSegment):
            text.append_text(mention_chip(segment))
        else:
            text.append(segment.text)
    return text


def suggestion_table(suggestions: Sequence[MentionableUser], selected_index: int = 0) -> Table:
    """Build the suggestion panel as a borderless table.

    Rows show initials, label, handle (when both a display name and a
    username exist) and role; the selected row is highlighted.
    """
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Initials", style="bold")
    table.add_column("Name")
    table.add_column("Handle", style="suggestion.handle")
    table.add_column("Role", style="suggestion.role")

    for index, user in enumerate(suggestions):
        handle = f"@{user.username}" if user.display_name and user.username else ""
        table.add_row(
            user.initials,
            user.label,
            handle,
            user.role or "",
            style="suggestion.selected" if index == selected_index else None,
        )
    return table


def mention_summary(users: Sequence[MentionableUser]) -> Text:
    """One-line summary of processed mentions."""
    if not users:
        return Text("No known users mentioned", style="dim")
    summary = Text(f"Mentioned {len(users)} user(s): ")
    summary.append(", ".join(user.label for user in users), style="mention.resolved")
    return summary
