"""Cursor-aware detection of the @mention being typed."""

from __future__ import annotations

import re

from .models import InProgressToken
from .models import MentionableUser

_WHITESPACE = re.compile(r"\s")


def clamp_cursor(text: str, cursor_position: int | None) -> int:
    """Clamp a cursor offset into the text.

    Out-of-range (or missing) positions clamp to the end of the text, matching
    how an editor reports a cursor it has lost track of.
    """
    if cursor_position is None or cursor_position < 0 or cursor_position > len(text):
        return len(text)
    return cursor_position


def extract_in_progress_token(text: str, cursor_position: int | None) -> InProgressToken | None:
    """Find the @mention token the cursor currently sits in.

    Only the nearest ``@`` before the cursor counts, and only while the run
    between it and the cursor is unbroken by whitespace.

    Args:
        text: Full editor text.
        cursor_position: Cursor offset; clamped when out of range.

    Returns:
        InProgressToken, or None if the cursor is not inside a mention.

    Examples:
        >>> extract_in_progress_token("Hi @jan", 7)
        InProgressToken(start_index=3, end_index=7, query='jan')
        >>> extract_in_progress_token("hello @foo bar", 14) is None
        True
    """
    cursor = clamp_cursor(text, cursor_position)
    before = text[:cursor]

    at_index = before.rfind("@")
    if at_index == -1:
        return None

    after_at = before[at_index + 1 :]
    if _WHITESPACE.search(after_at):
        return None

    # Token extends past the cursor up to the next whitespace
    match = _WHITESPACE.search(text, cursor)
    end_index = match.start() if match else len(text)

    return InProgressToken(start_index=at_index, end_index=end_index, query=after_at.lower())


def splice_mention(text: str, token: InProgressToken, user: MentionableUser) -> tuple[str, int]:
    """Replace the token span with ``@<label> `` and return the new cursor.

    Returns:
        Tuple of (new_text, cursor) with the cursor right after the inserted space.

    Examples:
        >>> splice_mention("Hi @jan", InProgressToken(3, 7, "jan"), MentionableUser(id="u1", display_name="Jane Doe"))
        ('Hi @Jane Doe ', 13)
    """
    inserted = f"@{user.label} "
    new_text = text[: token.start_index] + inserted + text[token.end_index :]
    return new_text, token.start_index + len(inserted)
