"""Segmenting committed text into plain text and resolved @mentions.

This is a separate pass from the tokenizer: it has no cursor, and a handle
runs to the end of a fixed character class rather than to whitespace.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from collections.abc import Sequence
from re import Pattern

from .models import MentionableUser
from .models import MentionSegment
from .models import Segment
from .models import TextSegment

# @handle: letters, digits, underscore, dot, hyphen
MENTION_PATTERN: Pattern = re.compile(r"@([A-Za-z0-9_.-]+)")

_WHITESPACE_RUN: Pattern = re.compile(r"\s+")


def resolve_handle(handle: str, known_users: Sequence[MentionableUser]) -> MentionableUser | None:
    """Resolve a lowercased handle against the known users.

    Resolution order, first match wins:
    1. exact username
    2. exact display name
    3. display name with whitespace replaced by underscores

    Args:
        handle: Handle without the @ prefix.
        known_users: Snapshot of mentionable users.

    Returns:
        The matching user, or None if unresolved.
    """
    key = handle.lower()
    for match_key in (_username_key, _display_name_key, _underscored_key):
        for user in known_users:
            if match_key(user) == key:
                return user
    return None


def _username_key(user: MentionableUser) -> str | None:
    return user.username.lower() if user.username else None


def _display_name_key(user: MentionableUser) -> str | None:
    return user.display_name.lower() if user.display_name else None


def _underscored_key(user: MentionableUser) -> str | None:
    if not user.display_name:
        return None
    return _WHITESPACE_RUN.sub("_", user.display_name.lower())


class RenderedText:
    """Lazy, restartable sequence of segments for a piece of committed text.

    Each iteration re-scans the text, so iterating twice yields identical
    segments and no state is shared between passes.
    """

    def __init__(self, text: str, known_users: Sequence[MentionableUser]) -> None:
        self.text = text or ""
        self.known_users = tuple(known_users)

    def __iter__(self) -> Iterator[Segment]:
        last_index = 0
        for match in MENTION_PATTERN.finditer(self.text):
            if match.start() > last_index:
                yield TextSegment(
                    text=self.text[last_index : match.start()],
                    start=last_index,
                    end=match.start(),
                )

            username = match.group(1).lower()
            yield MentionSegment(
                text=match.group(0),
                username=username,
                user=resolve_handle(username, self.known_users),
                start=match.start(),
                end=match.end(),
            )
            last_index = match.end()

        if last_index < len(self.text):
            yield TextSegment(text=self.text[last_index:], start=last_index, end=len(self.text))

    def mentions(self) -> list[MentionSegment]:
        """Mention segments only, in order of appearance."""
        return [segment for segment in self if isinstance(segment, MentionSegment)]

    def __repr__(self) -> str:
        return f"RenderedText({self.text!r}, known_users={len(self.known_users)})"


def render_segments(text: str, known_users: Sequence[MentionableUser]) -> RenderedText:
    """Split committed text into plain-text and mention segments.

    Args:
        text: Finalized text (comment body, task description).
        known_users: Snapshot of mentionable users for the workspace.

    Returns:
        Restartable iterable of TextSegment / MentionSegment.

    Examples:
        >>> users = [MentionableUser(id="u1", display_name="Jane Doe")]
        >>> [s.text for s in render_segments("Hi @jane_doe!", users)]
        ['Hi ', '@jane_doe', '!']
    """
    return RenderedText(text, known_users)
