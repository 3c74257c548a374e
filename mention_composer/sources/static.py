"""In-memory suggestion source over a known-users snapshot."""

from __future__ import annotations

from collections.abc import Sequence

from mention_composer.models import MentionableUser

DEFAULT_LIMIT = 10


class StaticSuggestionSource:
    """Search a fixed list of users by case-insensitive substring.

    Matches on display name first and falls back to username for users
    without one. Results keep snapshot order and are capped at ``limit``.
    Suitable for tests, CLI tools and hosts that already hold the
    workspace member list.
    """

    def __init__(self, users: Sequence[MentionableUser], limit: int = DEFAULT_LIMIT) -> None:
        """Initialize source.

        Args:
            users: Snapshot of mentionable users.
            limit: Maximum number of results per search.
        """
        self.users = list(users)
        self.limit = limit

    async def search(self, query: str) -> list[MentionableUser]:
        """Return users whose name contains the query.

        Args:
            query: Text typed after the @ (any case).

        Returns:
            Up to ``limit`` matching users; empty for an empty query.
        """
        needle = query.strip().lower()
        if not needle:
            return []

        results: list[MentionableUser] = []
        for user in self.users:
            haystack = user.display_name or user.username or ""
            if needle in haystack.lower():
                results.append(user)
                if len(results) >= self.limit:
                    break
        return results

    def replace(self, users: Sequence[MentionableUser]) -> None:
        """Swap in a refreshed snapshot."""
        self.users = list(users)
