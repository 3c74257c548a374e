"""Protocols for the collaborators a composer talks to."""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Sequence
from typing import Protocol
from typing import runtime_checkable

from .models import MentionableUser


@runtime_checkable
class SuggestionSourceProtocol(Protocol):
    """Protocol for searching mentionable users.

    The package ships StaticSuggestionSource (in-memory snapshot) and
    HttpSuggestionSource (REST member search). Hosts may supply their own.
    """

    async def search(self, query: str) -> Sequence[MentionableUser]:
        """Search for users matching a typed query.

        Args:
            query: Lowercased text typed after the @.

        Returns:
            Ordered candidates; ordering is the source's own ranking.

        Raises:
            Any exception on failure. Composers treat failures as no results.
        """
        ...


# Bare async callables are accepted wherever a source is
SearchCallable = Callable[[str], Awaitable[Sequence[MentionableUser]]]

# Host notification fired once per committed mention; may be async
MentionCallback = Callable[[list[MentionableUser]], Awaitable[None] | None]
