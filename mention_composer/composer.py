"""Editing-session state machine for @mention composing.

The composer owns one editing session: the current text and cursor, the
active token, the suggestion panel and its selection. Hosts feed it text
changes and keys; it asks the suggestion source for candidates and splices
the chosen user into the text.

State machine:
    IDLE -> QUERYING (text change with a non-empty token query)
    QUERYING -> SUGGESTING (latest search returned results)
    QUERYING -> IDLE (latest search returned nothing, failed or timed out)
    SUGGESTING -> IDLE (commit, escape, outside click, token gone)

Every search is tagged with a sequence number. A result is applied only if
its number is still the latest issued, so a slow earlier search can never
overwrite a faster later one, and closing the panel discards anything
still in flight.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Sequence
from enum import Enum

from .models import CommitResult
from .models import InProgressToken
from .models import MentionableUser
from .protocol import MentionCallback
from .protocol import SearchCallable
from .protocol import SuggestionSourceProtocol
from .tokenizer import clamp_cursor
from .tokenizer import extract_in_progress_token
from .tokenizer import splice_mention

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_TIMEOUT = 5.0

# Key names accepted by handle_key (browser-style names are aliased)
_KEY_ALIASES = {
    "arrowdown": "down",
    "arrowup": "up",
    "return": "enter",
    "esc": "escape",
}


class ComposerState(Enum):
    """Composer state machine states."""

    IDLE = "idle"  # No active token, panel hidden
    QUERYING = "querying"  # Token active, search in flight
    SUGGESTING = "suggesting"  # Results available, panel visible


class MentionComposer:
    """Mediates keystrokes, tokenizer output and suggestion results.

    Example:
        composer = MentionComposer(StaticSuggestionSource(users), on_mention=notify)
        await composer.update("Hi @ja")
        if composer.is_open:
            composer.move_selection(1)
            result = await composer.commit()
    """

    def __init__(
        self,
        source: SuggestionSourceProtocol | SearchCallable,
        *,
        on_mention: MentionCallback | None = None,
        search_timeout: float | None = DEFAULT_SEARCH_TIMEOUT,
        trigger_on_empty_query: bool = False,
        text: str = "",
        cursor: int | None = None,
    ) -> None:
        """Initialize composer.

        Args:
            source: Suggestion source, or a bare async search callable.
            on_mention: Host callback fired once per commit with [user].
            search_timeout: Seconds before a search counts as empty (None = no limit).
            trigger_on_empty_query: Search on a bare "@" with an empty query.
            text: Initial text.
            cursor: Initial cursor; defaults to end of text.
        """
        self._search_fn: SearchCallable = source.search if hasattr(source, "search") else source
        self.on_mention = on_mention
        self.search_timeout = search_timeout
        self.trigger_on_empty_query = trigger_on_empty_query

        self.text = text
        self.cursor = clamp_cursor(text, cursor)
        self.state = ComposerState.IDLE
        self.token: InProgressToken | None = None
        self.suggestions: list[MentionableUser] = []
        self.selected_index = 0
        self.loading = False
        self._sequence = 0

    # ----- Derived state -----

    @property
    def is_open(self) -> bool:
        """True if the suggestion panel is visible."""
        return self.state == ComposerState.SUGGESTING and bool(self.suggestions)

    @property
    def selected_user(self) -> MentionableUser | None:
        """Currently highlighted suggestion, if the panel is open."""
        if not self.is_open:
            return None
        return self.suggestions[self.selected_index]

    @property
    def query(self) -> str:
        return self.token.query if self.token else ""

    # ----- Transitions -----

    async def update(self, text: str, cursor: int | None = None) -> None:
        """Handle a text change.

        Re-runs the tokenizer and, if a mention is being typed, searches for
        candidates. Returns once this change's search has settled; results
        superseded by a later change are dropped.

        Args:
            text: New editor text.
            cursor: Cursor offset; defaults to end of text.
        """
        self.text = text
        self.cursor = clamp_cursor(text, cursor)
        token = extract_in_progress_token(self.text, self.cursor)

        if token is None or (not token.query and not self.trigger_on_empty_query):
            self._reset()
            return

        self.token = token
        self.state = ComposerState.QUERYING
        sequence = self._next_sequence()
        self.loading = True

        results = await self._search(token.query)

        if sequence != self._sequence:
            logger.debug(f"Discarding stale results for {token.query!r} (request {sequence}, latest {self._sequence})")
            return

        self.loading = False
        self.suggestions = list(results)
        self.selected_index = 0
        self.state = ComposerState.SUGGESTING if self.suggestions else ComposerState.IDLE

    async def set_cursor(self, cursor: int) -> None:
        """Handle a cursor move without a text change."""
        await self.update(self.text, cursor)

    def move_selection(self, step: int) -> int:
        """Move the highlighted suggestion, wrapping around.

        Args:
            step: +1 for down, -1 for up.

        Returns:
            New selected index (unchanged if the panel is closed).
        """
        if not self.is_open:
            return self.selected_index
        self.selected_index = (self.selected_index + step) % len(self.suggestions)
        assert 0 <= self.selected_index < len(self.suggestions)
        return self.selected_index

    def dismiss(self) -> None:
        """Close the panel (Escape or outside click). Text is left untouched."""
        if self.state != ComposerState.IDLE:
            logger.debug("Suggestion panel dismissed")
        self._reset()

    def handle_outside_click(self) -> None:
        """Pointer interaction outside the editor and panel."""
        if self.is_open:
            self.dismiss()

    async def handle_key(self, key: str) -> bool:
        """Route a navigation key while the panel is open.

        Args:
            key: One of down, up, enter, tab, escape (browser names like
                "ArrowDown" are accepted).

        Returns:
            True if the key was consumed and the editor should not act on it.
        """
        if not self.is_open:
            return False

        name = key.lower()
        name = _KEY_ALIASES.get(name, name)

        if name == "down":
            self.move_selection(1)
            return True
        if name == "up":
            self.move_selection(-1)
            return True
        if name in ("enter", "tab"):
            await self.commit()
            return True
        if name == "escape":
            self.dismiss()
            return True
        return False

    async def commit(self, user: MentionableUser | None = None) -> CommitResult | None:
        """Splice a user into the text at the active token.

        The token is recomputed from the current text and cursor so the
        splice always matches what is on screen.

        Args:
            user: User to insert; defaults to the highlighted suggestion.

        Returns:
            CommitResult with the new text and cursor, or None if there was
            no active token or nothing to insert.
        """
        chosen = user or self.selected_user
        token = extract_in_progress_token(self.text, self.cursor)
        if chosen is None or token is None:
            logger.debug("Commit ignored: no active mention token or no selection")
            return None

        self.text, self.cursor = splice_mention(self.text, token, chosen)
        self._reset()

        if self.on_mention is not None:
            notified = self.on_mention([chosen])
            if inspect.isawaitable(notified):
                await notified

        logger.debug(f"Committed mention of {chosen.id}")
        return CommitResult(text=self.text, cursor=self.cursor, user=chosen)

    # ----- Internals -----

    def _next_sequence(self) -> int:
        self._sequence += 1
        return self._sequence

    def _reset(self) -> None:
        # Bumping the sequence invalidates any search still in flight
        self._next_sequence()
        self.state = ComposerState.IDLE
        self.token = None
        self.suggestions = []
        self.selected_index = 0
        self.loading = False

    async def _search(self, query: str) -> Sequence[MentionableUser]:
        """Run the search; failures and timeouts become an empty result."""
        try:
            if self.search_timeout is None:
                return await self._search_fn(query)
            return await asyncio.wait_for(self._search_fn(query), timeout=self.search_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Mention search timed out after {self.search_timeout}s for {query!r}")
        except Exception as e:
            logger.warning(f"Mention search failed for {query!r}: {e}")
        return []
