"""prompt_toolkit integration: @mention completion driven by a MentionComposer."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from collections.abc import Iterable

from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.completion import Completer
from prompt_toolkit.completion import Completion
from prompt_toolkit.document import Document

from ..composer import MentionComposer
from ..models import MentionableUser

logger = logging.getLogger(__name__)


class MentionCompleter(Completer):
    """Offer workspace members while an @mention is being typed.

    Every completion request is fed to the composer as a text change, so the
    composer's sequence numbering decides which search result is current.
    The synchronous path replays the last settled suggestions without
    searching.
    """

    def __init__(self, composer: MentionComposer) -> None:
        self.composer = composer

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        if document.text != self.composer.text or document.cursor_position != self.composer.cursor:
            return
        yield from self._completions(document)

    async def get_completions_async(
        self, document: Document, complete_event: CompleteEvent
    ) -> AsyncGenerator[Completion, None]:
        await self.composer.update(document.text, document.cursor_position)
        # A newer keystroke may have superseded this request
        if document.text != self.composer.text or document.cursor_position != self.composer.cursor:
            return
        for completion in self._completions(document):
            yield completion

    def _completions(self, document: Document) -> list[Completion]:
        token = self.composer.token
        if not self.composer.is_open or token is None:
            return []
        start_position = token.start_index - document.cursor_position
        return [_to_completion(user, start_position) for user in self.composer.suggestions]


def _to_completion(user: MentionableUser, start_position: int) -> Completion:
    return Completion(
        text=f"@{user.label} ",
        start_position=start_position,
        display=user.label,
        display_meta=user.role or (f"@{user.username}" if user.username else ""),
    )
