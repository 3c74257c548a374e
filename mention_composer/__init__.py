"""Mention Composer - @mention tokenizing, suggesting and rendering.

Provides the editing-session logic behind comment and task-description
editors that support @mentions:

- Tokenizer: finds the mention being typed at the cursor.
- Composer: state machine over the suggestion panel, with sequence-numbered
  searches so stale results never win.
- Renderer: splits committed text into plain text and resolved mentions.
- Processing: extracts and validates mentions in saved text for the host.

Suggestion search and mention persistence belong to the host; they are
injected as a SuggestionSourceProtocol and callbacks.
"""

from __future__ import annotations

# Composer
from mention_composer.composer import ComposerState
from mention_composer.composer import MentionComposer

# Exceptions
from mention_composer.exceptions import KnownUsersError
from mention_composer.exceptions import MentionComposerError
from mention_composer.exceptions import SettingsError
from mention_composer.exceptions import SuggestionSourceError

# Known users
from mention_composer.known_users import load_known_users
from mention_composer.known_users import parse_known_users

# Models
from mention_composer.models import CommitResult
from mention_composer.models import InProgressToken
from mention_composer.models import MentionableUser
from mention_composer.models import MentionSegment
from mention_composer.models import Segment
from mention_composer.models import TextSegment

# Processing
from mention_composer.processing import extract_mentions
from mention_composer.processing import process_mentions
from mention_composer.processing import validate_mentions

# Protocols
from mention_composer.protocol import SuggestionSourceProtocol

# Renderer
from mention_composer.renderer import MENTION_PATTERN
from mention_composer.renderer import RenderedText
from mention_composer.renderer import render_segments
from mention_composer.renderer import resolve_handle

# Settings
from mention_composer.settings import ComposerSettings
from mention_composer.settings import SettingsLoader

# Reference suggestion sources
from mention_composer.sources import HttpSuggestionSource
from mention_composer.sources import StaticSuggestionSource

# Tokenizer
from mention_composer.tokenizer import extract_in_progress_token
from mention_composer.tokenizer import splice_mention

__all__ = [
    # Composer
    "ComposerState",
    "MentionComposer",
    # Exceptions
    "MentionComposerError",
    "SuggestionSourceError",
    "KnownUsersError",
    "SettingsError",
    # Models
    "MentionableUser",
    "InProgressToken",
    "TextSegment",
    "MentionSegment",
    "Segment",
    "CommitResult",
    # Protocols
    "SuggestionSourceProtocol",
    # Sources
    "StaticSuggestionSource",
    "HttpSuggestionSource",
    # Tokenizer
    "extract_in_progress_token",
    "splice_mention",
    # Renderer
    "MENTION_PATTERN",
    "RenderedText",
    "render_segments",
    "resolve_handle",
    # Processing
    "extract_mentions",
    "validate_mentions",
    "process_mentions",
    # Known users
    "load_known_users",
    "parse_known_users",
    # Settings
    "ComposerSettings",
    "SettingsLoader",
]
