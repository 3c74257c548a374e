"""Suggestion sources for @mention search."""

from .http import HttpSuggestionSource
from .http import derive_username
from .http import member_to_user
from .static import StaticSuggestionSource

__all__ = [
    "HttpSuggestionSource",
    "StaticSuggestionSource",
    "derive_username",
    "member_to_user",
]
