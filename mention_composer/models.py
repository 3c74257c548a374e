"""Data models for @mention composing and rendering.

MentionableUser comes from external collaborators (search endpoints,
workspace snapshots) and is validated with Pydantic. Tokens and segments are
derived values recomputed from text on every pass, so they are plain frozen
dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator


class MentionableUser(BaseModel):
    """A workspace member that can be @mentioned.

    Identity is ``id``. ``display_name`` and ``username`` are aliases used
    both for matching typed queries and for rendering.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(min_length=1, description="Unique user identifier")
    display_name: str | None = Field(default=None, description="Human readable name")
    username: str | None = Field(default=None, description="Handle, e.g. jane_doe")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")
    email: str | None = Field(default=None, description="Contact email")
    role: str | None = Field(default=None, description="Workspace role, e.g. admin")

    @field_validator("display_name", "username", "avatar_url", "email", "role", mode="before")
    @classmethod
    def _empty_to_none(cls, value: object) -> object:
        # Backends send "" for unset profile fields
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def label(self) -> str:
        """Display label, falling back display_name -> username -> id."""
        return self.display_name or self.username or self.id

    @property
    def initials(self) -> str:
        """Up to two upper-cased initials taken from the label words."""
        return "".join(word[0] for word in self.label.split(" ") if word).upper()[:2]


@dataclass(frozen=True)
class InProgressToken:
    """An @mention currently being typed.

    ``start_index`` is the offset of the triggering ``@``; ``end_index`` is
    where the token ends (next whitespace or end of text). ``query`` is the
    lowercased text typed between the ``@`` and the cursor.
    """

    start_index: int
    end_index: int
    query: str


@dataclass(frozen=True)
class TextSegment:
    """Plain text between mentions."""

    text: str
    start: int
    end: int

    @property
    def is_mention(self) -> bool:
        return False


@dataclass(frozen=True)
class MentionSegment:
    """A completed @mention found in committed text."""

    text: str  # Matched literal including the @
    username: str  # Lowercased handle without the @
    user: MentionableUser | None
    start: int
    end: int

    @property
    def is_mention(self) -> bool:
        return True

    @property
    def resolved(self) -> bool:
        """True if the handle matched a known user."""
        return self.user is not None


Segment = TextSegment | MentionSegment


@dataclass(frozen=True)
class CommitResult:
    """Outcome of committing a suggestion into the text."""

    text: str
    cursor: int
    user: MentionableUser
