"""Shared fixtures for mention-composer tests."""

import pytest

from mention_composer.models import MentionableUser


@pytest.fixture
def users() -> list[MentionableUser]:
    """Small workspace member snapshot."""
    return [
        MentionableUser(id="u1", display_name="Jane Doe", username="jane_doe", role="admin"),
        MentionableUser(id="u2", display_name="Alex Smith", username="alex", role="member"),
        MentionableUser(id="u3", display_name="Alexandra Ng", username="ang"),
        MentionableUser(id="u4", username="bot.ci"),
    ]
