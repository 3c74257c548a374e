"""Tests for committed-text segmenting and handle resolution."""

from mention_composer.models import MentionableUser
from mention_composer.models import MentionSegment
from mention_composer.models import TextSegment
from mention_composer.renderer import render_segments
from mention_composer.renderer import resolve_handle


class TestResolveHandle:
    """Tests for resolve_handle."""

    def test_username_match(self, users) -> None:
        """Exact username resolves."""
        assert resolve_handle("alex", users).id == "u2"

    def test_display_name_underscored(self, users) -> None:
        """Display name with spaces replaced by underscores resolves."""
        assert resolve_handle("alexandra_ng", users).id == "u3"

    def test_case_insensitive(self, users) -> None:
        """Handles are compared lowercased."""
        assert resolve_handle("JANE_DOE", users).id == "u1"

    def test_username_wins_over_display_name(self) -> None:
        """Username match is tried before display-name matches."""
        users = [
            MentionableUser(id="a", display_name="sam"),
            MentionableUser(id="b", username="sam"),
        ]
        assert resolve_handle("sam", users).id == "b"

    def test_exact_display_name(self) -> None:
        """Single-word display names match exactly."""
        users = [MentionableUser(id="a", display_name="Priya")]
        assert resolve_handle("priya", users).id == "a"

    def test_unresolved(self, users) -> None:
        """Unknown handle returns None."""
        assert resolve_handle("nobody", users) is None
        assert resolve_handle("jane", []) is None


class TestRenderSegments:
    """Tests for render_segments."""

    def test_empty_text(self, users) -> None:
        """Empty text yields no segments."""
        assert list(render_segments("", users)) == []

    def test_plain_text(self, users) -> None:
        """Text without mentions is a single plain segment."""
        assert list(render_segments("no mentions here", users)) == [
            TextSegment(text="no mentions here", start=0, end=16)
        ]

    def test_mixed_segments(self, users) -> None:
        """Mentions split the text into ordered segments."""
        segments = list(render_segments("Hi @jane_doe and @ghost!", users))

        assert [s.text for s in segments] == ["Hi ", "@jane_doe", " and ", "@ghost", "!"]
        assert isinstance(segments[1], MentionSegment)
        assert segments[1].user is not None
        assert segments[1].user.id == "u1"
        assert segments[1].username == "jane_doe"
        assert segments[3].user is None
        assert not segments[3].resolved

    def test_character_class_is_greedy(self, users) -> None:
        """Handles include dots and hyphens and stop at other characters."""
        segments = list(render_segments("ping @bot.ci, ok", users))
        mention = segments[1]
        assert mention.text == "@bot.ci"
        assert mention.user is not None
        assert mention.user.id == "u4"
        assert segments[2].text == ", ok"

    def test_mention_at_start_and_end(self, users) -> None:
        """Mentions at text boundaries produce no empty text segments."""
        segments = list(render_segments("@alex", users))
        assert len(segments) == 1
        assert segments[0].is_mention

    def test_offsets_cover_text(self, users) -> None:
        """Segment offsets tile the text exactly."""
        text = "a @alex b @ang c"
        segments = list(render_segments(text, users))
        assert "".join(text[s.start : s.end] for s in segments) == text
        assert all(text[s.start : s.end] == s.text for s in segments)

    def test_idempotent(self, users) -> None:
        """Rendering twice yields identical output."""
        text = "cc @alex @Jane_Doe @who"
        assert list(render_segments(text, users)) == list(render_segments(text, users))

    def test_restartable(self, users) -> None:
        """The same rendered object can be iterated more than once."""
        rendered = render_segments("hey @alex", users)
        assert list(rendered) == list(rendered)

    def test_mentions_helper(self, users) -> None:
        """mentions() returns only mention segments."""
        rendered = render_segments("hey @alex and @ang", users)
        assert [m.username for m in rendered.mentions()] == ["alex", "ang"]
