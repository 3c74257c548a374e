"""Tests for known-user snapshot loading and the user model."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from mention_composer.exceptions import KnownUsersError
from mention_composer.known_users import load_known_users
from mention_composer.known_users import parse_known_users
from mention_composer.models import MentionableUser


class TestMentionableUser:
    """Tests for MentionableUser."""

    def test_id_required(self) -> None:
        with pytest.raises(ValidationError):
            MentionableUser(id="")

    def test_empty_strings_become_none(self) -> None:
        """Blank optional fields are treated as missing."""
        user = MentionableUser(id="u1", display_name="  ", username="")
        assert user.display_name is None
        assert user.username is None
        assert user.label == "u1"

    def test_label_fallback(self) -> None:
        assert MentionableUser(id="u1", display_name="Jane", username="j").label == "Jane"
        assert MentionableUser(id="u1", username="j").label == "j"

    def test_initials(self) -> None:
        assert MentionableUser(id="u1", display_name="jane mary doe").initials == "JM"
        assert MentionableUser(id="x1").initials == "X"


class TestParseKnownUsers:
    """Tests for parse_known_users."""

    def test_list_and_mapping_forms(self) -> None:
        entries = [{"id": "u1", "display_name": "Jane"}]
        assert parse_known_users(entries) == parse_known_users({"users": entries})

    def test_empty(self) -> None:
        assert parse_known_users(None) == []
        assert parse_known_users({}) == []

    def test_duplicates_keep_first(self) -> None:
        users = parse_known_users([{"id": "u1", "display_name": "A"}, {"id": "u1", "display_name": "B"}])
        assert [u.display_name for u in users] == ["A"]

    def test_invalid_entry(self) -> None:
        with pytest.raises(KnownUsersError, match="index 1"):
            parse_known_users([{"id": "u1"}, {"display_name": "no id"}])

    def test_invalid_structure(self) -> None:
        with pytest.raises(KnownUsersError):
            parse_known_users("not a list")


class TestLoadKnownUsers:
    """Tests for load_known_users."""

    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "users.yaml"
        path.write_text("users:\n  - id: u1\n    display_name: Jane Doe\n    role: admin\n")
        users = load_known_users(path)
        assert users == [MentionableUser(id="u1", display_name="Jane Doe", role="admin")]

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "users.json"
        path.write_text('[{"id": "u1", "username": "jd"}]')
        assert load_known_users(path)[0].username == "jd"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(KnownUsersError):
            load_known_users(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "users.yaml"
        path.write_text("users: [unclosed")
        with pytest.raises(KnownUsersError):
            load_known_users(path)
