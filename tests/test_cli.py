"""Tests for the mention-composer CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner
from prompt_toolkit import PromptSession
from prompt_toolkit.input import DummyInput
from prompt_toolkit.output import DummyOutput

from mention_composer.cli import _create_prompt_session
from mention_composer.cli import cli
from mention_composer.composer import MentionComposer
from mention_composer.sources import StaticSuggestionSource
from mention_composer.ui import MentionCompleter

USERS_YAML = """\
users:
  - id: u1
    display_name: Jane Doe
    role: admin
  - id: u2
    display_name: Alex Smith
    username: alex
    role: member
"""


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch) -> None:
    """Keep real user/project settings and env overrides out of CLI runs."""
    home = tmp_path / "home"
    project = tmp_path / "project"
    home.mkdir()
    project.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    monkeypatch.chdir(project)
    for name in ("MENTION_COMPOSER_API_KEY", "MENTION_COMPOSER_SEARCH_URL", "MENTION_COMPOSER_WORKSPACE_ID"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def users_file(tmp_path: Path) -> Path:
    path = tmp_path / "users.yaml"
    path.write_text(USERS_YAML)
    return path


class TestRenderCommand:
    """Tests for `render`."""

    def test_render_resolves(self, users_file: Path) -> None:
        result = CliRunner().invoke(cli, ["render", "Hi @jane_doe and @ghost", "--users", str(users_file)])
        assert result.exit_code == 0, result.output
        assert "Hi @Jane Doe and @ghost?" in result.output

    def test_render_without_users(self) -> None:
        """Without a snapshot every mention is unknown."""
        result = CliRunner().invoke(cli, ["render", "cc @alex"])
        assert result.exit_code == 0
        assert "cc @alex?" in result.output

    def test_known_users_from_settings(self, users_file: Path) -> None:
        """known_users_file in project settings is used when --users is omitted."""
        settings_dir = Path.cwd() / ".mention-composer"
        settings_dir.mkdir()
        (settings_dir / "settings.yaml").write_text(f"known_users_file: {users_file}\n")

        result = CliRunner().invoke(cli, ["render", "@alex"])
        assert result.exit_code == 0
        assert "@Alex Smith" in result.output

    def test_invalid_users_file(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yaml"
        bad.write_text("users:\n  - display_name: no id\n")
        result = CliRunner().invoke(cli, ["render", "@x", "--users", str(bad)])
        assert result.exit_code == 1
        assert "Invalid user" in result.output

    def test_invalid_settings(self) -> None:
        settings_dir = Path.cwd() / ".mention-composer"
        settings_dir.mkdir()
        (settings_dir / "settings.yaml").write_text("max_suggestions: 0\n")

        result = CliRunner().invoke(cli, ["render", "@x"])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output


class TestExtractCommand:
    """Tests for `extract`."""

    def test_extract_with_users(self, users_file: Path) -> None:
        result = CliRunner().invoke(cli, ["extract", "@Jane_Doe and @ghost, @jane_doe", "--users", str(users_file)])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[:2] == ["@jane_doe", "@ghost"]
        assert "Mentioned 1 user(s): Jane Doe" in result.output

    def test_extract_none(self) -> None:
        result = CliRunner().invoke(cli, ["extract", "nothing here"])
        assert result.exit_code == 0
        assert "No mentions found" in result.output


class TestSearchCommand:
    """Tests for `search`."""

    def test_search_table(self, users_file: Path) -> None:
        result = CliRunner().invoke(cli, ["search", "al", "--users", str(users_file)])
        assert result.exit_code == 0
        assert "Alex Smith" in result.output
        assert "@alex" in result.output
        assert "Jane Doe" not in result.output

    def test_search_no_match(self, users_file: Path) -> None:
        result = CliRunner().invoke(cli, ["search", "zzz", "--users", str(users_file)])
        assert result.exit_code == 0
        assert "No users match 'zzz'" in result.output


class TestComposePrompt:
    """Tests for the compose prompt session."""

    @pytest.fixture(autouse=True)
    def dummy_output(self, monkeypatch) -> None:
        """Force dummy input/output so no terminal is needed."""
        original_init = PromptSession.__init__

        def patched_init(self, *args, **kwargs):
            kwargs["input"] = DummyInput()
            kwargs["output"] = DummyOutput()
            return original_init(self, *args, **kwargs)

        monkeypatch.setattr(PromptSession, "__init__", patched_init)

    def test_session_uses_mention_completer(self, users) -> None:
        completer = MentionCompleter(MentionComposer(StaticSuggestionSource(users)))
        session = _create_prompt_session(completer)

        assert session.completer is completer
        assert session.complete_while_typing
        assert session.multiline
        assert session.key_bindings is not None
