"""Settings management for mention-composer.

Philosophy: Simple, scope-aware YAML settings validated by one Pydantic model.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

from .exceptions import SettingsError

logger = logging.getLogger(__name__)

SETTINGS_DIR = ".mention-composer"

# Environment overrides (env name -> settings key)
ENV_OVERRIDES = {
    "MENTION_COMPOSER_API_KEY": "api_key",
    "MENTION_COMPOSER_SEARCH_URL": "search_url",
    "MENTION_COMPOSER_WORKSPACE_ID": "workspace_id",
}


class ComposerSettings(BaseModel):
    """Effective composer configuration."""

    search_timeout: float = Field(default=5.0, gt=0, description="Seconds before a search counts as empty")
    max_suggestions: int = Field(default=10, ge=1, description="Suggestion list cap")
    trigger_on_empty_query: bool = Field(default=False, description="Search on a bare @")
    excerpt_length: int = Field(default=200, ge=0, description="Excerpt length passed to mention notifiers")
    known_users_file: Path | None = Field(default=None, description="YAML/JSON snapshot of workspace members")
    search_url: str | None = Field(default=None, description="REST root for HTTP member search")
    workspace_id: str | None = Field(default=None, description="Workspace searched over HTTP")
    api_key: str | None = Field(default=None, description="Key for the member search endpoint")
    log_level: str = Field(default="WARNING", description="Root log level for the CLI")


@dataclass
class SettingsPaths:
    """Standard paths for settings files."""

    global_settings: Path
    project_settings: Path
    local_settings: Path

    @classmethod
    def default(cls) -> SettingsPaths:
        """Create default paths for the standard layout."""
        return cls(
            global_settings=Path.home() / SETTINGS_DIR / "settings.yaml",
            project_settings=Path.cwd() / SETTINGS_DIR / "settings.yaml",
            local_settings=Path.cwd() / SETTINGS_DIR / "settings.local.yaml",
        )


class SettingsLoader:
    """Load settings with scope-aware merging.

    Scope priority (most specific wins):
    1. environment (MENTION_COMPOSER_*)
    2. local (.mention-composer/settings.local.yaml) - gitignored, machine-specific
    3. project (.mention-composer/settings.yaml) - committed, team-shared
    4. global (~/.mention-composer/settings.yaml) - user defaults

    Usage:
        settings = SettingsLoader().load()
        composer = MentionComposer(source, search_timeout=settings.search_timeout)
    """

    def __init__(self, paths: SettingsPaths | None = None, environ: dict[str, str] | None = None) -> None:
        self.paths = paths or SettingsPaths.default()
        self.environ = os.environ if environ is None else environ

    def get_merged_settings(self) -> dict[str, Any]:
        """Read and merge raw settings from all file scopes.

        Raises:
            SettingsError: If a settings file is not valid YAML or not a mapping.
        """
        result: dict[str, Any] = {}
        # Order: global -> project -> local (most specific wins)
        for path in (self.paths.global_settings, self.paths.project_settings, self.paths.local_settings):
            if not path.exists():
                continue
            try:
                with open(path, encoding="utf-8") as f:
                    content = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise SettingsError(f"Could not read settings from {path}: {e}") from e
            if not isinstance(content, dict):
                raise SettingsError(f"Settings file {path} must contain a mapping, got {type(content).__name__}")
            logger.debug(f"Loaded settings from {path}")
            result.update(content)

        for env_name, key in ENV_OVERRIDES.items():
            if value := self.environ.get(env_name):
                result[key] = value
        return result

    def load(self, **overrides: Any) -> ComposerSettings:
        """Build validated settings; keyword overrides (e.g. CLI flags) win over all scopes.

        Raises:
            SettingsError: If a file is malformed or a value fails validation.
        """
        merged = self.get_merged_settings()
        merged.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return ComposerSettings(**merged)
        except ValidationError as e:
            raise SettingsError(f"Invalid settings: {e}") from e
