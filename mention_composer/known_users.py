"""Loading known-user snapshots from YAML or JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import KnownUsersError
from .models import MentionableUser

logger = logging.getLogger(__name__)


def parse_known_users(data: Any) -> list[MentionableUser]:
    """Validate a decoded snapshot.

    Accepts either a list of user mappings or a mapping with a ``users`` key.

    Raises:
        KnownUsersError: If the structure or any entry is invalid.
    """
    if isinstance(data, dict):
        data = data.get("users")
    if data is None:
        return []
    if not isinstance(data, list):
        raise KnownUsersError(f"Expected a list of users, got {type(data).__name__}")

    users: list[MentionableUser] = []
    seen: set[str] = set()
    for index, entry in enumerate(data):
        try:
            user = MentionableUser.model_validate(entry)
        except ValidationError as e:
            raise KnownUsersError(f"Invalid user at index {index}: {e}") from e
        if user.id in seen:
            logger.warning(f"Duplicate user id {user.id!r} in snapshot; keeping first")
            continue
        seen.add(user.id)
        users.append(user)
    return users


def load_known_users(path: Path) -> list[MentionableUser]:
    """Read a known-users snapshot from a YAML or JSON file.

    Example file::

        users:
          - id: u1
            display_name: Jane Doe
            role: admin

    Args:
        path: Path to a .yaml/.yml/.json file.

    Returns:
        Validated users in file order.

    Raises:
        KnownUsersError: If the file is missing or invalid.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise KnownUsersError(f"Could not read known users from {path}: {e}") from e

    try:
        if path.suffix.lower() == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except (ValueError, yaml.YAMLError) as e:
        raise KnownUsersError(f"Could not parse known users in {path}: {e}") from e

    users = parse_known_users(data)
    logger.debug(f"Loaded {len(users)} known user(s) from {path}")
    return users
