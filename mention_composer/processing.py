"""Mention processing for committed text.

Extracts the handles in a saved comment or task description, validates them
against the workspace members and hands the result to a host-supplied
notifier (which records the mentions wherever the host persists them).
"""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Sequence

from .models import MentionableUser
from .renderer import MENTION_PATTERN

logger = logging.getLogger(__name__)

DEFAULT_EXCERPT_LENGTH = 200

MentionNotifier = Callable[[list[MentionableUser], str], Awaitable[None] | None]


def extract_mentions(text: str) -> list[str]:
    """Extract unique lowercased handles from text, preserving order.

    Examples:
        >>> extract_mentions("@Jane and @bob, again @jane")
        ['jane', 'bob']
    """
    seen: set[str] = set()
    result: list[str] = []
    for match in MENTION_PATTERN.finditer(text or ""):
        handle = match.group(1).lower()
        if handle not in seen:
            seen.add(handle)
            result.append(handle)
    return result


def validate_mentions(handles: Sequence[str], known_users: Sequence[MentionableUser]) -> list[MentionableUser]:
    """Return the known users whose display name matches one of the handles.

    A display name matches when, lowercased, it equals the handle as-is,
    with whitespace runs replaced by underscores, or with whitespace removed.
    Users without a display name cannot be matched.

    Args:
        handles: Lowercased handles (see extract_mentions).
        known_users: Workspace member snapshot.

    Returns:
        Matching users in snapshot order.
    """
    if not handles:
        return []

    wanted = set(handles)
    valid: list[MentionableUser] = []
    for user in known_users:
        if not user.display_name:
            continue
        name = user.display_name.lower()
        variants = {name, re.sub(r"\s+", "_", name), re.sub(r"\s+", "", name)}
        if variants & wanted:
            valid.append(user)
    return valid


async def process_mentions(
    text: str,
    known_users: Sequence[MentionableUser],
    notify: MentionNotifier | None = None,
    *,
    excerpt_length: int = DEFAULT_EXCERPT_LENGTH,
) -> list[MentionableUser]:
    """Extract, validate and report the mentions in committed text.

    Notifier failures are logged and swallowed: saving a comment must never
    fail because mention processing did.

    Args:
        text: Committed text.
        known_users: Workspace member snapshot.
        notify: Optional callable receiving (users, excerpt); may be async.
        excerpt_length: Maximum length of the excerpt passed to notify.

    Returns:
        Validated mentioned users (empty if none).
    """
    if not text or not text.strip() or "@" not in text:
        return []

    handles = extract_mentions(text)
    if not handles:
        return []

    users = validate_mentions(handles, known_users)
    if not users:
        logger.debug(f"No known users matched handles: {handles}")
        return users

    if notify is not None:
        excerpt = text[:excerpt_length]
        try:
            result = notify(users, excerpt)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.warning(f"Mention notifier failed for {len(users)} user(s): {e}")
        else:
            logger.info(f"Processed {len(users)} mention(s)")

    return users
