"""HTTP suggestion source for REST (PostgREST-style) member search."""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from mention_composer.exceptions import SuggestionSourceError
from mention_composer.models import MentionableUser

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
DEFAULT_TIMEOUT = 10.0


def derive_username(display_name: str | None) -> str | None:
    """Derive a handle from a display name: lowercased, whitespace -> underscore.

    Examples:
        >>> derive_username("Jane Doe")
        'jane_doe'
    """
    if not display_name:
        return None
    return re.sub(r"\s+", "_", display_name.lower())


def member_to_user(row: dict[str, Any]) -> MentionableUser:
    """Map a workspace_members row (with embedded profile) to a MentionableUser.

    Expected row shape::

        {"user_id": "...", "role": "member",
         "profiles": {"display_name": "Jane Doe", "avatar_url": "..."}}
    """
    profile = row.get("profiles") or {}
    display_name = profile.get("display_name") or None
    return MentionableUser(
        id=row["user_id"],
        display_name=display_name,
        avatar_url=profile.get("avatar_url") or None,
        username=derive_username(display_name),
        role=row.get("role") or None,
    )


class HttpSuggestionSource:
    """Search active workspace members over HTTP.

    Issues ``GET {base_url}/workspace_members`` with PostgREST filters:
    active members of one workspace whose profile display name contains the
    query (case-insensitive), limited to ``limit`` rows.

    Transport errors, non-2xx responses and malformed payloads raise
    SuggestionSourceError; composers turn that into an empty panel.
    """

    def __init__(
        self,
        base_url: str,
        workspace_id: str,
        api_key: str | None = None,
        limit: int = DEFAULT_LIMIT,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize source.

        Args:
            base_url: REST endpoint root, e.g. https://xyz.example.co/rest/v1.
            workspace_id: Workspace whose members are searched.
            api_key: Optional key sent as ``apikey`` and bearer token.
            limit: Maximum number of results per search.
            client: Optional shared AsyncClient (owned by the caller).
            timeout: Request timeout when this source creates its own client.
        """
        self.base_url = base_url.rstrip("/")
        self.workspace_id = workspace_id
        self.api_key = api_key
        self.limit = limit
        self.timeout = timeout
        self._client = client

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _params(self, query: str) -> dict[str, str]:
        return {
            "select": "user_id,role,profiles!inner(id,display_name,avatar_url)",
            "workspace_id": f"eq.{self.workspace_id}",
            "is_active": "eq.true",
            "profiles.display_name": f"ilike.*{query}*",
            "limit": str(self.limit),
        }

    async def search(self, query: str) -> list[MentionableUser]:
        """Search workspace members by display name.

        Args:
            query: Text typed after the @.

        Returns:
            Up to ``limit`` users in server order; empty for an empty query.

        Raises:
            SuggestionSourceError: On transport, status or payload errors.
        """
        if not query or not self.workspace_id:
            return []

        url = f"{self.base_url}/workspace_members"
        try:
            if self._client is not None:
                response = await self._client.get(url, params=self._params(query), headers=self._headers())
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=self._params(query), headers=self._headers())
            response.raise_for_status()
            rows = response.json()
        except httpx.HTTPError as e:
            raise SuggestionSourceError(f"Member search failed for {query!r}: {e}") from e
        except ValueError as e:
            raise SuggestionSourceError(f"Member search returned invalid JSON: {e}") from e

        if not isinstance(rows, list):
            raise SuggestionSourceError(f"Member search returned {type(rows).__name__}, expected list")

        users: list[MentionableUser] = []
        for row in rows:
            try:
                users.append(member_to_user(row))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug(f"Skipping malformed member row {row!r}: {e}")
        logger.debug(f"Member search {query!r} returned {len(users)} user(s)")
        return users[: self.limit]
