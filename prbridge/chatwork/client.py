"""Minimal async Chatwork API v2 client."""

from __future__ import annotations

from typing import Any

import httpx

DEFAULT_API_URL = "https://api.chatwork.com/v2"


class ChatworkClient:
    """Posts messages to Chatwork rooms with a single API token.

    Build one per request; the token is fixed for the life of the client.
    """

    def __init__(
        self,
        token: str | None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers={"X-ChatWorkToken": token or ""},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> ChatworkClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def post_message(
        self, room_id: str, body: str, self_unread: bool = False
    ) -> dict[str, Any]:
        """POST /rooms/{room_id}/messages.

        Raises ``httpx.HTTPStatusError`` for non-2xx responses.
        """
        resp = await self._client.post(
            f"/rooms/{room_id}/messages",
            data={"body": body, "self_unread": "1" if self_unread else "0"},
        )
        resp.raise_for_status()
        return resp.json()
