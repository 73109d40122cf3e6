"""Deliver composed messages to Chatwork."""

from __future__ import annotations

from typing import Any, Callable

import httpx

from prbridge.chatwork.client import ChatworkClient
from prbridge.core.errors import CHATWORK_REQUEST_FAILURE, DeliveryRejected
from prbridge.utils.logging import get_logger

log = get_logger(__name__)

ClientFactory = Callable[[str | None], ChatworkClient]

_REJECTED_STATUSES = frozenset({400, 401})


def _first_error(response: httpx.Response) -> str:
    try:
        errors = response.json().get("errors") or []
    except (ValueError, AttributeError):
        return ""
    return str(errors[0]) if errors else ""


class Dispatcher:
    """Sends one message per call, with a client built for that call's token.

    Delivery is best effort: nothing is retried.
    """

    def __init__(self, client_factory: ClientFactory) -> None:
        self._client_factory = client_factory

    async def send(self, room_id: str, body: str, token: str | None) -> dict[str, Any]:
        async with self._client_factory(token) as client:
            try:
                # Don't mark the bot's own message as unread
                result = await client.post_message(room_id, body, self_unread=False)
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status not in _REJECTED_STATUSES:
                    raise
                detail = _first_error(e.response)
                log.info("chatwork_request_rejected", room_id=room_id, status=status, detail=detail)
                raise DeliveryRejected(f"{CHATWORK_REQUEST_FAILURE}: {detail}") from e

        log.info("chatwork_message_sent", room_id=room_id, message_id=result.get("message_id"))
        return result
