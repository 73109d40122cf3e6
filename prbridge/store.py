"""Webhook configuration store with SQLite backend."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

from prbridge.models import BotCredentials, Member, Room, WebhookConfig
from prbridge.utils.logging import get_logger

log = get_logger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS webhooks (
    service_key TEXT PRIMARY KEY,
    bot TEXT,
    room TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


def _load_json(raw: str | None) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        log.warning("webhook_column_invalid_json")
        return None


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _parse_bot(data: Any) -> BotCredentials | None:
    if not isinstance(data, dict):
        return None
    return BotCredentials(
        chatwork_token=_optional_str(data.get("chatwork_token")),
        slack_token=_optional_str(data.get("slack_token")),
    )


def _parse_room(data: Any) -> Room | None:
    """Build a Room, or None when the stored room is empty or malformed."""
    if not isinstance(data, dict) or not data.get("room_id"):
        return None
    raw_members = data.get("members") or []
    if not isinstance(raw_members, list):
        return None
    members = []
    for item in raw_members:
        if not isinstance(item, dict):
            continue
        github_id = item.get("github_id")
        chatwork_id = item.get("chatwork_id")
        if github_id is None or chatwork_id is None:
            continue
        members.append(Member(github_id=str(github_id), chatwork_id=str(chatwork_id)))
    return Room(room_id=str(data["room_id"]), members=tuple(members))


def room_to_dict(room: Room) -> dict[str, Any]:
    return {
        "room_id": room.room_id,
        "members": [
            {"github_id": m.github_id, "chatwork_id": m.chatwork_id} for m in room.members
        ],
    }


def bot_to_dict(bot: BotCredentials) -> dict[str, Any]:
    data: dict[str, Any] = {"chatwork_token": bot.chatwork_token}
    if bot.slack_token:
        data["slack_token"] = bot.slack_token
    return data


class WebhookStore:
    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._db: aiosqlite.Connection | None = None

    async def start(self) -> None:
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(str(self._db_path))
        await self._db.executescript(_SCHEMA)
        await self._db.commit()

    async def stop(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    async def find_by_key(self, service_key: str) -> WebhookConfig | None:
        """Return the webhook configured for ``service_key``, if any."""
        assert self._db is not None
        cursor = await self._db.execute(
            "SELECT service_key, bot, room FROM webhooks WHERE service_key = ?",
            (service_key,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return WebhookConfig(
            service_key=row[0],
            bot=_parse_bot(_load_json(row[1])),
            room=_parse_room(_load_json(row[2])),
        )

    async def upsert(
        self,
        service_key: str,
        bot: BotCredentials | None,
        room: Room | None,
    ) -> None:
        """Insert or replace the configuration for ``service_key``."""
        assert self._db is not None
        now = datetime.now(timezone.utc).isoformat()
        bot_json = json.dumps(bot_to_dict(bot)) if bot else None
        room_json = json.dumps(room_to_dict(room)) if room else None
        await self._db.execute(
            "INSERT INTO webhooks (service_key, bot, room, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?) "
            "ON CONFLICT(service_key) DO UPDATE SET "
            "bot = excluded.bot, "
            "room = excluded.room, "
            "updated_at = excluded.updated_at",
            (service_key, bot_json, room_json, now, now),
        )
        await self._db.commit()
        log.info("webhook_saved", service_key=service_key)

    async def delete(self, service_key: str) -> bool:
        """Delete a webhook. Returns True if one was deleted."""
        assert self._db is not None
        cursor = await self._db.execute(
            "DELETE FROM webhooks WHERE service_key = ?",
            (service_key,),
        )
        await self._db.commit()
        return cursor.rowcount > 0

    async def list_keys(self) -> list[str]:
        assert self._db is not None
        cursor = await self._db.execute(
            "SELECT service_key FROM webhooks ORDER BY service_key"
        )
        rows = await cursor.fetchall()
        return [row[0] for row in rows]
