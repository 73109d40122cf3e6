"""Tests for the SQLite webhook store."""

import json

import pytest

from prbridge.core.dispatcher import Dispatcher
from prbridge.core.errors import ConfigurationError
from prbridge.core.service import WebhookService
from prbridge.models import BotCredentials, Member, Room
from prbridge.store import WebhookStore


@pytest.fixture
async def store(tmp_path):
    s = WebhookStore(tmp_path / "webhooks.db")
    await s.start()
    yield s
    await s.stop()


@pytest.fixture
def room():
    return Room(
        room_id="123",
        members=(Member("alice", "1"), Member("bob", "2")),
    )


class TestWebhookStore:
    async def test_find_missing(self, store):
        assert await store.find_by_key("nope") is None

    async def test_upsert_and_find(self, store, room):
        await store.upsert("key", BotCredentials(chatwork_token="tok"), room)
        config = await store.find_by_key("key")

        assert config.service_key == "key"
        assert config.chatwork_token == "tok"
        assert config.room == room

    async def test_member_order_preserved(self, store):
        members = tuple(Member(f"user{i}", str(i)) for i in range(5, 0, -1))
        await store.upsert("key", None, Room(room_id="1", members=members))
        config = await store.find_by_key("key")
        assert [m.github_id for m in config.room.members] == [m.github_id for m in members]

    async def test_upsert_replaces(self, store, room):
        await store.upsert("key", BotCredentials(chatwork_token="old"), room)
        await store.upsert("key", BotCredentials(chatwork_token="new"), None)
        config = await store.find_by_key("key")
        assert config.chatwork_token == "new"
        assert config.room is None

    async def test_null_bot(self, store, room):
        await store.upsert("key", None, room)
        config = await store.find_by_key("key")
        assert config.bot is None
        assert config.chatwork_token is None

    async def test_delete(self, store, room):
        await store.upsert("key", None, room)
        assert await store.delete("key") is True
        assert await store.delete("key") is False
        assert await store.find_by_key("key") is None

    async def test_list_keys(self, store, room):
        await store.upsert("b", None, room)
        await store.upsert("a", None, room)
        assert await store.list_keys() == ["a", "b"]


class TestMalformedRows:
    async def _insert_raw(self, store, bot, room):
        await store._db.execute(
            "INSERT INTO webhooks (service_key, bot, room, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?)",
            ("raw", bot, room, "now", "now"),
        )
        await store._db.commit()

    async def test_empty_room_object(self, store):
        await self._insert_raw(store, None, "{}")
        config = await store.find_by_key("raw")
        assert config.room is None

    async def test_room_not_an_object(self, store):
        await self._insert_raw(store, None, json.dumps(["123"]))
        config = await store.find_by_key("raw")
        assert config.room is None

    async def test_invalid_json(self, store):
        await self._insert_raw(store, "{not json", "{not json")
        config = await store.find_by_key("raw")
        assert config.bot is None
        assert config.room is None

    async def test_incomplete_members_skipped(self, store):
        room = {
            "room_id": 77,
            "members": [
                {"github_id": "alice", "chatwork_id": 1},
                {"github_id": "bob"},
                "junk",
            ],
        }
        await self._insert_raw(store, json.dumps({"chatwork_token": "t"}), json.dumps(room))
        config = await store.find_by_key("raw")
        assert config.room == Room(room_id="77", members=(Member("alice", "1"),))
        assert config.chatwork_token == "t"

    async def test_members_not_a_list(self, store):
        await self._insert_raw(store, None, json.dumps({"room_id": "1", "members": 5}))
        config = await store.find_by_key("raw")
        assert config.room is None

    async def test_numeric_token_is_a_string(self, store):
        await self._insert_raw(store, json.dumps({"chatwork_token": 12345}), json.dumps({"room_id": "1"}))
        config = await store.find_by_key("raw")
        assert config.chatwork_token == "12345"

    async def test_malformed_members_fail_as_room_undefined(self, store, pr_event):
        await self._insert_raw(store, None, json.dumps({"room_id": "1", "members": {"alice": "1"}}))
        service = WebhookService(store, Dispatcher(lambda token: pytest.fail("no dispatch expected")))

        with pytest.raises(ConfigurationError, match="Room undefined") as exc_info:
            await service.github("raw", pr_event())
        assert exc_info.value.status == 409
