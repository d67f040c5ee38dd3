import asyncio
from typing import Any, Callable

import pytest

from wajs.client import chats as chats_module
from wajs.client.chats import ChatsAPI
from wajs.core.chat import GroupChat, PrivateChat
from wajs.core.errors import ValidationError


class _FakeBridge:
    def __init__(self, handlers: dict[str, Callable[[Any], Any]] | None = None) -> None:
        self.handlers = handlers or {}
        self.calls: list[tuple[str, Any]] = []

    async def execute(self, script: str, arg: Any = None) -> Any:
        self.calls.append((script, arg))
        handler = self.handlers.get(script)
        return handler(arg) if handler else None


class _FakeClient:
    def __init__(self, handlers: dict[str, Callable[[Any], Any]] | None = None) -> None:
        self.bridge = _FakeBridge(handlers)


def _run(coro):
    return asyncio.run(coro)


def test_get_chats_builds_variants() -> None:
    async def _case() -> None:
        client = _FakeClient(
            {
                chats_module.GET_CHATS: lambda _: [
                    {"id": {"_serialized": "1@c.us"}, "name": "Ann", "unreadCount": 2},
                    {
                        "id": {"_serialized": "1-2@g.us"},
                        "isGroup": True,
                        "formattedTitle": "Team",
                        "groupMetadata": {
                            "owner": {"_serialized": "1@c.us"},
                            "participants": [{"id": {"_serialized": "1@c.us"}, "isAdmin": True}],
                        },
                    },
                ]
            }
        )
        chats = await ChatsAPI(client).get_chats()
        assert isinstance(chats[0], PrivateChat)
        assert chats[0].unread_count == 2
        assert isinstance(chats[1], GroupChat)
        assert chats[1].name == "Team"
        assert chats[1].owner == "1@c.us"
        assert chats[1].participants[0].is_admin is True
        assert chats[1].client is client

    _run(_case())


def test_get_chat_by_id_missing_returns_none() -> None:
    async def _case() -> None:
        assert await ChatsAPI(_FakeClient()).get_chat_by_id("nope@c.us") is None

    _run(_case())


def test_archive_and_unarchive_report_new_state() -> None:
    async def _case() -> None:
        client = _FakeClient()
        api = ChatsAPI(client)
        assert await api.archive("1@c.us") is True
        assert await api.unarchive("1@c.us") is False
        assert [arg["archive"] for _, arg in client.bridge.calls] == [True, False]

    _run(_case())


def test_pin_refuses_when_limit_reached() -> None:
    async def _case() -> None:
        client = _FakeClient(
            {
                chats_module.GET_CHAT: lambda chat_id: {"id": chat_id, "pin": 0},
                chats_module.PINNED_COUNT: lambda _: chats_module.MAX_PIN_COUNT,
                chats_module.PIN: lambda arg: arg["pin"],
            }
        )
        assert await ChatsAPI(client).pin("1@c.us") is False
        assert all(script != chats_module.PIN for script, _ in client.bridge.calls)

    _run(_case())


def test_pin_under_limit_and_already_pinned() -> None:
    async def _case() -> None:
        pinned = {"1@c.us": 0, "2@c.us": 1}
        client = _FakeClient(
            {
                chats_module.GET_CHAT: lambda chat_id: {"id": chat_id, "pin": pinned[chat_id]},
                chats_module.PINNED_COUNT: lambda _: 1,
                chats_module.PIN: lambda arg: arg["pin"],
            }
        )
        api = ChatsAPI(client)
        assert await api.pin("1@c.us") is True
        assert await api.pin("2@c.us") is True
        pin_calls = [arg for script, arg in client.bridge.calls if script == chats_module.PIN]
        assert pin_calls == [{"chatId": "1@c.us", "pin": True}]

    _run(_case())


def test_mute_expiration() -> None:
    async def _case() -> None:
        client = _FakeClient()
        api = ChatsAPI(client)
        await api.mute("1@c.us")
        await api.mute("1@c.us", 1900000000.5)
        assert [arg["expiration"] for _, arg in client.bridge.calls] == [-1, 1900000000]
        with pytest.raises(ValidationError):
            await api.mute("1@c.us", 0)

    _run(_case())


def test_fetch_messages_passes_filters() -> None:
    async def _case() -> None:
        client = _FakeClient(
            {
                chats_module.FETCH_MESSAGES: lambda arg: [
                    {"id": {"fromMe": True, "id": "A", "_serialized": "true_1@c.us_A"}, "type": "chat", "body": "x"}
                ]
            }
        )
        messages = await ChatsAPI(client).fetch_messages("1@c.us", limit=5, from_me=True)
        assert client.bridge.calls[0][1] == {"chatId": "1@c.us", "limit": 5, "fromMe": True}
        assert messages[0].body == "x"

        await ChatsAPI(client).fetch_messages("1@c.us")
        assert client.bridge.calls[1][1] == {"chatId": "1@c.us", "limit": -1, "fromMe": None}

    _run(_case())
