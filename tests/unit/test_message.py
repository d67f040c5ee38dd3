import asyncio
from typing import Any

import pytest

from wajs.core.events import MessageAck, MessageTypes
from wajs.core.message import Message


def _run(coro):
    return asyncio.run(coro)


def _raw(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": {"fromMe": False, "remote": "628111@c.us", "id": "ABCDEF0123", "_serialized": "false_628111@c.us_ABCDEF0123"},
        "type": "chat",
        "body": "hello",
        "t": 1700000000,
        "from": "628111@c.us",
        "to": "628222@c.us",
        "ack": 1,
    }
    data.update(overrides)
    return data


@pytest.mark.parametrize(
    ("media_key", "direct_path", "expected"),
    [
        ("key", "/v/t62", True),
        ("key", None, False),
        (None, "/v/t62", False),
        (None, None, False),
    ],
)
def test_has_media_requires_media_key_and_direct_path(media_key, direct_path, expected) -> None:
    message = Message.from_raw(None, _raw(mediaKey=media_key, directPath=direct_path, caption="cap"))
    assert message.has_media is expected
    assert message.body == ("cap" if expected else "hello")


def test_is_status_from_flag_or_status_broadcast_remote() -> None:
    flagged = Message.from_raw(None, _raw(isStatusV3=True))
    remote = _raw()
    remote["id"] = {**remote["id"], "remote": "status@broadcast"}
    by_remote = Message.from_raw(None, remote)
    plain = Message.from_raw(None, _raw())

    assert flagged.is_status
    assert by_remote.is_status
    assert not plain.is_status


def test_raw_data_is_an_unmodified_copy_of_the_snapshot() -> None:
    raw = _raw(mentionedJidList=[{"_serialized": "1@c.us"}], extraField={"nested": [1, 2]})
    message = Message.from_raw(None, raw)
    raw["extraField"]["nested"].append(3)

    assert message.raw_data["extraField"] == {"nested": [1, 2]}
    assert message.raw_data["body"] == "hello"
    assert message.mentioned_ids == ["1@c.us"]


def test_mutating_raw_data_leaves_message_snapshot_intact() -> None:
    message = Message.from_raw(None, _raw(extraField={"nested": [1, 2]}))
    exported = message.raw_data
    exported["extraField"]["nested"].append(3)
    exported["body"] = "changed"

    assert message.raw_data["extraField"] == {"nested": [1, 2]}
    assert message.raw_data["body"] == "hello"
    assert message.raw_data is not exported


def test_poll_creation_fields() -> None:
    message = Message.from_raw(
        None,
        _raw(
            type=MessageTypes.POLL_CREATION.value,
            body="",
            pollName="Lunch?",
            pollOptions=[{"name": "Pizza", "localId": 0}, {"name": "Sushi", "localId": 1}],
            pollSelectableOptionsCount=0,
        ),
    )
    assert message.body == "Lunch?"
    assert message.poll_name == "Lunch?"
    assert [o["name"] for o in message.poll_options] == ["Pizza", "Sushi"]
    assert message.allow_multiple_answers is True


def test_location_and_vcard_payloads() -> None:
    location = Message.from_raw(
        None,
        _raw(type="location", lat=-6.2, lng=106.8, loc="Monas\nJakarta", clientUrl="https://maps.example"),
    )
    assert location.location is not None
    assert location.location.name == "Monas"
    assert location.location.address == "Jakarta"
    assert location.location.url == "https://maps.example"

    multi = Message.from_raw(None, _raw(type="multi_vcard", vcardList=[{"vcard": "A"}, {"vcard": "B"}]))
    assert multi.v_cards == ["A", "B"]


def test_group_invite_payload() -> None:
    message = Message.from_raw(
        None,
        _raw(type="groups_v4_invite", inviteCode="CODE", inviteCodeExp=123, inviteGrp="1-2@g.us", inviteGrpName="Team"),
    )
    assert message.invite_v4 == {
        "invite_code": "CODE",
        "invite_code_exp": 123,
        "group_id": "1-2@g.us",
        "group_name": "Team",
        "from_id": "628111@c.us",
        "to_id": "628222@c.us",
    }


def test_chat_id_depends_on_direction() -> None:
    incoming = Message.from_raw(None, _raw())
    outgoing = _raw()
    outgoing["id"] = {**outgoing["id"], "fromMe": True}
    sent = Message.from_raw(None, outgoing)
    assert incoming.chat_id == "628111@c.us"
    assert sent.chat_id == "628222@c.us"


def test_message_missing_id_is_tolerated() -> None:
    message = Message.from_raw(None, {"type": "chat", "body": "x"})
    assert message.serialized_id is None
    assert message.from_me is False


def test_reply_and_reload_delegate_to_client() -> None:
    class _FakeMessages:
        def __init__(self) -> None:
            self.sent: list[tuple[Any, ...]] = []

        async def send_message(self, chat_id, content, options=None, quoted_message_id=None):
            self.sent.append((chat_id, content, quoted_message_id))
            return "sent"

        async def fetch_raw(self, message_id):
            return _raw(body="edited", id={"fromMe": False, "remote": "628111@c.us", "id": "ABCDEF0123", "_serialized": message_id})

    class _FakeClient:
        def __init__(self) -> None:
            self.messages = _FakeMessages()

    async def _case() -> None:
        client = _FakeClient()
        message = Message.from_raw(client, _raw())
        assert await message.reply("pong") == "sent"
        assert client.messages.sent == [("628111@c.us", "pong", "false_628111@c.us_ABCDEF0123")]

        reloaded = await message.reload()
        assert reloaded is message
        assert message.body == "edited"
        assert message.raw_data["body"] == "edited"

    _run(_case())


def test_ack_compares_with_ack_levels() -> None:
    message = Message.from_raw(None, _raw(ack=3))
    assert message.ack == MessageAck.ACK_READ
    assert message.ack > MessageAck.ACK_SERVER
