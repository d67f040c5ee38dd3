import asyncio

from wajs.core.entities import Call, GroupNotification, Location, MessageMedia, Poll, Reaction


def _run(coro):
    return asyncio.run(coro)


def test_location_description_joins_name_and_address() -> None:
    assert Location(1.0, 2.0, name="Office", address="Main St").description == "Office\nMain St"
    assert Location(1.0, 2.0, name="Office").description == "Office"
    assert Location(1.0, 2.0).description is None
    remote = Location(1.0, 2.0, name="Office", url="https://x").to_remote()
    assert remote == {"latitude": 1.0, "longitude": 2.0, "description": "Office", "url": "https://x"}


def test_poll_to_remote_assigns_local_ids() -> None:
    remote = Poll("Lunch?", [" Pizza ", "Sushi"], allow_multiple_answers=True).to_remote()
    assert remote["pollName"] == "Lunch?"
    assert remote["pollOptions"] == [{"name": "Pizza", "localId": 0}, {"name": "Sushi", "localId": 1}]
    assert remote["options"]["allowMultipleAnswers"] is True


def test_message_media_from_bytes_encodes_base64() -> None:
    media = MessageMedia.from_bytes(b"\x00\x01abc", "image/png", filename="a.png")
    assert media.data == "AAFhYmM="
    assert media.filesize == 5
    assert media.to_bytes() == b"\x00\x01abc"
    assert media.to_remote()["mimetype"] == "image/png"


def test_group_notification_from_raw() -> None:
    notification = GroupNotification.from_raw(
        None,
        {
            "id": {"remote": {"_serialized": "1-2@g.us"}, "id": "N1", "_serialized": "false_1-2@g.us_N1"},
            "author": {"_serialized": "1@c.us"},
            "subtype": "add",
            "t": 10,
            "recipients": [{"_serialized": "2@c.us"}, "3@c.us"],
        },
    )
    assert notification.chat_id == "1-2@g.us"
    assert notification.author == "1@c.us"
    assert notification.type == "add"
    assert notification.recipient_ids == ["2@c.us", "3@c.us"]


def test_reaction_and_call_from_raw() -> None:
    reaction = Reaction.from_raw(
        None,
        {"msgKey": {"id": "R1"}, "reactionText": "👍", "senderUserJid": "1@c.us", "parentMsgKey": {"id": "M1"}, "timestamp": 5},
    )
    assert reaction.reaction == "👍"
    assert reaction.sender_id == "1@c.us"
    assert reaction.msg_id == {"id": "M1"}

    call = Call.from_raw(None, {"id": "C1", "peerJid": "1@c.us", "isVideo": True, "outgoing": False, "offerTime": 7})
    assert call.from_ == "1@c.us"
    assert call.is_video is True
    assert call.timestamp == 7


def test_call_reject_goes_through_bridge() -> None:
    class _FakeBridge:
        def __init__(self) -> None:
            self.calls = []

        async def execute(self, script, arg=None):
            self.calls.append((script, arg))
            return True

    class _FakeClient:
        def __init__(self) -> None:
            self.bridge = _FakeBridge()

    async def _case() -> None:
        client = _FakeClient()
        call = Call.from_raw(client, {"id": "C1", "peerJid": "1@c.us"})
        await call.reject()
        assert client.bridge.calls[0][1] == "C1"
        assert "reject" in client.bridge.calls[0][0]

    _run(_case())
