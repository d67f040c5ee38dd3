import asyncio
import re
from typing import Any

import pytest

from wajs.client.event_normalizer import ACCEPTED_STATES, EventNormalizer, classify_group_notification
from wajs.core.entities import GroupNotification
from wajs.core.events import Events, WAState
from wajs.core.message import Message
from wajs.infra import scripts


class _FakeBridge:
    def __init__(self, value: Any = None) -> None:
        self.value = value
        self.calls: list[tuple[str, Any]] = []

    async def execute(self, script: str, arg: Any = None) -> Any:
        self.calls.append((script, arg))
        return self.value


class _FakeClient:
    def __init__(self, **options: Any) -> None:
        self.options = {"qr_max_retries": 0, "takeover_on_conflict": False, "takeover_timeout_ms": 0, **options}
        self.bridge = _FakeBridge()
        self.emitted: list[tuple[str, tuple[Any, ...]]] = []
        self.destroyed = 0

    async def emit(self, event: Any, *args: Any) -> bool:
        self.emitted.append((event.value, args))
        return True

    async def destroy(self) -> None:
        self.destroyed += 1


def _run(coro):
    return asyncio.run(coro)


def _msg(unique_id: str = "M1", *, from_me: bool = False, **extra: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": {"fromMe": from_me, "remote": "1@c.us", "id": unique_id, "_serialized": f"{from_me}_1@c.us_{unique_id}".lower()},
        "type": "chat",
        "body": "hi",
        "from": "1@c.us",
        "to": "2@c.us",
    }
    data.update(extra)
    return data


def _names(client: _FakeClient) -> list[str]:
    return [name for name, _ in client.emitted]


def test_incoming_message_emits_create_before_received() -> None:
    async def _case() -> None:
        client = _FakeClient()
        normalizer = EventNormalizer(client)
        await normalizer.on_add_message(_msg())
        assert _names(client) == ["message_create", "message"]
        assert isinstance(client.emitted[0][1][0], Message)

    _run(_case())


def test_own_message_emits_only_create() -> None:
    async def _case() -> None:
        client = _FakeClient()
        await EventNormalizer(client).on_add_message(_msg(from_me=True))
        assert _names(client) == ["message_create"]

    _run(_case())


@pytest.mark.parametrize(
    ("subtype", "event"),
    [
        ("add", Events.GROUP_JOIN),
        ("invite", Events.GROUP_JOIN),
        ("linked_group_join", Events.GROUP_JOIN),
        ("remove", Events.GROUP_LEAVE),
        ("leave", Events.GROUP_LEAVE),
        ("promote", Events.GROUP_ADMIN_CHANGED),
        ("demote", Events.GROUP_ADMIN_CHANGED),
        ("created_membership_requests", Events.GROUP_MEMBERSHIP_REQUEST),
        ("subject", Events.GROUP_UPDATE),
        (None, Events.GROUP_UPDATE),
    ],
)
def test_classify_group_notification(subtype, event) -> None:
    assert classify_group_notification(subtype) is event


def test_gp2_message_emits_single_group_event() -> None:
    async def _case() -> None:
        client = _FakeClient()
        await EventNormalizer(client).on_add_message(
            _msg(type="gp2", subtype="promote", author="1@c.us", recipients=["2@c.us"], id={"remote": "1-2@g.us", "id": "N"})
        )
        assert _names(client) == ["group_admin_changed"]
        assert isinstance(client.emitted[0][1][0], GroupNotification)

    _run(_case())


def test_revoke_pairs_with_cached_previous_message() -> None:
    async def _case() -> None:
        client = _FakeClient()
        normalizer = EventNormalizer(client)
        await normalizer.on_change_message(_msg("M1", body="original"))
        await normalizer.on_change_message_type(_msg("M1", type="revoked", body=""))

        name, args = client.emitted[-1]
        assert name == "message_revoke_everyone"
        revoked, previous = args
        assert revoked.type == "revoked"
        assert previous is not None
        assert previous.body == "original"

    _run(_case())


def test_revoke_without_matching_cache_reports_none() -> None:
    async def _case() -> None:
        client = _FakeClient()
        normalizer = EventNormalizer(client)
        await normalizer.on_change_message(_msg("OTHER", body="unrelated"))
        await normalizer.on_change_message_type(_msg("M1", type="revoked"))
        assert client.emitted[-1][0] == "message_revoke_everyone"
        assert client.emitted[-1][1][1] is None

    _run(_case())


def test_revoked_change_does_not_overwrite_cache() -> None:
    async def _case() -> None:
        client = _FakeClient()
        normalizer = EventNormalizer(client)
        await normalizer.on_change_message(_msg("M1", body="keep"))
        await normalizer.on_change_message(_msg("M1", type="revoked"))
        assert normalizer.last_message["body"] == "keep"

    _run(_case())


def test_non_revoke_type_change_is_ignored() -> None:
    async def _case() -> None:
        client = _FakeClient()
        await EventNormalizer(client).on_change_message_type(_msg("M1", type="image"))
        assert client.emitted == []

    _run(_case())


def test_identity_change_emits_contact_changed() -> None:
    async def _case() -> None:
        client = _FakeClient()
        await EventNormalizer(client).on_change_message(
            _msg("N", type="gp2", subtype="modify", author="111@c.us", recipients=["222@c.us"])
        )
        name, args = client.emitted[0]
        assert name == "contact_changed"
        assert args[1:] == ("111@c.us", "222@c.us", False)

    _run(_case())


def test_remove_requires_new_message_flag() -> None:
    async def _case() -> None:
        client = _FakeClient()
        normalizer = EventNormalizer(client)
        await normalizer.on_remove_message(_msg(isNewMsg=False))
        await normalizer.on_remove_message(_msg(isNewMsg=True))
        assert _names(client) == ["message_revoke_me"]

    _run(_case())


def test_edit_only_emits_when_body_changes() -> None:
    async def _case() -> None:
        client = _FakeClient()
        normalizer = EventNormalizer(client)
        await normalizer.on_edit_message(_msg(), "same", "same")
        await normalizer.on_edit_message(_msg(), "new", "old")
        assert _names(client) == ["message_edit"]
        assert client.emitted[0][1][1:] == ("new", "old")

    _run(_case())


@pytest.mark.parametrize("state", ["CONNECTED", "OPENING", "PAIRING", "TIMEOUT"])
def test_accepted_states_only_emit_change_state(state) -> None:
    async def _case() -> None:
        client = _FakeClient()
        await EventNormalizer(client).on_app_state_changed(state)
        assert client.emitted == [("change_state", (state,))]
        assert client.destroyed == 0

    _run(_case())


@pytest.mark.parametrize("state", [state.value for state in WAState if state.value not in ACCEPTED_STATES])
def test_unaccepted_state_disconnects_and_tears_down(state) -> None:
    async def _case() -> None:
        client = _FakeClient()
        await EventNormalizer(client).on_app_state_changed(state)
        assert client.emitted == [("change_state", (state,)), ("disconnected", (state,))]
        assert client.destroyed == 1

    _run(_case())


def test_conflict_with_takeover_schedules_takeover_and_stays_connected() -> None:
    async def _case() -> None:
        client = _FakeClient(takeover_on_conflict=True, takeover_timeout_ms=0)
        normalizer = EventNormalizer(client)
        await normalizer.on_app_state_changed("CONFLICT")
        await asyncio.sleep(0.01)
        assert _names(client) == ["change_state"]
        assert client.destroyed == 0
        assert len(client.bridge.calls) == 1
        normalizer.cancel_pending()

    _run(_case())


def test_conflict_without_takeover_disconnects() -> None:
    async def _case() -> None:
        client = _FakeClient()
        await EventNormalizer(client).on_app_state_changed("CONFLICT")
        assert _names(client) == ["change_state", "disconnected"]

    _run(_case())


def test_qr_retries_exhausted_disconnects() -> None:
    async def _case() -> None:
        client = _FakeClient(qr_max_retries=2)
        normalizer = EventNormalizer(client)
        for _ in range(3):
            await normalizer.on_auth_code_change({"fullCode": "ref,key"})
        assert _names(client) == ["qr", "qr", "qr", "disconnected"]
        assert client.emitted[0][1] == ("ref,key,1",)
        assert client.emitted[-1][1] == ("Max qrcode retries reached",)
        assert client.destroyed == 1

    _run(_case())


def test_pairing_number_requests_link_code() -> None:
    async def _case() -> None:
        client = _FakeClient(pairing_number="628111")
        client.bridge.value = "ABCD-EFGH"
        await EventNormalizer(client).on_auth_code_change({"fullCode": "ref"})
        assert client.emitted == [("code", ("ABCD-EFGH",))]
        assert client.bridge.calls[0][1] == "628111"

    _run(_case())


def test_loading_screen_and_ready() -> None:
    async def _case() -> None:
        client = _FakeClient()
        normalizer = EventNormalizer(client)
        await normalizer.on_main_loaded({"inProgress": True, "progress": 40})
        await normalizer.on_main_loaded({"inProgress": False})
        await normalizer.on_main_ready()
        assert client.emitted == [
            ("loading_screen", (40, "40% Organizing your messages")),
            ("loading_screen", ("", "Loading Your Chats")),
            ("ready", ()),
        ]

    _run(_case())


def test_logout_emits_navigation_reason() -> None:
    async def _case() -> None:
        client = _FakeClient()
        await EventNormalizer(client).on_logout()
        assert client.emitted == [("disconnected", ("NAVIGATION",))]

    _run(_case())


def test_dispatch_swallows_handler_failures_and_unknown_bindings() -> None:
    async def _case() -> None:
        client = _FakeClient()
        normalizer = EventNormalizer(client)
        await normalizer.dispatch("onAddMessageEvent", (None,))
        await normalizer.dispatch("onUnknownEvent", ())
        await normalizer.dispatch("onMainReadyEvent", ())
        assert _names(client) == ["ready"]

    _run(_case())


def test_chat_events_carry_snapshots() -> None:
    async def _case() -> None:
        client = _FakeClient()
        normalizer = EventNormalizer(client)
        await normalizer.on_archive_chat({"id": {"_serialized": "1@c.us"}, "archive": True}, True, False)
        name, (chat, current, previous) = client.emitted[0]
        assert name == "chat_archived"
        assert chat.id == "1@c.us"
        assert (current, previous) == (True, False)

    _run(_case())


def test_every_page_listener_has_a_handler() -> None:
    normalizer = EventNormalizer(_FakeClient())
    listeners = scripts.REGISTER_STORE_LISTENERS + scripts.REGISTER_AUTH_CODE_LISTENER + scripts.REGISTER_LOGOUT_LISTENER
    called = set(re.findall(r"window\.(on[A-Za-z]+)\(", listeners))
    assert called
    assert set(normalizer.bindings) == called
