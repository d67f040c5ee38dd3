import asyncio
from typing import Any

import pytest

from wajs.client import interface
from wajs.client.interface import InterfaceAPI
from wajs.core.errors import ValidationError


class _FakeBridge:
    def __init__(self, result: Any = None) -> None:
        self.result = result
        self.calls: list[tuple[str, Any]] = []

    async def execute(self, script: str, arg: Any = None) -> Any:
        self.calls.append((script, arg))
        return self.result


class _FakeClient:
    def __init__(self, result: Any = None) -> None:
        self.bridge = _FakeBridge(result)


def _run(coro):
    return asyncio.run(coro)


@pytest.mark.parametrize(
    "method, script",
    [
        ("open_chat_window", interface.OPEN_CHAT_WINDOW),
        ("open_chat_drawer", interface.OPEN_CHAT_DRAWER),
        ("open_chat_search", interface.OPEN_CHAT_SEARCH),
    ],
)
def test_chat_commands_send_chat_id(method, script) -> None:
    async def _case() -> None:
        client = _FakeClient()
        await getattr(InterfaceAPI(client), method)("123@c.us")
        assert client.bridge.calls == [(script, {"chatId": "123@c.us"})]

    _run(_case())


def test_message_commands_report_missing_message() -> None:
    async def _case() -> None:
        client = _FakeClient(result=False)
        api = InterfaceAPI(client)
        assert await api.open_chat_window_at("true_1@c.us_ABC") is False
        assert await api.open_message_drawer("true_1@c.us_ABC") is False
        assert client.bridge.calls == [
            (interface.OPEN_CHAT_WINDOW_AT, {"msgId": "true_1@c.us_ABC"}),
            (interface.OPEN_MESSAGE_DRAWER, {"msgId": "true_1@c.us_ABC"}),
        ]

    _run(_case())


def test_close_right_drawer_takes_no_argument() -> None:
    async def _case() -> None:
        client = _FakeClient()
        await InterfaceAPI(client).close_right_drawer()
        assert client.bridge.calls == [(interface.CLOSE_RIGHT_DRAWER, None)]

    _run(_case())


def test_get_features_defaults_to_empty_dict() -> None:
    async def _case() -> None:
        assert await InterfaceAPI(_FakeClient()).get_features() == {}
        flags = {"MD_BACKEND": True}
        assert await InterfaceAPI(_FakeClient(result=flags)).get_features() == flags

    _run(_case())


def test_check_feature_status_sends_single_feature() -> None:
    async def _case() -> None:
        client = _FakeClient(result=1)
        assert await InterfaceAPI(client).check_feature_status("MD_BACKEND") is True
        assert client.bridge.calls == [(interface.CHECK_FEATURE_STATUS, {"feature": "MD_BACKEND"})]

    _run(_case())


def test_enable_and_disable_features_toggle_flag() -> None:
    async def _case() -> None:
        client = _FakeClient()
        api = InterfaceAPI(client)
        await api.enable_features(["VOIP_INDIVIDUAL_OUTGOING", "MEDIA_PICKER"])
        await api.disable_features("MEDIA_PICKER")
        assert client.bridge.calls == [
            (interface.SET_FEATURES, {"features": ["VOIP_INDIVIDUAL_OUTGOING", "MEDIA_PICKER"], "enabled": True}),
            (interface.SET_FEATURES, {"features": ["MEDIA_PICKER"], "enabled": False}),
        ]

    _run(_case())


@pytest.mark.parametrize("features", [[], [""], ["OK", 3]])
def test_invalid_feature_lists_rejected_before_dispatch(features) -> None:
    async def _case() -> None:
        client = _FakeClient()
        with pytest.raises(ValidationError):
            await InterfaceAPI(client).enable_features(features)
        assert client.bridge.calls == []

    _run(_case())


def test_client_exposes_interface_api() -> None:
    from wajs.client.client import Client

    async def _case() -> None:
        client = Client()
        assert isinstance(client.interface, InterfaceAPI)
        assert client.interface.client is client
        await client.media.close()

    _run(_case())
