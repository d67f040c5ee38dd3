import asyncio
from typing import Any, Callable

from wajs.client import labels as labels_module
from wajs.client import profile as profile_module
from wajs.client.labels import LabelsAPI
from wajs.client.profile import ProfileAPI
from wajs.core.entities import MessageMedia


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


def test_labels_and_label_chats() -> None:
    async def _case() -> None:
        client = _FakeClient(
            {
                labels_module.GET_LABELS: lambda _: [{"id": "1", "name": "New", "hexColor": "#ff0000"}],
                labels_module.GET_LABEL: lambda label_id: None,
                labels_module.GET_CHATS_BY_LABEL: lambda label_id: [{"id": {"_serialized": "1@c.us"}}, None],
            }
        )
        api = LabelsAPI(client)
        labels = await api.get_labels()
        assert labels[0].name == "New"
        assert labels[0].hex_color == "#ff0000"
        assert await api.get_label_by_id("9") is None
        chats = await api.get_chats_by_label_id("1")
        assert [c.id for c in chats] == ["1@c.us"]

        await api.add_or_remove_labels([1, "2"], ["1@c.us"])
        assert client.bridge.calls[-1][1] == {"labelIds": ["1", "2"], "chatIds": ["1@c.us"]}

    _run(_case())


def test_profile_settings_payloads() -> None:
    async def _case() -> None:
        client = _FakeClient({profile_module.AUTO_DOWNLOAD: lambda arg: arg["flag"]})
        api = ProfileAPI(client)
        assert await api.set_auto_download_photos(True) is True
        assert await api.set_auto_download_videos(False) is False
        kinds = [arg["kind"] for _, arg in client.bridge.calls]
        assert kinds == ["Photos", "Videos"]

        await api.set_profile_picture(MessageMedia(mimetype="image/jpeg", data="AAAA"))
        assert client.bridge.calls[-1][1]["mimetype"] == "image/jpeg"

    _run(_case())
