import asyncio
from typing import Any

from wajs.client.client import Client
from wajs.core.events import Events
from wajs.infra import scripts
from wajs.infra.bridge import wrap_script


class _FakeHandle:
    def __init__(self, value: Any) -> None:
        self.value = value

    async def json_value(self) -> Any:
        return self.value


class _FakePage:
    """Answers bridge calls by matching the wrapped script against known sources."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = {wrap_script(script): value for script, value in responses.items()}
        self.evaluated: list[str] = []
        self.exposed: dict[str, Any] = {}
        self.waited: list[str] = []
        self.closed = False

    def ran(self, script: str) -> bool:
        return wrap_script(script) in self.evaluated

    def is_closed(self) -> bool:
        return self.closed

    async def evaluate(self, wrapped: str, arg: Any = None) -> Any:
        self.evaluated.append(wrapped)
        return {"ok": True, "value": self.responses.get(wrapped)}

    async def expose_function(self, name: str, callback: Any) -> None:
        self.exposed[name] = callback

    async def wait_for_function(self, expression: str, arg: Any = None, timeout: float | None = None) -> _FakeHandle:
        self.waited.append(expression)
        return _FakeHandle(True)

    async def close(self) -> None:
        self.closed = True


def _run(coro):
    return asyncio.run(coro)


def _page(registered: Any) -> _FakePage:
    return _FakePage(
        {
            scripts.IS_REGISTERED: registered,
            scripts.STREAM_INFO: "NORMAL",
            scripts.CLIENT_INFO: {"pushname": "Bot", "platform": "web", "wid": {"_serialized": "628111@c.us"}},
            scripts.WWEB_VERSION: "2.3000.1015",
        }
    )


def _record(client: Client) -> list[tuple[str, tuple[Any, ...]]]:
    seen: list[tuple[str, tuple[Any, ...]]] = []
    for event in (Events.AUTHENTICATED, Events.AUTHENTICATION_FAILURE):
        client.on(event, lambda *args, _name=event.value: seen.append((_name, args)))
    return seen


def test_unregistered_session_registers_auth_code_listener() -> None:
    async def _case() -> None:
        client = Client()
        seen = _record(client)
        page = _page(False)
        await client.initialize(page)

        assert set(page.exposed) == set(client.normalizer.bindings)
        assert page.ran(scripts.REGISTER_AUTH_CODE_LISTENER)
        assert page.waited == [scripts.WAIT_REGISTERED]
        assert seen == [("authenticated", ("NORMAL",))]
        assert page.ran(scripts.REGISTER_STORE_LISTENERS)
        assert client.info.me == "628111@c.us"
        await client.destroy()
        assert page.closed

    _run(_case())


def test_registered_session_skips_pairing() -> None:
    async def _case() -> None:
        client = Client()
        seen = _record(client)
        page = _page(True)
        await client.initialize(page)
        assert not page.ran(scripts.REGISTER_AUTH_CODE_LISTENER)
        assert [name for name, _ in seen] == ["authenticated"]
        await client.destroy()

    _run(_case())


def test_unknown_registration_emits_auth_failure_first() -> None:
    async def _case() -> None:
        client = Client()
        seen = _record(client)
        page = _page(None)
        await client.initialize(page)
        assert seen == [("auth_failure", ("NORMAL",)), ("authenticated", ("NORMAL",))]
        await client.destroy()

    _run(_case())


def test_bindings_feed_events_through_the_pump() -> None:
    async def _case() -> None:
        client = Client()
        received: list[str] = []
        client.on(Events.MESSAGE_RECEIVED, lambda message: received.append(message.body))
        page = _page(True)
        await client.initialize(page)

        await page.exposed["onAddMessageEvent"]({"id": {"fromMe": False, "id": "X"}, "type": "chat", "body": "hello"})
        await client.pump.join()
        assert received == ["hello"]
        await client.destroy()

    _run(_case())


def test_calls_after_destroy_fail_and_state_is_none() -> None:
    async def _case() -> None:
        client = Client()
        page = _page(True)
        await client.initialize(page)
        assert await client.get_wweb_version() == "2.3000.1015"
        await client.destroy()
        assert await client.get_state() is None
        assert not client.pump.running

    _run(_case())


def test_logout_removes_session_directory(tmp_path) -> None:
    async def _case() -> None:
        session_dir = tmp_path / "main"
        session_dir.mkdir()
        (session_dir / "Default").write_text("x")
        client = Client(session_name="main", session_path=str(tmp_path))
        page = _page(True)
        await client.initialize(page)
        await client.logout()
        assert page.ran(scripts.LOGOUT)
        assert page.closed
        assert not session_dir.exists()

    _run(_case())


def test_options_merge_over_defaults() -> None:
    client = Client(headless=False, qr_max_retries=3)
    assert client.options["headless"] is False
    assert client.options["qr_max_retries"] == 3
    assert client.options["web_url"].startswith("https://web.whatsapp.com")
    _run(client.media.close())
