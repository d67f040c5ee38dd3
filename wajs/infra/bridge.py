"""Playwright page bridge: runs functions against the live web app and returns plain results."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from playwright.async_api import Error as PlaywrightError

from wajs.core.errors import BridgeError, SessionClosedError

logger = logging.getLogger(__name__)

# Remote exceptions never cross the boundary as driver errors; they come back
# as a tagged record so their name survives.
_ENVELOPE = """async (__arg) => {
    try {
        const value = await (%s)(__arg);
        return { ok: true, value: value === undefined ? null : value };
    } catch (err) {
        const name = (err && err.name) || (typeof err === 'string' ? 'Error' : 'UnknownError');
        const message = (err && err.message) || (typeof err === 'string' ? err : String(err));
        return { ok: false, name, message };
    }
}"""


def wrap_script(script: str) -> str:
    return _ENVELOPE % script.strip()


class RemoteBridge:
    """Single-page boundary for one client.

    Calls are neither retried nor bounded by a timeout. After :meth:`close`, or
    once the page reports closed, every call raises :class:`SessionClosedError`.
    """

    def __init__(self, page: Any) -> None:
        self.page = page
        self._closed = False

    @property
    def is_closed(self) -> bool:
        if self._closed:
            return True
        is_closed = getattr(self.page, "is_closed", None)
        return bool(is_closed()) if callable(is_closed) else False

    def _ensure_open(self) -> None:
        if self.is_closed:
            raise SessionClosedError()

    async def execute(self, script: str, arg: Any = None) -> Any:
        self._ensure_open()
        try:
            result = await self.page.evaluate(wrap_script(script), arg)
        except PlaywrightError as exc:
            if self.is_closed:
                raise SessionClosedError(exc.message) from exc
            raise BridgeError(exc.name or "PlaywrightError", exc.message) from exc

        if not isinstance(result, dict) or "ok" not in result:
            raise BridgeError("MalformedResult", f"unexpected bridge payload: {result!r}")
        if not result["ok"]:
            logger.debug("remote call failed name=%s message=%s", result.get("name"), result.get("message"))
            raise BridgeError(result.get("name") or "Error", result.get("message") or "")
        return result.get("value")

    async def expose_function(self, name: str, callback: Callable[..., Any]) -> None:
        self._ensure_open()
        try:
            await self.page.expose_function(name, callback)
        except PlaywrightError as exc:
            raise BridgeError(exc.name or "PlaywrightError", exc.message) from exc

    async def wait_for_function(self, expression: str, arg: Any = None) -> Any:
        """Waits until ``expression`` is truthy in the page, without a deadline."""
        self._ensure_open()
        try:
            handle = await self.page.wait_for_function(expression, arg=arg, timeout=0)
        except PlaywrightError as exc:
            if self.is_closed:
                raise SessionClosedError(exc.message) from exc
            raise BridgeError(exc.name or "PlaywrightError", exc.message) from exc
        return await handle.json_value()

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        is_closed = getattr(self.page, "is_closed", None)
        if callable(is_closed) and is_closed():
            return
        try:
            await self.page.close()
        except PlaywrightError as exc:  # pragma: no cover
            logger.debug("page close failed: %s", exc)
