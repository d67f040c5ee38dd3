"""High-level wajs application framework."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import qrcode

from wajs.app import filters as filters_module
from wajs.app.context import Context
from wajs.app.middleware import MiddlewarePipeline
from wajs.app.router import Router
from wajs.client.client import Client
from wajs.core.events import Events
from wajs.core.message import Message
from wajs.infra.logger import get_logger

logger = logging.getLogger(__name__)

ReadyCallback = Callable[["App"], Awaitable[None] | None]


def print_qr(code: str) -> None:
    print("\n=== SCAN THIS QR CODE ===")
    qr = qrcode.QRCode(border=1)
    qr.add_data(code)
    qr.make(fit=True)
    qr.print_ascii(invert=True)
    print("==========================\n")


class App:
    """Decorator-based high-level wrapper around :class:`Client`."""

    def __init__(
        self,
        client: Client | None = None,
        log_level: int = logging.INFO,
        first_match: bool = False,
        **client_options: Any,
    ) -> None:
        self.client = client or Client(**client_options)
        self.log_level = log_level

        self.messages = self.client.messages
        self.chats = self.client.chats
        self.groups = self.client.groups
        self.presence = self.client.presence
        self.media = self.client.media

        self.router = Router(first_match=first_match)
        self.middleware = MiddlewarePipeline()
        self._on_ready_cb: ReadyCallback | None = None

        self._ready_event = asyncio.Event()
        self._stopped_event = asyncio.Event()

        self.client.on(Events.QR_RECEIVED, self._handle_qr)
        self.client.on(Events.CODE_RECEIVED, self._handle_pairing_code)
        self.client.on(Events.READY, self._handle_ready)
        self.client.on(Events.DISCONNECTED, self._handle_disconnected)
        self.client.on(Events.MESSAGE_RECEIVED, self._dispatch_message)

    def _handle_qr(self, code: str) -> None:
        print_qr(code)

    def _handle_pairing_code(self, code: str) -> None:
        print(f"[wajs] Pairing code: {code}")

    def _handle_ready(self) -> None:
        self._ready_event.set()

    def _handle_disconnected(self, reason: Any) -> None:
        logger.info("client disconnected reason=%s", reason, extra={"event": Events.DISCONNECTED.value})
        self._stopped_event.set()

    def on_ready(self, func: ReadyCallback) -> ReadyCallback:
        self._on_ready_cb = func
        return func

    def on(self, event: Any):
        """Subscribes a handler to any raw client event."""
        return self.client.on(event)

    def use(self, middleware):
        """Adds a middleware; also usable as a decorator."""
        return self.middleware.add(middleware)

    def message(self, custom_filter=None):
        return self.router.message(custom_filter)

    def command(self, *prefixes: str):
        return self.message(custom_filter=filters_module.command(*prefixes))

    async def _dispatch_message(self, message: Message) -> None:
        ctx = Context(message=message, app=self)
        await self.middleware.run(ctx, self.router.dispatch)

    async def start(self) -> None:
        """Initializes the client, waits for ``ready`` and runs until disconnected."""
        get_logger("wajs", self.log_level)
        try:
            await self.client.initialize()
            print("[wajs] Page loaded. Waiting for login/auth...")
            await self._ready_event.wait()
            print("[wajs] Client ready.")
            if self._on_ready_cb is not None:
                result = self._on_ready_cb(self)
                if result is not None:
                    await result
            await self._stopped_event.wait()
        finally:
            await self.client.destroy()

    def run(self) -> None:
        try:
            asyncio.run(self.start())
        except KeyboardInterrupt:
            pass
