"""Per-client event emitter."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


def _event_name(event: Any) -> str:
    return getattr(event, "value", event)


class EventEmitter:
    def __init__(self) -> None:
        self._handlers: dict[str, list[tuple[Handler, bool]]] = {}

    def on(self, event: Any, handler: Handler | None = None):
        """Registers ``handler`` for ``event``; usable as a decorator when ``handler`` is omitted."""
        if handler is None:
            def decorator(func: Handler) -> Handler:
                self._add(event, func, once=False)
                return func

            return decorator
        self._add(event, handler, once=False)
        return handler

    def once(self, event: Any, handler: Handler | None = None):
        if handler is None:
            def decorator(func: Handler) -> Handler:
                self._add(event, func, once=True)
                return func

            return decorator
        self._add(event, handler, once=True)
        return handler

    def off(self, event: Any, handler: Handler | None = None) -> None:
        name = _event_name(event)
        if handler is None:
            self._handlers.pop(name, None)
            return
        self._handlers[name] = [entry for entry in self._handlers.get(name, []) if entry[0] is not handler]

    def listener_count(self, event: Any) -> int:
        return len(self._handlers.get(_event_name(event), []))

    def _add(self, event: Any, handler: Handler, once: bool) -> None:
        self._handlers.setdefault(_event_name(event), []).append((handler, once))

    async def emit(self, event: Any, *args: Any) -> bool:
        """Calls every handler in registration order; a failing handler does not stop the rest."""
        name = _event_name(event)
        entries = list(self._handlers.get(name, []))
        if not entries:
            return False

        self._handlers[name] = [entry for entry in self._handlers[name] if not entry[1]]
        for handler, _ in entries:
            try:
                result = handler(*args)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("handler failed for event %s", name, extra={"event": name})
        return True
