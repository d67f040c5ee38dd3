"""Message routes for the app layer."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from wajs.app.context import Context

logger = logging.getLogger(__name__)

HandlerFn = Callable[["Context"], Optional[Awaitable[None]]]
Predicate = Callable[["Context"], bool]


@dataclass(frozen=True)
class Route:
    handler: HandlerFn
    predicate: Optional[Predicate] = None
    name: str = ""

    def matches(self, ctx: "Context") -> bool:
        return self.predicate is None or bool(self.predicate(ctx))


class Router:
    """Ordered message routes.

    With ``first_match`` only the earliest matching route runs; otherwise every
    matching route runs in registration order.
    """

    def __init__(self, first_match: bool = False) -> None:
        self.first_match = first_match
        self._routes: list[Route] = []

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    def add(self, handler: HandlerFn, predicate: Optional[Predicate] = None) -> Route:
        route = Route(handler=handler, predicate=predicate, name=getattr(handler, "__name__", repr(handler)))
        self._routes.append(route)
        return route

    def message(self, predicate: Optional[Predicate] = None):
        def decorator(func: HandlerFn) -> HandlerFn:
            self.add(func, predicate)
            return func

        return decorator

    async def dispatch(self, ctx: "Context") -> int:
        """Runs matching handlers and returns how many ran."""
        handled = 0
        for route in self._routes:
            if not route.matches(ctx):
                continue
            pending = route.handler(ctx)
            if pending is not None:
                await pending
            handled += 1
            if self.first_match:
                break
        if not handled:
            logger.debug("no route matched")
        return handled
