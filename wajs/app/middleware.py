"""Middleware chain around route dispatch.

A middleware is ``async def mw(ctx, nxt)``; it runs the rest of the chain by
awaiting ``nxt()`` and stops it by returning without doing so.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from functools import partial
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wajs.app.context import Context

NextFn = Callable[[], Awaitable[Any]]
Middleware = Callable[["Context", NextFn], Awaitable[None]]
Endpoint = Callable[["Context"], Awaitable[Any]]


class MiddlewarePipeline:
    def __init__(self) -> None:
        self._middleware: list[Middleware] = []

    def __len__(self) -> int:
        return len(self._middleware)

    def add(self, middleware: Middleware) -> Middleware:
        self._middleware.append(middleware)
        return middleware

    def _compose(self, ctx: "Context", endpoint: Endpoint) -> NextFn:
        chain: NextFn = partial(endpoint, ctx)
        for middleware in reversed(self._middleware):
            chain = partial(middleware, ctx, chain)
        return chain

    async def run(self, ctx: "Context", endpoint: Endpoint) -> None:
        await self._compose(ctx, endpoint)()
