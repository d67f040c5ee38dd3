"""Composable message predicates for :meth:`wajs.app.App.message`.

Filters combine with ``&``, ``|`` and ``~``::

    @app.message(filters.group & ~filters.from_me & filters.regex(r"^!ban\\b"))
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Optional

from wajs.core.wid import is_group_wid, is_user_wid

if TYPE_CHECKING:
    from wajs.app.context import Context

Predicate = Callable[["Context"], bool]


class Filter:
    __slots__ = ("predicate", "name")

    def __init__(self, predicate: Predicate, name: Optional[str] = None) -> None:
        self.predicate = predicate
        self.name = name or getattr(predicate, "__name__", "filter")

    def __call__(self, ctx: "Context") -> bool:
        return bool(self.predicate(ctx))

    def __and__(self, other: "Filter") -> "Filter":
        return Filter(lambda ctx: self(ctx) and other(ctx), f"({self.name} & {other.name})")

    def __or__(self, other: "Filter") -> "Filter":
        return Filter(lambda ctx: self(ctx) or other(ctx), f"({self.name} | {other.name})")

    def __invert__(self) -> "Filter":
        return Filter(lambda ctx: not self(ctx), f"~{self.name}")

    def __repr__(self) -> str:
        return f"Filter({self.name})"


text = Filter(lambda ctx: bool(ctx.text), "text")
private = Filter(lambda ctx: is_user_wid(ctx.from_ or ""), "private")
group = Filter(lambda ctx: is_group_wid(ctx.from_ or ""), "group")
media = Filter(lambda ctx: bool(ctx.message.has_media), "media")
from_me = Filter(lambda ctx: bool(ctx.message.from_me), "from_me")


def regex(pattern: str, flags: int = 0) -> Filter:
    compiled = re.compile(pattern, flags)
    return Filter(lambda ctx: ctx.text is not None and compiled.search(ctx.text) is not None, f"regex({pattern!r})")


def command(*prefixes: str) -> Filter:
    """Matches text starting with any of ``prefixes``."""
    return Filter(lambda ctx: bool(ctx.text) and ctx.text.startswith(prefixes), f"command{prefixes!r}")


def message_type(*types: str) -> Filter:
    wanted = frozenset(getattr(t, "value", t) for t in types)
    return Filter(lambda ctx: ctx.message.type in wanted, "message_type")
