"""Per-message handler context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from wajs.core.message import Message

if TYPE_CHECKING:
    from wajs.app.app import App


@dataclass
class Context:
    message: Message
    app: "App"

    @property
    def text(self) -> Optional[str]:
        return self.message.body or None

    @property
    def from_(self) -> Optional[str]:
        """The chat the message belongs to."""
        return self.message.chat_id

    @property
    def sender(self) -> Optional[str]:
        return self.message.author or self.message.from_

    async def reply(self, content: Any, options: Any = None) -> Message:
        return await self.message.reply(content, options=options)

    async def react(self, emoji: str) -> None:
        await self.message.react(emoji)

    async def forward(self, chat_id: str) -> None:
        await self.message.forward(chat_id)

    async def delete(self, everyone: bool = True) -> None:
        await self.message.delete(everyone=everyone)
