from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from wajs.core.chat import Chat
from wajs.core.errors import ValidationError
from wajs.core.factory import create_chat
from wajs.core.message import Message

if TYPE_CHECKING:
    from wajs.client.client import Client

logger = logging.getLogger(__name__)

MAX_PIN_COUNT = 3

GET_CHATS = "async () => await window.WAJS.getChats()"

GET_CHAT = """async (chatId) => {
    const chat = await window.WPP.chat.get(chatId);
    return chat ? await window.WAJS.getChatModel(chat) : null;
}"""

ARCHIVE = """async ({ chatId, archive }) => {
    if (archive) {
        await window.WPP.chat.archive(chatId);
    } else {
        await window.WPP.chat.unarchive(chatId);
    }
    return true;
}"""

PINNED_COUNT = "() => window.WPP.whatsapp.ChatStore.getModelsArray().filter((chat) => chat.pin).length"

PIN = """async ({ chatId, pin }) => {
    const chat = window.WPP.whatsapp.ChatStore.get(chatId);
    if (chat && !!chat.pin === pin) return pin;
    if (pin) {
        await window.WPP.chat.pin(chatId);
    } else {
        await window.WPP.chat.unpin(chatId);
    }
    return pin;
}"""

MUTE = "async ({ chatId, expiration }) => { await window.WPP.chat.mute(chatId, { expiration }); }"

UNMUTE = "async (chatId) => { await window.WPP.chat.unmute(chatId); }"

MARK_UNREAD = "async (chatId) => { await window.WPP.chat.markIsUnread(chatId); }"

SEND_SEEN = "async (chatId) => { await window.WPP.chat.markIsRead(chatId); return true; }"

FETCH_MESSAGES = """async ({ chatId, limit, fromMe }) => {
    const msgs = await window.WPP.chat.getMessages(chatId, { count: limit });
    return msgs
        .filter((m) => !m.isNotification)
        .filter((m) => fromMe === null || m.id.fromMe === fromMe)
        .map((m) => window.WAJS.getMessageModel(m));
}"""

CLEAR_MESSAGES = "async (chatId) => { await window.WPP.chat.clear(chatId); return true; }"

DELETE_CHAT = "async (chatId) => { await window.WPP.chat.delete(chatId); return true; }"


class ChatsAPI:
    def __init__(self, client: Client) -> None:
        self.client = client

    async def get_chats(self) -> list[Chat]:
        raw_chats = await self.client.bridge.execute(GET_CHATS) or []
        return [create_chat(self.client, raw) for raw in raw_chats]

    async def get_chat_by_id(self, chat_id: str) -> Optional[Chat]:
        raw = await self.client.bridge.execute(GET_CHAT, chat_id)
        if not raw:
            return None
        return create_chat(self.client, raw)

    async def archive(self, chat_id: str) -> bool:
        await self.client.bridge.execute(ARCHIVE, {"chatId": chat_id, "archive": True})
        return True

    async def unarchive(self, chat_id: str) -> bool:
        await self.client.bridge.execute(ARCHIVE, {"chatId": chat_id, "archive": False})
        return False

    async def pin(self, chat_id: str) -> bool:
        """Pins ``chat_id``; returns False once the pin limit is reached."""
        chat = await self.get_chat_by_id(chat_id)
        if chat is not None and chat.pinned:
            return True
        if await self.client.bridge.execute(PINNED_COUNT) >= MAX_PIN_COUNT:
            logger.info("pin limit reached, not pinning %s", chat_id)
            return False
        return bool(await self.client.bridge.execute(PIN, {"chatId": chat_id, "pin": True}))

    async def unpin(self, chat_id: str) -> bool:
        return bool(await self.client.bridge.execute(PIN, {"chatId": chat_id, "pin": False}))

    async def mute(self, chat_id: str, unmute_at: Optional[float] = None) -> None:
        """Mutes until the unix timestamp ``unmute_at``, or forever when omitted."""
        if unmute_at is not None and unmute_at <= 0:
            raise ValidationError("unmute_at must be a unix timestamp in the future")
        expiration = int(unmute_at) if unmute_at is not None else -1
        await self.client.bridge.execute(MUTE, {"chatId": chat_id, "expiration": expiration})

    async def unmute(self, chat_id: str) -> None:
        await self.client.bridge.execute(UNMUTE, chat_id)

    async def mark_unread(self, chat_id: str) -> None:
        await self.client.bridge.execute(MARK_UNREAD, chat_id)

    async def send_seen(self, chat_id: str) -> bool:
        return bool(await self.client.bridge.execute(SEND_SEEN, chat_id))

    async def fetch_messages(
        self,
        chat_id: str,
        limit: int | None = None,
        from_me: bool | None = None,
    ) -> list[Message]:
        raw_messages = await self.client.bridge.execute(
            FETCH_MESSAGES,
            {"chatId": chat_id, "limit": limit if limit is not None else -1, "fromMe": from_me},
        ) or []
        return [Message.from_raw(self.client, raw) for raw in raw_messages]

    async def clear_messages(self, chat_id: str) -> bool:
        return bool(await self.client.bridge.execute(CLEAR_MESSAGES, chat_id))

    async def delete(self, chat_id: str) -> bool:
        return bool(await self.client.bridge.execute(DELETE_CHAT, chat_id))
