from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from wajs.core.errors import ValidationError

if TYPE_CHECKING:
    from wajs.client.client import Client

OPEN_CHAT_WINDOW = """async ({ chatId }) => {
    const chatWid = window.WPP.whatsapp.WidFactory.createWid(chatId);
    const chat = await window.WPP.whatsapp.ChatStore.find(chatWid);
    await window.WPP.whatsapp.Cmd.openChatAt(chat);
}"""

OPEN_CHAT_DRAWER = """async ({ chatId }) => {
    const chat = await window.WPP.whatsapp.ChatStore.get(chatId);
    await window.WPP.whatsapp.Cmd.openDrawerMid(chat);
}"""

OPEN_CHAT_SEARCH = """async ({ chatId }) => {
    const chat = await window.WPP.whatsapp.ChatStore.get(chatId);
    await window.WPP.whatsapp.Cmd.chatSearch(chat);
}"""

OPEN_CHAT_WINDOW_AT = """async ({ msgId }) => {
    const msg = window.WPP.whatsapp.MsgStore.get(msgId);
    if (!msg) return false;
    await window.WPP.chat.openChatAt(msg.id.remote, msgId);
    return true;
}"""

OPEN_MESSAGE_DRAWER = """async ({ msgId }) => {
    const msg = window.WPP.whatsapp.MsgStore.get(msgId);
    if (!msg) return false;
    await window.WPP.whatsapp.Cmd.msgInfoDrawer(msg);
    return true;
}"""

CLOSE_RIGHT_DRAWER = "async () => { await window.Store.DrawerManager.closeDrawerRight(); }"

GET_FEATURES = "() => ({ ...window.Store.Features.F })"

CHECK_FEATURE_STATUS = "({ feature }) => Boolean(window.Store.Features.supportsFeature(feature))"

SET_FEATURES = """({ features, enabled }) => {
    for (const feature of features) {
        window.Store.Features.setFeature(feature, enabled);
    }
}"""


def _feature_names(features: Iterable[str]) -> list[str]:
    names = [features] if isinstance(features, str) else list(features)
    if not names or not all(isinstance(name, str) and name for name in names):
        raise ValidationError("features must be non-empty strings")
    return names


class InterfaceAPI:
    """Drives the web app's own UI: chat windows, drawers and feature flags."""

    def __init__(self, client: Client) -> None:
        self.client = client

    async def open_chat_window(self, chat_id: str) -> None:
        await self.client.bridge.execute(OPEN_CHAT_WINDOW, {"chatId": chat_id})

    async def open_chat_drawer(self, chat_id: str) -> None:
        await self.client.bridge.execute(OPEN_CHAT_DRAWER, {"chatId": chat_id})

    async def open_chat_search(self, chat_id: str) -> None:
        await self.client.bridge.execute(OPEN_CHAT_SEARCH, {"chatId": chat_id})

    async def open_chat_window_at(self, msg_id: str) -> bool:
        """Opens the chat holding ``msg_id`` scrolled to that message; False when the message is not loaded."""
        return bool(await self.client.bridge.execute(OPEN_CHAT_WINDOW_AT, {"msgId": msg_id}))

    async def open_message_drawer(self, msg_id: str) -> bool:
        return bool(await self.client.bridge.execute(OPEN_MESSAGE_DRAWER, {"msgId": msg_id}))

    async def close_right_drawer(self) -> None:
        await self.client.bridge.execute(CLOSE_RIGHT_DRAWER)

    async def get_features(self) -> dict[str, Any]:
        return await self.client.bridge.execute(GET_FEATURES) or {}

    async def check_feature_status(self, feature: str) -> bool:
        (feature,) = _feature_names(feature)
        return bool(await self.client.bridge.execute(CHECK_FEATURE_STATUS, {"feature": feature}))

    async def enable_features(self, features: Iterable[str]) -> None:
        await self.client.bridge.execute(SET_FEATURES, {"features": _feature_names(features), "enabled": True})

    async def disable_features(self, features: Iterable[str]) -> None:
        await self.client.bridge.execute(SET_FEATURES, {"features": _feature_names(features), "enabled": False})
