from __future__ import annotations

from typing import TYPE_CHECKING, Any

from wajs.core.errors import ValidationError
from wajs.core.events import ChatState

if TYPE_CHECKING:
    from wajs.client.client import Client

DEFAULT_CHAT_STATE_DURATION_MS = 5000

SEND_AVAILABLE = "async () => { await window.WPP.whatsapp.ChatPresence.sendPresenceAvailable(); }"

SEND_UNAVAILABLE = "async () => { await window.WPP.whatsapp.ChatPresence.sendPresenceUnavailable(); }"

SEND_CHAT_STATE = """async ({ state, chatId, duration }) => {
    await window.WAJS.sendChatstate(state, chatId, duration);
    return true;
}"""


class PresenceAPI:
    def __init__(self, client: Client) -> None:
        self.client = client

    async def send_available(self) -> None:
        await self.client.bridge.execute(SEND_AVAILABLE)

    async def send_unavailable(self) -> None:
        await self.client.bridge.execute(SEND_UNAVAILABLE)

    async def send_chat_state(
        self,
        state: Any,
        chat_id: str,
        duration: int = DEFAULT_CHAT_STATE_DURATION_MS,
    ) -> bool:
        try:
            state = ChatState(state)
        except ValueError as exc:
            raise ValidationError("Invalid chatstate") from exc
        return bool(
            await self.client.bridge.execute(
                SEND_CHAT_STATE,
                {"state": state.value, "chatId": chat_id, "duration": duration},
            )
        )
