from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from wajs.core.chat import Chat
from wajs.core.entities import Label
from wajs.core.factory import create_chat

if TYPE_CHECKING:
    from wajs.client.client import Client

GET_LABELS = "async () => await window.WAJS.getLabels()"

GET_LABEL = "async (labelId) => await window.WAJS.getLabel(labelId)"

GET_CHAT_LABELS = "async (chatId) => await window.WAJS.getChatLabels(chatId)"

GET_CHATS_BY_LABEL = """async (labelId) => {
    const label = window.WPP.whatsapp.LabelStore.get(labelId);
    if (!label) return [];
    const chatIds = label.labelItemCollection
        .getModelsArray()
        .filter((item) => item.parentType === 'Chat')
        .map((item) => item.parentId);
    return Promise.all(chatIds.map(async (id) => {
        const chat = await window.WPP.chat.get(id);
        return chat ? await window.WAJS.getChatModel(chat) : null;
    }));
}"""

ADD_OR_REMOVE_LABELS = """async ({ labelIds, chatIds }) => {
    const labels = window.WPP.whatsapp.LabelStore.getModelsArray().map((l) => l.id);
    const options = labelIds.map((id) => ({ labelId: id, type: 'add' }));
    for (const id of labels) {
        if (!labelIds.includes(id)) options.push({ labelId: id, type: 'remove' });
    }
    return await window.WPP.labels.addOrRemoveLabels(chatIds, options);
}"""


class LabelsAPI:
    """Business account labels."""

    def __init__(self, client: Client) -> None:
        self.client = client

    async def get_labels(self) -> list[Label]:
        raw_labels = await self.client.bridge.execute(GET_LABELS) or []
        return [Label.from_raw(self.client, raw) for raw in raw_labels]

    async def get_label_by_id(self, label_id: str) -> Optional[Label]:
        raw = await self.client.bridge.execute(GET_LABEL, label_id)
        return Label.from_raw(self.client, raw) if raw else None

    async def get_chat_labels(self, chat_id: str) -> list[Label]:
        raw_labels = await self.client.bridge.execute(GET_CHAT_LABELS, chat_id) or []
        return [Label.from_raw(self.client, raw) for raw in raw_labels]

    async def get_chats_by_label_id(self, label_id: str) -> list[Chat]:
        raw_chats = await self.client.bridge.execute(GET_CHATS_BY_LABEL, label_id) or []
        return [create_chat(self.client, raw) for raw in raw_chats if raw]

    async def add_or_remove_labels(self, label_ids: list[str], chat_ids: list[str]) -> Any:
        """Sets the labels of every chat in ``chat_ids`` to exactly ``label_ids``."""
        return await self.client.bridge.execute(
            ADD_OR_REMOVE_LABELS,
            {"labelIds": [str(label_id) for label_id in label_ids], "chatIds": list(chat_ids)},
        )
