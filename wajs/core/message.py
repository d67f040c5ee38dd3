"""Message snapshot built from the page's serialized message model."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from wajs.core.entities import Location, Order, Payment
from wajs.core.events import MessageTypes
from wajs.core.wid import STATUS_BROADCAST, serialize_wid

if TYPE_CHECKING:
    from wajs.client.client import Client


def _device_type(unique_id: Any) -> str:
    if isinstance(unique_id, str) and len(unique_id) > 21:
        return "android"
    if isinstance(unique_id, str) and unique_id[:2] == "3A":
        return "ios"
    return "web"


def _selected_row_id(data: dict[str, Any]) -> Optional[str]:
    response = data.get("listResponse")
    if not isinstance(response, dict):
        return None
    reply = response.get("singleSelectReply") or {}
    return reply.get("selectedRowId") or None


def _fields_from_raw(data: dict[str, Any]) -> dict[str, Any]:
    msg_id = data.get("id") or {}
    has_media = bool(data.get("mediaKey") and data.get("directPath"))
    msg_type = data.get("type")

    if has_media:
        body = data.get("caption") or ""
    else:
        body = data.get("body") or data.get("pollName") or ""

    location = Location.from_raw(data) if msg_type == MessageTypes.LOCATION.value else None

    if msg_type == MessageTypes.CONTACT_CARD_MULTI.value:
        v_cards = [c.get("vcard") for c in data.get("vcardList") or []]
    elif msg_type == MessageTypes.CONTACT_CARD.value:
        v_cards = [data.get("body")]
    else:
        v_cards = []

    invite_v4 = None
    if msg_type == MessageTypes.GROUP_INVITE.value:
        invite_v4 = {
            "invite_code": data.get("inviteCode"),
            "invite_code_exp": data.get("inviteCodeExp"),
            "group_id": data.get("inviteGrp"),
            "group_name": data.get("inviteGrpName"),
            "from_id": serialize_wid(data.get("from")),
            "to_id": serialize_wid(data.get("to")),
        }

    fields: dict[str, Any] = {
        "id": msg_id,
        "ack": data.get("ack"),
        "media_key": data.get("mediaKey"),
        "has_media": has_media,
        "body": body,
        "type": msg_type,
        "timestamp": data.get("t"),
        "from_": serialize_wid(data.get("from")),
        "to": serialize_wid(data.get("to")),
        "author": serialize_wid(data.get("author")),
        "device_type": _device_type(msg_id.get("id")),
        "is_forwarded": bool(data.get("isForwarded")),
        "forwarding_score": data.get("forwardingScore") or 0,
        "is_status": bool(data.get("isStatusV3") or msg_id.get("remote") == STATUS_BROADCAST),
        "is_starred": bool(data.get("star")),
        "broadcast": bool(data.get("broadcast")),
        "from_me": bool(msg_id.get("fromMe")),
        "has_quoted_msg": bool(data.get("quotedMsg")),
        "has_reaction": bool(data.get("hasReaction")),
        "duration": data.get("duration") or None,
        "location": location,
        "v_cards": v_cards,
        "invite_v4": invite_v4,
        "mentioned_ids": [serialize_wid(m) for m in data.get("mentionedJidList") or []],
        "order_id": data.get("orderId") or None,
        "token": data.get("token") or None,
        "is_gif": bool(data.get("isGif")),
        "is_ephemeral": bool(data.get("isEphemeral")),
        "title": data.get("title") or None,
        "description": data.get("description") or None,
        "business_owner_jid": data.get("businessOwnerJid") or None,
        "product_id": data.get("productId") or None,
        "latest_edit_sender_timestamp_ms": data.get("latestEditSenderTimestampMs") or None,
        "latest_edit_msg_key": data.get("latestEditMsgKey") or None,
        "links": data.get("links") or [],
        "dynamic_reply_buttons": data.get("dynamicReplyButtons") or None,
        "selected_button_id": data.get("selectedButtonId") or None,
        "selected_row_id": _selected_row_id(data),
    }

    if msg_type == MessageTypes.POLL_CREATION.value:
        fields.update(
            poll_name=data.get("pollName"),
            poll_options=data.get("pollOptions") or [],
            allow_multiple_answers=not data.get("pollSelectableOptionsCount"),
            poll_invalidated=bool(data.get("pollInvalidated")),
            is_sent_cag_poll_creation=bool(data.get("isSentCagPollCreation")),
        )
    return fields


@dataclass
class Message:
    id: dict[str, Any] = field(default_factory=dict)
    ack: Optional[int] = None
    media_key: Optional[str] = None
    has_media: bool = False
    body: str = ""
    type: Optional[str] = None
    timestamp: Optional[int] = None
    from_: Optional[str] = None
    to: Optional[str] = None
    author: Optional[str] = None
    device_type: str = "web"
    is_forwarded: bool = False
    forwarding_score: int = 0
    is_status: bool = False
    is_starred: bool = False
    broadcast: bool = False
    from_me: bool = False
    has_quoted_msg: bool = False
    has_reaction: bool = False
    duration: Optional[Any] = None
    location: Optional[Location] = None
    v_cards: list[str] = field(default_factory=list)
    invite_v4: Optional[dict[str, Any]] = None
    mentioned_ids: list[str] = field(default_factory=list)
    order_id: Optional[str] = None
    token: Optional[str] = None
    is_gif: bool = False
    is_ephemeral: bool = False
    title: Optional[str] = None
    description: Optional[str] = None
    business_owner_jid: Optional[str] = None
    product_id: Optional[str] = None
    latest_edit_sender_timestamp_ms: Optional[int] = None
    latest_edit_msg_key: Optional[Any] = None
    links: list[dict[str, Any]] = field(default_factory=list)
    dynamic_reply_buttons: Optional[Any] = None
    selected_button_id: Optional[str] = None
    selected_row_id: Optional[str] = None
    poll_name: Optional[str] = None
    poll_options: list[Any] = field(default_factory=list)
    allow_multiple_answers: bool = False
    poll_invalidated: bool = False
    is_sent_cag_poll_creation: bool = False
    client: Optional["Client"] = field(default=None, repr=False, compare=False)
    _data: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_raw(cls, client: Optional["Client"], data: dict[str, Any]) -> "Message":
        message = cls(client=client)
        message._patch(data)
        return message

    def _patch(self, data: dict[str, Any]) -> None:
        for name, value in _fields_from_raw(data).items():
            setattr(self, name, value)
        self._data = copy.deepcopy(data)

    @property
    def raw_data(self) -> dict[str, Any]:
        """The snapshot this message was built from, unmodified."""
        return copy.deepcopy(self._data)

    @property
    def serialized_id(self) -> Optional[str]:
        return self.id.get("_serialized")

    @property
    def chat_id(self) -> Optional[str]:
        return self.to if self.from_me else self.from_

    async def reload(self) -> Optional["Message"]:
        data = await self.client.messages.fetch_raw(self.serialized_id)
        if not data:
            return None
        self._patch(data)
        return self

    async def get_chat(self):
        return await self.client.get_chat_by_id(self.chat_id)

    async def get_contact(self):
        return await self.client.get_contact_by_id(self.author or self.from_)

    async def get_mentions(self):
        return [await self.client.get_contact_by_id(contact_id) for contact_id in self.mentioned_ids]

    async def get_quoted_message(self) -> Optional["Message"]:
        if not self.has_quoted_msg:
            return None
        return await self.client.messages.get_quoted_message(self.serialized_id)

    async def reply(self, content: Any, chat_id: str | None = None, options: Any = None) -> "Message":
        return await self.client.messages.send_message(
            chat_id or self.chat_id,
            content,
            options,
            quoted_message_id=self.serialized_id,
        )

    async def react(self, reaction: str) -> None:
        await self.client.messages.react(self.serialized_id, reaction)

    async def forward(self, chat: Any) -> None:
        chat_id = chat if isinstance(chat, str) else chat.id
        await self.client.messages.forward(self.serialized_id, chat_id)

    async def download_media(self):
        if not self.has_media:
            return None
        return await self.client.messages.download_media(self.serialized_id)

    async def delete(self, everyone: bool = False) -> None:
        await self.client.messages.delete(self.from_, self.serialized_id, everyone)

    async def star(self) -> None:
        await self.client.messages.star(self.serialized_id, True)

    async def unstar(self) -> None:
        await self.client.messages.star(self.serialized_id, False)

    async def get_info(self) -> Optional[dict[str, Any]]:
        return await self.client.messages.get_info(self.serialized_id)

    async def get_order(self) -> Optional[Order]:
        if self.type != MessageTypes.ORDER.value:
            return None
        return await self.client.messages.get_order(self.order_id, self.token, self.chat_id)

    async def get_payment(self) -> Optional[Payment]:
        if self.type != MessageTypes.PAYMENT.value:
            return None
        return await self.client.messages.get_payment(self.serialized_id)

    async def get_reactions(self):
        if not self.has_reaction:
            return None
        return await self.client.messages.get_reactions(self.serialized_id)

    async def edit(self, content: str, mentions: list[Any] | None = None, link_preview: bool = True) -> Optional["Message"]:
        if not self.from_me:
            return None
        return await self.client.messages.edit(self.serialized_id, content, mentions=mentions, link_preview=link_preview)

    async def pin(self, duration: int) -> bool:
        return await self.client.messages.pin(self.serialized_id, duration)

    async def unpin(self) -> bool:
        return await self.client.messages.unpin(self.serialized_id)

    async def accept_group_v4_invite(self):
        return await self.client.groups.accept_group_v4_invite(self.invite_v4)
