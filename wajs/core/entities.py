from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Optional

from wajs.core.wid import serialize_wid


@dataclass
class Location:
    latitude: float
    longitude: float
    name: Optional[str] = None
    address: Optional[str] = None
    url: Optional[str] = None

    @property
    def description(self) -> Optional[str]:
        if self.name and self.address:
            return f"{self.name}\n{self.address}"
        return self.name or self.address

    def to_remote(self) -> dict[str, Any]:
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "description": self.description,
            "url": self.url,
        }

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> "Location":
        name = address = None
        loc = data.get("loc")
        if loc and isinstance(loc, str):
            parts = loc.split("\n")
            name = parts[0]
            address = parts[1] if len(parts) > 1 else None
        return cls(
            latitude=data.get("lat"),
            longitude=data.get("lng"),
            name=name,
            address=address,
            url=data.get("clientUrl") if loc else None,
        )


@dataclass
class Poll:
    poll_name: str
    poll_options: list[str]
    allow_multiple_answers: bool = False
    message_secret: Optional[list[int]] = None

    def to_remote(self) -> dict[str, Any]:
        return {
            "pollName": self.poll_name,
            "pollOptions": [{"name": option.strip(), "localId": index} for index, option in enumerate(self.poll_options)],
            "options": {
                "allowMultipleAnswers": self.allow_multiple_answers,
                "messageSecret": self.message_secret,
            },
        }


@dataclass
class MessageMedia:
    """Base64 encoded media payload as it crosses the page boundary."""

    mimetype: str
    data: str
    filename: Optional[str] = None
    filesize: Optional[int] = None

    @classmethod
    def from_bytes(cls, raw: bytes, mimetype: str, filename: str | None = None) -> "MessageMedia":
        return cls(
            mimetype=mimetype,
            data=base64.b64encode(raw).decode("ascii"),
            filename=filename,
            filesize=len(raw),
        )

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    def to_remote(self) -> dict[str, Any]:
        return {
            "mimetype": self.mimetype,
            "data": self.data,
            "filename": self.filename,
            "filesize": self.filesize,
        }


@dataclass
class GroupParticipant:
    id: str
    is_admin: bool = False
    is_super_admin: bool = False

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> "GroupParticipant":
        return cls(
            id=serialize_wid(data.get("id")) or "",
            is_admin=bool(data.get("isAdmin")),
            is_super_admin=bool(data.get("isSuperAdmin")),
        )


@dataclass
class GroupNotification:
    id: dict[str, Any]
    chat_id: Optional[str]
    author: Optional[str]
    type: Optional[str] = None
    body: str = ""
    timestamp: int = 0
    recipient_ids: list[str] = field(default_factory=list)
    client: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_raw(cls, client: Any, data: dict[str, Any]) -> "GroupNotification":
        msg_id = data.get("id") or {}
        return cls(
            id=msg_id,
            chat_id=serialize_wid(msg_id.get("remote")),
            author=serialize_wid(data.get("author")),
            type=data.get("subtype"),
            body=data.get("body") or "",
            timestamp=data.get("t") or 0,
            recipient_ids=[serialize_wid(r) for r in data.get("recipients") or []],
            client=client,
        )

    async def get_chat(self):
        return await self.client.get_chat_by_id(self.chat_id)

    async def get_contact(self):
        return await self.client.get_contact_by_id(self.author)

    async def get_recipients(self):
        return [await self.client.get_contact_by_id(rid) for rid in self.recipient_ids]

    async def reply(self, content: Any, options: Any = None):
        return await self.client.send_message(self.chat_id, content, options)


@dataclass
class Reaction:
    id: dict[str, Any]
    reaction: str
    sender_id: Optional[str]
    msg_id: dict[str, Any]
    timestamp: int = 0
    orphan: int = 0
    orphan_reason: Optional[str] = None
    read: bool = False
    ack: Optional[int] = None
    client: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_raw(cls, client: Any, data: dict[str, Any]) -> "Reaction":
        return cls(
            id=data.get("msgKey") or data.get("id") or {},
            reaction=data.get("reactionText", data.get("reaction", "")),
            sender_id=serialize_wid(data.get("senderUserJid") or data.get("sender") or data.get("senderId")),
            msg_id=data.get("parentMsgKey") or data.get("msgId") or {},
            timestamp=data.get("timestamp") or 0,
            orphan=data.get("orphan") or 0,
            orphan_reason=data.get("orphanReason"),
            read=bool(data.get("read")),
            ack=data.get("ack"),
            client=client,
        )


@dataclass
class Call:
    id: str
    from_: Optional[str]
    timestamp: int = 0
    is_video: bool = False
    is_group: bool = False
    from_me: bool = False
    can_handle_locally: bool = False
    web_client_should_handle: bool = False
    participants: Any = None
    client: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_raw(cls, client: Any, data: dict[str, Any]) -> "Call":
        return cls(
            id=data.get("id"),
            from_=serialize_wid(data.get("peerJid")),
            timestamp=data.get("offerTime") or 0,
            is_video=bool(data.get("isVideo")),
            is_group=bool(data.get("isGroup")),
            from_me=bool(data.get("outgoing")),
            can_handle_locally=bool(data.get("canHandleLocally")),
            web_client_should_handle=bool(data.get("webClientShouldHandle")),
            participants=data.get("participants"),
            client=client,
        )

    async def reject(self) -> Any:
        return await self.client.bridge.execute(
            "async (callId) => await window.WPP.call.reject(callId)",
            self.id,
        )


@dataclass
class Label:
    id: str
    name: str
    hex_color: Optional[str] = None
    client: Any = field(default=None, repr=False, compare=False)

    @classmethod
    def from_raw(cls, client: Any, data: dict[str, Any]) -> "Label":
        return cls(id=str(data.get("id")), name=data.get("name", ""), hex_color=data.get("hexColor"), client=client)

    async def get_chats(self):
        return await self.client.get_chats_by_label_id(self.id)


@dataclass
class ClientInfo:
    pushname: Optional[str]
    wid: Optional[str]
    platform: Optional[str] = None
    client: Any = field(default=None, repr=False, compare=False)

    @property
    def me(self) -> Optional[str]:
        return self.wid

    @classmethod
    def from_raw(cls, client: Any, data: dict[str, Any]) -> "ClientInfo":
        return cls(
            pushname=data.get("pushname"),
            wid=serialize_wid(data.get("wid")),
            platform=data.get("platform"),
            client=client,
        )

    async def get_battery_status(self) -> dict[str, Any]:
        return await self.client.bridge.execute(
            "() => { const { battery, plugged } = window.WPP.whatsapp.Conn; return { battery, plugged }; }"
        )


@dataclass
class Product:
    id: str
    name: Optional[str] = None
    price: Optional[str] = None
    currency: Optional[str] = None
    quantity: int = 0
    thumbnail_url: Optional[str] = None

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> "Product":
        return cls(
            id=str(data.get("id")),
            name=data.get("name"),
            price=data.get("price") or "",
            currency=data.get("currency"),
            quantity=data.get("quantity") or 0,
            thumbnail_url=data.get("thumbnailUrl"),
        )


@dataclass
class Order:
    subtotal: Optional[str]
    total: Optional[str]
    currency: Optional[str]
    created_at: Optional[int] = None
    products: list[Product] = field(default_factory=list)

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> "Order":
        return cls(
            subtotal=data.get("subtotal"),
            total=data.get("total"),
            currency=data.get("currency"),
            created_at=data.get("createdAt"),
            products=[Product.from_raw(p) for p in data.get("products") or []],
        )


@dataclass
class Payment:
    id: dict[str, Any]
    currency: Optional[str]
    amount: Optional[int]
    receiver: Optional[str]
    transaction_timestamp: Optional[int] = None
    status: Any = None
    txn_status: Any = None
    note: Optional[str] = None

    @classmethod
    def from_raw(cls, data: dict[str, Any]) -> "Payment":
        note = data.get("paymentNoteMsg") or {}
        return cls(
            id=data.get("id") or {},
            currency=data.get("paymentCurrency"),
            amount=data.get("paymentAmount1000"),
            receiver=serialize_wid(data.get("paymentMessageReceiverJid")),
            transaction_timestamp=data.get("paymentTransactionTimestamp"),
            status=data.get("paymentStatus"),
            txn_status=data.get("paymentTxnStatus"),
            note=note.get("body") if isinstance(note, dict) else None,
        )


@dataclass
class ParticipantResult:
    code: int
    message: str
    is_group_creator: bool = False
    is_invite_v4_sent: bool = False


@dataclass
class CreateGroupResult:
    """Outcome of :meth:`GroupsAPI.create_group`.

    ``ok`` is False when the group itself could not be created; ``error`` then
    holds the reason and ``gid`` is None.
    """

    ok: bool
    title: str
    gid: Optional[str] = None
    participants: dict[str, ParticipantResult] = field(default_factory=dict)
    error: Optional[str] = None


@dataclass
class MembershipRequestResult:
    requester_id: str
    message: str
    error: Optional[int] = None
