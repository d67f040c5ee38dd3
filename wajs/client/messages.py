"""Message sending and per-message operations."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from wajs.core.contact import Contact
from wajs.core.entities import Location, MessageMedia, Order, Payment, Poll, Reaction
from wajs.core.errors import ValidationError
from wajs.core.message import Message
from wajs.core.wid import STATUS_BROADCAST
from wajs.utils.sticker import StickerMetadata, format_to_webp_sticker

if TYPE_CHECKING:
    from wajs.client.client import Client

logger = logging.getLogger(__name__)

KIND_MEDIA = "media"
KIND_LOCATION = "location"
KIND_POLL = "poll"
KIND_CONTACT = "contact"
KIND_CONTACT_LIST = "contact_list"
KIND_TEXT = "text"

SEND_TO_CHAT = """async ({ chatId, message, options, sendSeen }) => {
    const chatWid = window.WPP.whatsapp.WidFactory.createWid(chatId);
    const chat = await window.WPP.whatsapp.ChatStore.find(chatWid);
    if (sendSeen) {
        await window.WPP.whatsapp.functions.sendSeen(chat, false);
    }
    const msg = await window.WAJS.sendMessage(chat, message, options, sendSeen);
    return window.WAJS.getMessageModel(msg);
}"""

SEND_TEXT_STATUS = """async ({ message, options }) => {
    const result = await window.WPP.status.sendTextStatus(message, options);
    return window.WAJS.getMessageModel(await window.WPP.whatsapp.MsgStore.get(result.id));
}"""

SEND_IMAGE_STATUS = """async ({ message, options }) => {
    const result = await window.WPP.status.sendImageStatus(`data:${message.mimetype};base64,${message.data}`, options);
    return window.WAJS.getMessageModel(await window.WPP.whatsapp.MsgStore.get(result.id));
}"""

SEND_VIDEO_STATUS = """async ({ message, options }) => {
    const result = await window.WPP.status.sendVideoStatus(`data:${message.mimetype};base64,${message.data}`, options);
    return window.WAJS.getMessageModel(await window.WPP.whatsapp.MsgStore.get(result.id));
}"""

GET_MESSAGE = """async (msgId) => {
    const msg = await window.WPP.chat.getMessageById(msgId);
    return msg ? window.WAJS.getMessageModel(msg) : null;
}"""

SEARCH_MESSAGES = """async ({ query, page, count, remote }) => {
    const { messages } = await window.WPP.whatsapp.MsgStore.search(query, page, count, remote);
    return messages.map((msg) => window.WAJS.getMessageModel(msg));
}"""

GET_QUOTED_MESSAGE = """(msgId) => {
    const msg = window.WPP.whatsapp.MsgStore.get(msgId);
    const quoted = window.WPP.whatsapp.functions.getQuotedMsgObj(msg);
    return quoted ? window.WAJS.getMessageModel(quoted) : null;
}"""

REACT = "async ({ msgId, reaction }) => { await window.WPP.chat.sendReactionToMessage(msgId, reaction); }"

FORWARD = "async ({ msgId, chatId }) => await window.WPP.chat.forwardMessage(chatId, msgId)"

DOWNLOAD_MEDIA = """async (msgId) => {
    const msg = window.WPP.whatsapp.MsgStore.get(msgId);
    if (!msg) return null;
    try {
        const blob = await window.WPP.chat.downloadMedia(msgId);
        const data = await window.WPP.util.blobToBase64(blob);
        return { data: data.split(',')[1], mimetype: msg.mimetype, filename: msg.filename, filesize: msg.size };
    } catch (e) {
        if (e.status && e.status === 404) return null;
        throw e;
    }
}"""

DELETE = "async ({ chatId, msgId, everyone }) => await window.WPP.chat.deleteMessage(chatId, msgId, true, everyone)"

STAR = "async ({ msgId, star }) => await window.WPP.chat.starMessage(msgId, star)"

GET_INFO = """async (msgId) => {
    const msg = window.WPP.whatsapp.MsgStore.get(msgId);
    if (!msg || !msg.id.fromMe) return null;
    return await window.Store.getMsgInfo.queryMsgInfo(msg.id);
}"""

GET_ORDER = "async ({ orderId, token, chatId }) => await window.WAJS.getOrderDetail(orderId, token, chatId)"

GET_PAYMENT = """(msgId) => {
    const msg = window.WPP.whatsapp.MsgStore.get(msgId);
    return msg ? msg.serialize() : null;
}"""

GET_REACTIONS = """async (msgId) => {
    const found = await window.Store.Reactions.find(msgId);
    if (!found || !found.reactions.length) return null;
    return found.reactions.serialize();
}"""

EDIT = """async ({ msgId, message, options }) => {
    const edited = await window.WPP.chat.editMessage(msgId, message, options);
    return edited ? window.WAJS.getMessageModel(edited) : null;
}"""

PIN = """async ({ msgId, action, duration }) => {
    const message = window.WPP.whatsapp.MsgStore.get(msgId);
    if (!message) return false;
    const response = await window.Store.PinUnpinMsg.sendPinInChatMsg(message, action, duration);
    return response.messageSendResult === 'OK';
}"""


@dataclass
class MessageSendOptions:
    link_preview: bool = True
    send_audio_as_voice: bool = False
    send_video_as_gif: bool = False
    send_media_as_sticker: bool = False
    send_media_as_document: bool = False
    is_view_once: bool = False
    parse_vcards: bool = True
    caption: Optional[str] = None
    quoted_message_id: Optional[str] = None
    mentions: list[Any] = field(default_factory=list)
    send_seen: bool = True
    sticker_author: Optional[str] = None
    sticker_name: Optional[str] = None
    sticker_categories: Optional[list[str]] = None
    sticker_is_avatar: bool = False
    media: Optional[MessageMedia] = None
    extra: Optional[dict[str, Any]] = None
    message_id: Optional[str] = None

    @classmethod
    def coerce(cls, options: Any) -> "MessageSendOptions":
        if options is None:
            return cls()
        if isinstance(options, cls):
            return dataclasses.replace(options)
        if isinstance(options, dict):
            known = {f.name for f in dataclasses.fields(cls)}
            unknown = set(options) - known
            if unknown:
                raise ValidationError(f"unknown send options: {', '.join(sorted(unknown))}")
            return cls(**{k: v for k, v in options.items() if v is not None})
        raise ValidationError(f"options must be MessageSendOptions or dict, got {type(options).__name__}")

    @property
    def sticker_metadata(self) -> StickerMetadata:
        return StickerMetadata(
            name=self.sticker_name,
            author=self.sticker_author,
            categories=list(self.sticker_categories or []),
            is_avatar=self.sticker_is_avatar,
        )


@dataclass
class OutgoingMessage:
    """Result of content dispatch: which branch fired and the record sent to the page."""

    kind: str
    content: Any
    options: dict[str, Any]
    send_seen: bool
    attachment: Optional[MessageMedia] = None

    def to_remote(self) -> dict[str, Any]:
        options = dict(self.options)
        if self.attachment is not None:
            options["attachment"] = self.attachment.to_remote()
        return options


def _mention_id(value: Any) -> str:
    if isinstance(value, Contact):
        return value.id
    return str(value)


def build_outgoing_message(content: Any, options: MessageSendOptions) -> OutgoingMessage:
    """Normalizes options and picks exactly one content branch.

    Order: media content, ``options.media``, location, poll, single contact,
    list of contacts, text.
    """
    internal: dict[str, Any] = {
        "linkPreview": options.link_preview is not False,
        "sendAudioAsVoice": options.send_audio_as_voice,
        "sendVideoAsGif": options.send_video_as_gif,
        "sendMediaAsSticker": options.send_media_as_sticker,
        "sendMediaAsDocument": options.send_media_as_document,
        "caption": options.caption,
        "quotedMessageId": options.quoted_message_id,
        "parseVCards": options.parse_vcards is not False,
        "mentionedJidList": [_mention_id(m) for m in options.mentions or []],
        "extraOptions": options.extra,
        "messageId": options.message_id,
    }
    send_seen = options.send_seen is not False
    attachment: Optional[MessageMedia] = None

    if isinstance(content, MessageMedia):
        kind, attachment = KIND_MEDIA, content
        internal["isViewOnce"] = options.is_view_once
        content = ""
    elif isinstance(options.media, MessageMedia):
        kind, attachment = KIND_MEDIA, options.media
        internal["caption"] = content if isinstance(content, str) and content else internal["caption"]
        internal["isViewOnce"] = options.is_view_once
        content = ""
    elif isinstance(content, Location):
        kind = KIND_LOCATION
        internal["location"] = content.to_remote()
        content = ""
    elif isinstance(content, Poll):
        kind = KIND_POLL
        internal["poll"] = content.to_remote()
        content = ""
    elif isinstance(content, Contact):
        kind = KIND_CONTACT
        internal["contactCard"] = content.id
        content = ""
    elif isinstance(content, (list, tuple)) and content and isinstance(content[0], Contact):
        kind = KIND_CONTACT_LIST
        internal["contactCardList"] = [contact.id for contact in content]
        content = ""
    elif isinstance(content, str):
        kind = KIND_TEXT
    else:
        raise ValidationError(f"unsupported message content: {type(content).__name__}")

    return OutgoingMessage(kind=kind, content=content, options=internal, send_seen=send_seen, attachment=attachment)


def select_status_script(outgoing: OutgoingMessage) -> str:
    """Status broadcast accepts text, image media or video media only."""
    if outgoing.kind == KIND_TEXT:
        return SEND_TEXT_STATUS
    if outgoing.kind == KIND_MEDIA and outgoing.attachment is not None:
        mimetype = outgoing.attachment.mimetype or ""
        if "image" in mimetype:
            return SEND_IMAGE_STATUS
        if "video" in mimetype:
            return SEND_VIDEO_STATUS
    raise ValidationError("Invalid type for status broadcast")


class MessagesAPI:
    def __init__(self, client: Client) -> None:
        self.client = client

    async def send_message(
        self,
        chat_id: str,
        content: Any,
        options: Any = None,
        quoted_message_id: str | None = None,
    ) -> Message:
        opts = MessageSendOptions.coerce(options)
        if quoted_message_id:
            opts.quoted_message_id = quoted_message_id
        outgoing = build_outgoing_message(content, opts)

        if opts.send_media_as_sticker and outgoing.attachment is not None:
            outgoing.attachment = await format_to_webp_sticker(
                outgoing.attachment,
                opts.sticker_metadata,
                ffmpeg_path=self.client.options.get("ffmpeg_path") or "ffmpeg",
            )

        if chat_id == STATUS_BROADCAST:
            script = select_status_script(outgoing)
            message = outgoing.attachment.to_remote() if outgoing.attachment is not None else outgoing.content
            status_options = {k: v for k, v in outgoing.options.items() if v is not None}
            raw = await self.client.bridge.execute(script, {"message": message, "options": status_options})
        else:
            raw = await self.client.bridge.execute(
                SEND_TO_CHAT,
                {
                    "chatId": chat_id,
                    "message": outgoing.content,
                    "options": outgoing.to_remote(),
                    "sendSeen": outgoing.send_seen,
                },
            )
        logger.debug("sent %s message to %s", outgoing.kind, chat_id)
        return Message.from_raw(self.client, raw or {})

    async def fetch_raw(self, message_id: str) -> Optional[dict[str, Any]]:
        return await self.client.bridge.execute(GET_MESSAGE, message_id)

    async def get_message_by_id(self, message_id: str) -> Optional[Message]:
        raw = await self.fetch_raw(message_id)
        if not raw:
            return None
        return Message.from_raw(self.client, raw)

    async def search_messages(
        self,
        query: str,
        page: int | None = None,
        limit: int | None = None,
        chat_id: str | None = None,
    ) -> list[Message]:
        raws = await self.client.bridge.execute(
            SEARCH_MESSAGES,
            {"query": query, "page": page, "count": limit, "remote": chat_id},
        )
        return [Message.from_raw(self.client, raw) for raw in raws or []]

    async def get_quoted_message(self, message_id: str) -> Optional[Message]:
        raw = await self.client.bridge.execute(GET_QUOTED_MESSAGE, message_id)
        return Message.from_raw(self.client, raw) if raw else None

    async def react(self, message_id: str, reaction: str) -> None:
        if not message_id:
            return
        await self.client.bridge.execute(REACT, {"msgId": message_id, "reaction": reaction})

    async def forward(self, message_id: str, chat_id: str) -> None:
        await self.client.bridge.execute(FORWARD, {"msgId": message_id, "chatId": chat_id})

    async def download_media(self, message_id: str) -> Optional[MessageMedia]:
        result = await self.client.bridge.execute(DOWNLOAD_MEDIA, message_id)
        if not result:
            return None
        return MessageMedia(
            mimetype=result.get("mimetype"),
            data=result.get("data"),
            filename=result.get("filename"),
            filesize=result.get("filesize"),
        )

    async def delete(self, chat_id: str, message_id: str, everyone: bool = False) -> None:
        await self.client.bridge.execute(DELETE, {"chatId": chat_id, "msgId": message_id, "everyone": everyone})

    async def star(self, message_id: str, star: bool = True) -> None:
        await self.client.bridge.execute(STAR, {"msgId": message_id, "star": star})

    async def get_info(self, message_id: str) -> Optional[dict[str, Any]]:
        return await self.client.bridge.execute(GET_INFO, message_id)

    async def get_order(self, order_id: str, token: str, chat_id: str) -> Optional[Order]:
        result = await self.client.bridge.execute(GET_ORDER, {"orderId": order_id, "token": token, "chatId": chat_id})
        return Order.from_raw(result) if result else None

    async def get_payment(self, message_id: str) -> Optional[Payment]:
        result = await self.client.bridge.execute(GET_PAYMENT, message_id)
        return Payment.from_raw(result) if result else None

    async def get_reactions(self, message_id: str) -> Optional[list[dict[str, Any]]]:
        """Groups of reactions, each with its ``senders`` as :class:`Reaction` objects."""
        groups = await self.client.bridge.execute(GET_REACTIONS, message_id)
        if not groups:
            return None
        out = []
        for group in groups:
            senders = []
            for sender in group.get("senders") or []:
                sender = dict(sender)
                sender["timestamp"] = round((sender.get("timestamp") or 0) / 1000)
                senders.append(Reaction.from_raw(self.client, sender))
            out.append({**group, "senders": senders})
        return out

    async def edit(
        self,
        message_id: str,
        content: str,
        mentions: list[Any] | None = None,
        link_preview: bool = True,
        extra: dict[str, Any] | None = None,
    ) -> Optional[Message]:
        options = {
            "linkPreview": link_preview is not False,
            "mentionedJidList": [_mention_id(m) for m in mentions or []],
            "extraOptions": extra,
        }
        raw = await self.client.bridge.execute(EDIT, {"msgId": message_id, "message": content, "options": options})
        return Message.from_raw(self.client, raw) if raw else None

    async def pin(self, message_id: str, duration: int) -> bool:
        return bool(await self.client.bridge.execute(PIN, {"msgId": message_id, "action": 1, "duration": duration}))

    async def unpin(self, message_id: str) -> bool:
        return bool(await self.client.bridge.execute(PIN, {"msgId": message_id, "action": 2, "duration": None}))
