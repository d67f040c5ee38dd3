"""Turns raw page mutations into domain events.

Every page binding lands in exactly one handler here. Handlers never raise:
a snapshot that cannot be normalized is logged and dropped.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Optional

from wajs.client.identity_change import detect_identity_change
from wajs.core.entities import Call, GroupNotification, Reaction
from wajs.core.events import Events, GroupNotificationTypes, MessageTypes, WAState
from wajs.core.factory import create_chat
from wajs.core.message import Message
from wajs.infra import scripts

if TYPE_CHECKING:
    from wajs.client.client import Client

logger = logging.getLogger(__name__)

ACCEPTED_STATES = frozenset({WAState.CONNECTED.value, WAState.OPENING.value, WAState.PAIRING.value, WAState.TIMEOUT.value})

_GN = GroupNotificationTypes
GROUP_JOIN_SUBTYPES = frozenset({_GN.ADD.value, _GN.INVITE.value, _GN.LINKED_GROUP_JOIN.value})
GROUP_LEAVE_SUBTYPES = frozenset({_GN.REMOVE.value, _GN.LEAVE.value})
GROUP_ADMIN_SUBTYPES = frozenset({_GN.PROMOTE.value, _GN.DEMOTE.value})
GROUP_MEMBERSHIP_SUBTYPE = _GN.MEMBERSHIP_REQUEST.value

MAX_QR_RETRIES_REASON = "Max qrcode retries reached"
LOGOUT_REASON = "NAVIGATION"


def classify_group_notification(subtype: Optional[str]) -> Events:
    if subtype in GROUP_JOIN_SUBTYPES:
        return Events.GROUP_JOIN
    if subtype in GROUP_LEAVE_SUBTYPES:
        return Events.GROUP_LEAVE
    if subtype in GROUP_ADMIN_SUBTYPES:
        return Events.GROUP_ADMIN_CHANGED
    if subtype == GROUP_MEMBERSHIP_SUBTYPE:
        return Events.GROUP_MEMBERSHIP_REQUEST
    return Events.GROUP_UPDATE


def _unique_id(data: Optional[dict[str, Any]]) -> Optional[str]:
    if not data:
        return None
    return (data.get("id") or {}).get("id")


class EventNormalizer:
    """Owns the per-session normalization state.

    ``last_message`` is a single slot overwritten by every non-revoked change
    and read when a revoke arrives. It is not locked: a revoke racing a newer
    change can miss its previous snapshot, in which case the revoke event
    carries ``None`` instead of an unrelated message.
    """

    def __init__(self, client: "Client") -> None:
        self.client = client
        self.last_message: Optional[dict[str, Any]] = None
        self.qr_retries = 0
        self._takeover_task: asyncio.Task[None] | None = None
        self._handlers = {
            "onAuthCodeChangeEvent": self.on_auth_code_change,
            "onAddMessageEvent": self.on_add_message,
            "onMessageCiphertextEvent": self.on_message_ciphertext,
            "onChangeMessageTypeEvent": self.on_change_message_type,
            "onChangeMessageEvent": self.on_change_message,
            "onEditMessageEvent": self.on_edit_message,
            "onRemoveMessageEvent": self.on_remove_message,
            "onMessageAckEvent": self.on_message_ack,
            "onMessageMediaUploadedEvent": self.on_media_uploaded,
            "onAppStateChangedEvent": self.on_app_state_changed,
            "onIncomingCall": self.on_incoming_call,
            "onChatUnreadCountEvent": self.on_chat_unread_count,
            "onReaction": self.on_reaction,
            "onRemoveChatEvent": self.on_remove_chat,
            "onArchiveChatEvent": self.on_archive_chat,
            "onMainLoadedEvent": self.on_main_loaded,
            "onMainReadyEvent": self.on_main_ready,
            "onLogoutEvent": self.on_logout,
        }

    @property
    def bindings(self) -> list[str]:
        return list(self._handlers)

    async def dispatch(self, binding: str, args: tuple[Any, ...]) -> None:
        handler = self._handlers.get(binding)
        if handler is None:
            logger.debug("no handler for binding %s", binding, extra={"binding": binding})
            return
        try:
            await handler(*args)
        except Exception:
            logger.exception("failed to normalize %s", binding, extra={"binding": binding})

    async def _emit(self, event: Events, *args: Any) -> None:
        await self.client.emit(event, *args)

    def _message(self, data: dict[str, Any]) -> Message:
        return Message.from_raw(self.client, data)

    async def on_auth_code_change(self, auth: Optional[dict[str, Any]] = None) -> None:
        if not auth:
            return
        pairing_number = self.client.options.get("pairing_number")
        if pairing_number:
            code = await self.client.bridge.execute(scripts.GEN_LINK_DEVICE_CODE, pairing_number)
            await self._emit(Events.CODE_RECEIVED, code)
            return

        await self._emit(Events.QR_RECEIVED, f"{auth.get('fullCode')},1")
        max_retries = int(self.client.options.get("qr_max_retries") or 0)
        if max_retries > 0:
            self.qr_retries += 1
            if self.qr_retries > max_retries:
                await self._emit(Events.DISCONNECTED, MAX_QR_RETRIES_REASON)
                await self.client.destroy()

    async def on_add_message(self, data: dict[str, Any]) -> None:
        if data.get("type") == MessageTypes.GP2.value:
            notification = GroupNotification.from_raw(self.client, data)
            await self._emit(classify_group_notification(data.get("subtype")), notification)
            return

        message = self._message(data)
        await self._emit(Events.MESSAGE_CREATE, message)
        if not message.from_me:
            await self._emit(Events.MESSAGE_RECEIVED, message)

    async def on_message_ciphertext(self, data: dict[str, Any]) -> None:
        await self._emit(Events.MESSAGE_CIPHERTEXT, self._message(data))

    async def on_change_message_type(self, data: dict[str, Any]) -> None:
        if data.get("type") != MessageTypes.REVOKED.value:
            return
        message = self._message(data)
        revoked: Optional[Message] = None
        unique_id = _unique_id(data)
        if unique_id is not None and unique_id == _unique_id(self.last_message):
            revoked = self._message(self.last_message)
        await self._emit(Events.MESSAGE_REVOKED_EVERYONE, message, revoked)

    async def on_change_message(self, data: dict[str, Any]) -> None:
        if data.get("type") != MessageTypes.REVOKED.value:
            self.last_message = data

        change = detect_identity_change(data)
        if change is None:
            return
        await self._emit(Events.CONTACT_CHANGED, self._message(data), change.old_id, change.new_id, change.is_contact)

    async def on_edit_message(self, data: dict[str, Any], new_body: Any = None, prev_body: Any = None) -> None:
        if new_body == prev_body:
            return
        await self._emit(Events.MESSAGE_EDIT, self._message(data), new_body, prev_body)

    async def on_remove_message(self, data: dict[str, Any]) -> None:
        if not data.get("isNewMsg"):
            return
        await self._emit(Events.MESSAGE_REVOKED_ME, self._message(data))

    async def on_message_ack(self, data: dict[str, Any], ack: Any = None) -> None:
        await self._emit(Events.MESSAGE_ACK, self._message(data), ack)

    async def on_media_uploaded(self, data: dict[str, Any]) -> None:
        await self._emit(Events.MEDIA_UPLOADED, self._message(data))

    async def on_app_state_changed(self, state: str) -> None:
        await self._emit(Events.STATE_CHANGED, state)

        accepted = set(ACCEPTED_STATES)
        if self.client.options.get("takeover_on_conflict"):
            accepted.add(WAState.CONFLICT.value)
            if state == WAState.CONFLICT.value:
                self._schedule_takeover()

        if state not in accepted:
            await self._emit(Events.DISCONNECTED, state)
            await self.client.destroy()

    def _schedule_takeover(self) -> None:
        if self._takeover_task is not None and not self._takeover_task.done():
            return
        delay = float(self.client.options.get("takeover_timeout_ms") or 0) / 1000
        self._takeover_task = asyncio.create_task(self._takeover(delay))

    async def _takeover(self, delay: float) -> None:
        await asyncio.sleep(delay)
        try:
            await self.client.bridge.execute(scripts.TAKEOVER)
        except Exception as exc:  # pragma: no cover
            logger.warning("session takeover failed: %s", exc)

    def cancel_pending(self) -> None:
        if self._takeover_task is not None and not self._takeover_task.done():
            self._takeover_task.cancel()
        self._takeover_task = None

    async def on_incoming_call(self, data: dict[str, Any]) -> None:
        await self._emit(Events.INCOMING_CALL, Call.from_raw(self.client, data))

    async def on_chat_unread_count(self, data: dict[str, Any]) -> None:
        await self._emit(Events.UNREAD_COUNT, create_chat(self.client, data))

    async def on_reaction(self, reactions: list[dict[str, Any]]) -> None:
        for reaction in reactions or []:
            await self._emit(Events.MESSAGE_REACTION, Reaction.from_raw(self.client, reaction))

    async def on_remove_chat(self, data: dict[str, Any]) -> None:
        await self._emit(Events.CHAT_REMOVED, create_chat(self.client, data))

    async def on_archive_chat(self, data: dict[str, Any], current: Any = None, previous: Any = None) -> None:
        await self._emit(Events.CHAT_ARCHIVED, create_chat(self.client, data), current, previous)

    async def on_main_loaded(self, info: Optional[dict[str, Any]] = None) -> None:
        info = info or {}
        if info.get("inProgress"):
            progress = info.get("progress")
            await self._emit(Events.LOADING_SCREEN, progress, f"{progress}% Organizing your messages")
        else:
            await self._emit(Events.LOADING_SCREEN, "", "Loading Your Chats")

    async def on_main_ready(self) -> None:
        await self._emit(Events.READY)

    async def on_logout(self) -> None:
        await self._emit(Events.DISCONNECTED, LOGOUT_REASON)
