"""WhatsApp Web session client driven through a Playwright page."""

from __future__ import annotations

import asyncio
import os
import shutil
from typing import Any, Optional

from wajs.client.chats import ChatsAPI
from wajs.client.contacts import ContactsAPI
from wajs.client.emitter import EventEmitter, Handler
from wajs.client.event_normalizer import EventNormalizer
from wajs.client.event_pump import EventPump
from wajs.client.groups import GroupsAPI
from wajs.client.interface import InterfaceAPI
from wajs.client.labels import LabelsAPI
from wajs.client.media import MediaManager
from wajs.client.messages import MessagesAPI
from wajs.client.presence import PresenceAPI
from wajs.client.profile import ProfileAPI
from wajs.core.chat import Chat
from wajs.core.contact import Contact
from wajs.core.entities import ClientInfo, CreateGroupResult, Label, MembershipRequestResult, MessageMedia
from wajs.core.errors import SessionClosedError
from wajs.core.events import Events
from wajs.core.message import Message
from wajs.defaults.config import DEFAULT_BATCH_SLEEP_MS, DEFAULT_CLIENT_OPTIONS
from wajs.infra import scripts
from wajs.infra.bridge import RemoteBridge
from wajs.infra.browser import BrowserSession, launch_page
from wajs.infra.logger import session_logger
from wajs.utils.batch import SleepOption

RESET_STATE = "async () => { await window.WPP.whatsapp.Socket.phoneWatchdog.shiftTimer.forceRunNow(); }"


class Client:
    """One WhatsApp Web session.

    Remote listeners enqueue onto an :class:`EventPump`; a single consumer feeds the
    :class:`EventNormalizer`, which emits domain events through this client's emitter.
    Commands go through :attr:`bridge` and the feature APIs (``messages``, ``chats``,
    ``contacts``, ``groups``, ``labels``, ``presence``, ``profile``, ``interface``).
    """

    def __init__(self, **options: Any) -> None:
        self.options: dict[str, Any] = {**DEFAULT_CLIENT_OPTIONS, **options}
        self.logger = session_logger(__name__, self.options.get("session_name"))

        self.emitter = EventEmitter()
        self.normalizer = EventNormalizer(self)
        self.pump = EventPump(self.normalizer.dispatch, maxsize=int(self.options["event_queue_size"]))

        self.bridge: RemoteBridge | None = None
        self.session: BrowserSession | None = None
        self.info: ClientInfo | None = None
        self._wweb_version: str | None = None

        self.messages = MessagesAPI(self)
        self.chats = ChatsAPI(self)
        self.contacts = ContactsAPI(self)
        self.groups = GroupsAPI(self)
        self.labels = LabelsAPI(self)
        self.presence = PresenceAPI(self)
        self.profile = ProfileAPI(self)
        self.interface = InterfaceAPI(self)
        self.media = MediaManager()

    def on(self, event: Any, handler: Handler | None = None):
        return self.emitter.on(event, handler)

    def once(self, event: Any, handler: Handler | None = None):
        return self.emitter.once(event, handler)

    def off(self, event: Any, handler: Handler | None = None) -> None:
        self.emitter.off(event, handler)

    async def emit(self, event: Any, *args: Any) -> bool:
        return await self.emitter.emit(event, *args)

    async def initialize(self, page: Any = None) -> None:
        """Opens the page (unless one is given), wires event bindings and runs the auth flow."""
        if page is None:
            self.session = await launch_page(self.options)
            page = self.session.page

        self.bridge = RemoteBridge(page)
        for name in self.normalizer.bindings:
            await self.bridge.expose_function(name, self.pump.binding(name))
        self.pump.start()

        await self._authenticate()

    async def _authenticate(self) -> None:
        bridge = self.bridge
        registered = await bridge.execute(scripts.IS_REGISTERED)

        if registered is False:
            await bridge.execute(scripts.REGISTER_AUTH_CODE_LISTENER)
        elif registered is None:
            stream_info = await bridge.execute(scripts.STREAM_INFO)
            self.logger.warning("registration state unknown", extra={"event": Events.AUTHENTICATION_FAILURE.value})
            await self.emit(Events.AUTHENTICATION_FAILURE, stream_info)

        await bridge.wait_for_function(scripts.WAIT_REGISTERED)

        stream_info = await bridge.execute(scripts.STREAM_INFO)
        await self.emit(Events.AUTHENTICATED, stream_info)

        await bridge.execute(scripts.REGISTER_STORE_LISTENERS)
        await bridge.execute(scripts.REGISTER_LOGOUT_LISTENER)
        self.info = ClientInfo.from_raw(self, await bridge.execute(scripts.CLIENT_INFO) or {})
        self.logger.info("session authenticated me=%s", self.info.me, extra={"event": Events.AUTHENTICATED.value})

    async def destroy(self) -> None:
        """Closes the page and browser. Safe to call from inside an event handler."""
        self.normalizer.cancel_pending()
        if self.bridge is not None:
            await self.bridge.close()
        if self.session is not None:
            session, self.session = self.session, None
            await session.close()
        await self.media.close()
        await self.pump.stop()
        self.logger.info("session destroyed")

    async def logout(self) -> None:
        """Logs out remotely, tears the session down and removes its local profile."""
        try:
            await self.bridge.execute(scripts.LOGOUT)
        finally:
            await self.destroy()

        session_name = self.options.get("session_name")
        if not session_name:
            return
        session_dir = os.path.join(os.path.abspath(self.options.get("session_path") or "./.wajs_auth"), session_name)
        if os.path.isdir(session_dir):
            await asyncio.to_thread(shutil.rmtree, session_dir, True)

    async def get_state(self) -> Optional[str]:
        try:
            return await self.bridge.execute(scripts.GET_STATE)
        except SessionClosedError:
            return None

    async def get_wweb_version(self) -> str:
        if self._wweb_version is None:
            self._wweb_version = await self.bridge.execute(scripts.WWEB_VERSION)
        return self._wweb_version

    async def reset_state(self) -> None:
        await self.bridge.execute(RESET_STATE)

    # messages

    async def send_message(self, chat_id: str, content: Any, options: Any = None) -> Message:
        return await self.messages.send_message(chat_id, content, options)

    async def search_messages(
        self,
        query: str,
        page: int | None = None,
        limit: int | None = None,
        chat_id: str | None = None,
    ) -> list[Message]:
        return await self.messages.search_messages(query, page=page, limit=limit, chat_id=chat_id)

    async def get_message_by_id(self, message_id: str) -> Optional[Message]:
        return await self.messages.get_message_by_id(message_id)

    # chats

    async def get_chats(self) -> list[Chat]:
        return await self.chats.get_chats()

    async def get_chat_by_id(self, chat_id: str) -> Optional[Chat]:
        return await self.chats.get_chat_by_id(chat_id)

    async def archive_chat(self, chat_id: str) -> bool:
        return await self.chats.archive(chat_id)

    async def unarchive_chat(self, chat_id: str) -> bool:
        return await self.chats.unarchive(chat_id)

    async def pin_chat(self, chat_id: str) -> bool:
        return await self.chats.pin(chat_id)

    async def unpin_chat(self, chat_id: str) -> bool:
        return await self.chats.unpin(chat_id)

    async def mute_chat(self, chat_id: str, unmute_at: Optional[float] = None) -> None:
        await self.chats.mute(chat_id, unmute_at)

    async def unmute_chat(self, chat_id: str) -> None:
        await self.chats.unmute(chat_id)

    async def mark_chat_unread(self, chat_id: str) -> None:
        await self.chats.mark_unread(chat_id)

    async def send_seen(self, chat_id: str) -> bool:
        return await self.chats.send_seen(chat_id)

    # contacts

    async def get_contacts(self) -> list[Contact]:
        return await self.contacts.get_contacts()

    async def get_contact_by_id(self, contact_id: str) -> Optional[Contact]:
        return await self.contacts.get_contact_by_id(contact_id)

    async def get_profile_pic_url(self, contact_id: str) -> Optional[str]:
        return await self.contacts.get_profile_pic_url(contact_id)

    async def get_number_id(self, number: str) -> Optional[dict[str, Any]]:
        return await self.contacts.get_number_id(number)

    async def is_registered_user(self, contact_id: str) -> bool:
        return await self.contacts.is_registered_user(contact_id)

    async def get_formatted_number(self, number: str) -> str:
        return await self.contacts.get_formatted_number(number)

    async def get_country_code(self, number: str) -> str:
        return await self.contacts.get_country_code(number)

    async def get_common_groups(self, contact_id: str) -> list[str]:
        return await self.contacts.get_common_groups(contact_id)

    async def get_blocked_contacts(self) -> list[Contact]:
        return await self.contacts.get_blocked_contacts()

    # groups

    async def create_group(self, title: str, participants: Any = None, **options: Any) -> CreateGroupResult:
        return await self.groups.create_group(title, participants, **options)

    async def get_group_membership_requests(self, group_id: str) -> list[dict[str, Any]]:
        return await self.groups.get_membership_requests(group_id)

    async def approve_group_membership_requests(
        self,
        group_id: str,
        requester_ids: Any = None,
        sleep: SleepOption = DEFAULT_BATCH_SLEEP_MS,
    ) -> list[MembershipRequestResult]:
        return await self.groups.approve_membership_requests(group_id, requester_ids, sleep=sleep)

    async def reject_group_membership_requests(
        self,
        group_id: str,
        requester_ids: Any = None,
        sleep: SleepOption = DEFAULT_BATCH_SLEEP_MS,
    ) -> list[MembershipRequestResult]:
        return await self.groups.reject_membership_requests(group_id, requester_ids, sleep=sleep)

    async def accept_invite(self, invite_code: str) -> str:
        return await self.groups.accept_invite(invite_code)

    async def get_invite_info(self, invite_code: str) -> dict[str, Any]:
        return await self.groups.get_invite_info(invite_code)

    # labels

    async def get_labels(self) -> list[Label]:
        return await self.labels.get_labels()

    async def get_label_by_id(self, label_id: str) -> Optional[Label]:
        return await self.labels.get_label_by_id(label_id)

    async def get_chat_labels(self, chat_id: str) -> list[Label]:
        return await self.labels.get_chat_labels(chat_id)

    async def get_chats_by_label_id(self, label_id: str) -> list[Chat]:
        return await self.labels.get_chats_by_label_id(label_id)

    async def add_or_remove_labels(self, label_ids: list[str], chat_ids: list[str]) -> Any:
        return await self.labels.add_or_remove_labels(label_ids, chat_ids)

    # presence and profile

    async def send_presence_available(self) -> None:
        await self.presence.send_available()

    async def send_presence_unavailable(self) -> None:
        await self.presence.send_unavailable()

    async def set_status(self, status: str) -> None:
        await self.profile.set_status(status)

    async def set_display_name(self, display_name: str) -> bool:
        return await self.profile.set_display_name(display_name)

    async def set_profile_picture(self, media: MessageMedia) -> bool:
        return await self.profile.set_profile_picture(media)

    async def delete_profile_picture(self) -> bool:
        return await self.profile.delete_profile_picture()

    async def set_auto_download_audio(self, flag: bool) -> bool:
        return await self.profile.set_auto_download_audio(flag)

    async def set_auto_download_documents(self, flag: bool) -> bool:
        return await self.profile.set_auto_download_documents(flag)

    async def set_auto_download_photos(self, flag: bool) -> bool:
        return await self.profile.set_auto_download_photos(flag)

    async def set_auto_download_videos(self, flag: bool) -> bool:
        return await self.profile.set_auto_download_videos(flag)

    async def join_web_beta(self, action: bool) -> None:
        await self.profile.join_web_beta(action)
