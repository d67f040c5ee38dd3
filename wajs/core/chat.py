"""Chat snapshots. Group metadata is captured once and never refreshed in place."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from wajs.core.entities import GroupParticipant, MessageMedia
from wajs.core.events import ChatTypes
from wajs.core.wid import serialize_wid

if TYPE_CHECKING:
    from wajs.client.client import Client
    from wajs.core.message import Message


def _last_message_id(data: dict[str, Any]) -> Optional[str]:
    last = data.get("lastMessage")
    if isinstance(last, dict):
        return (last.get("id") or {}).get("_serialized")
    return None


@dataclass
class Chat:
    id: str
    name: Optional[str] = None
    is_group: bool = False
    is_read_only: bool = False
    unread_count: int = 0
    timestamp: Optional[int] = None
    archived: bool = False
    pinned: bool = False
    is_muted: bool = False
    mute_expiration: int = 0
    last_message_id: Optional[str] = None
    client: Optional["Client"] = field(default=None, repr=False, compare=False)

    @classmethod
    def _base_fields(cls, data: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": serialize_wid(data.get("id")) or "",
            "name": data.get("formattedTitle") or data.get("name"),
            "is_group": bool(data.get("isGroup")),
            "is_read_only": bool(data.get("isReadOnly")),
            "unread_count": data.get("unreadCount") or 0,
            "timestamp": data.get("t"),
            "archived": bool(data.get("archive")),
            "pinned": bool(data.get("pin")),
            "is_muted": bool(data.get("isMuted")),
            "mute_expiration": data.get("muteExpiration") or 0,
            "last_message_id": _last_message_id(data),
        }

    @classmethod
    def from_raw(cls, client: Optional["Client"], data: dict[str, Any]) -> "Chat":
        return cls(client=client, **cls._base_fields(data))

    @property
    def type(self) -> ChatTypes:
        return ChatTypes.GROUP if self.is_group else ChatTypes.SOLO

    async def fetch_last_message(self) -> Optional["Message"]:
        if not self.last_message_id:
            return None
        return await self.client.get_message_by_id(self.last_message_id)

    async def send_message(self, content: Any, options: Any = None) -> "Message":
        return await self.client.send_message(self.id, content, options)

    async def send_seen(self) -> bool:
        return await self.client.chats.send_seen(self.id)

    async def archive(self) -> bool:
        return await self.client.archive_chat(self.id)

    async def unarchive(self) -> bool:
        return await self.client.unarchive_chat(self.id)

    async def pin(self) -> bool:
        return await self.client.pin_chat(self.id)

    async def unpin(self) -> bool:
        return await self.client.unpin_chat(self.id)

    async def mute(self, unmute_at: Optional[float] = None) -> None:
        await self.client.mute_chat(self.id, unmute_at)

    async def unmute(self) -> None:
        await self.client.unmute_chat(self.id)

    async def mark_unread(self) -> None:
        await self.client.mark_chat_unread(self.id)

    async def fetch_messages(self, limit: int | None = None, from_me: bool | None = None) -> list["Message"]:
        return await self.client.chats.fetch_messages(self.id, limit=limit, from_me=from_me)

    async def clear_messages(self) -> bool:
        return await self.client.chats.clear_messages(self.id)

    async def delete(self) -> bool:
        return await self.client.chats.delete(self.id)

    async def send_state_typing(self) -> bool:
        return await self.client.presence.send_chat_state("typing", self.id)

    async def send_state_recording(self) -> bool:
        return await self.client.presence.send_chat_state("recording", self.id)

    async def clear_state(self) -> bool:
        return await self.client.presence.send_chat_state("stop", self.id)

    async def get_contact(self):
        return await self.client.get_contact_by_id(self.id)

    async def get_labels(self):
        return await self.client.get_chat_labels(self.id)

    async def change_labels(self, label_ids: list[str]) -> Any:
        return await self.client.add_or_remove_labels(label_ids, [self.id])

    async def reload(self) -> "Chat":
        return await self.client.get_chat_by_id(self.id)


@dataclass
class PrivateChat(Chat):
    pass


@dataclass
class GroupChat(Chat):
    owner: Optional[str] = None
    created_at: Optional[int] = None
    description: Optional[str] = None
    participants: list[GroupParticipant] = field(default_factory=list)
    announce: bool = False
    restrict: bool = False

    @classmethod
    def from_raw(cls, client: Optional["Client"], data: dict[str, Any]) -> "GroupChat":
        meta = data.get("groupMetadata") or {}
        return cls(
            client=client,
            owner=serialize_wid(meta.get("owner")),
            created_at=meta.get("creation"),
            description=meta.get("desc"),
            participants=[GroupParticipant.from_raw(p) for p in meta.get("participants") or []],
            announce=bool(meta.get("announce")),
            restrict=bool(meta.get("restrict")),
            **cls._base_fields(data),
        )

    async def add_participants(self, participant_ids: Any, **options: Any):
        return await self.client.groups.add_participants(self.id, participant_ids, **options)

    async def remove_participants(self, participant_ids: list[str]):
        return await self.client.groups.remove_participants(self.id, participant_ids)

    async def promote_participants(self, participant_ids: list[str]):
        return await self.client.groups.promote_participants(self.id, participant_ids)

    async def demote_participants(self, participant_ids: list[str]):
        return await self.client.groups.demote_participants(self.id, participant_ids)

    async def set_subject(self, subject: str) -> bool:
        if not await self.client.groups.set_subject(self.id, subject):
            return False
        self.name = subject
        return True

    async def set_description(self, description: str) -> bool:
        if not await self.client.groups.set_description(self.id, description):
            return False
        self.description = description
        return True

    async def set_messages_admins_only(self, admins_only: bool = True) -> bool:
        if not await self.client.groups.set_messages_admins_only(self.id, admins_only):
            return False
        self.announce = admins_only
        return True

    async def set_info_admins_only(self, admins_only: bool = True) -> bool:
        if not await self.client.groups.set_info_admins_only(self.id, admins_only):
            return False
        self.restrict = admins_only
        return True

    async def set_picture(self, media: MessageMedia) -> bool:
        return await self.client.groups.set_picture(self.id, media)

    async def delete_picture(self) -> bool:
        return await self.client.groups.delete_picture(self.id)

    async def get_invite_code(self) -> str:
        return await self.client.groups.get_invite_code(self.id)

    async def revoke_invite(self) -> str:
        return await self.client.groups.revoke_invite(self.id)

    async def get_membership_requests(self) -> list[dict[str, Any]]:
        return await self.client.get_group_membership_requests(self.id)

    async def approve_membership_requests(self, requester_ids: Any = None, sleep: Any = (250, 500)):
        return await self.client.approve_group_membership_requests(self.id, requester_ids, sleep=sleep)

    async def reject_membership_requests(self, requester_ids: Any = None, sleep: Any = (250, 500)):
        return await self.client.reject_group_membership_requests(self.id, requester_ids, sleep=sleep)

    async def leave(self) -> None:
        await self.client.groups.leave(self.id)
