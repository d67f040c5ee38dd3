from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from wajs.core.wid import serialize_wid

if TYPE_CHECKING:
    from wajs.client.client import Client


@dataclass
class Contact:
    id: str
    number: Optional[str] = None
    name: Optional[str] = None
    short_name: Optional[str] = None
    pushname: Optional[str] = None
    verified_name: Optional[str] = None
    verified_level: Optional[int] = None
    is_me: bool = False
    is_user: bool = False
    is_group: bool = False
    is_wa_contact: bool = False
    is_my_contact: bool = False
    is_blocked: bool = False
    is_business: bool = False
    is_enterprise: bool = False
    status_mute: bool = False
    labels: list[str] = field(default_factory=list)
    client: Optional["Client"] = field(default=None, repr=False, compare=False)

    @classmethod
    def _base_fields(cls, data: dict[str, Any]) -> dict[str, Any]:
        raw_id = data.get("id")
        return {
            "id": serialize_wid(raw_id) or "",
            "number": data.get("userid") or (raw_id.get("user") if isinstance(raw_id, dict) else None),
            "name": data.get("name"),
            "short_name": data.get("shortName"),
            "pushname": data.get("pushname"),
            "verified_name": data.get("verifiedName"),
            "verified_level": data.get("verifiedLevel"),
            "is_me": bool(data.get("isMe")),
            "is_user": bool(data.get("isUser")),
            "is_group": bool(data.get("isGroup")),
            "is_wa_contact": bool(data.get("isWAContact")),
            "is_my_contact": bool(data.get("isMyContact")),
            "is_blocked": bool(data.get("isBlocked")),
            "is_business": bool(data.get("isBusiness")),
            "is_enterprise": bool(data.get("isEnterprise")),
            "status_mute": bool(data.get("statusMute")),
            "labels": [str(label) for label in data.get("labels") or []],
        }

    @classmethod
    def from_raw(cls, client: Optional["Client"], data: dict[str, Any]) -> "Contact":
        return cls(client=client, **cls._base_fields(data))

    async def get_profile_pic_url(self) -> Optional[str]:
        return await self.client.get_profile_pic_url(self.id)

    async def get_formatted_number(self) -> str:
        return await self.client.get_formatted_number(self.id)

    async def get_country_code(self) -> str:
        return await self.client.get_country_code(self.id)

    async def get_chat(self):
        if self.is_me:
            return None
        return await self.client.get_chat_by_id(self.id)

    async def get_common_groups(self) -> list[str]:
        return await self.client.get_common_groups(self.id)

    async def block(self) -> bool:
        if self.is_group:
            return False
        await self.client.contacts.block(self.id)
        self.is_blocked = True
        return True

    async def unblock(self) -> bool:
        if self.is_group:
            return False
        await self.client.contacts.unblock(self.id)
        self.is_blocked = False
        return True

    async def get_about(self) -> Optional[str]:
        return await self.client.contacts.get_about(self.id)


@dataclass
class PrivateContact(Contact):
    pass


@dataclass
class BusinessContact(Contact):
    business_profile: Optional[dict[str, Any]] = None

    @classmethod
    def from_raw(cls, client: Optional["Client"], data: dict[str, Any]) -> "BusinessContact":
        return cls(client=client, business_profile=data.get("businessProfile"), **cls._base_fields(data))
