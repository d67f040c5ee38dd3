from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from wajs.core.contact import Contact
from wajs.core.factory import create_contact
from wajs.core.wid import C_US, S_WHATSAPP_NET, to_user_wid

if TYPE_CHECKING:
    from wajs.client.client import Client

GET_CONTACTS = "async () => await window.WAJS.getContacts()"

GET_CONTACT = """async (contactId) => {
    const contact = await window.WPP.contact.get(contactId);
    return contact ? await window.WAJS.getContactModel(contact) : null;
}"""

GET_PROFILE_PIC_URL = "async (contactId) => await window.WPP.contact.getProfilePictureUrl(contactId)"

QUERY_EXISTS = """async (contactId) => {
    const result = await window.WPP.contact.queryExists(contactId);
    return result && result.wid ? result.wid : null;
}"""

FORMATTED_NUMBER = "async (numberId) => window.Store.NumberInfo.formattedPhoneNumber(numberId)"

COUNTRY_CODE = "async (numberId) => window.Store.NumberInfo.findCC(numberId)"

COMMON_GROUPS = """async (contactId) => {
    const wid = window.WPP.whatsapp.WidFactory.createWid(contactId);
    let contact = window.WPP.whatsapp.ContactStore.get(contactId);
    if (!contact) {
        contact = window.WPP.whatsapp.ContactStore.gadd(wid);
    }
    if (!contact.commonGroups) {
        contact.commonGroups = await window.WPP.whatsapp.ContactStore.findCommonGroups(contact);
    }
    return contact.commonGroups ? contact.commonGroups.map((group) => group.id._serialized) : [];
}"""

GET_BLOCKED = """async () => {
    const ids = window.WPP.whatsapp.BlocklistStore.getModelsArray().map((item) => item.id._serialized);
    return Promise.all(ids.map((id) => window.WAJS.getContact(id)));
}"""

BLOCK = "async (contactId) => { await window.WPP.blocklist.blockContact(contactId); }"

UNBLOCK = "async (contactId) => { await window.WPP.blocklist.unblockContact(contactId); }"

GET_ABOUT = """async (contactId) => {
    const status = await window.WPP.contact.getStatus(contactId);
    return status && typeof status.status === 'string' ? status.status : null;
}"""


_USER_SUFFIX = f"@{C_US}"
_PHONE_SUFFIX = f"@{S_WHATSAPP_NET}"


class ContactsAPI:
    def __init__(self, client: Client) -> None:
        self.client = client

    async def get_contacts(self) -> list[Contact]:
        raw_contacts = await self.client.bridge.execute(GET_CONTACTS) or []
        return [create_contact(self.client, raw) for raw in raw_contacts]

    async def get_contact_by_id(self, contact_id: str) -> Optional[Contact]:
        raw = await self.client.bridge.execute(GET_CONTACT, contact_id)
        if not raw:
            return None
        return create_contact(self.client, raw)

    async def get_profile_pic_url(self, contact_id: str) -> Optional[str]:
        return await self.client.bridge.execute(GET_PROFILE_PIC_URL, contact_id)

    async def get_number_id(self, number: str) -> Optional[dict[str, Any]]:
        """Resolves a phone number to its WhatsApp wid, or None when unregistered."""
        return await self.client.bridge.execute(QUERY_EXISTS, to_user_wid(number))

    async def is_registered_user(self, contact_id: str) -> bool:
        return bool(await self.get_number_id(contact_id))

    async def get_formatted_number(self, number: str) -> str:
        if not number.endswith(_PHONE_SUFFIX):
            number = number.replace(_USER_SUFFIX, "") + _PHONE_SUFFIX
        return await self.client.bridge.execute(FORMATTED_NUMBER, number)

    async def get_country_code(self, number: str) -> str:
        number = number.replace(" ", "").replace("+", "").replace(_USER_SUFFIX, "")
        return await self.client.bridge.execute(COUNTRY_CODE, number)

    async def get_common_groups(self, contact_id: str) -> list[str]:
        return await self.client.bridge.execute(COMMON_GROUPS, contact_id) or []

    async def get_blocked_contacts(self) -> list[Contact]:
        raw_contacts = await self.client.bridge.execute(GET_BLOCKED) or []
        return [create_contact(self.client, raw) for raw in raw_contacts if raw]

    async def block(self, contact_id: str) -> None:
        await self.client.bridge.execute(BLOCK, contact_id)

    async def unblock(self, contact_id: str) -> None:
        await self.client.bridge.execute(UNBLOCK, contact_id)

    async def get_about(self, contact_id: str) -> Optional[str]:
        return await self.client.bridge.execute(GET_ABOUT, contact_id)
