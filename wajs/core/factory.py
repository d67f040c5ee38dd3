"""Picks the concrete chat or contact variant from a raw snapshot."""

from __future__ import annotations

from typing import Any

from wajs.core.chat import Chat, GroupChat, PrivateChat
from wajs.core.contact import BusinessContact, Contact, PrivateContact


def create_chat(client: Any, data: dict[str, Any]) -> Chat:
    if data.get("isGroup"):
        return GroupChat.from_raw(client, data)
    return PrivateChat.from_raw(client, data)


def create_contact(client: Any, data: dict[str, Any]) -> Contact:
    if data.get("isBusiness"):
        return BusinessContact.from_raw(client, data)
    return PrivateContact.from_raw(client, data)
