from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from wajs.core.wid import serialize_wid


@dataclass
class IdentityChange:
    old_id: Optional[str]
    new_id: Optional[str]
    is_contact: bool


def detect_identity_change(data: dict[str, Any]) -> Optional[IdentityChange]:
    """Recognises a phone number change by a group participant or a contact.

    Participant: ``gp2``/``modify``, new id is the first recipient, old id the author.
    Contact: ``notification_template``/``change_number``, new id is ``to``, old id the
    template parameter that differs from it.
    """
    msg_type = data.get("type")
    subtype = data.get("subtype")

    if msg_type == "gp2" and subtype == "modify":
        recipients = data.get("recipients") or []
        new_id = serialize_wid(recipients[0]) if recipients else None
        return IdentityChange(old_id=serialize_wid(data.get("author")), new_id=new_id, is_contact=False)

    if msg_type == "notification_template" and subtype == "change_number":
        new_id = serialize_wid(data.get("to"))
        params = [serialize_wid(p) for p in data.get("templateParams") or []]
        old_id = next((p for p in params if p != new_id), None)
        return IdentityChange(old_id=old_id, new_id=new_id, is_contact=True)

    return None
