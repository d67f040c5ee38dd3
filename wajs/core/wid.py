from dataclasses import dataclass
from typing import Any, Optional

C_US = "c.us"
G_US = "g.us"
S_WHATSAPP_NET = "s.whatsapp.net"
S_LID = "lid"
S_BROADCAST = "broadcast"

STATUS_BROADCAST = f"status@{S_BROADCAST}"


@dataclass
class Wid:
    user: str
    server: str

    @property
    def serialized(self) -> str:
        return wid_encode(self.user, self.server)

    def __str__(self) -> str:
        return self.serialized


def wid_decode(value: Any) -> Optional[Wid]:
    """Decodes a wid from its serialized string or the remote object form."""
    if not value:
        return None

    if isinstance(value, dict):
        server = value.get("server")
        user = value.get("user")
        if server is not None:
            return Wid(user=str(user or ""), server=str(server))
        value = value.get("_serialized")
        if not value:
            return None

    parts = str(value).split("@", 1)
    if len(parts) == 1:
        return Wid(user="", server=parts[0])
    return Wid(user=parts[0], server=parts[1])


def wid_encode(user: str, server: str) -> str:
    return f"{user}@{server}" if user else server


def serialize_wid(value: Any) -> Optional[str]:
    """Returns the `_serialized` form of a remote wid object, or the value itself for strings."""
    if value is None:
        return None
    if isinstance(value, dict):
        serialized = value.get("_serialized")
        if serialized:
            return str(serialized)
        decoded = wid_decode(value)
        return decoded.serialized if decoded else None
    return str(value)


def is_group_wid(value: str) -> bool:
    return value.endswith(f"@{G_US}")


def is_user_wid(value: str) -> bool:
    return value.endswith(f"@{C_US}") or value.endswith(f"@{S_WHATSAPP_NET}")


def is_lid_wid(value: str) -> bool:
    return value.endswith(f"@{S_LID}")


def is_status_broadcast(value: str | None) -> bool:
    return value == STATUS_BROADCAST


def to_user_wid(number: str) -> str:
    """Appends the `c.us` server to a bare phone number."""
    if number.endswith(f"@{C_US}"):
        return number
    return f"{number}@{C_US}"
