from .wid import (
    Wid,
    wid_decode,
    wid_encode,
    serialize_wid,
    is_group_wid,
    is_user_wid,
    is_lid_wid,
    is_status_broadcast,
    C_US,
    G_US,
    S_WHATSAPP_NET,
    STATUS_BROADCAST,
)
from .errors import WajsError, BridgeError, SessionClosedError, ValidationError, StickerFormatError

__all__ = [
    "Wid",
    "wid_decode",
    "wid_encode",
    "serialize_wid",
    "is_group_wid",
    "is_user_wid",
    "is_lid_wid",
    "is_status_broadcast",
    "C_US",
    "G_US",
    "S_WHATSAPP_NET",
    "STATUS_BROADCAST",
    "WajsError",
    "BridgeError",
    "SessionClosedError",
    "ValidationError",
    "StickerFormatError",
]
