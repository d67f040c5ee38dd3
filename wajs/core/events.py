from enum import Enum, IntEnum


class Events(str, Enum):
    """Names of the events emitted by :class:`wajs.client.client.Client`."""
    QR_RECEIVED = "qr"
    CODE_RECEIVED = "code"
    AUTHENTICATED = "authenticated"
    AUTHENTICATION_FAILURE = "auth_failure"
    LOADING_SCREEN = "loading_screen"
    READY = "ready"
    MESSAGE_RECEIVED = "message"
    MESSAGE_CREATE = "message_create"
    MESSAGE_CIPHERTEXT = "message_ciphertext"
    MESSAGE_REVOKED_EVERYONE = "message_revoke_everyone"
    MESSAGE_REVOKED_ME = "message_revoke_me"
    MESSAGE_ACK = "message_ack"
    MESSAGE_EDIT = "message_edit"
    MEDIA_UPLOADED = "media_uploaded"
    GROUP_JOIN = "group_join"
    GROUP_LEAVE = "group_leave"
    GROUP_ADMIN_CHANGED = "group_admin_changed"
    GROUP_MEMBERSHIP_REQUEST = "group_membership_request"
    GROUP_UPDATE = "group_update"
    CONTACT_CHANGED = "contact_changed"
    STATE_CHANGED = "change_state"
    DISCONNECTED = "disconnected"
    INCOMING_CALL = "incoming_call"
    UNREAD_COUNT = "unread_count"
    CHAT_REMOVED = "chat_removed"
    CHAT_ARCHIVED = "chat_archived"
    MESSAGE_REACTION = "message_reaction"


class WAState(str, Enum):
    CONFLICT = "CONFLICT"
    CONNECTED = "CONNECTED"
    DEPRECATED_VERSION = "DEPRECATED_VERSION"
    OPENING = "OPENING"
    PAIRING = "PAIRING"
    PROXYBLOCK = "PROXYBLOCK"
    SMB_TOS_BLOCK = "SMB_TOS_BLOCK"
    TIMEOUT = "TIMEOUT"
    TOS_BLOCK = "TOS_BLOCK"
    UNLAUNCHED = "UNLAUNCHED"
    UNPAIRED = "UNPAIRED"
    UNPAIRED_IDLE = "UNPAIRED_IDLE"


class MessageTypes(str, Enum):
    TEXT = "chat"
    AUDIO = "audio"
    VOICE = "ptt"
    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"
    STICKER = "sticker"
    LOCATION = "location"
    CONTACT_CARD = "vcard"
    CONTACT_CARD_MULTI = "multi_vcard"
    ORDER = "order"
    REVOKED = "revoked"
    PRODUCT = "product"
    UNKNOWN = "unknown"
    GROUP_INVITE = "groups_v4_invite"
    LIST = "list"
    LIST_RESPONSE = "list_response"
    BUTTONS_RESPONSE = "buttons_response"
    PAYMENT = "payment"
    BROADCAST_NOTIFICATION = "broadcast_notification"
    CALL_LOG = "call_log"
    CIPHERTEXT = "ciphertext"
    DEBUG = "debug"
    E2E_NOTIFICATION = "e2e_notification"
    GP2 = "gp2"
    GROUP_NOTIFICATION = "group_notification"
    HSM = "hsm"
    INTERACTIVE = "interactive"
    NATIVE_FLOW = "native_flow"
    NOTIFICATION = "notification"
    NOTIFICATION_TEMPLATE = "notification_template"
    OVERSIZED = "oversized"
    PROTOCOL = "protocol"
    REACTION = "reaction"
    TEMPLATE_BUTTON_REPLY = "template_button_reply"
    POLL_CREATION = "poll_creation"


class MessageAck(IntEnum):
    ACK_ERROR = -1
    ACK_PENDING = 0
    ACK_SERVER = 1
    ACK_DEVICE = 2
    ACK_READ = 3
    ACK_PLAYED = 4


class GroupNotificationTypes(str, Enum):
    ADD = "add"
    INVITE = "invite"
    REMOVE = "remove"
    LEAVE = "leave"
    PROMOTE = "promote"
    DEMOTE = "demote"
    SUBJECT = "subject"
    DESCRIPTION = "description"
    PICTURE = "picture"
    ANNOUNCE = "announce"
    RESTRICT = "restrict"
    LINKED_GROUP_JOIN = "linked_group_join"
    MEMBERSHIP_REQUEST = "created_membership_requests"
    MODIFY = "modify"


class ChatTypes(str, Enum):
    SOLO = "solo"
    GROUP = "group"
    UNKNOWN = "unknown"


class ChatState(str, Enum):
    TYPING = "typing"
    RECORDING = "recording"
    STOP = "stop"
