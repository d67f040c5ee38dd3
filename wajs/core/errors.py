from typing import Optional

SERVER_STATUS_CODE_ERROR = "ServerStatusCodeError"


class WajsError(Exception):
    """Base exception for wajs."""
    pass


class BridgeError(WajsError):
    """Raised when a call across the page boundary fails.

    ``name`` and ``message`` carry the remote error verbatim so call sites can
    match on known remote error names.
    """
    def __init__(self, name: str, message: str = ""):
        super().__init__(f"{name}: {message}" if message else name)
        self.name = name
        self.message = message


class SessionClosedError(BridgeError):
    """Raised for every bridge call made after the page was torn down."""
    def __init__(self, message: str = "the browser session is closed"):
        super().__init__("SessionClosedError", message)


class ValidationError(WajsError, ValueError):
    """Raised for malformed input before anything is sent to the page."""
    pass


class StickerFormatError(WajsError):
    """Raised when media could not be converted into a sticker."""
    def __init__(self, message: str, mimetype: Optional[str] = None):
        super().__init__(message)
        self.mimetype = mimetype


def is_server_status_error(exc: BaseException) -> bool:
    return isinstance(exc, BridgeError) and exc.name == SERVER_STATUS_CODE_ERROR
