"""Python WhatsApp Web client driven through a Playwright browser page."""

__version__ = "0.1.0"

__all__ = [
    "App",
    "Context",
    "filters",
    "Client",
    "Events",
    "Message",
    "Chat",
    "Contact",
    "MessageMedia",
    "WajsError",
    "BridgeError",
    "SessionClosedError",
    "ValidationError",
]


def __getattr__(name: str) -> object:
    """Lazy exports so importing the package does not pull in the browser driver."""
    if name in {"App", "Context"}:
        from .app.app import App, Context

        return {"App": App, "Context": Context}[name]

    if name == "filters":
        from .app import filters

        return filters

    if name == "Client":
        from .client.client import Client

        return Client

    if name == "Events":
        from .core.events import Events

        return Events

    if name in {"Message", "Chat", "Contact", "MessageMedia"}:
        from .core.chat import Chat
        from .core.contact import Contact
        from .core.entities import MessageMedia
        from .core.message import Message

        return {
            "Message": Message,
            "Chat": Chat,
            "Contact": Contact,
            "MessageMedia": MessageMedia,
        }[name]

    if name in {"WajsError", "BridgeError", "SessionClosedError", "ValidationError"}:
        from .core.errors import BridgeError, SessionClosedError, ValidationError, WajsError

        return {
            "WajsError": WajsError,
            "BridgeError": BridgeError,
            "SessionClosedError": SessionClosedError,
            "ValidationError": ValidationError,
        }[name]

    raise AttributeError(f"module 'wajs' has no attribute {name!r}")
