"""Client package public exports."""

from .client import Client
from .messages import MessageSendOptions

__all__ = ["Client", "MessageSendOptions"]
