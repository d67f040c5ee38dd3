"""Default constants and configuration values for wajs."""

from .config import DEFAULT_CLIENT_OPTIONS, WHATSAPP_WEB_URL

__all__ = ["DEFAULT_CLIENT_OPTIONS", "WHATSAPP_WEB_URL"]
