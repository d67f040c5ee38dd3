"""High-level app framework exports."""

from .app import App, Context
from . import filters

__all__ = ["App", "Context", "filters"]
