"""Server core: configuration and constants."""

from .config import settings

__all__ = ["settings"]
