"""API routes package"""

from . import health, spaces, sync

__all__ = ["health", "spaces", "sync"]
