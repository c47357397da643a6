"""
Core package - Shared service plumbing.
"""

from core.base import BaseService

__all__ = ["BaseService"]
