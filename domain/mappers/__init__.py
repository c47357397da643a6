"""
Domain mappers package.
Handles transformation between ORM models and DTOs (Data Transfer Objects).
"""

from domain.mappers.sync_mapper import SyncMapper, to_epoch
from domain.mappers.space_mapper import SpaceMapper

__all__ = ["SyncMapper", "SpaceMapper", "to_epoch"]
