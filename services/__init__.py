"""Services package - Business logic layer"""

from services.category_service import CategoryService
from services.space_relationship_service import SpaceRelationshipService
from services.space_service import SpaceService
from services.sync_service import SyncService

__all__ = [
    "CategoryService",
    "SpaceRelationshipService",
    "SpaceService",
    "SyncService",
]
