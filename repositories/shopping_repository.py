"""
Shopping List Repository - Data access layer for shopping list operations
"""

from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import ShoppingListItem


class ShoppingListItemRepository(BaseRepository[ShoppingListItem]):
    """Repository for shopping list item data access"""

    def __init__(self, db: Session):
        super().__init__(db, ShoppingListItem)
