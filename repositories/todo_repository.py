"""
Todo Repositories - Data access layer for todo items, their events and categories
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import TodoItem, TodoItemCategory, TodoItemEvent


class TodoItemRepository(BaseRepository[TodoItem]):
    """Repository for todo item data access"""

    def __init__(self, db: Session):
        super().__init__(db, TodoItem)


class TodoItemEventRepository(BaseRepository[TodoItemEvent]):
    """Repository for todo item event data access"""

    def __init__(self, db: Session):
        super().__init__(db, TodoItemEvent)


class TodoItemCategoryRepository:
    """
    Repository for todo item categories.
    Categories are keyed by name and carry no sync state of their own.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_by_name(self, name: str) -> Optional[TodoItemCategory]:
        """Get category by exact name"""
        return (
            self.db.query(TodoItemCategory)
            .filter(TodoItemCategory.name == name)
            .first()
        )

    def get_all(self) -> List[TodoItemCategory]:
        """Get all categories ordered by name"""
        return self.db.query(TodoItemCategory).order_by(TodoItemCategory.name).all()

    def search_by_prefix(self, prefix: str, limit: int = 20) -> List[TodoItemCategory]:
        """Case-insensitive name prefix search"""
        return (
            self.db.query(TodoItemCategory)
            .filter(TodoItemCategory.name.ilike(f"{prefix}%"))
            .order_by(TodoItemCategory.name)
            .limit(limit)
            .all()
        )

    def add(self, category: TodoItemCategory) -> TodoItemCategory:
        """Stage new category and flush so it gets an id"""
        self.db.add(category)
        self.db.flush()
        return category
