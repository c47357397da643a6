"""Todo item category service"""

import logging
from typing import List, Optional

from domain.models import TodoItemCategory
from repositories.local_store import LocalStore

logger = logging.getLogger("vesta.categories")


class CategoryService:
    """Find-or-create resolution for todo item categories."""

    @staticmethod
    def fetch_or_create(store: LocalStore, name: Optional[str]) -> Optional[TodoItemCategory]:
        """
        Resolve a category by name, creating it when unknown.

        Args:
            store: Local store of the current unit of work
            name: Category name; surrounding whitespace is ignored

        Returns:
            The category, or None for an empty or whitespace-only name
        """
        if name is None:
            return None
        trimmed = name.strip()
        if not trimmed:
            return None

        existing = store.categories.get_by_name(trimmed)
        if existing:
            return existing

        category = TodoItemCategory(name=trimmed)
        store.insert(category)
        logger.info(f"Created todo item category '{trimmed}'")
        return category

    @staticmethod
    def list_categories(store: LocalStore) -> List[TodoItemCategory]:
        """All categories sorted by name"""
        return store.categories.get_all()

    @staticmethod
    def find_matching(store: LocalStore, prefix: str, limit: int = 20) -> List[TodoItemCategory]:
        """Categories whose name starts with `prefix`, case-insensitively"""
        prefix = (prefix or "").strip()
        if not prefix:
            return CategoryService.list_categories(store)[:limit]
        return store.categories.search_by_prefix(prefix, limit=limit)
