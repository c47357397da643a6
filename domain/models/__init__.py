"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    create_store_engine,
    init_database,
    get_db_session,
)
from domain.models.sync_state import SyncStateMixin, SoftDeleteMixin, mutator, is_mutator
from domain.models.user import User
from domain.models.recipe import Recipe, Ingredient, RecipeStep
from domain.models.todo import TodoItem, TodoItemCategory, TodoItemEvent
from domain.models.meal import Meal
from domain.models.shopping import ShoppingListItem
from domain.models.space import Space

SYNCABLE_MODELS = (User, Recipe, TodoItem, TodoItemEvent, Meal, ShoppingListItem, Space)

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "create_store_engine",
    "init_database",
    "get_db_session",
    # Sync capability
    "SyncStateMixin",
    "SoftDeleteMixin",
    "mutator",
    "is_mutator",
    "SYNCABLE_MODELS",
    # Entities
    "User",
    "Recipe",
    "Ingredient",
    "RecipeStep",
    "TodoItem",
    "TodoItemCategory",
    "TodoItemEvent",
    "Meal",
    "ShoppingListItem",
    "Space",
]
