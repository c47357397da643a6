"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import UserRepository
from repositories.recipe_repository import RecipeRepository
from repositories.todo_repository import (
    TodoItemRepository,
    TodoItemEventRepository,
    TodoItemCategoryRepository,
)
from repositories.meal_repository import MealRepository
from repositories.shopping_repository import ShoppingListItemRepository
from repositories.space_repository import SpaceRepository
from repositories.local_store import LocalStore

__all__ = [
    "BaseRepository",
    "UserRepository",
    "RecipeRepository",
    "TodoItemRepository",
    "TodoItemEventRepository",
    "TodoItemCategoryRepository",
    "MealRepository",
    "ShoppingListItemRepository",
    "SpaceRepository",
    "LocalStore",
]
