"""Entity processors and the ingestion coordinator"""

from services.sync.processor_base import EntityProcessor
from services.sync.user_processor import UserEntityProcessor
from services.sync.recipe_processor import RecipeEntityProcessor
from services.sync.todo_item_processor import TodoItemEntityProcessor
from services.sync.meal_processor import MealEntityProcessor
from services.sync.shopping_list_item_processor import ShoppingListItemEntityProcessor
from services.sync.coordinator import ProcessorCoordinator, PROCESSING_ORDER, INGESTIBLE_KINDS

__all__ = [
    "EntityProcessor",
    "UserEntityProcessor",
    "RecipeEntityProcessor",
    "TodoItemEntityProcessor",
    "MealEntityProcessor",
    "ShoppingListItemEntityProcessor",
    "ProcessorCoordinator",
    "PROCESSING_ORDER",
    "INGESTIBLE_KINDS",
]
