"""
Sync domain mappers.
Handles transformation between ORM entities and the flat field maps used at
the ingestion/egress boundary.

Field application never calls mark_dirty: ingestion is not a local change.
Values are only assigned when they differ, so replaying a record leaves the
session without pending writes.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from domain.enums import MealType
from domain.models import (
    Ingredient,
    Meal,
    Recipe,
    RecipeStep,
    ShoppingListItem,
    Space,
    TodoItem,
    TodoItemEvent,
    User,
)
from domain.models.types import as_utc
from domain.schemas.sync_schemas import (
    MealRecord,
    RecipeRecord,
    ShoppingListItemRecord,
    SyncRecord,
    TodoItemRecord,
    UserRecord,
)


def to_epoch(value: Optional[datetime]) -> Optional[float]:
    """Seconds since the epoch, treating naive values as UTC."""
    if value is None:
        return None
    return as_utc(value).timestamp()


def _enum_value(value):
    return value.value if value is not None else None


def _uids(entities: Iterable[Any]) -> list:
    return sorted(entity.uid for entity in entities if entity.uid)


def assign(entity: Any, attr: str, value: Any) -> bool:
    """Set an attribute only when the value differs. Returns True on write."""
    if getattr(entity, attr) != value:
        setattr(entity, attr, value)
        return True
    return False


def apply_scalars(
    entity: Any,
    record: SyncRecord,
    fields: Iterable[str],
    nullable: Iterable[str] = (),
) -> int:
    """
    Copy the scalar fields present in a record onto an entity.

    Args:
        entity: target ORM entity
        record: validated ingestion record
        fields: scalar field names shared by record and entity
        nullable: fields for which an explicit null clears the local value

    Returns:
        Number of attributes written
    """
    nullable = set(nullable)
    written = 0
    for field in fields:
        if not record.has(field):
            continue
        value = getattr(record, field)
        if value is None and field not in nullable:
            continue
        written += assign(entity, field, value)
    return written


class SyncMapper:
    """Mapper for synchronizable entities: record → entity and entity → DTO."""

    # ------------------------------------------------------------------
    # Ingestion: scalar fields
    # ------------------------------------------------------------------

    @staticmethod
    def apply_user_fields(user: User, record: UserRecord) -> int:
        return apply_scalars(
            user,
            record,
            ("display_name", "email", "photo_url", "is_registered"),
            nullable=("display_name", "email", "photo_url"),
        )

    @staticmethod
    def apply_recipe_fields(recipe: Recipe, record: RecipeRecord) -> int:
        written = apply_scalars(
            recipe,
            record,
            ("title", "details", "seasonality", "tags", "is_shared", "deleted_at"),
            nullable=("seasonality", "deleted_at"),
        )
        if record.meal_types is not None:
            written += assign(recipe, "meal_types", [m.value for m in record.meal_types])
        if record.has("ingredients"):
            written += SyncMapper._replace_ingredients(recipe, record)
        if record.has("steps"):
            written += SyncMapper._replace_steps(recipe, record)
        return written

    @staticmethod
    def _replace_ingredients(recipe: Recipe, record: RecipeRecord) -> int:
        rows = [
            (row.name, row.order, row.quantity, row.unit)
            for row in (record.ingredients or [])
            if row.name is not None and row.order is not None
        ]
        rows.sort(key=lambda row: row[1])
        current = [(i.name, i.order, i.quantity, i.unit) for i in recipe.ingredients]
        if rows == current:
            return 0
        recipe.ingredients = [
            Ingredient(name=name, order=order, quantity=quantity, unit=unit)
            for name, order, quantity, unit in rows
        ]
        return 1

    @staticmethod
    def _replace_steps(recipe: Recipe, record: RecipeRecord) -> int:
        rows = [
            (row.order, row.instruction, row.type, row.duration)
            for row in (record.steps or [])
            if row.order is not None and row.instruction is not None and row.type is not None
        ]
        rows.sort(key=lambda row: row[0])
        current = [(s.order, s.instruction, s.type, s.duration) for s in recipe.steps]
        if rows == current:
            return 0
        recipe.steps = [
            RecipeStep(order=order, instruction=instruction, type=type, duration=duration)
            for order, instruction, type, duration in rows
        ]
        return 1

    @staticmethod
    def apply_todo_item_fields(todo_item: TodoItem, record: TodoItemRecord) -> int:
        return apply_scalars(
            todo_item,
            record,
            (
                "title",
                "details",
                "due_date",
                "is_completed",
                "recurrence_frequency",
                "recurrence_type",
                "recurrence_interval",
                "ignore_time_component",
                "priority",
                "deleted_at",
            ),
            nullable=(
                "due_date",
                "recurrence_frequency",
                "recurrence_type",
                "recurrence_interval",
                "deleted_at",
            ),
        )

    @staticmethod
    def apply_meal_fields(meal: Meal, record: MealRecord) -> int:
        return apply_scalars(
            meal,
            record,
            ("scaling_factor", "meal_type", "is_done", "deleted_at"),
            nullable=("deleted_at",),
        )

    @staticmethod
    def apply_shopping_list_item_fields(
        item: ShoppingListItem, record: ShoppingListItemRecord
    ) -> int:
        return apply_scalars(
            item,
            record,
            ("name", "quantity", "unit", "is_purchased", "deleted_at"),
            nullable=("quantity", "unit", "deleted_at"),
        )

    # ------------------------------------------------------------------
    # Egress
    # ------------------------------------------------------------------

    @staticmethod
    def _base_dto(entity, entity_type: str) -> Dict[str, Any]:
        return {
            "entityType": entity_type,
            "uid": entity.uid,
            "ownerId": entity.owner_uid or "",
            "lastModified": to_epoch(entity.last_modified),
        }

    @staticmethod
    def user_to_dto(user: User) -> Dict[str, Any]:
        dto = SyncMapper._base_dto(user, "User")
        dto.update(
            {
                "displayName": user.display_name,
                "email": user.email,
                "photoUrl": user.photo_url,
                "isRegistered": bool(user.is_registered),
                "friendIds": _uids(user.friends),
            }
        )
        return dto

    @staticmethod
    def recipe_to_dto(recipe: Recipe) -> Dict[str, Any]:
        dto = SyncMapper._base_dto(recipe, "Recipe")
        dto.update(
            {
                "title": recipe.title,
                "details": recipe.details,
                "seasonality": _enum_value(recipe.seasonality),
                "mealTypes": [MealType(m).value for m in (recipe.meal_types or [])],
                "tags": list(recipe.tags or []),
                "isShared": bool(recipe.is_shared),
                "deletedAt": to_epoch(recipe.deleted_at),
                "ingredients": [
                    {
                        "name": ingredient.name,
                        "order": ingredient.order,
                        "quantity": ingredient.quantity,
                        "unit": _enum_value(ingredient.unit),
                    }
                    for ingredient in recipe.ingredients
                ],
                "steps": [
                    {
                        "order": step.order,
                        "instruction": step.instruction,
                        "type": _enum_value(step.type),
                        "duration": step.duration,
                    }
                    for step in recipe.steps
                ],
                "mealIds": _uids(recipe.meals),
                "spaceIds": _uids(recipe.spaces),
            }
        )
        return dto

    @staticmethod
    def todo_item_to_dto(todo_item: TodoItem) -> Dict[str, Any]:
        dto = SyncMapper._base_dto(todo_item, "TodoItem")
        dto.update(
            {
                "title": todo_item.title,
                "details": todo_item.details,
                "dueDate": to_epoch(todo_item.due_date),
                "isCompleted": bool(todo_item.is_completed),
                "recurrenceFrequency": _enum_value(todo_item.recurrence_frequency),
                "recurrenceType": _enum_value(todo_item.recurrence_type),
                "recurrenceInterval": todo_item.recurrence_interval,
                "ignoreTimeComponent": bool(todo_item.ignore_time_component),
                "priority": todo_item.priority,
                "deletedAt": to_epoch(todo_item.deleted_at),
                "spaceIds": _uids(todo_item.spaces),
            }
        )
        # Unset references are omitted: an absent field clears on ingestion
        if todo_item.category is not None:
            dto["categoryName"] = todo_item.category.name
        if todo_item.meal is not None:
            dto["mealId"] = todo_item.meal.uid
        if todo_item.shopping_list_item is not None:
            dto["shoppingListItemId"] = todo_item.shopping_list_item.uid
        return dto

    @staticmethod
    def todo_item_event_to_dto(event: TodoItemEvent) -> Dict[str, Any]:
        dto = SyncMapper._base_dto(event, "TodoItemEvent")
        dto.update(
            {
                "type": _enum_value(event.type),
                "date": to_epoch(event.date),
                "spaceIds": _uids(event.spaces),
            }
        )
        if event.todo_item is not None:
            dto["todoItemId"] = event.todo_item.uid

        previous = {
            "previousTitle": event.previous_title,
            "previousDetails": event.previous_details,
            "previousDueDate": to_epoch(event.previous_due_date),
            "previousIsCompleted": event.previous_is_completed,
            "previousRecurrenceFrequency": _enum_value(event.previous_recurrence_frequency),
            "previousRecurrenceType": _enum_value(event.previous_recurrence_type),
            "previousRecurrenceInterval": event.previous_recurrence_interval,
            "previousIgnoreTimeComponent": event.previous_ignore_time_component,
            "previousPriority": event.previous_priority,
            "previousCategory": event.previous_category,
        }
        dto.update({key: value for key, value in previous.items() if value is not None})
        return dto

    @staticmethod
    def meal_to_dto(meal: Meal) -> Dict[str, Any]:
        dto = SyncMapper._base_dto(meal, "Meal")
        dto.update(
            {
                "scalingFactor": meal.scaling_factor,
                "mealType": _enum_value(meal.meal_type),
                "isDone": bool(meal.is_done),
                "deletedAt": to_epoch(meal.deleted_at),
                "shoppingListItemIds": _uids(meal.shopping_list_items),
                "spaceIds": _uids(meal.spaces),
            }
        )
        if meal.todo_item is not None:
            dto["todoItemId"] = meal.todo_item.uid
        if meal.recipe is not None:
            dto["recipeId"] = meal.recipe.uid
        return dto

    @staticmethod
    def shopping_list_item_to_dto(item: ShoppingListItem) -> Dict[str, Any]:
        dto = SyncMapper._base_dto(item, "ShoppingListItem")
        dto.update(
            {
                "name": item.name,
                "quantity": item.quantity,
                "unit": _enum_value(item.unit),
                "isPurchased": bool(item.is_purchased),
                "deletedAt": to_epoch(item.deleted_at),
                "mealIds": _uids(item.meals),
                "spaceIds": _uids(item.spaces),
            }
        )
        if item.todo_item is not None:
            dto["todoItemId"] = item.todo_item.uid
        return dto

    @staticmethod
    def space_to_dto(space: Space) -> Dict[str, Any]:
        dto = SyncMapper._base_dto(space, "Space")
        dto.update(
            {
                "name": space.name,
                "shareAllRecipes": bool(space.share_all_recipes),
                "shareAllMeals": bool(space.share_all_meals),
                "shareAllShoppingItems": bool(space.share_all_shopping_items),
                "memberIds": _uids(space.members),
                "sharedCategoryNames": sorted(c.name for c in space.shared_categories),
            }
        )
        return dto

    @staticmethod
    def to_dto(entity) -> Dict[str, Any]:
        """Encode any synchronizable entity; references become ids, never objects."""
        encoder = _ENCODERS.get(type(entity))
        if encoder is None:
            raise TypeError(f"No DTO encoder for {type(entity).__name__}")
        return encoder(entity)


_ENCODERS = {
    User: SyncMapper.user_to_dto,
    Recipe: SyncMapper.recipe_to_dto,
    TodoItem: SyncMapper.todo_item_to_dto,
    TodoItemEvent: SyncMapper.todo_item_event_to_dto,
    Meal: SyncMapper.meal_to_dto,
    ShoppingListItem: SyncMapper.shopping_list_item_to_dto,
    Space: SyncMapper.space_to_dto,
}
