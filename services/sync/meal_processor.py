"""Meal entity processor"""

from domain.enums import EntityKind
from domain.mappers.sync_mapper import SyncMapper
from domain.models import Meal
from domain.schemas.sync_schemas import MealRecord, ProcessingReport
from services.sync.processor_base import EntityProcessor


class MealEntityProcessor(EntityProcessor):
    kind = EntityKind.MEALS
    entity_type = "Meal"
    model = Meal
    record_class = MealRecord
    required_fields = ("scaling_factor", "meal_type")

    def apply_fields(self, meal: Meal, record: MealRecord) -> None:
        SyncMapper.apply_meal_fields(meal, record)

    def resolve_references(self, meal: Meal, record: MealRecord, report: ProcessingReport) -> None:
        self.resolve_owner(meal, record, report)
        self.resolve_reference(
            meal, "recipe", record.recipe_id, EntityKind.RECIPES, report, field="recipeId"
        )
        self.resolve_reference(
            meal, "todo_item", record.todo_item_id, EntityKind.TODO_ITEMS, report, field="todoItemId"
        )
        self.reconcile_collection(
            meal,
            "shopping_list_items",
            record.shopping_list_item_ids,
            EntityKind.SHOPPING_LIST_ITEMS,
            report,
            field="shoppingListItemIds",
        )
