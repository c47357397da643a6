"""Recipe entity processor"""

from domain.enums import EntityKind
from domain.mappers.sync_mapper import SyncMapper
from domain.models import Recipe
from domain.schemas.sync_schemas import ProcessingReport, RecipeRecord
from services.sync.processor_base import EntityProcessor


class RecipeEntityProcessor(EntityProcessor):
    kind = EntityKind.RECIPES
    entity_type = "Recipe"
    model = Recipe
    record_class = RecipeRecord
    required_fields = ("title", "details")

    def apply_fields(self, recipe: Recipe, record: RecipeRecord) -> None:
        SyncMapper.apply_recipe_fields(recipe, record)

    def resolve_references(self, recipe: Recipe, record: RecipeRecord, report: ProcessingReport) -> None:
        self.resolve_owner(recipe, record, report)
        self.reconcile_collection(
            recipe, "meals", record.meal_ids, EntityKind.MEALS, report, field="mealIds"
        )
