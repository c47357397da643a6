"""ShoppingListItem entity processor"""

from domain.enums import EntityKind
from domain.mappers.sync_mapper import SyncMapper
from domain.models import ShoppingListItem
from domain.schemas.sync_schemas import ProcessingReport, ShoppingListItemRecord
from services.sync.processor_base import EntityProcessor


class ShoppingListItemEntityProcessor(EntityProcessor):
    kind = EntityKind.SHOPPING_LIST_ITEMS
    entity_type = "ShoppingListItem"
    model = ShoppingListItem
    record_class = ShoppingListItemRecord
    required_fields = ("name",)

    def apply_fields(self, item: ShoppingListItem, record: ShoppingListItemRecord) -> None:
        SyncMapper.apply_shopping_list_item_fields(item, record)

    def resolve_references(
        self, item: ShoppingListItem, record: ShoppingListItemRecord, report: ProcessingReport
    ) -> None:
        self.resolve_owner(item, record, report)
        self.resolve_reference(
            item, "todo_item", record.todo_item_id, EntityKind.TODO_ITEMS, report, field="todoItemId"
        )
        self.reconcile_collection(
            item, "meals", record.meal_ids, EntityKind.MEALS, report, field="mealIds"
        )
