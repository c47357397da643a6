"""TodoItem entity processor"""

from domain.enums import EntityKind
from domain.mappers.sync_mapper import SyncMapper
from domain.models import TodoItem
from domain.schemas.sync_schemas import ProcessingReport, TodoItemRecord
from services.category_service import CategoryService
from services.sync.processor_base import EntityProcessor


class TodoItemEntityProcessor(EntityProcessor):
    """Categories are resolved by name and created on first use."""

    kind = EntityKind.TODO_ITEMS
    entity_type = "TodoItem"
    model = TodoItem
    record_class = TodoItemRecord
    required_fields = ("title", "details")

    def apply_fields(self, todo_item: TodoItem, record: TodoItemRecord) -> None:
        SyncMapper.apply_todo_item_fields(todo_item, record)

    def resolve_references(
        self, todo_item: TodoItem, record: TodoItemRecord, report: ProcessingReport
    ) -> None:
        self.resolve_owner(todo_item, record, report)

        category_name = record.category_name.strip() if record.category_name else None
        self.resolve_lookup(
            todo_item,
            "category",
            category_name,
            todo_item.category.name if todo_item.category else None,
            lambda name: CategoryService.fetch_or_create(self.store, name),
            report,
            field="categoryName",
        )

        self.resolve_reference(
            todo_item, "meal", record.meal_id, EntityKind.MEALS, report, field="mealId"
        )
        self.resolve_reference(
            todo_item,
            "shopping_list_item",
            record.shopping_list_item_id,
            EntityKind.SHOPPING_LIST_ITEMS,
            report,
            field="shoppingListItemId",
        )
