"""
Processor coordinator.

Runs one ingestion cycle: every kind's processor in dependency order, then a
single save. Later kinds may reference ids introduced by earlier kinds in the
same payload; references to kinds that arrive later stay dangling until a
following cycle.
"""

from typing import Any, List, Mapping, Type

from app.config import settings
from app.exceptions import PersistenceError
from core.base import BaseService
from domain.enums import EntityKind, IssueCode
from domain.schemas.sync_schemas import IngestionReport, ProcessingIssue, ProcessingReport
from repositories.local_store import LocalStore
from services.sync.meal_processor import MealEntityProcessor
from services.sync.processor_base import EntityProcessor
from services.sync.recipe_processor import RecipeEntityProcessor
from services.sync.shopping_list_item_processor import ShoppingListItemEntityProcessor
from services.sync.todo_item_processor import TodoItemEntityProcessor
from services.sync.user_processor import UserEntityProcessor

PROCESSING_ORDER: List[Type[EntityProcessor]] = [
    UserEntityProcessor,
    RecipeEntityProcessor,
    TodoItemEntityProcessor,
    MealEntityProcessor,
    ShoppingListItemEntityProcessor,
]

INGESTIBLE_KINDS = tuple(processor.kind.value for processor in PROCESSING_ORDER)


class ProcessorCoordinator(BaseService[LocalStore]):
    """Drives the entity processors over one kind-keyed payload."""

    def __init__(self, store: LocalStore):
        super().__init__(store, "vesta.sync.coordinator")
        self.processors = [processor(store) for processor in PROCESSING_ORDER]

    def process(self, payload: Mapping[str, Any]) -> IngestionReport:
        """
        Ingest one payload and commit it.

        Args:
            payload: Mapping of kind name to a list of records

        Returns:
            IngestionReport with one ProcessingReport per kind present

        Raises:
            PersistenceError: If the local store fails; nothing is committed
        """
        report = IngestionReport()
        self._check_kinds(payload, report)

        for processor in self.processors:
            key = processor.kind.value
            if key not in payload:
                continue

            batch = payload[key]
            if not isinstance(batch, list):
                report.issues.append(
                    ProcessingIssue(
                        kind=key,
                        code=IssueCode.INVALID_RECORD,
                        message=f"Expected a list of {processor.entity_type} records",
                    )
                )
                self.log_warning("Ignoring non-list batch", kind=key)
                continue

            report.reports[key] = self._run(processor, batch)

        self.store.save()
        self.log_info(
            "Ingestion cycle committed",
            kinds=",".join(report.reports) or "-",
            issues=report.issue_count,
        )
        return report

    def _run(self, processor: EntityProcessor, batch: List[Any]) -> ProcessingReport:
        try:
            return processor.process(batch)
        except PersistenceError:
            raise
        except Exception as e:
            # One failing kind must not block the others
            self.logger.exception(f"Processor for {processor.kind.value} failed: {e}")
            failed = ProcessingReport(kind=processor.kind.value, received=len(batch))
            failed.add_issue(
                IssueCode.PROCESSOR_FAILURE,
                f"{processor.entity_type} processor failed: {type(e).__name__}",
            )
            return failed

    def _check_kinds(self, payload: Mapping[str, Any], report: IngestionReport) -> None:
        for key in payload:
            if key in INGESTIBLE_KINDS:
                continue
            message = f"Unknown entity kind '{key}'"
            if settings.sync_unknown_kind_is_error:
                self.log_error(message)
            else:
                self.log_warning(message)
            report.issues.append(
                ProcessingIssue(kind=str(key), code=IssueCode.UNKNOWN_KIND, message=message)
            )
