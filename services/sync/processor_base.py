"""
Entity processor base.

A processor consumes one batch of remote records for its kind and upserts
them into the local store. Problems with individual records are collected in
a ProcessingReport and never interrupt the batch; only PersistenceError
escapes.
"""

from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Type

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from core.base import BaseService
from domain.enums import EntityKind, IssueCode
from domain.mappers.sync_mapper import assign
from domain.schemas.sync_schemas import ProcessingReport, SyncRecord
from repositories.local_store import LocalStore


def _describe_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)


class EntityProcessor(BaseService[LocalStore]):
    """
    Template for one entity kind.

    Subclasses declare `kind`, `entity_type`, `model`, `record_class` and
    `required_fields`, and implement `apply_fields` and `resolve_references`.
    """

    kind: EntityKind
    entity_type: str
    model: Type
    record_class: Type[SyncRecord]
    # Snake-case record fields needed to materialize an unknown entity
    required_fields: Tuple[str, ...] = ()

    def __init__(self, store: LocalStore):
        super().__init__(store, "vesta.sync.processors")

    # ------------------------------------------------------------------
    # Batch driver
    # ------------------------------------------------------------------

    def process(self, batch: Iterable[Any]) -> ProcessingReport:
        """
        Upsert every record of a batch.

        Args:
            batch: Raw field maps for this kind

        Returns:
            ProcessingReport with counts and soft issues
        """
        records = list(batch)
        report = ProcessingReport(kind=self.kind.value, received=len(records))
        self.log_info(f"Processing {len(records)} {self.entity_type} entities")

        for raw in records:
            self._process_record(raw, report)

        self.log_info(
            f"Processed {self.entity_type} batch",
            created=report.created,
            updated=report.updated,
            skipped=report.skipped,
            issues=len(report.issues),
        )
        return report

    def _process_record(self, raw: Any, report: ProcessingReport) -> None:
        uid = raw.get("uid") if isinstance(raw, Mapping) else None
        if not isinstance(uid, str) or not uid.strip():
            self._skip(
                report,
                IssueCode.MISSING_ID,
                f"Skipping {self.entity_type} entity without UID",
            )
            return

        try:
            record = self.record_class.model_validate(raw)
        except ValidationError as e:
            self._skip(
                report,
                IssueCode.INVALID_RECORD,
                f"Skipping malformed {self.entity_type}: {_describe_validation_error(e)}",
                uid=uid,
            )
            return

        entity = self.store.fetch_unique(self.kind, uid)
        created = entity is None
        if created:
            missing = [name for name in self.required_fields if getattr(record, name) is None]
            if missing:
                self._skip(
                    report,
                    IssueCode.MISSING_REQUIRED_FIELDS,
                    f"Skipping {self.entity_type} without required properties",
                    uid=uid,
                    field=",".join(self._alias(name) for name in missing),
                )
                return
            entity = self.create(record)
            self.store.insert(entity)
            self.log_debug(f"Created new {self.entity_type}", uid=uid)
        else:
            self.log_debug(f"Found existing {self.entity_type}", uid=uid)

        if record.last_modified is not None:
            assign(entity, "last_modified", record.last_modified)
        self.apply_fields(entity, record)
        self.resolve_references(entity, record, report)

        entity.mark_synced()
        if created:
            report.created += 1
        else:
            report.updated += 1

    def _skip(
        self,
        report: ProcessingReport,
        code: IssueCode,
        message: str,
        uid: Optional[str] = None,
        field: Optional[str] = None,
    ) -> None:
        report.skipped += 1
        report.add_issue(code, message, uid=uid, field=field)
        self.log_warning(message, uid=uid, field=field)

    def _alias(self, name: str) -> str:
        field = self.record_class.model_fields[name]
        return field.alias or to_camel(name)

    # ------------------------------------------------------------------
    # Kind hooks
    # ------------------------------------------------------------------

    def create(self, record: SyncRecord):
        """Build a fresh, clean entity from the creation fields"""
        values = {name: getattr(record, name) for name in self.required_fields}
        return self.model(uid=record.uid, dirty=False, **values)

    def apply_fields(self, entity, record: SyncRecord) -> None:
        raise NotImplementedError

    def resolve_references(self, entity, record: SyncRecord, report: ProcessingReport) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Reference helpers
    # ------------------------------------------------------------------

    def resolve_owner(self, entity, record: SyncRecord, report: ProcessingReport) -> None:
        self.resolve_reference(
            entity, "owner", record.owner_id, EntityKind.USERS, report, field="ownerId"
        )

    def resolve_reference(
        self,
        entity,
        attr: str,
        target_uid: Optional[str],
        target_kind: EntityKind,
        report: ProcessingReport,
        field: str,
    ) -> None:
        """
        Point a singular reference at `target_uid`.

        A different id is looked up: found replaces the reference, not found
        leaves it untouched and reports a dangling reference. No id clears a
        reference that is currently set.
        """
        current = getattr(entity, attr)
        if target_uid is None:
            if current is not None:
                self.log_debug(f"Removing {attr} from {self.entity_type}", uid=entity.uid)
                setattr(entity, attr, None)
            return

        if current is not None and current.uid == target_uid:
            return

        target = self.store.fetch_unique(target_kind, target_uid)
        if target is None:
            self._dangling(entity, report, field, target_uid)
            return

        setattr(entity, attr, target)
        self.log_debug(f"Set {attr} {target_uid} for {self.entity_type}", uid=entity.uid)

    def resolve_lookup(
        self,
        entity,
        attr: str,
        key: Optional[str],
        current_key: Optional[str],
        lookup: Callable[[str], Any],
        report: ProcessingReport,
        field: str,
    ) -> None:
        """Like resolve_reference, for targets found by something other than uid"""
        current = getattr(entity, attr)
        if key is None:
            if current is not None:
                self.log_debug(f"Removing {attr} from {self.entity_type}", uid=entity.uid)
                setattr(entity, attr, None)
            return

        if current is not None and current_key == key:
            return

        target = lookup(key)
        if target is None:
            self._dangling(entity, report, field, key)
            return

        if target is not current:
            setattr(entity, attr, target)
            self.log_debug(f"Set {attr} {key} for {self.entity_type}", uid=entity.uid)

    def reconcile_collection(
        self,
        entity,
        attr: str,
        target_uids: Optional[List[str]],
        target_kind: EntityKind,
        report: ProcessingReport,
        field: str,
    ) -> None:
        """
        Make a to-many reference hold exactly the entities named by `target_uids`.

        Missing or empty ids clear the collection. Ids that cannot be found
        locally are reported as dangling and picked up on a later cycle.
        """
        collection = getattr(entity, attr)
        target = set(target_uids or ())
        current = {item.uid for item in collection}
        if target == current:
            return

        to_add = target - current
        if to_add:
            found = self.store.fetch_many(target_kind, sorted(to_add))
            for item in found:
                collection.append(item)
            self.log_debug(
                f"Added {len(found)} {attr} to {self.entity_type}", uid=entity.uid
            )
            for missing_uid in sorted(to_add - {item.uid for item in found}):
                self._dangling(entity, report, field, missing_uid)

        to_remove = [item for item in collection if item.uid not in target]
        for item in to_remove:
            collection.remove(item)
        if to_remove:
            self.log_debug(
                f"Removed {len(to_remove)} {attr} from {self.entity_type}", uid=entity.uid
            )

    def _dangling(self, entity, report: ProcessingReport, field: str, target: str) -> None:
        message = f"Failed to find {field} {target} for {self.entity_type}"
        report.add_issue(IssueCode.DANGLING_REFERENCE, message, uid=entity.uid, field=field)
        self.log_debug(message, uid=entity.uid)
