"""Sync service: ingestion cycles, egress batches and acknowledgements"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import EntityKind
from domain.mappers.sync_mapper import SyncMapper
from domain.schemas.sync_schemas import AcknowledgeResponse, IngestionReport
from repositories.local_store import LocalStore, store_lock
from services.space_relationship_service import SpaceRelationshipService
from services.sync.coordinator import ProcessorCoordinator

logger = logging.getLogger("vesta.sync")

# Users first so every later DTO's ownerId is already known remotely
PUSH_ORDER = (
    EntityKind.USERS,
    EntityKind.TODO_ITEMS,
    EntityKind.TODO_ITEM_EVENTS,
    EntityKind.RECIPES,
    EntityKind.MEALS,
    EntityKind.SHOPPING_LIST_ITEMS,
    EntityKind.SPACES,
)


def _parse_kind(kind: Any) -> EntityKind:
    try:
        return EntityKind(kind)
    except ValueError:
        raise ServiceValidationError(
            f"Unknown entity kind '{kind}'",
            details={"allowed": [k.value for k in EntityKind]},
            code="UNKNOWN_KIND",
        )


def _chunk(items: List[Any], size: int) -> List[List[Any]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


class SyncService:
    """
    Owns the local store for the duration of each pass.

    Ingestion, space recomputation and acknowledgement all run under the
    store lock so their writes never interleave.
    """

    @staticmethod
    def ingest(store: LocalStore, payload: Mapping[str, Any]) -> IngestionReport:
        """
        Run one ingestion cycle.

        Raises:
            PersistenceError: If the cycle could not be committed
        """
        with store_lock:
            logger.info(f"Starting ingestion cycle for kinds: {', '.join(map(str, payload)) or '-'}")
            return ProcessorCoordinator(store).process(payload)

    @staticmethod
    def collect_changes(
        store: LocalStore,
        kinds: Optional[Iterable[Any]] = None,
        batch_size: Optional[int] = None,
    ) -> Dict[str, List[List[Dict[str, Any]]]]:
        """
        Encode dirty entities for an outbound push.

        Args:
            store: Local store
            kinds: Restrict to these kinds; all kinds when omitted
            batch_size: Entities per batch, defaults to settings.sync_push_batch_size

        Returns:
            Mapping of kind to batches of DTOs, in push order; clean kinds are omitted
        """
        wanted = {_parse_kind(kind) for kind in kinds} if kinds else set(PUSH_ORDER)
        size = batch_size or settings.sync_push_batch_size

        changes: Dict[str, List[List[Dict[str, Any]]]] = {}
        with store_lock:
            for kind in PUSH_ORDER:
                if kind not in wanted:
                    continue
                dirty = store.fetch_dirty(kind)
                if not dirty:
                    continue
                dtos = [SyncMapper.to_dto(entity) for entity in dirty]
                changes[kind.value] = _chunk(dtos, size)
                logger.info(f"Collected {len(dtos)} dirty {kind.value} in {len(changes[kind.value])} batches")
        return changes

    @staticmethod
    def acknowledge(store: LocalStore, kind: Any, uids: Iterable[str]) -> AcknowledgeResponse:
        """
        Mark entities synced after the remote side accepted them.

        Unknown uids are ignored and reported back in `missing`.
        """
        kind = _parse_kind(kind)
        uids = list(dict.fromkeys(uid for uid in uids if uid))

        with store_lock:
            entities = store.fetch_many(kind, uids)
            for entity in entities:
                entity.mark_synced()
            store.save()

        found = {entity.uid for entity in entities}
        missing = [uid for uid in uids if uid not in found]
        if missing:
            logger.warning(f"Acknowledged {kind.value} not found locally: {', '.join(missing)}")
        logger.info(f"Acknowledged {len(found)} {kind.value}")
        return AcknowledgeResponse(kind=kind, acknowledged=len(found), missing=missing)

    @staticmethod
    def recompute_spaces(store: LocalStore, user_uid: str) -> int:
        """Recompute derived spaces of everything a user owns and save"""
        with store_lock:
            user = store.fetch_unique(EntityKind.USERS, user_uid)
            if not user:
                raise NotFoundError(
                    f"User {user_uid} not found",
                    details={"user_uid": user_uid},
                    code="USER_NOT_FOUND",
                )
            changed = SpaceRelationshipService(store).update_all_space_relationships(user)
            store.save()
            return changed
