"""Synchronization routes: ingestion, outbound changes and acknowledgements"""

from fastapi import APIRouter, Body, Depends, Query
import logging
from typing import Any, Dict, List, Optional

from api.dependencies import get_store
from domain.schemas.sync_schemas import (
    AcknowledgeRequest,
    AcknowledgeResponse,
    IngestionReport,
)
from repositories.local_store import LocalStore
from services.sync_service import SyncService

router = APIRouter(prefix="/sync", tags=["Sync"])
logger = logging.getLogger("vesta.api.sync")


@router.post("/ingest", response_model=IngestionReport)
def ingest(
    payload: Dict[str, Any] = Body(..., examples=[{"users": [{"uid": "u1"}]}]),
    store: LocalStore = Depends(get_store),
):
    """
    Run one ingestion cycle over a kind-keyed payload.

    Soft problems (missing ids, dangling references, ...) are returned in the
    report; only a store failure fails the request (503), in which case the
    whole payload should be sent again.
    """
    report = SyncService.ingest(store, payload)
    logger.info(f"Ingestion finished with {report.issue_count} issues")
    return report


@router.get("/changes")
def collect_changes(
    kind: Optional[List[str]] = Query(None, description="Restrict to these kinds"),
    batch_size: Optional[int] = Query(None, ge=1, le=500),
    store: LocalStore = Depends(get_store),
):
    """Dirty entities encoded as DTOs, in push order and split into batches."""
    return SyncService.collect_changes(store, kinds=kind, batch_size=batch_size)


@router.post("/ack", response_model=AcknowledgeResponse)
def acknowledge(request: AcknowledgeRequest, store: LocalStore = Depends(get_store)):
    """Mark entities synced after the remote side accepted a push."""
    return SyncService.acknowledge(store, request.kind, request.uids)
