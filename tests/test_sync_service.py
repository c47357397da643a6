"""
Tests for the sync service: outbound change collection, acknowledgements and
space recomputation on demand.
"""

import pytest
from sqlalchemy.orm import Session

from test_fixtures import (
    db_session,
    store,
    make_category,
    make_meal,
    make_recipe,
    make_space,
    make_todo_item,
    make_user,
)
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import EntityKind
from services.sync_service import PUSH_ORDER, SyncService


# =============================================================================
# INGESTION
# =============================================================================


def test_ingest_commits_and_reports(db_session: Session, store):
    report = SyncService.ingest(store, {"users": [{"uid": "u1"}, {"displayName": "no id"}]})

    db_session.expire_all()
    assert report.reports["users"].created == 1
    assert report.issue_count == 1
    assert store.fetch_unique(EntityKind.USERS, "u1") is not None


# =============================================================================
# OUTBOUND CHANGES
# =============================================================================


def test_push_order_puts_users_first_and_spaces_last():
    assert PUSH_ORDER[0] == EntityKind.USERS
    assert PUSH_ORDER[-1] == EntityKind.SPACES
    assert set(PUSH_ORDER) == set(EntityKind)


def test_collect_changes_only_includes_dirty_entities(store):
    """
    Verifies:
    - Clean entities and clean kinds are omitted
    - Keys follow push order
    - DTOs carry ids, not objects
    """
    owner = make_user(store, "u1", clean=False)
    make_recipe(store, owner, uid="r1")
    make_recipe(store, owner, uid="r2", clean=False)
    make_meal(store, owner, clean=False)

    changes = SyncService.collect_changes(store)

    assert list(changes) == ["users", "recipes", "meals"]
    assert [dto["uid"] for dto in changes["recipes"][0]] == ["r2"]
    assert changes["meals"][0][0]["ownerId"] == "u1"


def test_collect_changes_splits_batches(store):
    for i in range(5):
        make_user(store, f"u{i}", clean=False)

    changes = SyncService.collect_changes(store, kinds=["users"], batch_size=2)

    assert [len(batch) for batch in changes["users"]] == [2, 2, 1]


def test_collect_changes_uses_configured_batch_size(store, monkeypatch):
    monkeypatch.setattr(settings, "sync_push_batch_size", 3)
    for i in range(4):
        make_user(store, f"u{i}", clean=False)

    changes = SyncService.collect_changes(store)

    assert [len(batch) for batch in changes["users"]] == [3, 1]


def test_collect_changes_includes_local_events(store):
    owner = make_user(store, "u1")
    todo = make_todo_item(store, owner)
    todo.mark_as_done()

    changes = SyncService.collect_changes(store)

    assert list(changes) == ["todoItems", "todoItemEvents"]
    assert changes["todoItemEvents"][0][0]["todoItemId"] == "t1"


def test_collect_changes_rejects_unknown_kind(store):
    with pytest.raises(ServiceValidationError) as exc_info:
        SyncService.collect_changes(store, kinds=["gadgets"])

    assert exc_info.value.code == "UNKNOWN_KIND"


def test_collect_changes_with_nothing_dirty(store):
    make_user(store, "u1")

    assert SyncService.collect_changes(store) == {}


# =============================================================================
# ACKNOWLEDGEMENT
# =============================================================================


def test_acknowledge_marks_synced_and_reports_missing(db_session: Session, store):
    """
    Verifies:
    - Acknowledged entities are clean afterwards
    - Unknown uids are ignored and reported
    - The change is committed
    """
    owner = make_user(store, "u1", clean=False)
    make_recipe(store, owner, uid="r1", clean=False)
    make_recipe(store, owner, uid="r2", clean=False)

    response = SyncService.acknowledge(store, "recipes", ["r1", "ghost", "r1", ""])

    db_session.expire_all()
    assert response.acknowledged == 1
    assert response.missing == ["ghost"]
    assert response.kind == EntityKind.RECIPES
    assert [r.uid for r in store.fetch_dirty(EntityKind.RECIPES)] == ["r2"]
    assert store.fetch_unique(EntityKind.USERS, "u1").dirty is True


def test_acknowledge_unknown_kind(store):
    with pytest.raises(ServiceValidationError):
        SyncService.acknowledge(store, "gadgets", ["x"])


# =============================================================================
# SPACE RECOMPUTATION
# =============================================================================


def test_recompute_spaces_for_user(store):
    owner = make_user(store, "u1")
    groceries = make_category(store, "Groceries")
    make_space(store, owner, members=[owner], categories=[groceries])
    recipe = make_recipe(store, owner)
    make_todo_item(store, owner, category=groceries)

    assert SyncService.recompute_spaces(store, "u1") == 2
    assert SyncService.recompute_spaces(store, "u1") == 0
    assert [s.uid for s in recipe.spaces] == ["sp1"]


def test_recompute_spaces_unknown_user(store):
    with pytest.raises(NotFoundError) as exc_info:
        SyncService.recompute_spaces(store, "ghost")

    assert exc_info.value.code == "USER_NOT_FOUND"
