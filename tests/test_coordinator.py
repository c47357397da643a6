"""
Tests for the processor coordinator: one ingestion cycle over a kind-keyed
payload.

Verifies:
- Dependency order lets later kinds reference earlier ones in one payload
- Deferred references converge on a later cycle
- Kind isolation and unknown-kind reporting
- Persistence failures abort and roll back the cycle
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from test_fixtures import db_session, store
from app.exceptions import PersistenceError
from domain.enums import EntityKind, IssueCode
from domain.models import Meal, User
from services.sync import ProcessorCoordinator, RecipeEntityProcessor
from services.sync.coordinator import INGESTIBLE_KINDS

MEAL = {"uid": "m1", "scalingFactor": 1.0, "mealType": "dinner", "ownerId": "u1", "recipeId": "r1"}
RECIPE = {"uid": "r1", "title": "Soup", "details": "d", "ownerId": "u1"}


# =============================================================================
# ORDERING AND CONVERGENCE
# =============================================================================


def test_processing_order_is_fixed():
    assert INGESTIBLE_KINDS == ("users", "recipes", "todoItems", "meals", "shoppingListItems")


def test_end_to_end_cycle_resolves_same_payload_references(db_session: Session, store):
    """
    Verifies:
    - users/recipes/meals in one payload resolve against each other
    - The cycle is committed
    - Ingested entities are clean
    """
    report = ProcessorCoordinator(store).process(
        {"meals": [MEAL], "recipes": [RECIPE], "users": [{"uid": "u1"}]}
    )

    db_session.expire_all()
    meal = db_session.get(Meal, "m1")
    assert report.ok
    assert meal.owner.uid == "u1"
    assert meal.recipe.uid == "r1"
    assert meal.dirty is False
    assert set(report.reports) == {"users", "recipes", "meals"}


def test_deferred_reference_resolves_on_later_cycle(store):
    coordinator = ProcessorCoordinator(store)

    first = coordinator.process({"users": [{"uid": "u1"}], "meals": [MEAL]})
    assert store.fetch_unique(EntityKind.MEALS, "m1").recipe is None
    assert first.reports["meals"].issues_with(IssueCode.DANGLING_REFERENCE)

    coordinator.process({"recipes": [RECIPE]})
    coordinator.process({"meals": [MEAL]})

    assert store.fetch_unique(EntityKind.MEALS, "m1").recipe.uid == "r1"


def test_list_reconciliation_across_cycles(store):
    coordinator = ProcessorCoordinator(store)
    items = [{"uid": uid, "name": uid} for uid in ("A", "B", "C", "D")]
    meal = {"uid": "m1", "scalingFactor": 1.0, "mealType": "dinner"}

    coordinator.process(
        {"shoppingListItems": items, "meals": [{**meal, "shoppingListItemIds": ["A", "B", "C"]}]}
    )
    coordinator.process({"meals": [{**meal, "shoppingListItemIds": ["C", "D", "B"]}]})

    result = store.fetch_unique(EntityKind.MEALS, "m1")
    assert {item.uid for item in result.shopping_list_items} == {"B", "C", "D"}


def test_many_to_many_link_converges_from_the_later_side(store):
    """
    Verifies:
    - Meals run before shopping items, so the meal side dangles first
    - The shopping item side links the pair in the same cycle
    - A replay resolves cleanly
    """
    coordinator = ProcessorCoordinator(store)
    payload = {
        "meals": [{"uid": "m1", "scalingFactor": 1.0, "mealType": "lunch", "shoppingListItemIds": ["s1"]}],
        "shoppingListItems": [{"uid": "s1", "name": "Bread", "mealIds": ["m1"]}],
    }

    first = coordinator.process(payload)
    meal = store.fetch_unique(EntityKind.MEALS, "m1")
    assert first.reports["meals"].issues_with(IssueCode.DANGLING_REFERENCE)
    assert [i.uid for i in meal.shopping_list_items] == ["s1"]

    second = coordinator.process(payload)

    assert second.ok
    assert [i.uid for i in meal.shopping_list_items] == ["s1"]


def test_replayed_cycle_is_idempotent(db_session: Session, store):
    coordinator = ProcessorCoordinator(store)
    payload = {"users": [{"uid": "u1"}], "recipes": [RECIPE], "meals": [MEAL]}
    coordinator.process(payload)
    stamps = {
        uid: entity.last_modified
        for uid, entity in (
            ("u1", store.fetch_unique(EntityKind.USERS, "u1")),
            ("m1", store.fetch_unique(EntityKind.MEALS, "m1")),
        )
    }

    report = coordinator.process(payload)

    assert report.ok
    assert report.reports["meals"].updated == 1
    assert store.fetch_unique(EntityKind.USERS, "u1").last_modified == stamps["u1"]
    assert store.fetch_unique(EntityKind.MEALS, "m1").last_modified == stamps["m1"]
    assert store.fetch_dirty(EntityKind.MEALS) == []


# =============================================================================
# PAYLOAD PROBLEMS
# =============================================================================


def test_missing_kind_is_a_no_op(store):
    report = ProcessorCoordinator(store).process({})

    assert report.ok
    assert report.reports == {}


def test_unknown_kind_is_reported_not_fatal(store):
    report = ProcessorCoordinator(store).process({"gadgets": [{"uid": "g1"}], "users": [{"uid": "u1"}]})

    issue = report.issues[0]
    assert issue.code == IssueCode.UNKNOWN_KIND
    assert issue.kind == "gadgets"
    assert store.fetch_unique(EntityKind.USERS, "u1") is not None


def test_non_list_batch_is_reported(store):
    report = ProcessorCoordinator(store).process({"users": {"uid": "u1"}})

    assert report.issues[0].code == IssueCode.INVALID_RECORD
    assert report.issues[0].kind == "users"
    assert "users" not in report.reports


def test_failing_processor_does_not_block_other_kinds(store):
    """
    Verifies:
    - An unexpected error in one kind becomes a processor_failure issue
    - Later kinds still run and the cycle is committed
    """
    with patch.object(RecipeEntityProcessor, "process", side_effect=RuntimeError("boom")):
        report = ProcessorCoordinator(store).process(
            {"users": [{"uid": "u1"}], "recipes": [RECIPE], "meals": [MEAL]}
        )

    failure = report.reports["recipes"].issues_with(IssueCode.PROCESSOR_FAILURE)
    assert len(failure) == 1
    assert report.reports["meals"].created == 1
    assert store.fetch_unique(EntityKind.MEALS, "m1").owner.uid == "u1"
    assert report.issue_count == 2  # processor failure + dangling recipeId


# =============================================================================
# PERSISTENCE FAILURES
# =============================================================================


def test_save_failure_aborts_cycle_and_rolls_back(db_session: Session, store):
    """
    Verifies:
    - A failing commit surfaces as PersistenceError
    - Nothing from the cycle remains in the store
    """
    failure = OperationalError("COMMIT", {}, Exception("disk I/O error"))

    with patch.object(db_session, "commit", side_effect=failure):
        with pytest.raises(PersistenceError) as exc_info:
            ProcessorCoordinator(store).process({"users": [{"uid": "u1"}], "meals": [MEAL]})

    assert exc_info.value.http_status == 503
    assert db_session.query(User).count() == 0
    assert db_session.query(Meal).count() == 0


def test_persistence_error_inside_processor_is_not_isolated(store):
    with patch.object(
        RecipeEntityProcessor, "process", side_effect=PersistenceError("flush failed")
    ):
        with pytest.raises(PersistenceError):
            ProcessorCoordinator(store).process({"recipes": [RECIPE]})


def test_failed_cycle_can_be_re_driven(db_session: Session, store):
    payload = {"users": [{"uid": "u1"}], "recipes": [RECIPE], "meals": [MEAL]}
    failure = OperationalError("COMMIT", {}, Exception("database is locked"))

    with patch.object(db_session, "commit", side_effect=failure):
        with pytest.raises(PersistenceError):
            ProcessorCoordinator(store).process(payload)

    report = ProcessorCoordinator(store).process(payload)

    assert report.ok
    assert store.fetch_unique(EntityKind.MEALS, "m1").recipe.uid == "r1"
