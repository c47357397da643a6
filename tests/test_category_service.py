"""
Tests for todo item category resolution.
"""

from sqlalchemy.orm import Session

from test_fixtures import db_session, store, make_category
from domain.models import TodoItemCategory
from services.category_service import CategoryService


def test_fetch_or_create_reuses_existing_category(db_session: Session, store):
    existing = make_category(store, "Groceries")

    found = CategoryService.fetch_or_create(store, "  Groceries\t")

    assert found is existing
    assert db_session.query(TodoItemCategory).count() == 1


def test_fetch_or_create_creates_trimmed_category(store):
    created = CategoryService.fetch_or_create(store, " Paperwork ")

    assert created.name == "Paperwork"
    assert created.id is not None
    assert store.categories.get_by_name("Paperwork") is created


def test_blank_names_resolve_to_none(db_session: Session, store):
    assert CategoryService.fetch_or_create(store, None) is None
    assert CategoryService.fetch_or_create(store, "") is None
    assert CategoryService.fetch_or_create(store, "   ") is None
    assert db_session.query(TodoItemCategory).count() == 0


def test_list_and_prefix_search(store):
    for name in ("Chores", "Groceries", "Garden"):
        make_category(store, name)

    assert [c.name for c in CategoryService.list_categories(store)] == [
        "Chores",
        "Garden",
        "Groceries",
    ]
    assert [c.name for c in CategoryService.find_matching(store, "g")] == ["Garden", "Groceries"]
    assert len(CategoryService.find_matching(store, "", limit=2)) == 2
