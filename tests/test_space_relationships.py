"""
Tests for derived space visibility.

Verifies:
- Per-kind visibility rules (share flags, category gating)
- Changes mark the entity dirty exactly once; unchanged sets write nothing
- Todo item changes cascade to their events
"""

from unittest.mock import Mock

from sqlalchemy.orm import Session

from test_fixtures import (
    db_session,
    store,
    make_category,
    make_meal,
    make_recipe,
    make_shopping_item,
    make_space,
    make_todo_item,
    make_user,
)
from domain.models import TodoItemEvent
from services.space_relationship_service import SpaceRelationshipService, same_spaces


def _spy_dirty(entity):
    entity.mark_dirty = Mock(wraps=entity.mark_dirty)
    return entity.mark_dirty


# =============================================================================
# SHARE FLAGS
# =============================================================================


def test_recipe_visible_in_member_spaces_with_share_flag(store):
    """
    Verifies:
    - share_all_recipes on and owner a member: visible
    - The entity is marked dirty exactly once
    """
    owner = make_user(store, "u1")
    household = make_space(store, owner, members=[owner], uid="sp1")
    make_space(store, owner, members=[], uid="sp2", name="Not a member")
    recipe = make_recipe(store, owner)
    spy = _spy_dirty(recipe)

    changed = SpaceRelationshipService(store).update_space_relationships(recipe)

    assert changed is True
    assert [s.uid for s in recipe.spaces] == [household.uid]
    assert spy.call_count == 1
    assert recipe.dirty is True


def test_toggling_share_flag_removes_and_restores_visibility(store):
    owner = make_user(store, "u1")
    space = make_space(store, owner, members=[owner])
    recipe = make_recipe(store, owner)
    service = SpaceRelationshipService(store)
    service.update_space_relationships(recipe)

    space.share_all_recipes = False
    assert service.update_space_relationships(recipe) is True
    assert recipe.spaces == []

    space.share_all_recipes = True
    assert service.update_space_relationships(recipe) is True
    assert [s.uid for s in recipe.spaces] == ["sp1"]


def test_meal_and_shopping_item_follow_their_own_flags(store):
    owner = make_user(store, "u1")
    make_space(store, owner, members=[owner], share_all_meals=False)
    meal = make_meal(store, owner)
    item = make_shopping_item(store, owner)
    service = SpaceRelationshipService(store)

    service.update_space_relationships(meal)
    service.update_space_relationships(item)

    assert meal.spaces == []
    assert [s.uid for s in item.spaces] == ["sp1"]


def test_unchanged_visibility_writes_nothing(db_session: Session, store):
    owner = make_user(store, "u1")
    make_space(store, owner, members=[owner])
    recipe = make_recipe(store, owner)
    service = SpaceRelationshipService(store)
    service.update_space_relationships(recipe)
    recipe.mark_synced()
    db_session.commit()
    spy = _spy_dirty(recipe)

    changed = service.update_space_relationships(recipe)

    assert changed is False
    assert spy.call_count == 0
    assert recipe.dirty is False
    assert not db_session.dirty


def test_same_spaces_ignores_order(store):
    owner = make_user(store, "u1")
    first = make_space(store, owner, uid="a")
    second = make_space(store, owner, uid="b")

    assert same_spaces([first, second], [second, first])
    assert not same_spaces([first], [first, second])


# =============================================================================
# TODO ITEMS
# =============================================================================


def test_todo_item_visible_only_where_its_category_is_shared(store):
    owner = make_user(store, "u1")
    groceries = make_category(store, "Groceries")
    chores = make_category(store, "Chores")
    make_space(store, owner, members=[owner], uid="sp1", categories=[groceries])
    make_space(store, owner, members=[owner], uid="sp2", categories=[chores])
    todo = make_todo_item(store, owner, category=groceries)
    uncategorized = make_todo_item(store, owner, uid="t2")
    service = SpaceRelationshipService(store)

    service.update_space_relationships(todo)
    service.update_space_relationships(uncategorized)

    assert [s.uid for s in todo.spaces] == ["sp1"]
    assert uncategorized.spaces == []


def test_todo_item_change_cascades_to_events(store):
    """
    Verifies:
    - Every event of the todo item gets the item's new space set
    - Each event is marked dirty
    """
    owner = make_user(store, "u1")
    groceries = make_category(store, "Groceries")
    make_space(store, owner, members=[owner], categories=[groceries])
    todo = make_todo_item(store, owner, category=groceries)
    todo.edit(title="Buy bread")
    todo.mark_as_done()
    for event in todo.events:
        event.mark_synced()

    SpaceRelationshipService(store).update_space_relationships(todo)

    assert len(todo.events) == 2
    for event in todo.events:
        assert isinstance(event, TodoItemEvent)
        assert [s.uid for s in event.spaces] == ["sp1"]
        assert event.dirty is True


def test_unshared_category_removes_todo_item_from_space(store):
    owner = make_user(store, "u1")
    groceries = make_category(store, "Groceries")
    space = make_space(store, owner, members=[owner], categories=[groceries])
    todo = make_todo_item(store, owner, category=groceries)
    service = SpaceRelationshipService(store)
    service.update_space_relationships(todo)

    space.shared_categories = []
    service.update_space_relationships(todo)

    assert todo.spaces == []


def test_clearing_category_removes_item_and_events_from_all_spaces(store):
    """
    Verifies:
    - A todo item without a category is visible nowhere
    - The removal reaches every event, including the category edit itself
    - The item is marked dirty exactly once by the recomputation
    """
    owner = make_user(store, "u1")
    groceries = make_category(store, "Groceries")
    make_space(store, owner, members=[owner], uid="sp1", categories=[groceries])
    make_space(store, owner, members=[owner], uid="sp2", categories=[groceries])
    todo = make_todo_item(store, owner, category=groceries)
    todo.edit(title="Buy bread", priority=1)
    service = SpaceRelationshipService(store)
    service.update_space_relationships(todo)
    assert sorted(s.uid for s in todo.spaces) == ["sp1", "sp2"]

    todo.set_category(None)
    for event in todo.events:
        event.mark_synced()
    todo.mark_synced()
    spy = _spy_dirty(todo)

    changed = service.update_space_relationships(todo)

    assert changed is True
    assert todo.spaces == []
    assert spy.call_count == 1
    assert len(todo.events) == 3
    for event in todo.events:
        assert event.spaces == []
        assert event.dirty is True


# =============================================================================
# EDGE CASES
# =============================================================================


def test_unowned_entity_is_skipped(store):
    make_space(store, make_user(store, "u1"))
    recipe = make_recipe(store, owner=None)
    spy = _spy_dirty(recipe)

    assert SpaceRelationshipService(store).update_space_relationships(recipe) is False
    assert spy.call_count == 0


def test_entity_without_visibility_rule_is_left_untouched(store):
    user = make_user(store, "u1")
    make_space(store, user, members=[user])

    changed = SpaceRelationshipService(store).update_space_relationships(user)

    assert changed is False
    assert user.dirty is False


def test_update_all_counts_changed_entities(store):
    """
    Verifies:
    - Every content kind owned by the user is visited
    - Only entities whose set changed are counted
    - Other users' content is not touched
    """
    owner = make_user(store, "u1")
    stranger = make_user(store, "u2")
    groceries = make_category(store, "Groceries")
    make_space(store, owner, members=[owner], categories=[groceries])
    make_recipe(store, owner)
    make_meal(store, owner)
    make_shopping_item(store, owner)
    make_todo_item(store, owner, category=groceries)
    make_todo_item(store, owner, uid="t2")
    theirs = make_recipe(store, stranger, uid="r2")
    service = SpaceRelationshipService(store)

    assert service.update_all_space_relationships(owner) == 4
    assert service.update_all_space_relationships(owner) == 0
    assert theirs.spaces == []
