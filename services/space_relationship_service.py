"""
Space relationship service.

Recomputes the derived `spaces` collection of content entities from space
membership and sharing policy. Recomputation is full and idempotent: an
entity whose visible set is unchanged is never written.
"""

from typing import Callable, Dict, Iterable, List, Optional, Sequence

from core.base import BaseService
from domain.enums import EntityKind
from domain.models import Meal, Recipe, ShoppingListItem, Space, TodoItem, User
from repositories.local_store import LocalStore


def _owner_is_member(space: Space, owner: User) -> bool:
    return space.has_member(owner)


def _recipe_visible(space: Space, recipe: Recipe) -> bool:
    return bool(space.share_all_recipes) and _owner_is_member(space, recipe.owner)


def _meal_visible(space: Space, meal: Meal) -> bool:
    return bool(space.share_all_meals) and _owner_is_member(space, meal.owner)


def _shopping_item_visible(space: Space, item: ShoppingListItem) -> bool:
    return bool(space.share_all_shopping_items) and _owner_is_member(space, item.owner)


def _todo_item_visible(space: Space, todo_item: TodoItem) -> bool:
    if todo_item.category is None:
        return False
    return _owner_is_member(space, todo_item.owner) and space.shares_category(
        todo_item.category.name
    )


VISIBILITY_RULES: Dict[type, Callable[[Space, object], bool]] = {
    Recipe: _recipe_visible,
    Meal: _meal_visible,
    ShoppingListItem: _shopping_item_visible,
    TodoItem: _todo_item_visible,
}

# Kinds recomputed for a user, in the order they are visited
OWNED_KINDS = (
    EntityKind.RECIPES,
    EntityKind.MEALS,
    EntityKind.SHOPPING_LIST_ITEMS,
    EntityKind.TODO_ITEMS,
)


def same_spaces(first: Iterable[Space], second: Iterable[Space]) -> bool:
    """Order-independent comparison by uid"""
    return {space.uid for space in first} == {space.uid for space in second}


class SpaceRelationshipService(BaseService[LocalStore]):
    """Derives which spaces each content entity is visible in."""

    def __init__(self, store: LocalStore):
        super().__init__(store, "vesta.spaces")

    def update_space_relationships(
        self, entity, spaces: Optional[Sequence[Space]] = None
    ) -> bool:
        """
        Recompute the visible spaces of one content entity.

        Args:
            entity: Recipe, Meal, ShoppingListItem or TodoItem
            spaces: Candidate spaces; the owner's spaces when omitted

        Returns:
            True if the entity's space set changed and it was marked dirty.
            Kinds without a visibility rule are left untouched.
        """
        rule = VISIBILITY_RULES.get(type(entity))
        if rule is None:
            self.log_warning(
                f"{type(entity).__name__} has no space visibility rule",
                uid=getattr(entity, "uid", None),
            )
            return False

        if entity.owner is None:
            return False

        if spaces is None:
            spaces = self.store.fetch_spaces_of(entity.owner)

        visible = [space for space in spaces if rule(space, entity)]
        if same_spaces(entity.spaces, visible):
            return False

        entity.spaces = visible
        entity.mark_dirty()
        self.log_debug(
            f"Updated spaces for {type(entity).__name__}",
            uid=entity.uid,
            spaces=",".join(space.uid for space in visible) or "-",
        )

        if isinstance(entity, TodoItem):
            self._cascade_to_events(entity, visible)
        return True

    def update_all_space_relationships(self, user: User) -> int:
        """
        Recompute every content entity owned by a user.

        Returns:
            Number of entities whose space set changed (events not counted)
        """
        # Only spaces the user belongs to can show their content
        spaces = self.store.fetch_spaces_of(user)
        changed = 0
        for kind in OWNED_KINDS:
            for entity in self.store.fetch_owned_by(kind, user):
                if self.update_space_relationships(entity, spaces):
                    changed += 1

        self.log_info("Recomputed space relationships", user=user.uid, changed=changed)
        return changed

    def _cascade_to_events(self, todo_item: TodoItem, visible: List[Space]) -> None:
        for event in todo_item.events:
            event.spaces = list(visible)
            event.mark_dirty()
