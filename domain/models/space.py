"""
Space model: a sharing scope with members and per-kind share policy.
"""

from typing import Optional

from sqlalchemy import Column, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from domain.models.database import Base
from domain.models.associations import (
    space_members,
    space_shared_categories,
    recipe_spaces,
    meal_spaces,
    shopping_list_item_spaces,
    todo_item_spaces,
    todo_item_event_spaces,
)
from domain.models.sync_state import SyncStateMixin, mutator


class Space(SyncStateMixin, Base):
    """Sharing scope; content visibility is derived, never authored"""

    __tablename__ = "spaces"

    _init_defaults = {
        "share_all_recipes": True,
        "share_all_meals": True,
        "share_all_shopping_items": True,
    }

    name = Column(Text, nullable=False)
    share_all_recipes = Column(Boolean, nullable=False, default=True)
    share_all_meals = Column(Boolean, nullable=False, default=True)
    share_all_shopping_items = Column(Boolean, nullable=False, default=True)

    owner_id = Column(String(64), ForeignKey("users.uid", ondelete="SET NULL"))
    owner = relationship("User", foreign_keys=[owner_id])

    members = relationship("User", secondary=space_members, back_populates="spaces")
    shared_categories = relationship(
        "TodoItemCategory", secondary=space_shared_categories, back_populates="spaces"
    )

    # Inverses of the derived visibility sets
    recipes = relationship("Recipe", secondary=recipe_spaces, back_populates="spaces")
    meals = relationship("Meal", secondary=meal_spaces, back_populates="spaces")
    shopping_list_items = relationship(
        "ShoppingListItem", secondary=shopping_list_item_spaces, back_populates="spaces"
    )
    todo_items = relationship("TodoItem", secondary=todo_item_spaces, back_populates="spaces")
    todo_item_events = relationship(
        "TodoItemEvent", secondary=todo_item_event_spaces, back_populates="spaces"
    )

    def has_member(self, user) -> bool:
        return any(member.uid == user.uid for member in self.members)

    def shares_category(self, name: Optional[str]) -> bool:
        if name is None:
            return False
        return any(category.name == name for category in self.shared_categories)

    @mutator
    def rename(self, name: str) -> None:
        self.name = name

    @mutator
    def add_member(self, user) -> None:
        if not self.has_member(user):
            self.members.append(user)

    @mutator
    def remove_member(self, user) -> None:
        self.members = [member for member in self.members if member.uid != user.uid]

    @mutator
    def set_share_policy(
        self,
        share_all_recipes: Optional[bool] = None,
        share_all_meals: Optional[bool] = None,
        share_all_shopping_items: Optional[bool] = None,
    ) -> None:
        if share_all_recipes is not None:
            self.share_all_recipes = share_all_recipes
        if share_all_meals is not None:
            self.share_all_meals = share_all_meals
        if share_all_shopping_items is not None:
            self.share_all_shopping_items = share_all_shopping_items

    @mutator
    def share_category(self, category) -> None:
        if not self.shares_category(category.name):
            self.shared_categories.append(category)

    @mutator
    def unshare_category(self, category) -> None:
        self.shared_categories = [
            shared for shared in self.shared_categories if shared.name != category.name
        ]
