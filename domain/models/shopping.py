"""
Shopping list item model.
"""

from typing import Optional

from sqlalchemy import (
    Column,
    String,
    Text,
    Float,
    Boolean,
    ForeignKey,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship

from domain.enums import Unit
from domain.models.database import Base
from domain.models.associations import meal_shopping_list_items, shopping_list_item_spaces
from domain.models.sync_state import SyncStateMixin, SoftDeleteMixin, mutator

_UNSET = object()


class ShoppingListItem(SyncStateMixin, SoftDeleteMixin, Base):
    """Something to buy, optionally needed by one or more meals"""

    __tablename__ = "shopping_list_items"

    _init_defaults = {"is_purchased": False}

    name = Column(Text, nullable=False)
    quantity = Column(Float)
    unit = Column(SQLEnum(Unit))
    is_purchased = Column(Boolean, nullable=False, default=False)

    owner_id = Column(String(64), ForeignKey("users.uid", ondelete="SET NULL"))
    owner = relationship("User", foreign_keys=[owner_id])

    # Owned companion task: deleting the item deletes it
    todo_item_id = Column(String(64), ForeignKey("todo_items.uid", ondelete="SET NULL"))
    todo_item = relationship(
        "TodoItem",
        foreign_keys=[todo_item_id],
        back_populates="shopping_list_item",
        cascade="save-update, merge, delete",
    )

    meals = relationship(
        "Meal", secondary=meal_shopping_list_items, back_populates="shopping_list_items"
    )
    spaces = relationship(
        "Space", secondary=shopping_list_item_spaces, back_populates="shopping_list_items"
    )

    @mutator
    def rename(self, name: str) -> None:
        self.name = name

    @mutator
    def set_quantity(self, quantity: Optional[float], unit=_UNSET) -> None:
        self.quantity = quantity
        if unit is not _UNSET:
            self.unit = Unit(unit) if unit is not None else None

    @mutator
    def toggle_purchased(self) -> None:
        self.is_purchased = not self.is_purchased
