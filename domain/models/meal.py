"""
Meal model.
"""

from sqlalchemy import (
    Column,
    String,
    Float,
    Boolean,
    ForeignKey,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship

from domain.enums import MealType
from domain.models.database import Base
from domain.models.associations import meal_shopping_list_items, meal_spaces
from domain.models.sync_state import SyncStateMixin, SoftDeleteMixin, mutator


class Meal(SyncStateMixin, SoftDeleteMixin, Base):
    """A planned meal: a recipe scaled for a slot, with a companion todo item"""

    __tablename__ = "meals"

    _init_defaults = {"scaling_factor": 1.0, "meal_type": MealType.DINNER, "is_done": False}

    scaling_factor = Column(Float, nullable=False, default=1.0)
    meal_type = Column(SQLEnum(MealType), nullable=False, default=MealType.DINNER)
    is_done = Column(Boolean, nullable=False, default=False)

    owner_id = Column(String(64), ForeignKey("users.uid", ondelete="SET NULL"))
    owner = relationship("User", foreign_keys=[owner_id])

    # Owned companion task: deleting the meal deletes it
    todo_item_id = Column(String(64), ForeignKey("todo_items.uid", ondelete="SET NULL"))
    todo_item = relationship(
        "TodoItem",
        foreign_keys=[todo_item_id],
        back_populates="meal",
        cascade="save-update, merge, delete",
    )

    recipe_id = Column(String(64), ForeignKey("recipes.uid", ondelete="SET NULL"))
    recipe = relationship("Recipe", back_populates="meals")

    shopping_list_items = relationship(
        "ShoppingListItem", secondary=meal_shopping_list_items, back_populates="meals"
    )
    spaces = relationship("Space", secondary=meal_spaces, back_populates="meals")

    @mutator
    def set_scaling_factor(self, scaling_factor: float) -> None:
        if scaling_factor <= 0:
            raise ValueError("scaling_factor must be positive")
        self.scaling_factor = scaling_factor

    @mutator
    def set_meal_type(self, meal_type: MealType) -> None:
        self.meal_type = MealType(meal_type)

    @mutator
    def mark_as_done(self) -> None:
        self.is_done = True
