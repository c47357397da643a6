"""
Recipe model with its owned ingredient and step rows.
"""

from typing import Iterable, Optional

from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Float,
    Boolean,
    JSON,
    ForeignKey,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship

from domain.enums import MealType, Seasonality, StepType, Unit
from domain.models.database import Base
from domain.models.associations import recipe_spaces
from domain.models.sync_state import SyncStateMixin, SoftDeleteMixin, mutator

_UNSET = object()


class Recipe(SyncStateMixin, SoftDeleteMixin, Base):
    """A recipe; meals reference it, ingredients and steps belong to it"""

    __tablename__ = "recipes"

    _init_defaults = {"details": "", "meal_types": list, "tags": list, "is_shared": False}

    title = Column(Text, nullable=False)
    details = Column(Text, nullable=False, default="")
    seasonality = Column(SQLEnum(Seasonality), nullable=True)
    meal_types = Column(JSON, nullable=False, default=list)  # MealType values
    tags = Column(JSON, nullable=False, default=list)
    is_shared = Column(Boolean, nullable=False, default=False)

    owner_id = Column(String(64), ForeignKey("users.uid", ondelete="SET NULL"))
    owner = relationship("User", foreign_keys=[owner_id])

    ingredients = relationship(
        "Ingredient",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="Ingredient.order",
    )
    steps = relationship(
        "RecipeStep",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeStep.order",
    )
    meals = relationship("Meal", back_populates="recipe")
    spaces = relationship("Space", secondary=recipe_spaces, back_populates="recipes")

    @mutator
    def edit(
        self,
        title: Optional[str] = None,
        details: Optional[str] = None,
        seasonality=_UNSET,
        meal_types: Optional[Iterable[MealType]] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> None:
        if title is not None:
            self.title = title
        if details is not None:
            self.details = details
        if seasonality is not _UNSET:
            self.seasonality = seasonality
        if meal_types is not None:
            self.meal_types = [MealType(m).value for m in meal_types]
        if tags is not None:
            self.tags = list(tags)

    @mutator
    def add_ingredient(
        self, name: str, quantity: Optional[float] = None, unit: Optional[Unit] = None
    ) -> "Ingredient":
        ingredient = Ingredient(
            name=name, order=len(self.ingredients), quantity=quantity, unit=unit
        )
        self.ingredients.append(ingredient)
        return ingredient

    @mutator
    def remove_ingredient(self, ingredient: "Ingredient") -> None:
        if ingredient in self.ingredients:
            self.ingredients.remove(ingredient)
            for position, remaining in enumerate(self.ingredients):
                remaining.order = position

    @mutator
    def add_step(
        self,
        instruction: str,
        type: StepType = StepType.COOKING,
        duration: Optional[float] = None,
    ) -> "RecipeStep":
        step = RecipeStep(
            order=len(self.steps), instruction=instruction, type=type, duration=duration
        )
        self.steps.append(step)
        return step


class Ingredient(Base):
    """Ingredient line of a recipe"""

    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_uid = Column(
        String(64), ForeignKey("recipes.uid", ondelete="CASCADE"), nullable=False
    )
    name = Column(Text, nullable=False)
    order = Column(Integer, nullable=False, default=0)
    quantity = Column(Float)
    unit = Column(SQLEnum(Unit))

    recipe = relationship("Recipe", back_populates="ingredients")


class RecipeStep(Base):
    """Ordered cooking step of a recipe"""

    __tablename__ = "recipe_steps"

    id = Column(Integer, primary_key=True, autoincrement=True)
    recipe_uid = Column(
        String(64), ForeignKey("recipes.uid", ondelete="CASCADE"), nullable=False
    )
    order = Column(Integer, nullable=False, default=0)
    instruction = Column(Text, nullable=False)
    type = Column(SQLEnum(StepType), nullable=False, default=StepType.COOKING)
    duration = Column(Float)  # seconds

    recipe = relationship("Recipe", back_populates="steps")
