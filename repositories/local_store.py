"""
Local store collaborator.

Kind-keyed facade over the per-kind repositories and the SQLAlchemy session.
Every store failure is rolled back and re-raised as PersistenceError; nothing
here swallows an error.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import PersistenceError
from domain.enums import EntityKind
from domain.models import TodoItemCategory
from repositories.base import BaseRepository
from repositories.meal_repository import MealRepository
from repositories.recipe_repository import RecipeRepository
from repositories.shopping_repository import ShoppingListItemRepository
from repositories.space_repository import SpaceRepository
from repositories.todo_repository import (
    TodoItemCategoryRepository,
    TodoItemEventRepository,
    TodoItemRepository,
)
from repositories.user_repository import UserRepository

logger = logging.getLogger("vesta.store")

KindLike = Union[EntityKind, str]

# Single writer: ingestion, recomputation and acknowledgement never interleave
store_lock = threading.RLock()


class LocalStore:
    """Unit of work for one ingestion cycle or recomputation pass"""

    def __init__(self, db: Session):
        self.db = db
        self.repositories: Dict[EntityKind, BaseRepository] = {
            EntityKind.USERS: UserRepository(db),
            EntityKind.RECIPES: RecipeRepository(db),
            EntityKind.TODO_ITEMS: TodoItemRepository(db),
            EntityKind.TODO_ITEM_EVENTS: TodoItemEventRepository(db),
            EntityKind.MEALS: MealRepository(db),
            EntityKind.SHOPPING_LIST_ITEMS: ShoppingListItemRepository(db),
            EntityKind.SPACES: SpaceRepository(db),
        }
        self.categories = TodoItemCategoryRepository(db)

    def repository(self, kind: KindLike) -> BaseRepository:
        return self.repositories[EntityKind(kind)]

    def repository_for(self, entity):
        """Repository managing the type of `entity`"""
        if isinstance(entity, TodoItemCategory):
            return self.categories
        for repository in self.repositories.values():
            if isinstance(entity, repository.model):
                return repository
        raise TypeError(f"No repository for {type(entity).__name__}")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def fetch_unique(self, kind: KindLike, uid: Optional[str]):
        with self._guard():
            return self.repository(kind).get_by_id(uid)

    def fetch_many(self, kind: KindLike, uids: Iterable[str]) -> List:
        with self._guard():
            return self.repository(kind).get_many(uids)

    def fetch_all(self, kind: KindLike) -> List:
        with self._guard():
            return self.repository(kind).get_all()

    def fetch_owned_by(self, kind: KindLike, user) -> List:
        user_uid = getattr(user, "uid", user)
        with self._guard():
            return self.repository(kind).get_owned_by(user_uid)

    def fetch_dirty(self, kind: KindLike) -> List:
        with self._guard():
            return self.repository(kind).get_dirty()

    def fetch_spaces_of(self, user) -> List:
        """Spaces the user is a member of"""
        user_uid = getattr(user, "uid", user)
        with self._guard():
            return self.repositories[EntityKind.SPACES].get_by_member(user_uid)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, entity):
        """Add an entity and flush it so later lookups in the cycle resolve it"""
        repository = self.repository_for(entity)
        with self._guard():
            repository.add(entity)
        return entity

    def delete(self, entity) -> None:
        """Hard-delete an entity; owned companions and events cascade"""
        repository = self.repository_for(entity)
        with self._guard():
            repository.delete(entity)

    def flush(self) -> None:
        with self._guard():
            self.db.flush()

    def save(self) -> None:
        """Commit the unit of work; failures roll back and propagate"""
        with self._guard():
            self.db.commit()
        logger.debug("Local store committed")

    @contextmanager
    def _guard(self):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Local store failure: {type(e).__name__}: {e}")
            raise PersistenceError(
                "Local store operation failed",
                details={"error": type(e).__name__},
            ) from e
