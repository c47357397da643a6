"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.

Repositories never commit: the unit of work belongs to the caller (one
ingestion cycle, one recomputation pass, one API request).
"""

from typing import Generic, Iterable, List, Optional, Type, TypeVar
from sqlalchemy.orm import Session
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common lookups for synchronizable entities.
    All entities handled here are keyed by their string `uid`.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, uid: str) -> Optional[ModelType]:
        """
        Get entity by uid.

        Session.get consults the identity map first, so entities inserted
        earlier in the same cycle resolve without a round-trip.

        Args:
            uid: Entity uid

        Returns:
            Entity or None if not found
        """
        if not uid:
            return None
        return self.db.get(self.model, uid)

    def get_many(self, uids: Iterable[str]) -> List[ModelType]:
        """Get every entity whose uid is in `uids`; unknown uids are dropped"""
        uids = {uid for uid in uids if uid}
        if not uids:
            return []
        return self.db.query(self.model).filter(self.model.uid.in_(uids)).all()

    def get_all(self) -> List[ModelType]:
        """Get all entities ordered by uid"""
        return self.db.query(self.model).order_by(self.model.uid).all()

    def get_owned_by(self, user_uid: str) -> List[ModelType]:
        """Get all entities owned by a user"""
        return (
            self.db.query(self.model)
            .filter(self.model.owner_id == user_uid)
            .order_by(self.model.uid)
            .all()
        )

    def get_dirty(self) -> List[ModelType]:
        """Get entities with local changes not yet pushed"""
        return (
            self.db.query(self.model)
            .filter(self.model.dirty.is_(True))
            .order_by(self.model.last_modified, self.model.uid)
            .all()
        )

    def add(self, entity: ModelType) -> ModelType:
        """Stage new entity and flush so later lookups can see it"""
        self.db.add(entity)
        self.db.flush()
        return entity

    def delete(self, entity: ModelType) -> None:
        """Delete entity; ORM cascades remove owned companions"""
        self.db.delete(entity)
        self.db.flush()
