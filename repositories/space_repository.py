"""
Space Repository - Data access layer for sharing spaces
"""

from typing import List
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Space, User


class SpaceRepository(BaseRepository[Space]):
    """Repository for space data access"""

    def __init__(self, db: Session):
        super().__init__(db, Space)

    def get_by_member(self, user_uid: str) -> List[Space]:
        """Get every space a user is a member of"""
        return (
            self.db.query(Space)
            .filter(Space.members.any(User.uid == user_uid))
            .order_by(Space.uid)
            .all()
        )
