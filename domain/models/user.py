"""
User model.
"""

from sqlalchemy import Column, String, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from domain.models.database import Base
from domain.models.associations import user_friends, space_members
from domain.models.sync_state import SyncStateMixin, mutator


class User(SyncStateMixin, Base):
    """A person whose content is synchronized; may own itself"""

    __tablename__ = "users"

    _init_defaults = {"is_registered": False}

    display_name = Column(Text)
    email = Column(Text)
    photo_url = Column(Text)
    is_registered = Column(Boolean, nullable=False, default=False)

    owner_id = Column(String(64), ForeignKey("users.uid", ondelete="SET NULL"))
    owner = relationship(
        "User", remote_side="User.uid", foreign_keys=[owner_id], post_update=True
    )

    friends = relationship(
        "User",
        secondary=user_friends,
        primaryjoin=lambda: User.uid == user_friends.c.user_uid,
        secondaryjoin=lambda: User.uid == user_friends.c.friend_uid,
    )
    spaces = relationship("Space", secondary=space_members, back_populates="members")

    @mutator
    def rename(self, display_name: str) -> None:
        self.display_name = display_name

    @mutator
    def add_friend(self, friend: "User") -> None:
        if friend is not self and friend not in self.friends:
            self.friends.append(friend)

    @mutator
    def remove_friend(self, friend: "User") -> None:
        if friend in self.friends:
            self.friends.remove(friend)
