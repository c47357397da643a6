"""
SyncState capability shared by every synchronizable entity.

Every entity kind that travels to and from the remote backend mixes in
SyncStateMixin. Local mutations go through methods decorated with @mutator,
which marks the entity dirty once the body has run. Ingestion writes fields
directly and finishes with mark_synced().
"""

import functools
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, String

from domain.models.types import UTCDateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_uid() -> str:
    return str(uuid.uuid4())


def mutator(method):
    """
    Declare a public entity method as a local mutation.

    The wrapped method runs first and the entity is then marked dirty, so no
    local change can skip the dirty/last_modified bookkeeping.
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        result = method(self, *args, **kwargs)
        self.mark_dirty()
        return result

    wrapper.is_mutator = True
    return wrapper


def is_mutator(attribute) -> bool:
    return getattr(attribute, "is_mutator", False)


class SyncStateMixin:
    """Owner-independent sync bookkeeping: uid, last_modified and dirty flag."""

    uid = Column(String(64), primary_key=True)
    last_modified = Column(UTCDateTime, nullable=False, default=utcnow)
    dirty = Column(Boolean, nullable=False, default=True)

    # Python-side defaults so unflushed entities read like persisted ones
    _init_defaults: dict = {}

    def __init__(self, **kwargs):
        for key, default in self._init_defaults.items():
            kwargs.setdefault(key, default() if callable(default) else default)
        # Locally constructed entities start dirty; processors pass dirty=False
        kwargs.setdefault("uid", generate_uid())
        kwargs.setdefault("dirty", True)
        kwargs.setdefault("last_modified", utcnow())
        super().__init__(**kwargs)

    def mark_dirty(self) -> None:
        """Record a local change that has not been pushed yet."""
        self.last_modified = utcnow()
        self.dirty = True

    def mark_synced(self) -> None:
        """Clear the dirty flag after ingestion or an acknowledged push."""
        if self.dirty:
            self.dirty = False

    @property
    def owner_uid(self):
        owner = getattr(self, "owner", None)
        return owner.uid if owner is not None else None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} uid={self.uid} dirty={self.dirty}>"


class SoftDeleteMixin:
    """Tombstone support for content entities; hard deletion happens elsewhere."""

    deleted_at = Column(UTCDateTime, nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @mutator
    def soft_delete(self) -> None:
        self.deleted_at = utcnow()

    @mutator
    def restore(self) -> None:
        self.deleted_at = None
