"""User entity processor"""

from domain.enums import EntityKind
from domain.mappers.sync_mapper import SyncMapper
from domain.models import User
from domain.schemas.sync_schemas import ProcessingReport, UserRecord
from services.sync.processor_base import EntityProcessor


class UserEntityProcessor(EntityProcessor):
    """Users need no creation fields; a user may own itself."""

    kind = EntityKind.USERS
    entity_type = "User"
    model = User
    record_class = UserRecord

    def apply_fields(self, user: User, record: UserRecord) -> None:
        SyncMapper.apply_user_fields(user, record)

    def resolve_references(self, user: User, record: UserRecord, report: ProcessingReport) -> None:
        self.resolve_owner(user, record, report)
        self.reconcile_collection(
            user, "friends", record.friend_ids, EntityKind.USERS, report, field="friendIds"
        )
