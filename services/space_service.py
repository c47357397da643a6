"""Space management service"""

import logging
from typing import Iterable, List, Optional

from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import EntityKind
from domain.models import Space, User
from repositories.local_store import LocalStore, store_lock
from services.category_service import CategoryService
from services.space_relationship_service import SpaceRelationshipService

logger = logging.getLogger("vesta.spaces")


class SpaceService:
    """
    Local, user-driven changes to sharing spaces.

    Every operation marks the space dirty, recomputes the derived spaces of
    every affected user's content and saves the store.
    """

    @staticmethod
    def get_space(store: LocalStore, space_uid: str) -> Space:
        space = store.fetch_unique(EntityKind.SPACES, space_uid)
        if not space:
            raise NotFoundError(
                f"Space {space_uid} not found",
                details={"space_uid": space_uid},
                code="SPACE_NOT_FOUND",
            )
        return space

    @staticmethod
    def _get_user(store: LocalStore, user_uid: str) -> User:
        user = store.fetch_unique(EntityKind.USERS, user_uid)
        if not user:
            raise NotFoundError(
                f"User {user_uid} not found",
                details={"user_uid": user_uid},
                code="USER_NOT_FOUND",
            )
        return user

    @staticmethod
    def create_space(
        store: LocalStore,
        name: str,
        owner_uid: str,
        member_uids: Iterable[str] = (),
    ) -> Space:
        """
        Create a space; the owner is always a member.

        Raises:
            ServiceValidationError: If the name is blank
            NotFoundError: If the owner or a member is unknown
        """
        name = (name or "").strip()
        if not name:
            raise ServiceValidationError("Space name must not be empty", code="INVALID_SPACE_NAME")

        with store_lock:
            owner = SpaceService._get_user(store, owner_uid)
            members = [owner]
            for uid in member_uids:
                if uid != owner.uid and all(m.uid != uid for m in members):
                    members.append(SpaceService._get_user(store, uid))

            space = Space(name=name, owner=owner, members=members)
            store.insert(space)
            logger.info(f"Created space {space.uid} '{name}' with {len(members)} members")

            SpaceService._recompute(store, members)
            store.save()
            return space

    @staticmethod
    def add_member(store: LocalStore, space_uid: str, user_uid: str) -> Space:
        with store_lock:
            space = SpaceService.get_space(store, space_uid)
            user = SpaceService._get_user(store, user_uid)
            if space.has_member(user):
                logger.info(f"User {user_uid} is already a member of space {space_uid}")
                return space
            space.add_member(user)
            logger.info(f"Added member {user_uid} to space {space_uid}")

            SpaceService._recompute(store, space.members)
            store.save()
            return space

    @staticmethod
    def remove_member(store: LocalStore, space_uid: str, user_uid: str) -> Space:
        with store_lock:
            space = SpaceService.get_space(store, space_uid)
            user = SpaceService._get_user(store, user_uid)
            if not space.has_member(user):
                raise NotFoundError(
                    f"User {user_uid} is not a member of space {space_uid}",
                    details={"space_uid": space_uid, "user_uid": user_uid},
                    code="MEMBER_NOT_FOUND",
                )
            space.remove_member(user)
            logger.info(f"Removed member {user_uid} from space {space_uid}")

            SpaceService._recompute(store, list(space.members) + [user])
            store.save()
            return space

    @staticmethod
    def update_policy(
        store: LocalStore,
        space_uid: str,
        share_all_recipes: Optional[bool] = None,
        share_all_meals: Optional[bool] = None,
        share_all_shopping_items: Optional[bool] = None,
    ) -> Space:
        with store_lock:
            space = SpaceService.get_space(store, space_uid)
            space.set_share_policy(
                share_all_recipes=share_all_recipes,
                share_all_meals=share_all_meals,
                share_all_shopping_items=share_all_shopping_items,
            )
            logger.info(
                f"Updated sharing policy of space {space_uid}: "
                f"recipes={space.share_all_recipes} meals={space.share_all_meals} "
                f"shopping_items={space.share_all_shopping_items}"
            )

            SpaceService._recompute(store, space.members)
            store.save()
            return space

    @staticmethod
    def share_category(store: LocalStore, space_uid: str, name: str) -> Space:
        with store_lock:
            space = SpaceService.get_space(store, space_uid)
            category = CategoryService.fetch_or_create(store, name)
            if category is None:
                raise ServiceValidationError(
                    "Category name must not be empty", code="INVALID_CATEGORY_NAME"
                )
            space.share_category(category)
            logger.info(f"Shared category '{category.name}' in space {space_uid}")

            SpaceService._recompute(store, space.members)
            store.save()
            return space

    @staticmethod
    def unshare_category(store: LocalStore, space_uid: str, name: str) -> Space:
        with store_lock:
            space = SpaceService.get_space(store, space_uid)
            trimmed = (name or "").strip()
            category = store.categories.get_by_name(trimmed) if trimmed else None
            if category is None or not space.shares_category(category.name):
                raise NotFoundError(
                    f"Category '{trimmed}' is not shared in space {space_uid}",
                    details={"space_uid": space_uid, "category": trimmed},
                    code="CATEGORY_NOT_SHARED",
                )
            space.unshare_category(category)
            logger.info(f"Unshared category '{trimmed}' in space {space_uid}")

            SpaceService._recompute(store, space.members)
            store.save()
            return space

    @staticmethod
    def _recompute(store: LocalStore, users: Iterable[User]) -> int:
        relationships = SpaceRelationshipService(store)
        changed = 0
        seen: List[str] = []
        for user in users:
            if user.uid in seen:
                continue
            seen.append(user.uid)
            changed += relationships.update_all_space_relationships(user)
        return changed
