"""
Space domain mappers.
Handles transformation between Space ORM models and API responses.
"""

from domain.models import Space
from domain.schemas.space_schemas import SpaceResponse


class SpaceMapper:
    """Mapper for space-related transformations."""

    @staticmethod
    def to_response(space: Space) -> SpaceResponse:
        """
        Convert Space ORM model to SpaceResponse DTO.

        Args:
            space: Space ORM instance

        Returns:
            SpaceResponse with members and shared categories flattened to names and ids
        """
        return SpaceResponse(
            uid=space.uid,
            name=space.name,
            owner_uid=space.owner_uid,
            member_uids=sorted(member.uid for member in space.members),
            shared_category_names=sorted(c.name for c in space.shared_categories),
            share_all_recipes=bool(space.share_all_recipes),
            share_all_meals=bool(space.share_all_meals),
            share_all_shopping_items=bool(space.share_all_shopping_items),
            dirty=bool(space.dirty),
        )
