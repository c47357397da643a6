"""
Association tables for the many-to-many relationships of the sync model.

Every row references its endpoints by id; deleting either endpoint removes
the row.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Table

from domain.models.database import Base


def _link_table(name: str, left: str, left_ref: str, right: str, right_ref: str, right_type=String(64)):
    return Table(
        name,
        Base.metadata,
        Column(left, String(64), ForeignKey(left_ref, ondelete="CASCADE"), primary_key=True),
        Column(right, right_type, ForeignKey(right_ref, ondelete="CASCADE"), primary_key=True),
    )


user_friends = _link_table("user_friends", "user_uid", "users.uid", "friend_uid", "users.uid")

space_members = _link_table("space_members", "space_uid", "spaces.uid", "user_uid", "users.uid")
space_shared_categories = _link_table(
    "space_shared_categories",
    "space_uid",
    "spaces.uid",
    "category_id",
    "todo_item_categories.id",
    right_type=Integer,
)

meal_shopping_list_items = _link_table(
    "meal_shopping_list_items",
    "meal_uid",
    "meals.uid",
    "shopping_list_item_uid",
    "shopping_list_items.uid",
)

# Derived visibility: maintained only by the space relationship service
recipe_spaces = _link_table("recipe_spaces", "recipe_uid", "recipes.uid", "space_uid", "spaces.uid")
meal_spaces = _link_table("meal_spaces", "meal_uid", "meals.uid", "space_uid", "spaces.uid")
shopping_list_item_spaces = _link_table(
    "shopping_list_item_spaces",
    "shopping_list_item_uid",
    "shopping_list_items.uid",
    "space_uid",
    "spaces.uid",
)
todo_item_spaces = _link_table(
    "todo_item_spaces", "todo_item_uid", "todo_items.uid", "space_uid", "spaces.uid"
)
todo_item_event_spaces = _link_table(
    "todo_item_event_spaces",
    "todo_item_event_uid",
    "todo_item_events.uid",
    "space_uid",
    "spaces.uid",
)
