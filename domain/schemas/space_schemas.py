from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class SpaceCreate(BaseModel):
    name: str = Field(..., min_length=1)
    owner_uid: str
    member_uids: List[str] = Field(default_factory=list)


class SpaceMemberAdd(BaseModel):
    user_uid: str


class SpaceCategoryShare(BaseModel):
    name: str


class SpacePolicyUpdate(BaseModel):
    share_all_recipes: Optional[bool] = None
    share_all_meals: Optional[bool] = None
    share_all_shopping_items: Optional[bool] = None


class SpaceResponse(BaseModel):
    uid: str
    name: str
    owner_uid: Optional[str] = None
    member_uids: List[str]
    shared_category_names: List[str]
    share_all_recipes: bool
    share_all_meals: bool
    share_all_shopping_items: bool
    dirty: bool


class RecomputeResponse(BaseModel):
    user_uid: str
    changed: int
