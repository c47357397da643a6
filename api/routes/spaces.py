"""Space management routes"""

from fastapi import APIRouter, Depends, status
import logging

from api.dependencies import get_store
from domain.mappers.space_mapper import SpaceMapper
from domain.schemas.space_schemas import (
    RecomputeResponse,
    SpaceCategoryShare,
    SpaceCreate,
    SpaceMemberAdd,
    SpacePolicyUpdate,
    SpaceResponse,
)
from repositories.local_store import LocalStore
from services.space_service import SpaceService
from services.sync_service import SyncService

router = APIRouter(tags=["Spaces"])
logger = logging.getLogger("vesta.api.spaces")


@router.post("/spaces", response_model=SpaceResponse, status_code=status.HTTP_201_CREATED)
def create_space(payload: SpaceCreate, store: LocalStore = Depends(get_store)):
    """Create a space owned by (and including) `owner_uid`"""
    space = SpaceService.create_space(store, payload.name, payload.owner_uid, payload.member_uids)
    return SpaceMapper.to_response(space)


@router.get("/spaces/{space_uid}", response_model=SpaceResponse)
def get_space(space_uid: str, store: LocalStore = Depends(get_store)):
    return SpaceMapper.to_response(SpaceService.get_space(store, space_uid))


@router.post("/spaces/{space_uid}/members", response_model=SpaceResponse)
def add_member(space_uid: str, payload: SpaceMemberAdd, store: LocalStore = Depends(get_store)):
    space = SpaceService.add_member(store, space_uid, payload.user_uid)
    return SpaceMapper.to_response(space)


@router.delete("/spaces/{space_uid}/members/{user_uid}", response_model=SpaceResponse)
def remove_member(space_uid: str, user_uid: str, store: LocalStore = Depends(get_store)):
    space = SpaceService.remove_member(store, space_uid, user_uid)
    return SpaceMapper.to_response(space)


@router.patch("/spaces/{space_uid}/policy", response_model=SpaceResponse)
def update_policy(
    space_uid: str, payload: SpacePolicyUpdate, store: LocalStore = Depends(get_store)
):
    """Toggle the per-kind auto-share flags; omitted flags keep their value"""
    space = SpaceService.update_policy(
        store,
        space_uid,
        share_all_recipes=payload.share_all_recipes,
        share_all_meals=payload.share_all_meals,
        share_all_shopping_items=payload.share_all_shopping_items,
    )
    return SpaceMapper.to_response(space)


@router.post("/spaces/{space_uid}/categories", response_model=SpaceResponse)
def share_category(
    space_uid: str, payload: SpaceCategoryShare, store: LocalStore = Depends(get_store)
):
    space = SpaceService.share_category(store, space_uid, payload.name)
    return SpaceMapper.to_response(space)


@router.delete("/spaces/{space_uid}/categories/{name}", response_model=SpaceResponse)
def unshare_category(space_uid: str, name: str, store: LocalStore = Depends(get_store)):
    space = SpaceService.unshare_category(store, space_uid, name)
    return SpaceMapper.to_response(space)


@router.post("/users/{user_uid}/recompute-spaces", response_model=RecomputeResponse)
def recompute_spaces(user_uid: str, store: LocalStore = Depends(get_store)):
    """Re-derive the spaces of everything the user owns"""
    changed = SyncService.recompute_spaces(store, user_uid)
    return RecomputeResponse(user_uid=user_uid, changed=changed)
