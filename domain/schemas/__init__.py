"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.sync_schemas import (
    SyncRecord,
    UserRecord,
    RecipeRecord,
    IngredientRecord,
    RecipeStepRecord,
    TodoItemRecord,
    MealRecord,
    ShoppingListItemRecord,
    ProcessingIssue,
    ProcessingReport,
    IngestionReport,
    AcknowledgeRequest,
    AcknowledgeResponse,
)
from domain.schemas.space_schemas import (
    SpaceCreate,
    SpaceMemberAdd,
    SpaceCategoryShare,
    SpacePolicyUpdate,
    SpaceResponse,
    RecomputeResponse,
)

__all__ = [
    # Ingestion records
    "SyncRecord",
    "UserRecord",
    "RecipeRecord",
    "IngredientRecord",
    "RecipeStepRecord",
    "TodoItemRecord",
    "MealRecord",
    "ShoppingListItemRecord",
    # Reports
    "ProcessingIssue",
    "ProcessingReport",
    "IngestionReport",
    "AcknowledgeRequest",
    "AcknowledgeResponse",
    # Spaces
    "SpaceCreate",
    "SpaceMemberAdd",
    "SpaceCategoryShare",
    "SpacePolicyUpdate",
    "SpaceResponse",
    "RecomputeResponse",
]
