"""
Pydantic schemas for the synchronization boundary.

Ingestion records: one tagged record per entity kind. Every field is
optional and presence is tracked through `model_fields_set`, so the codec can
tell "absent, leave it alone" from "sent as null, clear it". Keys travel in
camelCase; unknown keys are ignored.

Reports: soft per-record problems collected during an ingestion cycle.
"""

from datetime import datetime
from typing import Annotated, Dict, List, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)
from pydantic.alias_generators import to_camel

from domain.enums import (
    EntityKind,
    IssueCode,
    MealType,
    RecurrenceFrequency,
    RecurrenceType,
    Seasonality,
    StepType,
    Unit,
)
from domain.models.types import as_utc

# Epoch seconds or ISO-8601 on the wire, aware UTC in memory
UTCTimestamp = Annotated[datetime, AfterValidator(as_utc)]


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _clean_ids(value):
    if value is None:
        return None
    return [uid for uid in value if isinstance(uid, str) and uid]


# ============================================================================
# Ingestion records
# ============================================================================


class SyncRecord(BaseModel):
    """Fields shared by every synchronizable kind."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )


    uid: str
    owner_id: Optional[str] = None
    last_modified: Optional[UTCTimestamp] = None

    @field_validator("owner_id", mode="before")
    @classmethod
    def clean_owner_id(cls, v):
        return _blank_to_none(v)

    def has(self, field: str) -> bool:
        """True when the field was present in the incoming record."""
        return field in self.model_fields_set


class UserRecord(SyncRecord):
    display_name: Optional[str] = None
    email: Optional[str] = None
    photo_url: Optional[str] = None
    is_registered: Optional[bool] = None
    friend_ids: Optional[List[str]] = None

    @field_validator("friend_ids", mode="after")
    @classmethod
    def clean_id_list(cls, v):
        return _clean_ids(v)


class IngredientRecord(BaseModel):
    """Ingredient row; rows without name or order are dropped by the codec."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    order: Optional[int] = None
    quantity: Optional[float] = None
    unit: Optional[Unit] = None


class RecipeStepRecord(BaseModel):
    """Step row; rows without order, instruction or type are dropped by the codec."""

    model_config = ConfigDict(extra="ignore")

    order: Optional[int] = None
    instruction: Optional[str] = None
    type: Optional[StepType] = None
    duration: Optional[float] = None


class RecipeRecord(SyncRecord):
    title: Optional[str] = None
    details: Optional[str] = None
    seasonality: Optional[Seasonality] = None
    meal_types: Optional[List[MealType]] = None
    tags: Optional[List[str]] = None
    is_shared: Optional[bool] = None
    deleted_at: Optional[UTCTimestamp] = None
    ingredients: Optional[List[IngredientRecord]] = None
    steps: Optional[List[RecipeStepRecord]] = None
    meal_ids: Optional[List[str]] = None

    @field_validator("meal_ids", mode="after")
    @classmethod
    def clean_id_list(cls, v):
        return _clean_ids(v)


class TodoItemRecord(SyncRecord):

    title: Optional[str] = None
    details: Optional[str] = None
    due_date: Optional[UTCTimestamp] = None
    is_completed: Optional[bool] = None
    recurrence_frequency: Optional[RecurrenceFrequency] = None
    recurrence_type: Optional[RecurrenceType] = None
    recurrence_interval: Optional[int] = None
    ignore_time_component: Optional[bool] = None
    priority: Optional[int] = None
    deleted_at: Optional[UTCTimestamp] = None
    category_name: Optional[str] = None
    meal_id: Optional[str] = None
    shopping_list_item_id: Optional[str] = None

    @field_validator("meal_id", "shopping_list_item_id", "category_name", mode="before")
    @classmethod
    def clean_references(cls, v):
        return _blank_to_none(v)


class MealRecord(SyncRecord):

    scaling_factor: Optional[float] = None
    meal_type: Optional[MealType] = None
    is_done: Optional[bool] = None
    deleted_at: Optional[UTCTimestamp] = None
    recipe_id: Optional[str] = None
    todo_item_id: Optional[str] = None
    shopping_list_item_ids: Optional[List[str]] = None

    @field_validator("recipe_id", "todo_item_id", mode="before")
    @classmethod
    def clean_references(cls, v):
        return _blank_to_none(v)

    @field_validator("shopping_list_item_ids", mode="after")
    @classmethod
    def clean_id_list(cls, v):
        return _clean_ids(v)


class ShoppingListItemRecord(SyncRecord):

    name: Optional[str] = None
    quantity: Optional[float] = None
    unit: Optional[Unit] = None
    is_purchased: Optional[bool] = None
    deleted_at: Optional[UTCTimestamp] = None
    todo_item_id: Optional[str] = None
    meal_ids: Optional[List[str]] = None

    @field_validator("todo_item_id", mode="before")
    @classmethod
    def clean_references(cls, v):
        return _blank_to_none(v)

    @field_validator("meal_ids", mode="after")
    @classmethod
    def clean_id_list(cls, v):
        return _clean_ids(v)


# ============================================================================
# Processing reports
# ============================================================================


class ProcessingIssue(BaseModel):
    """One soft failure: a skipped record or an unresolved reference"""

    kind: str
    code: IssueCode
    message: str
    uid: Optional[str] = None
    field: Optional[str] = None


class ProcessingReport(BaseModel):
    """Outcome of one processor run over one batch"""

    kind: str
    received: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    issues: List[ProcessingIssue] = Field(default_factory=list)

    def add_issue(
        self,
        code: IssueCode,
        message: str,
        uid: Optional[str] = None,
        field: Optional[str] = None,
    ) -> ProcessingIssue:
        issue = ProcessingIssue(
            kind=self.kind, code=code, message=message, uid=uid, field=field
        )
        self.issues.append(issue)
        return issue

    def issues_with(self, code: IssueCode) -> List[ProcessingIssue]:
        return [issue for issue in self.issues if issue.code == code]


class IngestionReport(BaseModel):
    """Outcome of one coordinator cycle"""

    reports: Dict[str, ProcessingReport] = Field(default_factory=dict)
    issues: List[ProcessingIssue] = Field(default_factory=list)

    @computed_field
    @property
    def issue_count(self) -> int:
        return len(self.issues) + sum(len(r.issues) for r in self.reports.values())

    @computed_field
    @property
    def ok(self) -> bool:
        return self.issue_count == 0

    def all_issues(self) -> List[ProcessingIssue]:
        collected = list(self.issues)
        for report in self.reports.values():
            collected.extend(report.issues)
        return collected


# ============================================================================
# Egress / acknowledgement
# ============================================================================


class AcknowledgeRequest(BaseModel):
    """Entities the remote side accepted in a push"""

    kind: EntityKind
    uids: List[str] = Field(default_factory=list)


class AcknowledgeResponse(BaseModel):
    kind: EntityKind
    acknowledged: int
    missing: List[str] = Field(default_factory=list)
