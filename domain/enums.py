"""
Domain enums for the Vesta synchronization core.
Contains all enumeration types used across the domain models and sync records.
"""

import enum


class MealType(str, enum.Enum):
    """Slot of the day a meal is planned for"""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"


class Unit(str, enum.Enum):
    """Measurement units for ingredients and shopping list items"""

    GRAM = "gram"
    KILOGRAM = "kilogram"
    MILLILITER = "milliliter"
    LITER = "liter"
    TEASPOON = "teaspoon"
    TABLESPOON = "tablespoon"
    CUP = "cup"
    PIECE = "piece"
    PINCH = "pinch"


class Seasonality(str, enum.Enum):
    """When a recipe is in season"""

    YEAR_ROUND = "yearRound"
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


class StepType(str, enum.Enum):
    """Kind of work a recipe step describes"""

    PREPARATION = "preparation"
    COOKING = "cooking"
    MAINTENANCE = "maintenance"


class RecurrenceFrequency(str, enum.Enum):
    """How often a recurring todo item repeats"""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class RecurrenceType(str, enum.Enum):
    """Whether the next occurrence is computed from the due date or completion"""

    FIXED = "fixed"
    FLEXIBLE = "flexible"


class TodoItemEventType(str, enum.Enum):
    """History entries recorded for a todo item"""

    CREATED = "created"
    MARK_AS_DONE = "markAsDone"
    EDIT_TITLE = "editTitle"
    EDIT_DETAILS = "editDetails"
    EDIT_DUE_DATE = "editDueDate"
    EDIT_RECURRENCE_FREQUENCY = "editRecurrenceFrequency"
    EDIT_RECURRENCE_TYPE = "editRecurrenceType"
    EDIT_IS_COMPLETED = "editIsCompleted"
    EDIT_IGNORE_TIME_COMPONENT = "editIgnoreTimeComponent"
    EDIT_RECURRENCE_INTERVAL = "editRecurrenceInterval"
    EDIT_PRIORITY = "editPriority"
    EDIT_CATEGORY = "editCategory"


class EntityKind(str, enum.Enum):
    """Payload keys of the synchronizable entity kinds"""

    USERS = "users"
    RECIPES = "recipes"
    TODO_ITEMS = "todoItems"
    TODO_ITEM_EVENTS = "todoItemEvents"
    MEALS = "meals"
    SHOPPING_LIST_ITEMS = "shoppingListItems"
    SPACES = "spaces"


class IssueCode(str, enum.Enum):
    """Soft, per-record problems collected while ingesting a batch"""

    MISSING_ID = "missing_id"
    INVALID_RECORD = "invalid_record"
    MISSING_REQUIRED_FIELDS = "missing_required_fields"
    DANGLING_REFERENCE = "dangling_reference"
    UNKNOWN_KIND = "unknown_kind"
    PROCESSOR_FAILURE = "processor_failure"
