"""
Todo item, its category and its event history.
"""

import calendar
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Boolean,
    ForeignKey,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship

from domain.enums import RecurrenceFrequency, RecurrenceType, TodoItemEventType
from domain.models.database import Base
from domain.models.associations import (
    todo_item_spaces,
    todo_item_event_spaces,
    space_shared_categories,
)
from domain.models.sync_state import SyncStateMixin, SoftDeleteMixin, mutator, utcnow
from domain.models.types import UTCDateTime

# field name -> event type recorded when TodoItem.edit changes it
_EDIT_EVENTS = {
    "title": TodoItemEventType.EDIT_TITLE,
    "details": TodoItemEventType.EDIT_DETAILS,
    "due_date": TodoItemEventType.EDIT_DUE_DATE,
    "is_completed": TodoItemEventType.EDIT_IS_COMPLETED,
    "recurrence_frequency": TodoItemEventType.EDIT_RECURRENCE_FREQUENCY,
    "recurrence_type": TodoItemEventType.EDIT_RECURRENCE_TYPE,
    "recurrence_interval": TodoItemEventType.EDIT_RECURRENCE_INTERVAL,
    "ignore_time_component": TodoItemEventType.EDIT_IGNORE_TIME_COMPONENT,
    "priority": TodoItemEventType.EDIT_PRIORITY,
}


def _add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def next_due_date(
    due_date: datetime, frequency: RecurrenceFrequency, interval: Optional[int] = None
) -> datetime:
    """Advance a due date by one recurrence step."""
    step = interval or 1
    if frequency == RecurrenceFrequency.DAILY:
        return due_date + timedelta(days=step)
    if frequency == RecurrenceFrequency.WEEKLY:
        return due_date + timedelta(weeks=step)
    if frequency == RecurrenceFrequency.MONTHLY:
        return _add_months(due_date, step)
    return _add_months(due_date, 12 * step)


class TodoItemCategory(Base):
    """Named category; spaces share todo items by category name"""

    __tablename__ = "todo_item_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, unique=True)

    todo_items = relationship("TodoItem", back_populates="category")
    spaces = relationship(
        "Space", secondary=space_shared_categories, back_populates="shared_categories"
    )

    def __repr__(self) -> str:
        return f"<TodoItemCategory name={self.name!r}>"


class TodoItem(SyncStateMixin, SoftDeleteMixin, Base):
    """A task; meals and shopping list items own one as their companion"""

    __tablename__ = "todo_items"

    _init_defaults = {
        "details": "",
        "is_completed": False,
        "ignore_time_component": True,
        "priority": 4,
    }

    title = Column(Text, nullable=False)
    details = Column(Text, nullable=False, default="")
    due_date = Column(UTCDateTime)
    is_completed = Column(Boolean, nullable=False, default=False)
    recurrence_frequency = Column(SQLEnum(RecurrenceFrequency))
    recurrence_type = Column(SQLEnum(RecurrenceType))
    recurrence_interval = Column(Integer)
    ignore_time_component = Column(Boolean, nullable=False, default=True)
    priority = Column(Integer, nullable=False, default=4)

    owner_id = Column(String(64), ForeignKey("users.uid", ondelete="SET NULL"))
    owner = relationship("User", foreign_keys=[owner_id])

    category_id = Column(
        Integer, ForeignKey("todo_item_categories.id", ondelete="SET NULL")
    )
    category = relationship("TodoItemCategory", back_populates="todo_items")

    events = relationship(
        "TodoItemEvent",
        back_populates="todo_item",
        cascade="all, delete-orphan",
        order_by="TodoItemEvent.date",
    )
    meal = relationship("Meal", back_populates="todo_item", uselist=False)
    shopping_list_item = relationship(
        "ShoppingListItem", back_populates="todo_item", uselist=False
    )
    spaces = relationship("Space", secondary=todo_item_spaces, back_populates="todo_items")

    def _record_event(self, event_type: TodoItemEventType, **previous) -> "TodoItemEvent":
        event = TodoItemEvent(
            type=event_type,
            date=utcnow(),
            owner=self.owner,
            **previous,
        )
        event.spaces = list(self.spaces)
        self.events.append(event)
        return event

    @mutator
    def edit(self, **changes) -> list:
        """
        Apply local edits and record one history event per changed field.

        Args:
            **changes: any of title, details, due_date, is_completed,
                recurrence_frequency, recurrence_type, recurrence_interval,
                ignore_time_component, priority

        Returns:
            The TodoItemEvents recorded for the fields that actually changed
        """
        unknown = set(changes) - set(_EDIT_EVENTS)
        if unknown:
            raise TypeError(f"Unknown TodoItem fields: {sorted(unknown)}")

        events = []
        for field, value in changes.items():
            previous = getattr(self, field)
            if previous == value:
                continue
            setattr(self, field, value)
            events.append(
                self._record_event(_EDIT_EVENTS[field], **{f"previous_{field}": previous})
            )
        return events

    @mutator
    def mark_as_done(self) -> "TodoItemEvent":
        """Complete the item, or roll a recurring item forward to its next due date."""
        event = self._record_event(
            TodoItemEventType.MARK_AS_DONE,
            previous_is_completed=self.is_completed,
            previous_due_date=self.due_date,
        )
        if self.recurrence_frequency is not None and self.due_date is not None:
            base = self.due_date
            if self.recurrence_type == RecurrenceType.FLEXIBLE:
                base = utcnow()
            self.due_date = next_due_date(
                base, self.recurrence_frequency, self.recurrence_interval
            )
        else:
            self.is_completed = True
        return event

    @mutator
    def set_category(self, category: Optional[TodoItemCategory]) -> None:
        previous = self.category.name if self.category is not None else None
        new = category.name if category is not None else None
        if previous == new:
            return
        self.category = category
        self._record_event(TodoItemEventType.EDIT_CATEGORY, previous_category=previous)


class TodoItemEvent(SyncStateMixin, Base):
    """History entry of a todo item; shares the spaces of its item"""

    __tablename__ = "todo_item_events"

    type = Column(SQLEnum(TodoItemEventType), nullable=False)
    date = Column(UTCDateTime, nullable=False, default=utcnow)

    previous_title = Column(Text)
    previous_details = Column(Text)
    previous_due_date = Column(UTCDateTime)
    previous_is_completed = Column(Boolean)
    previous_recurrence_frequency = Column(SQLEnum(RecurrenceFrequency))
    previous_recurrence_type = Column(SQLEnum(RecurrenceType))
    previous_recurrence_interval = Column(Integer)
    previous_ignore_time_component = Column(Boolean)
    previous_priority = Column(Integer)
    previous_category = Column(Text)

    owner_id = Column(String(64), ForeignKey("users.uid", ondelete="SET NULL"))
    owner = relationship("User", foreign_keys=[owner_id])

    todo_item_uid = Column(String(64), ForeignKey("todo_items.uid", ondelete="CASCADE"))
    todo_item = relationship("TodoItem", back_populates="events")

    spaces = relationship(
        "Space", secondary=todo_item_event_spaces, back_populates="todo_item_events"
    )
