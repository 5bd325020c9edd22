"""
Domain records handled by the JobPursuit core.

Records are pydantic models. Stored payloads are validated on load (extra
keys ignored) and serialized with ``model_dump(mode="json")`` for storage
and tool responses. Timestamps are always timezone-aware; naive values are
interpreted as UTC.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.status import (
    ActionPriority,
    ActionStatus,
    ActionType,
    ApplicationStatus,
    EngagementPlatform,
    EngagementType,
    Frequency,
    SuggestionActionType,
)
from utils.clock import ensure_aware


class RecordModel(BaseModel):
    """Base for stored records: unknown keys are dropped, datetimes made aware."""

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="after")
    @classmethod
    def make_datetimes_aware(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return ensure_aware(value)
        return value


class Application(RecordModel):
    """One tracked pursuit of a job."""

    id: str
    job_id: str
    status: ApplicationStatus = ApplicationStatus.SAVED
    applied_date: Optional[datetime] = None
    last_action_date: datetime
    notes: str = ""
    archived: bool = False


class Engagement(RecordModel):
    """Audit-log entry; status changes are emitted by the workflow engine."""

    id: str
    type: EngagementType
    platform: EngagementPlatform = EngagementPlatform.OTHER
    description: str
    date: datetime
    application_id: Optional[str] = None
    person_id: Optional[str] = None
    url: Optional[str] = None


class FrequencyDetails(RecordModel):
    """Weekly days (0=Sunday..6=Saturday) or a monthly target day (1-31).

    Ranges are checked by ``utils.recurrence.validate_schedule`` so that a
    corrupt record surfaces as a malformed suggestion rather than being
    silently coerced.
    """

    days_of_week: Optional[list[int]] = None
    day_of_month: Optional[int] = None


class SuggestionHistoryEntry(RecordModel):
    date: datetime
    action: SuggestionActionType
    note: Optional[str] = None


class Suggestion(RecordModel):
    """Recurring reminder task, independent of any application."""

    id: str
    title: str
    description: Optional[str] = None
    frequency: Frequency
    frequency_details: Optional[FrequencyDetails] = None
    next_due_date: datetime
    is_active: bool = True
    history: list[SuggestionHistoryEntry] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class HistoryFeedItem(SuggestionHistoryEntry):
    """History entry flattened across suggestions for an activity feed."""

    suggestion_id: str
    suggestion_title: str


class SuggestedAction(RecordModel):
    """Transient next step generated from an application's state."""

    id: str
    application_id: Optional[str] = None
    person_id: Optional[str] = None
    type: ActionType
    title: str
    description: Optional[str] = None
    status: ActionStatus = ActionStatus.PENDING
    due_date: Optional[datetime] = None
    created_date: datetime
    completed_date: Optional[datetime] = None
    priority: ActionPriority
    is_system_suggested: bool = True
