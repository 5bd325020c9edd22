"""Pydantic schemas for the suggestion (routine) tools."""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator

from models.records import HistoryFeedItem, Suggestion
from schemas.common import (
    DbPathMixin,
    StrictIgnoreRequest,
    StrictResponse,
    validate_non_empty_str,
    validate_optional_non_empty_str,
)


class CreateSuggestionRequest(DbPathMixin, StrictIgnoreRequest):
    """Request schema for create_suggestion.

    ``frequency`` and the schedule details are checked by the scheduler so
    that bad values surface as MALFORMED_SUGGESTION rather than a generic
    validation error.
    """

    title: str
    frequency: str
    description: Optional[str] = None
    days_of_week: Optional[list[int]] = None
    day_of_month: Optional[int] = None

    @field_validator("title", "frequency")
    @classmethod
    def validate_required(cls, value: str, info) -> str:
        return validate_non_empty_str(value, info.field_name)

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: Optional[str]) -> Optional[str]:
        return validate_optional_non_empty_str(value, "description")


class RecordSuggestionActionRequest(DbPathMixin, StrictIgnoreRequest):
    """Request schema for record_suggestion_action."""

    suggestion_id: str
    action_type: str
    note: Optional[str] = None

    @field_validator("suggestion_id", "action_type")
    @classmethod
    def validate_required(cls, value: str, info) -> str:
        return validate_non_empty_str(value, info.field_name)

    @field_validator("note")
    @classmethod
    def validate_note(cls, value: Optional[str]) -> Optional[str]:
        return validate_optional_non_empty_str(value, "note")


class SuggestionResponse(StrictResponse):
    suggestion: Suggestion
    is_due_today: bool


class ListDueSuggestionsRequest(DbPathMixin, StrictIgnoreRequest):
    """Request schema for list_due_suggestions."""

    include_history: bool = False


class ListDueSuggestionsResponse(StrictResponse):
    suggestions: list[Suggestion]
    count: int
    history: Optional[list[HistoryFeedItem]] = None
