"""Pydantic schemas for the application workflow tools."""

from __future__ import annotations

from typing import Optional

from pydantic import field_validator

from models.records import Application, SuggestedAction
from schemas.common import (
    DbPathMixin,
    StrictIgnoreRequest,
    StrictResponse,
    validate_non_empty_str,
    validate_optional_non_empty_str,
)


class CreateApplicationRequest(DbPathMixin, StrictIgnoreRequest):
    """Request schema for create_application."""

    job_id: str

    @field_validator("job_id")
    @classmethod
    def validate_job_id(cls, value: str) -> str:
        return validate_non_empty_str(value, "job_id")


class CreateApplicationResponse(StrictResponse):
    application: Application


class TransitionApplicationRequest(DbPathMixin, StrictIgnoreRequest):
    """Request schema for transition_application."""

    application_id: str
    target_status: str
    note: Optional[str] = None

    @field_validator("application_id", "target_status")
    @classmethod
    def validate_required(cls, value: str, info) -> str:
        return validate_non_empty_str(value, info.field_name)

    @field_validator("note")
    @classmethod
    def validate_note(cls, value: Optional[str]) -> Optional[str]:
        return validate_optional_non_empty_str(value, "note")


class TransitionApplicationResponse(StrictResponse):
    application: Application
    previous_status: str
    allowed_next: list[str]


class ApplicationInsightsRequest(DbPathMixin, StrictIgnoreRequest):
    """Request schema for get_application_insights."""

    application_id: str
    stall_threshold_days: Optional[int] = None

    @field_validator("application_id")
    @classmethod
    def validate_application_id(cls, value: str) -> str:
        return validate_non_empty_str(value, "application_id")

    @field_validator("stall_threshold_days")
    @classmethod
    def validate_threshold(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise ValueError(f"Invalid stall_threshold_days: {value} must not be negative")
        return value


class ApplicationInsightsResponse(StrictResponse):
    application_id: str
    status: str
    days_since_last_action: int
    is_stalled: bool
    suggested_action: str
    allowed_transitions: list[str]
    suggested_actions: list[SuggestedAction]
