"""
Main MCP tool handler for create_suggestion.

Creates a recurring routine task that is due immediately.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from config import get_config
from db.record_store import SqliteRecordStore
from models.errors import ToolError, create_internal_error
from models.records import FrequencyDetails
from schemas.suggestions import CreateSuggestionRequest, SuggestionResponse
from utils.clock import Clock
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.suggestion_scheduler import SuggestionScheduler


def create_suggestion(args: Dict[str, Any], clock: Optional[Clock] = None) -> Dict[str, Any]:
    """
    Create and persist a new suggestion.

    Args:
        args: Dictionary containing parameters:
            - title (str): Task title
            - frequency (str): Daily, Weekly, Monthly or Once
            - description (str, optional)
            - days_of_week (list[int], optional): Weekly days, 0=Sunday..6=Saturday
            - day_of_month (int, optional): Monthly target day, 1-31
            - db_path (str, optional): Database path override
        clock: Optional time source override

    Returns:
        Dictionary with structure (success case):
        {
            "suggestion": {...},
            "is_due_today": true
        }

        On error, returns the standard {"error": {...}} envelope; bad
        frequencies or schedule details use MALFORMED_SUGGESTION.
    """
    try:
        request = CreateSuggestionRequest.model_validate(args)

        details = None
        if request.days_of_week is not None or request.day_of_month is not None:
            details = FrequencyDetails(
                days_of_week=request.days_of_week, day_of_month=request.day_of_month
            )

        with SqliteRecordStore(request.db_path) as store:
            scheduler = SuggestionScheduler(store, clock=clock or get_config().build_clock())
            suggestion = scheduler.create_suggestion(
                title=request.title,
                frequency=request.frequency,
                description=request.description,
                frequency_details=details,
            )
            due = scheduler.is_due_today(suggestion)

        return SuggestionResponse(suggestion=suggestion, is_due_today=due).model_dump(
            mode="json", exclude_none=True
        )

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
