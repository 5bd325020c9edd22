"""
Main MCP tool handler for record_suggestion_action.

Records Completed / Skipped / Unnecessary on a suggestion and returns it with
its advanced due date.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from config import get_config
from db.record_store import SqliteRecordStore
from models.errors import ToolError, create_internal_error, create_not_found_error
from schemas.suggestions import RecordSuggestionActionRequest, SuggestionResponse
from utils.clock import Clock
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.suggestion_scheduler import SuggestionScheduler


def record_suggestion_action(args: Dict[str, Any], clock: Optional[Clock] = None) -> Dict[str, Any]:
    """
    Record an action on a suggestion.

    Args:
        args: Dictionary containing parameters:
            - suggestion_id (str): Suggestion to act on
            - action_type (str): Completed, Skipped or Unnecessary
            - note (str, optional): Stored on the history entry
            - db_path (str, optional): Database path override
        clock: Optional time source override

    Returns:
        Dictionary with structure (success case):
        {
            "suggestion": {...},          # history[0] is the new entry
            "is_due_today": bool
        }

        On error, returns the standard {"error": {...}} envelope
        (NOT_FOUND, MALFORMED_SUGGESTION, VALIDATION_ERROR, ...).
    """
    try:
        request = RecordSuggestionActionRequest.model_validate(args)

        with SqliteRecordStore(request.db_path) as store:
            suggestion = store.get_suggestion(request.suggestion_id)
            if suggestion is None:
                raise create_not_found_error("Suggestion", request.suggestion_id)

            scheduler = SuggestionScheduler(store, clock=clock or get_config().build_clock())
            updated = scheduler.record_action(suggestion, request.action_type, note=request.note)
            due = scheduler.is_due_today(updated)

        return SuggestionResponse(suggestion=updated, is_due_today=due).model_dump(
            mode="json", exclude_none=True
        )

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
