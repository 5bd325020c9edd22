"""
Main MCP tool handler for list_due_suggestions.

Read-only query: active suggestions due by the end of today, earliest first,
optionally with the activity history across all suggestions.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from config import get_config
from db.record_store import SqliteRecordStore
from models.errors import ToolError, create_internal_error
from schemas.suggestions import ListDueSuggestionsRequest, ListDueSuggestionsResponse
from utils.clock import Clock
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.suggestion_scheduler import SuggestionScheduler


def list_due_suggestions(args: Dict[str, Any], clock: Optional[Clock] = None) -> Dict[str, Any]:
    """
    List suggestions that are due today.

    Args:
        args: Dictionary containing parameters:
            - include_history (bool, optional): Also return the history feed (default: false)
            - db_path (str, optional): Database path override
        clock: Optional time source override

    Returns:
        Dictionary with structure (success case):
        {
            "suggestions": [...],         # sorted by next_due_date ascending
            "count": int,
            "history": [...]              # only when include_history=true, newest first
        }

        On error, returns the standard {"error": {...}} envelope.
    """
    try:
        request = ListDueSuggestionsRequest.model_validate(args)

        with SqliteRecordStore(request.db_path) as store:
            scheduler = SuggestionScheduler(store, clock=clock or get_config().build_clock())
            suggestions = store.list_suggestions()

        due = scheduler.list_due(suggestions)
        history = scheduler.history_feed(suggestions) if request.include_history else None

        return ListDueSuggestionsResponse(
            suggestions=due, count=len(due), history=history
        ).model_dump(mode="json", exclude_none=True)

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
