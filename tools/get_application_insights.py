"""
Main MCP tool handler for get_application_insights.

Read-only: combines the staleness detector, the suggested-action label,
the allowed next statuses and the recommendation generator for one
application.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from config import get_config
from db.record_store import SqliteRecordStore
from models.errors import ToolError, create_internal_error, create_not_found_error
from schemas.applications import ApplicationInsightsRequest, ApplicationInsightsResponse
from utils.clock import Clock
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.recommendations import get_suggested_actions
from utils.staleness import days_since, get_suggested_action, is_stalled
from utils.transition_policy import allowed_targets


def get_application_insights(args: Dict[str, Any], clock: Optional[Clock] = None) -> Dict[str, Any]:
    """
    Compute staleness and next-step suggestions for an application.

    Args:
        args: Dictionary containing parameters:
            - application_id (str): Application to inspect
            - stall_threshold_days (int, optional): Override of the configured threshold
            - db_path (str, optional): Database path override
        clock: Optional time source override

    Returns:
        Dictionary with structure (success case):
        {
            "application_id": str,
            "status": str,
            "days_since_last_action": int,
            "is_stalled": bool,
            "suggested_action": str,      # e.g. "Follow Up", "Apply Now"
            "allowed_transitions": [str, ...],
            "suggested_actions": [        # transient, not persisted
                {"id": str, "type": str, "title": str, "priority": str, ...}
            ]
        }

        On error, returns the standard {"error": {...}} envelope.
    """
    try:
        request = ApplicationInsightsRequest.model_validate(args)
        config = get_config()
        clock = clock or config.build_clock()
        threshold = (
            request.stall_threshold_days
            if request.stall_threshold_days is not None
            else config.stall_threshold_days
        )

        with SqliteRecordStore(request.db_path) as store:
            application = store.get_application(request.application_id)
        if application is None:
            raise create_not_found_error("Application", request.application_id)

        return ApplicationInsightsResponse(
            application_id=application.id,
            status=application.status.value,
            days_since_last_action=days_since(application.last_action_date, clock),
            is_stalled=is_stalled(application, threshold, clock),
            suggested_action=get_suggested_action(application, clock, threshold),
            allowed_transitions=[s.value for s in allowed_targets(application.status)],
            suggested_actions=get_suggested_actions(
                application, clock, follow_up_after_days=config.follow_up_after_days
            ),
        ).model_dump(mode="json", exclude_none=True)

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
