"""
Main MCP tool handler for transition_application.

Loads an application, applies a workflow transition (with optional note),
and returns the updated record. Invalid transitions are reported as
INVALID_TRANSITION errors and leave the stored record untouched.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from config import get_config
from db.record_store import SqliteRecordStore
from models.errors import ToolError, create_internal_error, create_not_found_error
from schemas.applications import TransitionApplicationRequest, TransitionApplicationResponse
from utils.clock import Clock
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.transition_policy import allowed_targets
from utils.workflow import WorkflowEngine


def transition_application(args: Dict[str, Any], clock: Optional[Clock] = None) -> Dict[str, Any]:
    """
    Move an application to a new status.

    This is the main entry point for the MCP tool:
    1. Validates input parameters
    2. Loads the application (NOT_FOUND if unknown)
    3. Validates the transition against the workflow table
    4. Persists the updated application and a StatusChange engagement
    5. Returns the updated record with its next allowed statuses

    Args:
        args: Dictionary containing parameters:
            - application_id (str): Application to transition
            - target_status (str): Desired status
            - note (str, optional): Note appended to the application's notes
            - db_path (str, optional): Database path override
        clock: Optional time source override

    Returns:
        Dictionary with structure (success case):
        {
            "application": {...},
            "previous_status": str,
            "allowed_next": [str, ...]
        }

        On error, returns:
        {
            "error": {
                "code": str,            # INVALID_TRANSITION, NOT_FOUND, VALIDATION_ERROR, ...
                "message": str,
                "retryable": bool
            }
        }
    """
    try:
        request = TransitionApplicationRequest.model_validate(args)

        with SqliteRecordStore(request.db_path) as store:
            application = store.get_application(request.application_id)
            if application is None:
                raise create_not_found_error("Application", request.application_id)

            engine = WorkflowEngine(store, clock=clock or get_config().build_clock())
            updated = engine.transition(application, request.target_status, note=request.note)

        return TransitionApplicationResponse(
            application=updated,
            previous_status=application.status.value,
            allowed_next=[s.value for s in allowed_targets(updated.status)],
        ).model_dump(mode="json", exclude_none=True)

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
