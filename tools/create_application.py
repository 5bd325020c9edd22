"""
Main MCP tool handler for create_application.

Starts tracking a job with a new application in the initial Saved status.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from config import get_config
from db.record_store import SqliteRecordStore
from models.errors import ToolError, create_internal_error
from schemas.applications import CreateApplicationRequest, CreateApplicationResponse
from utils.clock import Clock
from utils.pydantic_error_mapper import map_pydantic_validation_error
from utils.workflow import WorkflowEngine


def create_application(args: Dict[str, Any], clock: Optional[Clock] = None) -> Dict[str, Any]:
    """
    Create and persist a new application for a job.

    Args:
        args: Dictionary containing parameters:
            - job_id (str): Job to track
            - db_path (str, optional): Database path override
        clock: Optional time source override

    Returns:
        Dictionary with structure (success case):
        {
            "application": {
                "id": str,
                "job_id": str,
                "status": "Saved",
                "last_action_date": str,   # ISO 8601
                "notes": "",
                "archived": false
            }
        }

        On error, returns:
        {
            "error": {
                "code": str,            # VALIDATION_ERROR, DB_ERROR, INTERNAL_ERROR
                "message": str,
                "retryable": bool
            }
        }
    """
    try:
        request = CreateApplicationRequest.model_validate(args)

        with SqliteRecordStore(request.db_path) as store:
            engine = WorkflowEngine(store, clock=clock or get_config().build_clock())
            application = engine.create_application(request.job_id)

        return CreateApplicationResponse(application=application).model_dump(
            mode="json", exclude_none=True
        )

    except ValidationError as e:
        return map_pydantic_validation_error(e).to_dict()

    except ToolError as e:
        return e.to_dict()

    except Exception as e:
        return create_internal_error(message=str(e), original_error=e).to_dict()
