#!/usr/bin/env python3
"""
MCP Server entry point for the JobPursuit application tracker.

This server exposes the application status workflow, staleness insights and
the recurring-suggestion scheduler as MCP tools backed by a local SQLite
record store.

Usage:
    python server.py

The server runs in stdio mode by default, which is the standard transport
for MCP servers that are invoked by LLM agents.
"""

import logging
from mcp.server.fastmcp import FastMCP
from tools.create_application import create_application
from tools.transition_application import transition_application
from tools.get_application_insights import get_application_insights
from tools.create_suggestion import create_suggestion
from tools.record_suggestion_action import record_suggestion_action
from tools.list_due_suggestions import list_due_suggestions
from config import get_config

# Create FastMCP server instance
config = get_config()
mcp = FastMCP(
    name=config.server_name,
    instructions=(
        "This server tracks job applications and a personal routine of recurring suggestions. "
        "\n\n"
        "APPLICATION WORKFLOW:\n"
        "Use create_application to start tracking a job (status 'Saved'). "
        "Use get_application_insights before offering a status change: it returns the allowed "
        "next statuses, whether the application is stalled, and suggested next steps. "
        "Use transition_application to move an application along the workflow; transitions "
        "outside the allowed table are rejected with INVALID_TRANSITION and change nothing. "
        "Every successful transition also logs a StatusChange engagement."
        "\n\n"
        "ROUTINE:\n"
        "Use create_suggestion to add a Daily, Weekly, Monthly or Once task. "
        "Use list_due_suggestions to see what is due today. "
        "Use record_suggestion_action with Completed or Skipped to schedule the next occurrence, "
        "or Unnecessary to retire the task."
    ),
)


@mcp.tool(
    name="create_application",
    description=(
        "Start tracking a job with a new application in status 'Saved'. "
        "Returns the stored application record."
    ),
)
def create_application_tool(
    job_id: str,
    db_path: str | None = None,
) -> dict:
    """
    Start tracking a job.

    Args:
        job_id: Identifier of the job to track.
        db_path: Optional database path override (default: data/jobpursuit.db).

    Returns:
        {"application": {...}} or {"error": {"code", "message", "retryable"}}
    """
    args = {"job_id": job_id}

    if db_path is not None:
        args["db_path"] = db_path

    return create_application(args)


@mcp.tool(
    name="transition_application",
    description=(
        "Move an application to a new status following the workflow table "
        "(Saved, Applied, OutreachStarted, Interviewing, Offer, Rejected, Stalled, Withdrawn). "
        "Optionally appends a dated note. Invalid transitions return INVALID_TRANSITION."
    ),
)
def transition_application_tool(
    application_id: str,
    target_status: str,
    note: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Move an application to a new status.

    Args:
        application_id: Application to transition.
        target_status: Desired status. Must be reachable from the current status:
            Saved -> Applied, Withdrawn
            Applied -> OutreachStarted, Interviewing, Rejected, Stalled, Withdrawn
            OutreachStarted -> Interviewing, Rejected, Stalled, Withdrawn
            Interviewing -> Offer, Rejected, Withdrawn
            Offer -> Withdrawn
            Rejected -> Stalled
            Stalled -> OutreachStarted, Applied, Withdrawn
            Withdrawn -> Saved
        note: Optional note appended as "[date] State changed to <status>: <note>".
        db_path: Optional database path override.

    Returns:
        {"application": {...}, "previous_status": str, "allowed_next": [...]}
        or {"error": {...}}
    """
    args = {"application_id": application_id, "target_status": target_status}

    if note is not None:
        args["note"] = note
    if db_path is not None:
        args["db_path"] = db_path

    return transition_application(args)


@mcp.tool(
    name="get_application_insights",
    description=(
        "Read-only insights for one application: days since last action, stalled flag, "
        "a one-line suggested action, allowed next statuses and system-suggested next steps."
    ),
)
def get_application_insights_tool(
    application_id: str,
    stall_threshold_days: int | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Compute insights for an application.

    Args:
        application_id: Application to inspect.
        stall_threshold_days: Optional override of the stalled threshold (default: 7).
        db_path: Optional database path override.

    Returns:
        Insights dictionary or {"error": {...}}
    """
    args = {"application_id": application_id}

    if stall_threshold_days is not None:
        args["stall_threshold_days"] = stall_threshold_days
    if db_path is not None:
        args["db_path"] = db_path

    return get_application_insights(args)


@mcp.tool(
    name="create_suggestion",
    description=(
        "Create a recurring routine task (Daily, Weekly with days_of_week, Monthly with "
        "day_of_month, or Once). New tasks are due immediately."
    ),
)
def create_suggestion_tool(
    title: str,
    frequency: str,
    description: str | None = None,
    days_of_week: list[int] | None = None,
    day_of_month: int | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Create a recurring suggestion.

    Args:
        title: Task title.
        frequency: One of Daily, Weekly, Monthly, Once.
        description: Optional longer text.
        days_of_week: For Weekly, weekday indices 0=Sunday..6=Saturday.
        day_of_month: For Monthly, target day 1-31 (clamped to short months).
        db_path: Optional database path override.

    Returns:
        {"suggestion": {...}, "is_due_today": bool} or {"error": {...}}
    """
    args = {"title": title, "frequency": frequency}

    if description is not None:
        args["description"] = description
    if days_of_week is not None:
        args["days_of_week"] = days_of_week
    if day_of_month is not None:
        args["day_of_month"] = day_of_month
    if db_path is not None:
        args["db_path"] = db_path

    return create_suggestion(args)


@mcp.tool(
    name="record_suggestion_action",
    description=(
        "Record Completed, Skipped or Unnecessary on a suggestion. Completed/Skipped schedule "
        "the next occurrence; Unnecessary (or any action on a Once task) deactivates it."
    ),
)
def record_suggestion_action_tool(
    suggestion_id: str,
    action_type: str,
    note: str | None = None,
    db_path: str | None = None,
) -> dict:
    """
    Record an action on a suggestion.

    Args:
        suggestion_id: Suggestion to act on.
        action_type: One of Completed, Skipped, Unnecessary.
        note: Optional note stored on the history entry.
        db_path: Optional database path override.

    Returns:
        {"suggestion": {...}, "is_due_today": bool} or {"error": {...}}
    """
    args = {"suggestion_id": suggestion_id, "action_type": action_type}

    if note is not None:
        args["note"] = note
    if db_path is not None:
        args["db_path"] = db_path

    return record_suggestion_action(args)


@mcp.tool(
    name="list_due_suggestions",
    description=(
        "List active suggestions due by the end of today, earliest first. "
        "Optionally include the activity history across all suggestions."
    ),
)
def list_due_suggestions_tool(
    include_history: bool | None = None,
    db_path: str | None = None,
) -> dict:
    """
    List suggestions due today.

    Args:
        include_history: Also return the history feed, newest first (default: false).
        db_path: Optional database path override.

    Returns:
        {"suggestions": [...], "count": int, "history": [...]} or {"error": {...}}
    """
    args = {}

    if include_history is not None:
        args["include_history"] = include_history
    if db_path is not None:
        args["db_path"] = db_path

    return list_due_suggestions(args)


def main():
    """
    Main entry point for the MCP server.

    Runs the server in stdio mode, which is the standard transport
    for MCP servers that are invoked by LLM agents.
    """
    config.setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("Starting JobPursuit MCP Server")
    logger.info(f"Server name: {config.server_name}")
    logger.info(f"Database path: {config.db_path}")

    warnings = config.validate()
    for warning in warnings:
        logger.warning(warning)

    logger.info("Server starting in stdio mode")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
