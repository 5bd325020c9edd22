"""
Staleness detection and the one-line suggested action for an application.

Elapsed time is measured in local calendar days, so an application last
touched late yesterday is one day old this morning regardless of DST shifts.
"""

from datetime import datetime
from typing import Dict, Optional

from models.records import Application
from models.status import ApplicationStatus
from utils.clock import Clock

DEFAULT_STALL_THRESHOLD_DAYS = 7

# Statuses where the candidate is not waiting on anyone
NOT_AWAITED_STATUSES = frozenset(
    {
        ApplicationStatus.SAVED,
        ApplicationStatus.REJECTED,
        ApplicationStatus.WITHDRAWN,
        ApplicationStatus.OFFER,
    }
)

FOLLOW_UP_LABEL = "Follow Up"
DEFAULT_ACTION_LABEL = "Review"

SUGGESTED_ACTION_LABELS: Dict[ApplicationStatus, str] = {
    ApplicationStatus.SAVED: "Apply Now",
    ApplicationStatus.APPLIED: "Log Response",
    ApplicationStatus.OUTREACH_STARTED: "Log Response",
    ApplicationStatus.INTERVIEWING: "Pre-brief",
    ApplicationStatus.OFFER: "Review Offer",
    ApplicationStatus.REJECTED: "Archive",
    ApplicationStatus.WITHDRAWN: "Archive",
}


def days_since(moment: datetime, clock: Optional[Clock] = None) -> int:
    """Absolute number of local calendar days between ``moment`` and now."""
    clock = clock or Clock()
    today = clock.now().date()
    return abs((today - clock.local_date(moment)).days)


def is_stalled(
    application: Application,
    days_threshold: int = DEFAULT_STALL_THRESHOLD_DAYS,
    clock: Optional[Clock] = None,
) -> bool:
    """
    Return True if the application is inactive for more than ``days_threshold``
    days while still actively awaited.

    Examples:
        An Applied application untouched for 10 days is stalled at threshold 7;
        a Saved one never is.
    """
    if application.status in NOT_AWAITED_STATUSES:
        return False
    return days_since(application.last_action_date, clock) > days_threshold


def get_suggested_action(
    application: Application,
    clock: Optional[Clock] = None,
    days_threshold: int = DEFAULT_STALL_THRESHOLD_DAYS,
) -> str:
    """Label for the next step; a stalled application always gets "Follow Up"."""
    if is_stalled(application, days_threshold, clock):
        return FOLLOW_UP_LABEL
    return SUGGESTED_ACTION_LABELS.get(application.status, DEFAULT_ACTION_LABEL)
