"""
Recommendation generator for ad-hoc next steps on an application.

Rules are evaluated independently and accumulate in a fixed order:
1. Applied, quiet for more than ``follow_up_after_days`` -> FollowUp (Medium)
2. OutreachStarted, quiet for more than ``follow_up_after_days`` -> FollowUp (High)
3. Saved -> Apply (High)
4. Interviewing -> SendThankYou (High)

Generated actions are transient; nothing is persisted here.
"""

from typing import List, Optional

from models.records import Application, SuggestedAction
from models.status import ActionPriority, ActionStatus, ActionType, ApplicationStatus
from utils.clock import Clock, IdFactory, new_id
from utils.staleness import days_since
from utils.workflow import format_local_date

DEFAULT_FOLLOW_UP_AFTER_DAYS = 3


def get_suggested_actions(
    application: Application,
    clock: Optional[Clock] = None,
    id_factory: Optional[IdFactory] = None,
    follow_up_after_days: int = DEFAULT_FOLLOW_UP_AFTER_DAYS,
) -> List[SuggestedAction]:
    """
    Derive system-suggested actions from the application's status and age.

    Args:
        application: Application to inspect
        clock: Time source (defaults to the system clock)
        id_factory: Id generator for the generated actions
        follow_up_after_days: Quiet days before a follow-up is suggested

    Returns:
        Ordered list of pending, system-suggested actions (possibly empty)
    """
    clock = clock or Clock()
    id_factory = id_factory or new_id
    now = clock.now()
    elapsed = days_since(application.last_action_date, clock)
    last_action = format_local_date(clock.to_local(application.last_action_date))

    def make(action_type: ActionType, title: str, description: str, priority: ActionPriority):
        return SuggestedAction(
            id=id_factory(),
            application_id=application.id,
            type=action_type,
            title=title,
            description=description,
            status=ActionStatus.PENDING,
            created_date=now,
            priority=priority,
            is_system_suggested=True,
        )

    actions: List[SuggestedAction] = []
    status = application.status

    if status == ApplicationStatus.APPLIED and elapsed > follow_up_after_days:
        actions.append(
            make(
                ActionType.FOLLOW_UP,
                "Follow up on application",
                f"It has been {elapsed} days since you applied ({last_action}). "
                "Consider a light follow-up.",
                ActionPriority.MEDIUM,
            )
        )

    if status == ApplicationStatus.OUTREACH_STARTED and elapsed > follow_up_after_days:
        actions.append(
            make(
                ActionType.FOLLOW_UP,
                "Follow up on outreach",
                f"No reply since {last_action} ({elapsed} days)? A polite bump might help.",
                ActionPriority.HIGH,
            )
        )

    if status == ApplicationStatus.SAVED:
        actions.append(
            make(
                ActionType.APPLY,
                "Apply to this role",
                "You saved this job. Review requirements and apply.",
                ActionPriority.HIGH,
            )
        )

    if status == ApplicationStatus.INTERVIEWING:
        actions.append(
            make(
                ActionType.SEND_THANK_YOU,
                "Send Thank You Note",
                "If you recently had an interview, don't forget the thank you note.",
                ActionPriority.HIGH,
            )
        )

    return actions
