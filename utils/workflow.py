"""
Application workflow engine.

Validates and performs status transitions on Application records, emits a
StatusChange engagement for every successful transition, and persists both
through the injected record store.
"""

import logging
from datetime import datetime
from typing import Optional

from db.record_store import RecordStore
from models.records import Application, Engagement
from models.status import ApplicationStatus, EngagementPlatform, EngagementType
from utils.clock import Clock, IdFactory, new_id
from utils.transition_policy import INITIAL_STATUS, StatusLike, can_transition, check_transition_or_raise

logger = logging.getLogger(__name__)


def format_local_date(value: datetime) -> str:
    """Short month/day/year date used in note lines (e.g. ``3/7/2024``)."""
    return f"{value.month}/{value.day}/{value.year}"


def build_note_line(when: datetime, target: ApplicationStatus, note: str) -> str:
    return f"[{format_local_date(when)}] State changed to {target.value}: {note}"


class WorkflowEngine:
    """
    Status workflow over Application records.

    Usage:
        engine = WorkflowEngine(store, clock=config.build_clock())
        app = engine.create_application("job-1")
        app = engine.transition(app, ApplicationStatus.APPLIED, note="Sent via LinkedIn")
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Optional[Clock] = None,
        id_factory: IdFactory = new_id,
    ):
        self.store = store
        self.clock = clock or Clock()
        self.id_factory = id_factory

    @staticmethod
    def can_transition(current_status: StatusLike, target_status: StatusLike) -> bool:
        return can_transition(current_status, target_status)

    def transition(
        self,
        application: Application,
        target_status: StatusLike,
        note: Optional[str] = None,
    ) -> Application:
        """
        Move ``application`` to ``target_status``.

        The input record is never mutated. On success a new Application is
        returned with the status, last action date and (when ``note`` is given)
        notes updated; one StatusChange engagement is stored alongside it.

        Raises:
            InvalidTransitionError: If the edge is not in the transition table.
                Nothing is stored in that case.
        """
        check_transition_or_raise(application.status, target_status)

        previous = ApplicationStatus(application.status)
        target = ApplicationStatus(target_status)
        now = self.clock.now()

        notes = application.notes
        if note:
            notes = f"{notes}\n{build_note_line(now, target, note)}"

        update = {"status": target, "last_action_date": now, "notes": notes}
        if target == ApplicationStatus.APPLIED and application.applied_date is None:
            update["applied_date"] = now
        updated = application.model_copy(update=update)

        # Keyed to the job so the entry shows up in the job's log
        engagement = Engagement(
            id=self.id_factory(),
            type=EngagementType.STATUS_CHANGE,
            platform=EngagementPlatform.OTHER,
            description=f"Status changed from {previous.value} to {target.value}",
            date=now,
            application_id=application.job_id,
        )
        self.store.save_engagement(engagement)
        self.store.save_application(updated)

        logger.info(
            "Application %s: %s -> %s", application.id, previous.value, target.value
        )
        return updated

    def create_application(self, job_id: str) -> Application:
        """Start tracking ``job_id`` with a fresh application in the initial status."""
        application = Application(
            id=self.id_factory(),
            job_id=job_id,
            status=INITIAL_STATUS,
            last_action_date=self.clock.now(),
            notes="",
            archived=False,
        )
        self.store.save_application(application)
        logger.info("Created application %s for job %s", application.id, job_id)
        return application
