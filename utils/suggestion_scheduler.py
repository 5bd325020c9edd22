"""
Suggestion scheduler: records completions/skips on recurring suggestions,
advances their due dates, and answers "what is due today" queries.

Due status is computed on every call against the clock; there is no
background timer.
"""

import logging
from typing import Iterable, List, Optional, Union

from db.record_store import RecordStore
from models.errors import MalformedSuggestionError, create_validation_error
from models.records import FrequencyDetails, HistoryFeedItem, Suggestion, SuggestionHistoryEntry
from models.status import Frequency, SuggestionActionType
from utils.clock import Clock, IdFactory, new_id
from utils.recurrence import compute_next_due_date, is_due_today, validate_schedule

logger = logging.getLogger(__name__)


def coerce_action_type(value: Union[SuggestionActionType, str]) -> SuggestionActionType:
    try:
        return SuggestionActionType(value)
    except ValueError as e:
        allowed = ", ".join(a.value for a in SuggestionActionType)
        raise create_validation_error(
            f"Invalid action_type: {value!r}. Must be one of: {allowed}"
        ) from e


class SuggestionScheduler:
    """
    Recurrence engine over Suggestion records.

    Usage:
        scheduler = SuggestionScheduler(store, clock=config.build_clock())
        due = scheduler.list_due()
        scheduler.record_action(due[0], SuggestionActionType.COMPLETED)
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

    def create_suggestion(
        self,
        title: str,
        frequency: Union[Frequency, str],
        description: Optional[str] = None,
        frequency_details: Optional[FrequencyDetails] = None,
    ) -> Suggestion:
        """Create an active suggestion that is due immediately."""
        suggestion_id = self.id_factory()
        try:
            frequency = Frequency(frequency)
        except ValueError as e:
            raise MalformedSuggestionError(
                f"unknown frequency {frequency!r}", suggestion_id=suggestion_id
            ) from e

        now = self.clock.now()
        suggestion = Suggestion(
            id=suggestion_id,
            title=title,
            description=description,
            frequency=frequency,
            frequency_details=frequency_details,
            next_due_date=now,
            is_active=True,
            history=[],
            created_at=now,
        )
        validate_schedule(suggestion)
        self.store.save_suggestion(suggestion)
        logger.info("Created %s suggestion %s (%s)", frequency.value, suggestion.id, title)
        return suggestion

    def record_action(
        self,
        suggestion: Suggestion,
        action_type: Union[SuggestionActionType, str],
        note: Optional[str] = None,
    ) -> Suggestion:
        """
        Record a completion, skip or "unnecessary" on ``suggestion``.

        The new history entry is prepended. Completed/Skipped advance the due
        date by the frequency policy (Once deactivates instead); Unnecessary
        deactivates and leaves the due date alone. The due date is never moved
        backwards: if the computed date is earlier than the current one, the
        current one is kept.

        Raises:
            MalformedSuggestionError: If the frequency or its details are invalid
            ToolError: VALIDATION_ERROR if ``action_type`` is unknown
        """
        action = coerce_action_type(action_type)
        frequency = validate_schedule(suggestion)
        now = self.clock.now()

        entry = SuggestionHistoryEntry(date=now, action=action, note=note)
        update = {"history": [entry, *suggestion.history]}

        if action == SuggestionActionType.UNNECESSARY:
            update["is_active"] = False
        elif frequency == Frequency.ONCE:
            update["is_active"] = False
        else:
            next_due = compute_next_due_date(
                frequency, suggestion.frequency_details, now, self.clock
            )
            if next_due < suggestion.next_due_date:
                next_due = suggestion.next_due_date
            update["next_due_date"] = next_due

        updated = suggestion.model_copy(update=update)
        self.store.save_suggestion(updated)

        logger.info(
            "Suggestion %s %s; active=%s next_due=%s",
            suggestion.id,
            action.value,
            updated.is_active,
            updated.next_due_date.isoformat(),
        )
        return updated

    def is_due_today(self, suggestion: Suggestion) -> bool:
        return is_due_today(suggestion, self.clock)

    def _suggestions(self, suggestions: Optional[Iterable[Suggestion]]) -> List[Suggestion]:
        if suggestions is None:
            return self.store.list_suggestions()
        return list(suggestions)

    def list_due(self, suggestions: Optional[Iterable[Suggestion]] = None) -> List[Suggestion]:
        """Due suggestions, earliest due date first."""
        due = [s for s in self._suggestions(suggestions) if self.is_due_today(s)]
        return sorted(due, key=lambda s: s.next_due_date)

    def history_feed(
        self, suggestions: Optional[Iterable[Suggestion]] = None
    ) -> List[HistoryFeedItem]:
        """All history entries across suggestions, newest first."""
        items = [
            HistoryFeedItem(
                **entry.model_dump(),
                suggestion_id=suggestion.id,
                suggestion_title=suggestion.title,
            )
            for suggestion in self._suggestions(suggestions)
            for entry in suggestion.history
        ]
        return sorted(items, key=lambda item: item.date, reverse=True)
