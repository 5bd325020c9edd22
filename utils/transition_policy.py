"""
Transition policy for the application status workflow.

This module owns the allowed-transitions table and the checks built on it:
- Every ``ApplicationStatus`` has an entry (validated at import time)
- Every status has at least one outgoing edge (revivable pipeline, no terminal state)
- Unknown status values are never transitionable
"""

from typing import Dict, FrozenSet, List, Optional, Union

from models.errors import InvalidTransitionError
from models.status import ApplicationStatus


StatusLike = Union[ApplicationStatus, str]

_S = ApplicationStatus

# Directed edges: current_status -> statuses it may become
ALLOWED_TRANSITIONS: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]] = {
    _S.SAVED: frozenset({_S.APPLIED, _S.WITHDRAWN}),
    _S.APPLIED: frozenset(
        {_S.OUTREACH_STARTED, _S.INTERVIEWING, _S.REJECTED, _S.STALLED, _S.WITHDRAWN}
    ),
    _S.OUTREACH_STARTED: frozenset({_S.INTERVIEWING, _S.REJECTED, _S.STALLED, _S.WITHDRAWN}),
    _S.INTERVIEWING: frozenset({_S.OFFER, _S.REJECTED, _S.WITHDRAWN}),
    _S.OFFER: frozenset({_S.WITHDRAWN}),
    _S.REJECTED: frozenset({_S.STALLED}),
    _S.STALLED: frozenset({_S.OUTREACH_STARTED, _S.APPLIED, _S.WITHDRAWN}),
    _S.WITHDRAWN: frozenset({_S.SAVED}),
}

INITIAL_STATUS = ApplicationStatus.SAVED


def _check_transition_table(table: Dict[ApplicationStatus, FrozenSet[ApplicationStatus]]) -> None:
    """Fail loudly if the table does not cover the status enum exactly."""
    members = set(ApplicationStatus)
    missing = members - set(table)
    unknown = set(table) - members
    if missing or unknown:
        raise RuntimeError(
            "Transition table mismatch: "
            f"missing={sorted(s.value for s in missing)}, "
            f"unknown={sorted(str(s) for s in unknown)}"
        )
    for source, targets in table.items():
        if not targets:
            raise RuntimeError(f"Transition table: {source.value} has no outgoing edge")
        stray = set(targets) - members
        if stray:
            raise RuntimeError(f"Transition table: {source.value} targets unknown {stray}")


_check_transition_table(ALLOWED_TRANSITIONS)


def coerce_status(value: StatusLike) -> Optional[ApplicationStatus]:
    """Return the enum member for ``value``, or None if it is not a known status."""
    if isinstance(value, ApplicationStatus):
        return value
    try:
        return ApplicationStatus(value)
    except ValueError:
        return None


def allowed_targets(current_status: StatusLike) -> List[ApplicationStatus]:
    """Statuses reachable from ``current_status``, in enum declaration order."""
    current = coerce_status(current_status)
    if current is None:
        return []
    targets = ALLOWED_TRANSITIONS[current]
    return [status for status in ApplicationStatus if status in targets]


def can_transition(current_status: StatusLike, target_status: StatusLike) -> bool:
    """
    Return whether ``target_status`` is in the allowed-targets set of ``current_status``.

    Pure function. Unknown statuses on either side return False.

    Examples:
        >>> can_transition("Saved", "Applied")
        True
        >>> can_transition("Saved", "Offer")
        False
        >>> can_transition("Applied", "Applied")
        False
    """
    current = coerce_status(current_status)
    target = coerce_status(target_status)
    if current is None or target is None:
        return False
    return target in ALLOWED_TRANSITIONS[current]


class TransitionResult:
    """Result of a transition policy check."""

    def __init__(self, allowed: bool, error_message: Optional[str] = None):
        """
        Initialize a transition result.

        Args:
            allowed: Whether the transition is allowed
            error_message: Error message if transition is blocked
        """
        self.allowed = allowed
        self.error_message = error_message

    def to_dict(self) -> Dict[str, object]:
        """Convert result to dictionary format."""
        result: Dict[str, object] = {"allowed": self.allowed}
        if self.error_message:
            result["error_message"] = self.error_message
        return result


def _status_text(value: StatusLike) -> str:
    return value.value if isinstance(value, ApplicationStatus) else str(value)


def validate_transition(current_status: StatusLike, target_status: StatusLike) -> TransitionResult:
    """
    Validate a status transition against ``ALLOWED_TRANSITIONS``.

    Same-status requests are not edges of the table and are blocked like any
    other unlisted pair.

    Args:
        current_status: The current application status
        target_status: The desired target status

    Returns:
        TransitionResult indicating whether transition is allowed,
        with an error message naming the allowed targets when blocked
    """
    if can_transition(current_status, target_status):
        return TransitionResult(allowed=True)

    targets = [s.value for s in allowed_targets(current_status)]
    error_msg = (
        f"Invalid transition from {_status_text(current_status)} "
        f"to {_status_text(target_status)}"
    )
    if targets:
        error_msg += ". Allowed transitions: " + ", ".join(targets)
    return TransitionResult(allowed=False, error_message=error_msg)


def check_transition_or_raise(
    current_status: StatusLike, target_status: StatusLike
) -> TransitionResult:
    """
    Validate transition and raise InvalidTransitionError if blocked.

    Raises:
        InvalidTransitionError: With INVALID_TRANSITION code if transition is blocked

    Examples:
        >>> try:
        ...     check_transition_or_raise("OutreachStarted", "Offer")
        ... except Exception as e:
        ...     print(e.code.value)
        INVALID_TRANSITION
    """
    result = validate_transition(current_status, target_status)

    if not result.allowed:
        raise InvalidTransitionError(
            _status_text(current_status),
            _status_text(target_status),
            [s.value for s in allowed_targets(current_status)],
        )

    return result
