"""
Centralized, type-safe enum definitions for the JobPursuit core.

This module is the single source of truth for every closed value set used by
the workflow and recurrence engines:

- ``ApplicationStatus``: workflow states of a tracked application.
- ``Frequency``: recurrence policy of a suggestion.
- ``SuggestionActionType``: what the user did with a due suggestion.
- ``EngagementType`` / ``EngagementPlatform``: audit-log classification.
- ``ActionType`` / ``ActionPriority`` / ``ActionStatus``: transient
  recommendation records.

All Enums inherit from ``(str, Enum)`` so that members are directly
comparable to plain strings and serialize naturally to JSON at tool
boundaries.
"""

from enum import Enum


class ApplicationStatus(str, Enum):
    """Workflow states of an application.

    ``SAVED`` is the implicit initial state. There is no terminal state:
    every status has at least one outgoing edge (see
    ``utils.transition_policy.ALLOWED_TRANSITIONS``).
    """

    SAVED = "Saved"
    APPLIED = "Applied"
    OUTREACH_STARTED = "OutreachStarted"
    INTERVIEWING = "Interviewing"
    OFFER = "Offer"
    REJECTED = "Rejected"
    STALLED = "Stalled"
    WITHDRAWN = "Withdrawn"


class Frequency(str, Enum):
    """Recurrence policy of a suggestion."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    ONCE = "Once"


class SuggestionActionType(str, Enum):
    """Action recorded in a suggestion's history."""

    COMPLETED = "Completed"
    SKIPPED = "Skipped"
    UNNECESSARY = "Unnecessary"


class EngagementType(str, Enum):
    LIKE = "Like"
    COMMENT = "Comment"
    SHARE = "Share"
    POST = "Post"
    CONNECT = "Connect"
    STATUS_CHANGE = "StatusChange"
    OUTREACH = "Outreach"
    FOLLOW_UP = "FollowUp"


class EngagementPlatform(str, Enum):
    LINKEDIN = "LinkedIn"
    TWITTER = "Twitter"
    OTHER = "Other"


class ActionType(str, Enum):
    """Kind of a system-suggested next step."""

    APPLY = "Apply"
    RESEARCH = "Research"
    OUTREACH = "Outreach"
    FOLLOW_UP = "FollowUp"
    PREPARE_INTERVIEW = "PrepareInterview"
    SEND_THANK_YOU = "SendThankYou"
    CUSTOM = "Custom"


class ActionPriority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ActionStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    SKIPPED = "Skipped"
