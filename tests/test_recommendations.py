"""
Unit tests for the recommendation generator.
"""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from models.records import Application
from models.status import ActionPriority, ActionStatus, ActionType, ApplicationStatus
from utils.clock import FixedClock
from utils.recommendations import get_suggested_actions

NOW = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FixedClock(NOW, tz=timezone.utc)


@pytest.fixture
def ids():
    counter = itertools.count(1)
    return lambda: f"act-{next(counter)}"


def app_with(status, days_ago=0):
    return Application(
        id="app-1", job_id="job-1", status=status, last_action_date=NOW - timedelta(days=days_ago)
    )


class TestFollowUps:
    def test_applied_quiet_for_five_days(self, clock, ids):
        actions = get_suggested_actions(app_with("Applied", 5), clock, ids)

        assert len(actions) == 1
        action = actions[0]
        assert action.type == ActionType.FOLLOW_UP
        assert action.priority == ActionPriority.MEDIUM
        assert action.title == "Follow up on application"
        assert "5 days" in action.description
        assert "1/10/2024" in action.description
        assert action.application_id == "app-1"
        assert action.status == ActionStatus.PENDING
        assert action.is_system_suggested is True
        assert action.created_date == NOW
        assert action.id == "act-1"

    def test_applied_at_threshold_gets_nothing(self, clock, ids):
        assert get_suggested_actions(app_with("Applied", 3), clock, ids) == []

    def test_outreach_follow_up_is_high_priority(self, clock, ids):
        actions = get_suggested_actions(app_with("OutreachStarted", 4), clock, ids)

        assert [a.type for a in actions] == [ActionType.FOLLOW_UP]
        assert actions[0].priority == ActionPriority.HIGH
        assert actions[0].title == "Follow up on outreach"
        assert "4 days" in actions[0].description

    def test_custom_follow_up_window(self, clock, ids):
        actions = get_suggested_actions(app_with("Applied", 2), clock, ids, follow_up_after_days=1)
        assert len(actions) == 1


class TestStatusRules:
    def test_saved_suggests_apply(self, clock, ids):
        actions = get_suggested_actions(app_with("Saved", 30), clock, ids)

        assert len(actions) == 1
        assert actions[0].type == ActionType.APPLY
        assert actions[0].priority == ActionPriority.HIGH
        assert actions[0].title == "Apply to this role"

    def test_interviewing_suggests_thank_you(self, clock, ids):
        actions = get_suggested_actions(app_with("Interviewing"), clock, ids)

        assert len(actions) == 1
        assert actions[0].type == ActionType.SEND_THANK_YOU
        assert actions[0].title == "Send Thank You Note"

    @pytest.mark.parametrize(
        "status",
        [ApplicationStatus.OFFER, ApplicationStatus.REJECTED, ApplicationStatus.STALLED, ApplicationStatus.WITHDRAWN],
    )
    def test_other_statuses_get_nothing(self, clock, ids, status):
        assert get_suggested_actions(app_with(status, 60), clock, ids) == []

    def test_each_action_gets_its_own_id(self, clock, ids):
        first = get_suggested_actions(app_with("Saved"), clock, ids)
        second = get_suggested_actions(app_with("Saved"), clock, ids)
        assert first[0].id != second[0].id
