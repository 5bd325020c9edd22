"""
Tests for the MCP tool handlers.

Each handler is called with a plain args dict against a temporary SQLite
database and a fixed clock, the way the server wrappers call them.
"""

from datetime import datetime, timedelta, timezone

import pytest

from db.record_store import EntityType, SqliteRecordStore
from models.records import Application, Suggestion
from tools.create_application import create_application
from tools.create_suggestion import create_suggestion
from tools.get_application_insights import get_application_insights
from tools.list_due_suggestions import list_due_suggestions
from tools.record_suggestion_action import record_suggestion_action
from tools.transition_application import transition_application
from utils.clock import FixedClock

NOW = datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "jobpursuit.db")


@pytest.fixture
def clock():
    return FixedClock(NOW, tz=timezone.utc)


def seed_application(db_path, status="Saved", days_ago=0, app_id="app-1"):
    with SqliteRecordStore(db_path) as store:
        store.save_application(
            Application(
                id=app_id,
                job_id="job-1",
                status=status,
                last_action_date=NOW - timedelta(days=days_ago),
            )
        )


def seed_suggestion(db_path, suggestion_id="s-1", **fields):
    record = {
        "id": suggestion_id,
        "title": "Comment on a post",
        "frequency": "Daily",
        "next_due_date": NOW.isoformat(),
    }
    record.update(fields)
    with SqliteRecordStore(db_path) as store:
        store.upsert(EntityType.SUGGESTION, record)


class TestCreateApplicationTool:
    def test_creates_saved_application(self, db_path, clock):
        result = create_application({"job_id": "job-7", "db_path": db_path}, clock=clock)

        application = result["application"]
        assert application["job_id"] == "job-7"
        assert application["status"] == "Saved"
        assert application["notes"] == ""
        assert application["archived"] is False
        assert "applied_date" not in application

        with SqliteRecordStore(db_path) as store:
            assert store.get_application(application["id"]).job_id == "job-7"

    def test_blank_job_id_is_validation_error(self, db_path, clock):
        result = create_application({"job_id": "  ", "db_path": db_path}, clock=clock)
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "job_id" in result["error"]["message"]

    def test_missing_job_id_is_validation_error(self, db_path, clock):
        result = create_application({"db_path": db_path}, clock=clock)
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_fields_are_ignored(self, db_path, clock):
        result = create_application({"job_id": "job-7", "db_path": db_path, "extra": 1}, clock=clock)
        assert "application" in result


class TestTransitionApplicationTool:
    def test_allowed_transition(self, db_path, clock):
        seed_application(db_path)

        result = transition_application(
            {"application_id": "app-1", "target_status": "Applied", "note": "Sent via LinkedIn",
             "db_path": db_path},
            clock=clock,
        )

        assert result["previous_status"] == "Saved"
        assert result["application"]["status"] == "Applied"
        assert result["application"]["notes"].endswith(
            "[1/15/2024] State changed to Applied: Sent via LinkedIn"
        )
        assert result["allowed_next"] == [
            "OutreachStarted", "Interviewing", "Rejected", "Stalled", "Withdrawn"
        ]

        with SqliteRecordStore(db_path) as store:
            engagements = store.list_engagements()
        assert len(engagements) == 1
        assert engagements[0].type == "StatusChange"

    def test_invalid_transition_leaves_record_untouched(self, db_path, clock):
        seed_application(db_path)

        result = transition_application(
            {"application_id": "app-1", "target_status": "Offer", "db_path": db_path}, clock=clock
        )

        assert result["error"]["code"] == "INVALID_TRANSITION"
        assert result["error"]["retryable"] is False
        assert "Saved to Offer" in result["error"]["message"]
        with SqliteRecordStore(db_path) as store:
            assert store.get_application("app-1").status == "Saved"
            assert store.list_engagements() == []

    def test_unknown_application(self, db_path, clock):
        result = transition_application(
            {"application_id": "nope", "target_status": "Applied", "db_path": db_path}, clock=clock
        )
        assert result["error"]["code"] == "NOT_FOUND"
        assert result["error"]["message"] == "Application not found: nope"

    def test_non_string_status_is_validation_error(self, db_path, clock):
        result = transition_application(
            {"application_id": "app-1", "target_status": 3, "db_path": db_path}, clock=clock
        )
        assert result["error"]["code"] == "VALIDATION_ERROR"
        assert "target_status" in result["error"]["message"]


class TestApplicationInsightsTool:
    def test_stalled_application(self, db_path, clock):
        seed_application(db_path, status="Applied", days_ago=10)

        result = get_application_insights({"application_id": "app-1", "db_path": db_path}, clock=clock)

        assert result["status"] == "Applied"
        assert result["days_since_last_action"] == 10
        assert result["is_stalled"] is True
        assert result["suggested_action"] == "Follow Up"
        assert "Stalled" in result["allowed_transitions"]
        assert [a["type"] for a in result["suggested_actions"]] == ["FollowUp"]
        assert result["suggested_actions"][0]["priority"] == "Medium"

    def test_threshold_override(self, db_path, clock):
        seed_application(db_path, status="Applied", days_ago=10)

        result = get_application_insights(
            {"application_id": "app-1", "stall_threshold_days": 30, "db_path": db_path}, clock=clock
        )

        assert result["is_stalled"] is False
        assert result["suggested_action"] == "Log Response"

    def test_saved_application(self, db_path, clock):
        seed_application(db_path, status="Saved", days_ago=100)

        result = get_application_insights({"application_id": "app-1", "db_path": db_path}, clock=clock)

        assert result["is_stalled"] is False
        assert result["suggested_action"] == "Apply Now"
        assert [a["type"] for a in result["suggested_actions"]] == ["Apply"]

    def test_negative_threshold_rejected(self, db_path, clock):
        result = get_application_insights(
            {"application_id": "app-1", "stall_threshold_days": -1, "db_path": db_path}, clock=clock
        )
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_application(self, db_path, clock):
        result = get_application_insights({"application_id": "x", "db_path": db_path}, clock=clock)
        assert result["error"]["code"] == "NOT_FOUND"


class TestCreateSuggestionTool:
    def test_creates_weekly_suggestion(self, db_path, clock):
        result = create_suggestion(
            {"title": "Post an update", "frequency": "Weekly", "days_of_week": [1, 3],
             "db_path": db_path},
            clock=clock,
        )

        suggestion = result["suggestion"]
        assert suggestion["frequency"] == "Weekly"
        assert suggestion["frequency_details"]["days_of_week"] == [1, 3]
        assert suggestion["is_active"] is True
        assert suggestion["history"] == []
        assert result["is_due_today"] is True

    def test_unknown_frequency_is_malformed(self, db_path, clock):
        result = create_suggestion(
            {"title": "Spam", "frequency": "Hourly", "db_path": db_path}, clock=clock
        )
        assert result["error"]["code"] == "MALFORMED_SUGGESTION"

    def test_bad_day_of_month_is_malformed(self, db_path, clock):
        result = create_suggestion(
            {"title": "Review", "frequency": "Monthly", "day_of_month": 32, "db_path": db_path},
            clock=clock,
        )
        assert result["error"]["code"] == "MALFORMED_SUGGESTION"
        assert "day_of_month" in result["error"]["message"]

    def test_blank_title_is_validation_error(self, db_path, clock):
        result = create_suggestion({"title": "", "frequency": "Daily", "db_path": db_path}, clock=clock)
        assert result["error"]["code"] == "VALIDATION_ERROR"


class TestRecordSuggestionActionTool:
    def test_completed_daily(self, db_path, clock):
        seed_suggestion(db_path)

        result = record_suggestion_action(
            {"suggestion_id": "s-1", "action_type": "Completed", "note": "done", "db_path": db_path},
            clock=clock,
        )

        suggestion = result["suggestion"]
        assert suggestion["history"][0]["action"] == "Completed"
        assert suggestion["history"][0]["note"] == "done"
        assert suggestion["next_due_date"].startswith("2024-01-16T09:00:00")
        assert result["is_due_today"] is False

        with SqliteRecordStore(db_path) as store:
            stored = store.get_suggestion("s-1")
        assert isinstance(stored, Suggestion)
        assert len(stored.history) == 1

    def test_unknown_action_type(self, db_path, clock):
        seed_suggestion(db_path)
        result = record_suggestion_action(
            {"suggestion_id": "s-1", "action_type": "Snoozed", "db_path": db_path}, clock=clock
        )
        assert result["error"]["code"] == "VALIDATION_ERROR"

    def test_unknown_suggestion(self, db_path, clock):
        result = record_suggestion_action(
            {"suggestion_id": "ghost", "action_type": "Completed", "db_path": db_path}, clock=clock
        )
        assert result["error"]["code"] == "NOT_FOUND"

    def test_malformed_stored_suggestion(self, db_path, clock):
        seed_suggestion(db_path, frequency="Weekly", frequency_details={"days_of_week": [8]})
        result = record_suggestion_action(
            {"suggestion_id": "s-1", "action_type": "Completed", "db_path": db_path}, clock=clock
        )
        assert result["error"]["code"] == "MALFORMED_SUGGESTION"


class TestListDueSuggestionsTool:
    def test_lists_due_in_order(self, db_path, clock):
        seed_suggestion(db_path, "later", next_due_date=(NOW + timedelta(hours=5)).isoformat())
        seed_suggestion(db_path, "overdue", next_due_date=(NOW - timedelta(days=2)).isoformat())
        seed_suggestion(db_path, "tomorrow", next_due_date=(NOW + timedelta(days=1)).isoformat())
        seed_suggestion(db_path, "off", is_active=False)

        result = list_due_suggestions({"db_path": db_path}, clock=clock)

        assert result["count"] == 2
        assert [s["id"] for s in result["suggestions"]] == ["overdue", "later"]
        assert "history" not in result

    def test_include_history(self, db_path, clock):
        seed_suggestion(db_path)
        record_suggestion_action(
            {"suggestion_id": "s-1", "action_type": "Skipped", "db_path": db_path}, clock=clock
        )

        result = list_due_suggestions({"include_history": True, "db_path": db_path}, clock=clock)

        assert result["count"] == 0
        assert len(result["history"]) == 1
        assert result["history"][0]["suggestion_id"] == "s-1"
        assert result["history"][0]["suggestion_title"] == "Comment on a post"

    def test_empty_database(self, db_path, clock):
        result = list_due_suggestions({"db_path": db_path}, clock=clock)
        assert result == {"suggestions": [], "count": 0}
