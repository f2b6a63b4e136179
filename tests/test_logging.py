"""Tests for UsageLog model and UsageStore."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from vanban_assistant.logging.models import UsageLog
from vanban_assistant.logging.usage_store import UsageStore


class TestUsageLog:
    def test_create_minimal(self):
        log = UsageLog(action="review")
        assert log.action == "review"
        assert log.user_id is None
        assert log.success is True
        assert log.error_message is None
        assert log.id  # uuid auto-generated

    def test_unique_ids(self):
        assert UsageLog(action="review").id != UsageLog(action="review").id

    def test_timestamp_auto(self):
        before = datetime.now()
        log = UsageLog(action="review")
        after = datetime.now()
        assert before <= log.timestamp <= after


class TestUsageStore:
    def test_creates_parent_directory(self, tmp_path):
        store = UsageStore(db_path=tmp_path / "nested" / "usage.db")
        assert store.db_path.exists()

    def test_save_and_get(self, usage_store):
        log = UsageLog(
            user_id=3,
            action="summarize",
            elapsed_seconds=2.5,
            total_input_tokens=1200,
            total_output_tokens=300,
            estimated_cost_usd=0.0081,
        )
        usage_store.save_log(log)

        logs = usage_store.get_logs()
        assert len(logs) == 1
        assert logs[0] == log

    def test_failure_roundtrip(self, usage_store):
        usage_store.save_log(UsageLog(action="draft", success=False, error_message="timeout"))
        log = usage_store.get_logs()[0]
        assert log.success is False
        assert log.error_message == "timeout"

    def test_most_recent_first_and_limit(self, usage_store):
        base = datetime.now()
        for i in range(5):
            usage_store.save_log(
                UsageLog(action=f"a{i}", timestamp=base + timedelta(seconds=i))
            )
        logs = usage_store.get_logs(limit=3)
        assert [log.action for log in logs] == ["a4", "a3", "a2"]

    def test_filter_by_user(self, usage_store):
        usage_store.save_log(UsageLog(user_id=1, action="review"))
        usage_store.save_log(UsageLog(user_id=2, action="review"))
        usage_store.save_log(UsageLog(action="review"))

        assert [log.user_id for log in usage_store.get_logs(user_id=2)] == [2]
        assert len(usage_store.get_logs()) == 3

    def test_monthly_stats(self, usage_store):
        usage_store.save_log(
            UsageLog(action="review", total_input_tokens=100, estimated_cost_usd=0.01)
        )
        usage_store.save_log(
            UsageLog(action="review", total_input_tokens=50, estimated_cost_usd=0.02, success=False)
        )
        # Previous month entries are excluded
        usage_store.save_log(
            UsageLog(
                action="review",
                timestamp=datetime.now().replace(day=1) - timedelta(days=1),
                estimated_cost_usd=5.0,
            )
        )

        stats = usage_store.get_monthly_stats()

        assert stats["total_runs"] == 2
        assert stats["total_input_tokens"] == 150
        assert stats["total_cost_usd"] == pytest.approx(0.03)
        assert stats["success_rate"] == pytest.approx(50.0)
        assert stats["month"] == datetime.now().strftime("%Y-%m")

    def test_monthly_stats_empty(self, usage_store):
        stats = usage_store.get_monthly_stats()
        assert stats["total_runs"] == 0
        assert stats["success_rate"] == 0.0

    def test_total_cost(self, usage_store):
        usage_store.save_log(UsageLog(action="a", estimated_cost_usd=0.5))
        usage_store.save_log(UsageLog(action="b", estimated_cost_usd=0.25))
        assert usage_store.get_total_cost() == pytest.approx(0.75)
