"""Tests for the reminder and message engine."""

import random
from datetime import date

import pytest

from neoroutine.services.reminders import (
    calculate_completion_stats,
    get_adaptive_reminder,
    get_gentle_message,
    get_progress_bucket,
    get_user_adaptive_reminder,
    get_users_needing_reminders,
    get_weekly_message,
)
from neoroutine.services.reminders.messages import ADAPTIVE_REMINDERS, MESSAGE_POOLS

TODAY = date(2024, 3, 17)


class TestProgressBuckets:
    @pytest.mark.parametrize("percent,bucket", [
        (0, "no_progress"),
        (1, "low_progress"),
        (25, "low_progress"),
        (26, "moderate_progress"),
        (50, "moderate_progress"),
        (51, "good_progress"),
        (75, "good_progress"),
        (76, "high_progress"),
        (99, "high_progress"),
        (100, "complete"),
        (130, "complete"),
    ])
    def test_bucket_boundaries(self, percent, bucket):
        assert get_progress_bucket(percent) == bucket

    @pytest.mark.parametrize("percent,bucket", [(0, "no_progress"), (60, "good_progress"), (100, "complete")])
    def test_message_comes_from_bucket_pool(self, percent, bucket):
        assert get_gentle_message(percent, rng=random.Random(3)) in MESSAGE_POOLS[bucket]


class TestGentleMessage:
    def test_seeded_rng_is_deterministic(self):
        first = get_gentle_message(40, rng=random.Random(42))
        second = get_gentle_message(40, rng=random.Random(42))
        assert first == second

    def test_recovery_overrides_progress(self):
        message = get_gentle_message(100, days_since_active=3, rng=random.Random(1))
        assert message in MESSAGE_POOLS["recovery"]

    def test_two_days_away_is_not_recovery(self):
        message = get_gentle_message(100, days_since_active=2, rng=random.Random(1))
        assert message in MESSAGE_POOLS["complete"]

    def test_every_pool_message_reachable(self):
        rng = random.Random(0)
        seen = {get_gentle_message(0, rng=rng) for _ in range(200)}
        assert seen == set(MESSAGE_POOLS["no_progress"])


class TestWeeklyAndAdaptive:
    @pytest.mark.parametrize("percent,pool", [
        (0, "weekly_low"),
        (39, "weekly_low"),
        (40, "weekly_good"),
        (74, "weekly_good"),
        (75, "weekly_excellent"),
    ])
    def test_weekly_message(self, percent, pool):
        assert get_weekly_message(percent, rng=random.Random(5)) in MESSAGE_POOLS[pool]

    @pytest.mark.parametrize("percent,intensity", [
        (0, "soft"),
        (29, "soft"),
        (30, "medium"),
        (59, "medium"),
        (60, "energetic"),
        (100, "energetic"),
    ])
    def test_adaptive_intensity(self, percent, intensity):
        reminder = get_adaptive_reminder(percent, rng=random.Random(7))

        assert reminder["intensity"] == intensity
        assert reminder["tone"] == ADAPTIVE_REMINDERS[intensity]["tone"]
        assert reminder["message"] in ADAPTIVE_REMINDERS[intensity]["messages"]


class TestCompletionStats:
    def test_trailing_window(self):
        check_ins = [
            {"date_iso": "2024-03-17"},
            {"date_iso": "2024-03-17"},
            {"date_iso": "2024-03-15"},
            {"date_iso": "2024-03-01"},
        ]
        stats = calculate_completion_stats(check_ins, total_tasks_per_day=2, days=7, today=TODAY)

        assert stats["total_completed"] == 3
        assert stats["total_possible"] == 14
        assert stats["completion_rate"] == pytest.approx(3 / 14 * 100)
        assert stats["days_with_activity"] == 2
        assert stats["active_day_rate"] == pytest.approx(2 / 7 * 100)

    def test_no_tasks(self):
        stats = calculate_completion_stats([], total_tasks_per_day=0, today=TODAY)
        assert stats["completion_rate"] == 0
        assert stats["total_possible"] == 0


class TestAdaptiveReminderService:
    async def test_consistent_user_gets_energetic_reminder(self, repo):
        repo.add_user("u1")
        routine = repo.add_routine("u1", ["t1"])
        for day in range(11, 18):
            repo.add_check_in("u1", routine["id"], "t1", f"2024-03-{day}")

        reminder = await get_user_adaptive_reminder("u1", today=TODAY, rng=random.Random(1))

        assert reminder["intensity"] == "energetic"
        assert reminder["stats"]["completion_rate"] == pytest.approx(100)

    async def test_inactive_user_gets_soft_reminder(self, repo):
        repo.add_user("u1")
        repo.add_routine("u1", ["t1", "t2"])

        reminder = await get_user_adaptive_reminder("u1", today=TODAY, rng=random.Random(1))
        assert reminder["intensity"] == "soft"

    async def test_users_needing_reminders(self, repo):
        repo.add_user("on", preferences={"reminder_frequency": "daily"})
        repo.add_user("default", preferences={})
        repo.add_user("off", preferences={"reminder_frequency": "off"})
        repo.add_user("done", preferences={"reminder_frequency": "daily"})
        repo.reminder_log.append({
            "user_id": "done",
            "date": "2024-03-17",
            "reminder_type": "adaptive",
            "intensity": "soft",
            "message": "hi",
        })

        users = await get_users_needing_reminders(TODAY)
        assert sorted(u["id"] for u in users) == ["default", "on"]
