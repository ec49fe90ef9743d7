"""Tests for badge awarding, the threshold checkers and the orchestrator."""

import asyncio
import logging
from datetime import datetime

import pytest
import pytz

from neoroutine.core.constants import STREAK_MILESTONES
from neoroutine.core.exceptions import BadgeAlreadyExistsError, DatabaseError
from neoroutine.services import repository
from neoroutine.services.badges import (
    award_badge,
    check_achievement_badges,
    check_comeback_badge,
    check_goal_badges,
    check_perfect_week_badge,
    check_routine_badges,
    check_streak_badges,
    check_volume_badges,
    get_celebration_for_badge,
    run_badge_checks,
)

NOON = datetime(2024, 3, 17, 12, 0, tzinfo=pytz.utc)
WEEK = [f"2024-03-{day}" for day in range(11, 18)]


def _at(hour: int) -> datetime:
    return datetime(2024, 3, 17, hour, 30, tzinfo=pytz.utc)


class TestAwardBadge:
    async def test_award_is_idempotent(self, repo):
        first = await award_badge("u1", "streak_7", {"value": 7})
        second = await award_badge("u1", "streak_7", {"value": 8})

        assert first["awarded"] is True
        assert first["badge"]["badge_id"] == "streak_7"
        assert second == {"awarded": False, "already_exists": True}
        assert len(repo.badges) == 1
        assert repo.badges[0]["context"] == {"value": 7}

    async def test_concurrent_awards_insert_once(self, repo):
        results = await asyncio.gather(*[award_badge("u1", "perfect_day") for _ in range(5)])

        assert sum(1 for r in results if r["awarded"]) == 1
        assert len(repo.badges) == 1

    async def test_same_badge_for_different_users(self, repo):
        assert (await award_badge("u1", "first_goal"))["awarded"]
        assert (await award_badge("u2", "first_goal"))["awarded"]

    async def test_unique_violation_is_not_an_error(self, repo, monkeypatch):
        async def raise_conflict(*args, **kwargs):
            raise BadgeAlreadyExistsError("duplicate")

        monkeypatch.setattr(repository, "insert_badge_if_absent", raise_conflict)
        assert await award_badge("u1", "streak_3") == {"awarded": False, "already_exists": True}

    async def test_database_failure_is_reported_not_raised(self, repo, monkeypatch):
        async def broken(*args, **kwargs):
            raise DatabaseError("connection reset")

        monkeypatch.setattr(repository, "insert_badge_if_absent", broken)
        result = await award_badge("u1", "streak_3")

        assert result["awarded"] is False
        assert "connection reset" in result["error"]


class TestStreakBadges:
    async def test_awards_every_reached_milestone(self, repo):
        awarded = await check_streak_badges("u1", 7)
        assert awarded == [
            {"badge_id": "streak_3", "milestone": 3},
            {"badge_id": "streak_7", "milestone": 7},
        ]

    async def test_only_new_milestones_on_later_runs(self, repo):
        await check_streak_badges("u1", 7)
        awarded = await check_streak_badges("u1", 14)
        assert [b["badge_id"] for b in awarded] == ["streak_14"]

    async def test_milestone_coverage_is_monotonic(self, repo):
        for streak in range(0, 40):
            await check_streak_badges("u1", streak)
            expected = {f"streak_{m}" for m in STREAK_MILESTONES if m <= streak}
            assert repo.badge_ids("u1") == expected

    async def test_jump_past_several_milestones(self, repo):
        awarded = await check_streak_badges("u1", 100)
        assert [b["milestone"] for b in awarded] == [3, 7, 14, 30, 60, 100]


class TestVolumeBadges:
    async def test_first_checkin(self, repo):
        repo.add_user("u1", analytics={"total_check_ins": 1})
        assert await check_volume_badges("u1") == [{"badge_id": "first_checkin", "milestone": 1}]

    async def test_volume_milestones(self, repo):
        repo.add_user("u1", analytics={"total_check_ins": 120})
        awarded = await check_volume_badges("u1")
        assert [b["badge_id"] for b in awarded] == ["first_checkin", "checkins_50", "checkins_100"]

    async def test_missing_user_awards_nothing(self, repo):
        assert await check_volume_badges("ghost") == []


class TestAchievementBadges:
    @pytest.mark.parametrize("hour,expected", [
        (0, ["early_bird"]),
        (6, ["early_bird"]),
        (7, []),
        (21, []),
        (22, ["night_owl"]),
        (23, ["night_owl"]),
    ])
    async def test_time_of_day(self, repo, hour, expected):
        awarded = await check_achievement_badges("u1", {}, now=_at(hour))
        assert [b["badge_id"] for b in awarded] == expected

    async def test_perfect_day_needs_full_completion(self, repo):
        assert await check_achievement_badges("u1", {"today_percent": 99}, now=NOON) == []
        awarded = await check_achievement_badges("u1", {"today_percent": 100}, now=NOON)
        assert awarded == [{"badge_id": "perfect_day"}]


class TestGoalAndRoutineBadges:
    async def test_goal_badges(self, repo):
        for _ in range(5):
            repo.add_goal("u1", status="completed")
        repo.add_goal("u1", status="active")

        awarded = await check_goal_badges("u1")
        assert [b["badge_id"] for b in awarded] == ["first_goal", "goal_complete", "five_goals"]

    async def test_goal_created_but_not_completed(self, repo):
        repo.add_goal("u1", status="active")
        assert [b["badge_id"] for b in await check_goal_badges("u1")] == ["first_goal"]

    async def test_archived_routines_do_not_count(self, repo):
        repo.add_routine("u1", ["t1"])
        for _ in range(4):
            repo.add_routine("u1", ["t1"], archived=True)

        awarded = await check_routine_badges("u1")
        assert [b["badge_id"] for b in awarded] == ["first_routine"]


class TestPerfectWeek:
    def _fill_week(self, repo, routine, per_day):
        for day in WEEK:
            for task in routine["tasks"][:per_day]:
                repo.add_check_in("u1", routine["id"], task["id"], day)

    async def test_seven_full_days_award(self, repo):
        routine = repo.add_routine("u1", ["t1", "t2"], inactive=["t3"])
        self._fill_week(repo, routine, per_day=2)

        awarded = await check_perfect_week_badge("u1", now=NOON)
        assert awarded == [{"badge_id": "perfect_week"}]

    async def test_one_short_day_blocks_award(self, repo):
        routine = repo.add_routine("u1", ["t1", "t2"])
        self._fill_week(repo, routine, per_day=2)
        repo.check_ins = [
            c for c in repo.check_ins
            if not (c["date_iso"] == "2024-03-14" and c["task_id"] == "t2")
        ]

        assert await check_perfect_week_badge("u1", now=NOON) == []

    async def test_no_routines_or_tasks(self, repo):
        assert await check_perfect_week_badge("u1", now=NOON) == []
        repo.add_routine("u1", [], inactive=["t1"])
        assert await check_perfect_week_badge("u1", now=NOON) == []


class TestComeback:
    async def test_seven_days_away(self, repo):
        awarded = await check_comeback_badge("u1", now=NOON, last_active_date="2024-03-10")
        assert awarded == [{"badge_id": "comeback_kid", "days_away": 7}]
        assert repo.badges[0]["context"] == {"days_away": 7}

    async def test_six_days_is_not_a_comeback(self, repo):
        assert await check_comeback_badge("u1", now=NOON, last_active_date="2024-03-11") == []

    async def test_reads_stored_last_active_date(self, repo):
        repo.add_user("u1", analytics={"last_active_date": "2024-02-01"})
        awarded = await check_comeback_badge("u1", now=NOON)
        assert awarded[0]["days_away"] == 45

    async def test_never_active(self, repo):
        repo.add_user("u1")
        assert await check_comeback_badge("u1", now=NOON) == []


class TestRunBadgeChecks:
    async def test_streak_and_first_checkin_example(self, repo):
        repo.add_user("u1", analytics={
            "current_streak": 7,
            "longest_streak": 7,
            "total_check_ins": 1,
            "last_active_date": "2024-03-17",
        })

        awarded = await run_badge_checks("u1", now=NOON)
        assert {b["badge_id"] for b in awarded} == {"streak_3", "streak_7", "first_checkin"}

        assert await run_badge_checks("u1", now=NOON) == []

    async def test_failing_checker_does_not_block_others(self, repo, monkeypatch, caplog):
        repo.add_user("u1", analytics={"current_streak": 3, "total_check_ins": 1})

        async def broken(*args, **kwargs):
            raise DatabaseError("goals table unavailable")

        monkeypatch.setattr(repository, "count_goals", broken)

        with caplog.at_level(logging.ERROR):
            awarded = await run_badge_checks("u1", now=NOON)

        assert {b["badge_id"] for b in awarded} == {"streak_3", "first_checkin"}
        assert "goal check failed" in caplog.text

    async def test_user_read_failure_yields_nothing(self, repo, monkeypatch):
        async def broken(*args, **kwargs):
            raise DatabaseError("down")

        monkeypatch.setattr(repository, "get_user", broken)
        assert await run_badge_checks("u1", now=NOON) == []

    async def test_previous_active_date_drives_comeback(self, repo):
        repo.add_user("u1", analytics={"current_streak": 1, "last_active_date": "2024-03-17"})

        awarded = await run_badge_checks("u1", {"previous_active_date": "2024-03-01"}, now=NOON)
        assert {"badge_id": "comeback_kid", "days_away": 16} in awarded


class TestCelebrations:
    @pytest.mark.parametrize("badge_id,expected", [
        ("streak_365", {"type": "milestone", "pieces": 200}),
        ("streak_100", {"type": "milestone", "pieces": 200}),
        ("streak_30", {"type": "milestone", "pieces": 150}),
        ("streak_7", {"type": "streak", "pieces": 100}),
        ("perfect_week", {"type": "achievement", "pieces": 120}),
        ("first_goal", {"type": "goal", "pieces": 100}),
        ("explorer", {"type": "achievement", "pieces": 80}),
    ])
    def test_celebration_for_badge(self, badge_id, expected):
        assert get_celebration_for_badge(badge_id) == expected
