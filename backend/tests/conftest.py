"""Shared test fixtures: in-memory repository, test client, data builders."""

import os

# Keep the scheduler out of app startup in tests
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ.setdefault("APP_TIMEZONE", "UTC")

import copy
import itertools
from typing import Any, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from neoroutine.core.exceptions import (
    BadgeAlreadyExistsError,
    CheckInAlreadyExistsError,
    DatabaseError,
)
from neoroutine.services import repository
from neoroutine.utils.cache import TTLCache


class FakeRepository:
    """In-memory stand-in for the supabase repository with the same unique constraints."""

    def __init__(self):
        self.users: Dict[str, Dict[str, Any]] = {}
        self.routines: List[Dict[str, Any]] = []
        self.check_ins: List[Dict[str, Any]] = []
        self.goals: List[Dict[str, Any]] = []
        self.badges: List[Dict[str, Any]] = []
        self.templates: List[Dict[str, Any]] = []
        self.reminder_log: List[Dict[str, Any]] = []
        self._ids = itertools.count(1)

    # -- builders ---------------------------------------------------------

    def add_user(self, user_id: str, analytics: Optional[dict] = None, preferences: Optional[dict] = None,
                 coaching: Optional[dict] = None, name: Optional[str] = None) -> dict:
        user = {
            "id": user_id,
            "name": name or user_id,
            "email": f"{user_id}@example.com",
            "analytics": analytics or {},
            "preferences": preferences if preferences is not None else {"timezone": "UTC"},
            "coaching": coaching,
        }
        self.users[user_id] = user
        return user

    def add_routine(self, user_id: str, task_ids: List[str], routine_id: Optional[str] = None,
                    archived: bool = False, inactive: Optional[List[str]] = None, title: str = "Morning") -> dict:
        inactive = inactive or []
        routine = {
            "id": routine_id or f"r{next(self._ids)}",
            "user_id": user_id,
            "title": title,
            "color": "neo",
            "is_archived": archived,
            "tasks": [{"id": t, "label": t} for t in task_ids]
                     + [{"id": t, "label": t, "is_active": False} for t in inactive],
        }
        self.routines.append(routine)
        return routine

    def add_check_in(self, user_id: str, routine_id: str, task_id: str, date_iso: str) -> dict:
        check_in = {
            "id": next(self._ids),
            "user_id": user_id,
            "routine_id": routine_id,
            "task_id": task_id,
            "date_iso": date_iso,
            "note": "",
        }
        self.check_ins.append(check_in)
        return check_in

    def add_goal(self, user_id: str, current_value: float = 0, target_value: float = 100,
                 status: str = "active", title: str = "Goal") -> dict:
        goal = {
            "id": f"g{next(self._ids)}",
            "user_id": user_id,
            "title": title,
            "category": "health",
            "status": status,
            "current_value": current_value,
            "target_value": target_value,
            "due_date": None,
        }
        self.goals.append(goal)
        return goal

    def badge_ids(self, user_id: str) -> set:
        return {b["badge_id"] for b in self.badges if b["user_id"] == user_id}

    # -- users ------------------------------------------------------------

    async def get_user(self, user_id):
        user = self.users.get(user_id)
        return copy.deepcopy(user) if user else None

    async def get_all_users(self):
        return copy.deepcopy(list(self.users.values()))

    async def update_user_analytics_if_unchanged(self, user_id, expected_total, analytics):
        user = self.users.get(user_id)
        if not user or user["analytics"].get("total_check_ins") != expected_total:
            return False
        user["analytics"] = dict(analytics)
        return True

    async def get_coach_clients(self, coach_id):
        return [
            copy.deepcopy(u) for u in self.users.values()
            if (u.get("coaching") or {}).get("coach_id") == coach_id
            and (u.get("coaching") or {}).get("status") == "active"
        ]

    # -- routines ---------------------------------------------------------

    async def get_active_routines(self, user_id):
        return [copy.deepcopy(r) for r in self.routines if r["user_id"] == user_id and not r["is_archived"]]

    async def get_active_routine(self, user_id, routine_id):
        for r in await self.get_active_routines(user_id):
            if str(r["id"]) == str(routine_id):
                return r
        return None

    async def count_active_routines(self, user_id):
        return len(await self.get_active_routines(user_id))

    # -- check-ins --------------------------------------------------------

    async def get_check_ins_in_range(self, user_ids, start_iso, end_iso):
        return [
            dict(c) for c in self.check_ins
            if c["user_id"] in user_ids and start_iso <= c["date_iso"] <= end_iso
        ]

    async def get_check_in(self, user_id, routine_id, task_id, date_iso):
        for c in self.check_ins:
            if (c["user_id"], c["routine_id"], c["task_id"], c["date_iso"]) == (user_id, routine_id, task_id, date_iso):
                return dict(c)
        return None

    async def create_check_in(self, user_id, routine_id, task_id, date_iso, note=""):
        if await self.get_check_in(user_id, routine_id, task_id, date_iso):
            raise CheckInAlreadyExistsError("Task already completed for this day")
        check_in = self.add_check_in(user_id, routine_id, task_id, date_iso)
        check_in["note"] = note
        return dict(check_in)

    async def delete_check_in(self, user_id, routine_id, task_id, date_iso):
        before = len(self.check_ins)
        self.check_ins = [
            c for c in self.check_ins
            if (c["user_id"], c["routine_id"], c["task_id"], c["date_iso"]) != (user_id, routine_id, task_id, date_iso)
        ]
        return before - len(self.check_ins)

    # -- goals ------------------------------------------------------------

    async def get_goals(self, user_id, statuses):
        return [dict(g) for g in self.goals if g["user_id"] == user_id and g["status"] in statuses]

    async def count_goals(self, user_id, status=None):
        return sum(1 for g in self.goals if g["user_id"] == user_id and (status is None or g["status"] == status))

    # -- badges -----------------------------------------------------------

    async def insert_badge_if_absent(self, user_id, badge_id, context, earned_at):
        if badge_id in self.badge_ids(user_id):
            return None
        row = {
            "id": next(self._ids),
            "user_id": user_id,
            "badge_id": badge_id,
            "context": context,
            "seen": False,
            "earned_at": earned_at,
        }
        self.badges.append(row)
        return dict(row)

    async def get_badges(self, user_id):
        rows = [dict(b) for b in self.badges if b["user_id"] == user_id]
        return sorted(rows, key=lambda b: b["earned_at"], reverse=True)

    async def mark_badges_seen(self, user_id, badge_ids=None):
        updated = 0
        for b in self.badges:
            if b["user_id"] == user_id and not b["seen"] and (not badge_ids or b["badge_id"] in badge_ids):
                b["seen"] = True
                updated += 1
        return updated

    # -- templates and reminders ------------------------------------------

    async def get_coach_templates(self, coach_id):
        return [dict(t) for t in self.templates if t["coach_id"] == coach_id]

    async def get_reminders_for_date(self, target_date, reminder_type):
        return [dict(r) for r in self.reminder_log
                if r["date"] == target_date and r["reminder_type"] == reminder_type]

    async def create_reminder_log(self, user_id, target_date, reminder_type, intensity, message):
        for r in self.reminder_log:
            if (r["user_id"], r["date"], r["reminder_type"]) == (user_id, target_date, reminder_type):
                raise DatabaseError("Failed to create reminder log: duplicate key")
        entry = {
            "user_id": user_id,
            "date": target_date,
            "reminder_type": reminder_type,
            "intensity": intensity,
            "message": message,
        }
        self.reminder_log.append(entry)
        return dict(entry)


REPOSITORY_FUNCTIONS = [
    "get_user",
    "get_all_users",
    "update_user_analytics_if_unchanged",
    "get_coach_clients",
    "get_active_routines",
    "get_active_routine",
    "count_active_routines",
    "get_check_ins_in_range",
    "get_check_in",
    "create_check_in",
    "delete_check_in",
    "get_goals",
    "count_goals",
    "insert_badge_if_absent",
    "get_badges",
    "mark_badges_seen",
    "get_coach_templates",
    "get_reminders_for_date",
    "create_reminder_log",
]


@pytest.fixture
def repo(monkeypatch):
    """Replace every repository function with the in-memory fake."""
    fake = FakeRepository()
    for name in REPOSITORY_FUNCTIONS:
        monkeypatch.setattr(repository, name, getattr(fake, name))
    return fake


@pytest.fixture
async def client(repo):
    from main import app

    app.state.insights_cache = TTLCache(60)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def auth(user_id: str = "u1") -> dict:
    return {"X-User-Id": user_id}
