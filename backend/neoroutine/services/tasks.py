"""
Helpers for reading the task list embedded in a routine
"""
from typing import Any, Dict, Iterable, List


def active_tasks(routine: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Tasks of a routine that are still active (a missing flag counts as active)"""
    return [t for t in routine.get("tasks") or [] if t and t.get("is_active", True) is not False]


def count_active_tasks(routines: Iterable[Dict[str, Any]]) -> int:
    """Total active tasks across routines, the daily denominator for completion"""
    return sum(len(active_tasks(r)) for r in routines)


def active_task_keys(routines: Iterable[Dict[str, Any]]) -> set:
    """Set of (routine_id, task_id) pairs for every active task"""
    return {
        (str(r["id"]), str(t["id"]))
        for r in routines
        for t in active_tasks(r)
    }
