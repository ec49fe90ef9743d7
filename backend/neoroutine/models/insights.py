"""
Pydantic models for insight summaries
"""
from pydantic import BaseModel
from typing import Any, Dict, List, Optional


class SeriesPoint(BaseModel):
    date_iso: str
    check_ins: int


class DailyDataPoint(BaseModel):
    date: str
    day: str
    check_ins: int
    percent: int


class RoutineStat(BaseModel):
    id: str
    name: str
    color: str
    completed: int
    total_possible: int
    total_tasks: int
    completion_rate: int


class GoalProgress(BaseModel):
    id: str
    title: str
    category: Optional[str] = None
    progress: int
    current_value: float
    target_value: float
    due_date: Optional[str] = None
    status: Optional[str] = None


class Insight(BaseModel):
    icon: str
    title: str
    description: str
    type: str


class WeeklySummary(BaseModel):
    completion_rate: int
    days_with_activity: int
    message: str


class Patterns(BaseModel):
    best_day_of_week: Optional[int] = None
    worst_day_of_week: Optional[int] = None


class Summary(BaseModel):
    total_check_ins: int
    completion_rate: int
    current_streak: int
    longest_streak: int
    days_with_activity: int
    active_day_rate: int
    routine_count: int
    active_goals: int
    completed_goals: int
    total_goals: int
    avg_goal_progress: int


class UserInsights(BaseModel):
    """Response model for a user's insight summary"""
    range_days: int
    totals: Dict[str, int]
    series: List[SeriesPoint]
    streaks: Dict[str, int]
    summary: Summary
    daily_data: List[DailyDataPoint]
    weekly: WeeklySummary
    routine_stats: List[RoutineStat]
    goals_progress: List[GoalProgress]
    insights: List[Insight]
    patterns: Patterns


class ClientSummary(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    last_active: Optional[str] = None
    total_check_ins: int
    coaching: Optional[Dict[str, Any]] = None


class CoachInsights(BaseModel):
    """Response model for a coach's insight summary"""
    coach_id: str
    range_days: int
    totals: Dict[str, int]
    series: List[SeriesPoint]
    clients: List[ClientSummary]
