"""Workout history endpoints and the dashboard figures computed locally."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable

from tracker.api import ApiClient, clean_params, get_field
from tracker.exercises import MUSCLE_GROUPS, to_labels
from tracker.models import WorkoutSession, WorkoutStatus

HISTORY_FILTERS = ("page", "limit", "status", "startDate", "endDate", "muscleGroup", "search")
STATS_PERIODS = ("week", "month", "year", "all")

STATUS_LABELS = {
    "IN_PROGRESS": "In progress",
    "COMPLETED": "Completed",
    "CANCELLED": "Cancelled",
}


class HistoryService:
    """Read access to past workouts under ``/history``."""

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    def get_workout_history(self, **filters: Any) -> dict:
        """Return a page of past workouts.

        Accepts the filters ``page``, ``limit``, ``status``, ``startDate``,
        ``endDate``, ``muscleGroup`` and ``search``; empty values are ignored.
        """
        unknown = set(filters) - set(HISTORY_FILTERS)
        if unknown:
            raise TypeError(f"Unknown history filters: {', '.join(sorted(unknown))}")
        return self._api.get("/history/", params=clean_params(filters))

    def get_workout_details(self, workout_id: str) -> dict:
        return self._api.get(f"/history/{workout_id}")

    def get_history_stats(
        self,
        period: str = "month",
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> dict:
        if period not in STATS_PERIODS:
            raise ValueError(f"Unknown period '{period}'")
        params = {"period": period, "startDate": start_date, "endDate": end_date}
        return self._api.get("/history/stats/overview", params=clean_params(params))

    def get_weekly_pattern(
        self, start_date: date | None = None, end_date: date | None = None
    ) -> list[dict]:
        params = {"startDate": start_date, "endDate": end_date}
        return self._api.get("/history/stats/weekly-pattern", params=clean_params(params))

    def get_muscle_group_stats(
        self, start_date: date | None = None, end_date: date | None = None
    ) -> list[dict]:
        params = {"startDate": start_date, "endDate": end_date}
        return self._api.get("/history/stats/muscle-groups", params=clean_params(params))

    def delete_workout(self, workout_id: str) -> Any:
        return self._api.delete(f"/history/{workout_id}")

    def duplicate_workout(self, workout_id: str) -> dict:
        return self._api.get(f"/history/{workout_id}/duplicate")


def calculate_streak(workouts: Iterable[WorkoutSession], today: date | None = None) -> int:
    """Count consecutive training days ending today or yesterday.

    Completed workouts are walked newest first; each one extends the streak
    while it is at most one day before the previously counted workout.
    """

    current = today or date.today()
    completed = sorted(
        (w for w in workouts if w.status is WorkoutStatus.COMPLETED and w.date),
        key=lambda w: w.date,
        reverse=True,
    )
    streak = 0
    for workout in completed:
        if (current - workout.date).days <= 1:
            streak += 1
            current = workout.date
        else:
            break
    return streak


@dataclass
class DashboardStats:
    total_workouts: int
    weekly_workouts: int
    monthly_workouts: int
    current_streak: int
    active_workout: WorkoutSession | None = None


def dashboard_stats(
    workouts: list[WorkoutSession], today: date | None = None
) -> DashboardStats:
    """Summarise ``workouts`` for the dashboard cards."""

    today = today or date.today()
    completed = [w for w in workouts if w.status is WorkoutStatus.COMPLETED]
    week_ago = today - timedelta(days=7)
    month_ago = today - timedelta(days=30)
    active = next((w for w in workouts if w.is_in_progress), None)
    return DashboardStats(
        total_workouts=len(completed),
        weekly_workouts=sum(1 for w in completed if w.date and w.date >= week_ago),
        monthly_workouts=sum(1 for w in completed if w.date and w.date >= month_ago),
        current_streak=calculate_streak(completed, today),
        active_workout=active,
    )


# ----------------------------------------------------------------------
# Display text for history payloads
# ----------------------------------------------------------------------


def _kg(value: Any) -> str:
    return f"{float(value):g}"


def describe_history_stats(stats: dict | None) -> str:
    """One line summary of a ``/history/stats/overview`` response."""

    totals = get_field(stats, "totals", {})
    return (
        f"This month: {get_field(totals, 'completedWorkouts')} completed, "
        f"{get_field(totals, 'series')} series, {_kg(get_field(totals, 'volume'))} kg"
    )


def describe_history_entry(entry: dict) -> tuple[str, str]:
    """Return the title and subtitle shown for one history item."""

    day = get_field(entry, "date", "")[:10]
    title = f"{get_field(entry, 'dayOfWeek', '')} {day}".strip()
    stats = get_field(entry, "stats", {})
    groups = ", ".join(to_labels(get_field(entry, "muscleGroups", [])))
    status = get_field(entry, "status", "")
    subtitle = (
        f"{groups} - {get_field(stats, 'totalSeries')} series, "
        f"{get_field(stats, 'duration')} min"
    )
    if status and status != "COMPLETED":
        subtitle = f"{subtitle} ({STATUS_LABELS.get(status, status)})"
    return title, subtitle


def describe_workout_details(details: dict) -> str:
    """Status and totals line for a ``/history/{id}`` response."""

    status = get_field(details, "status", "")
    stats = get_field(details, "stats", {})
    return (
        f"{STATUS_LABELS.get(status, status or 'Unknown')} - "
        f"{get_field(stats, 'completedExercises')}/{get_field(stats, 'totalExercises')} exercises, "
        f"{get_field(stats, 'totalSeries')} series, "
        f"{_kg(get_field(stats, 'totalVolume'))} kg, {get_field(stats, 'duration')} min"
    )


def describe_series(series: dict) -> str:
    text = (
        f"Set {get_field(series, 'seriesNumber')}: "
        f"{_kg(get_field(series, 'weight'))} kg x {get_field(series, 'reps')}"
    )
    rest = get_field(series, "restTime")
    if rest:
        text += f", rest {rest} s"
    difficulty = get_field(series, "difficulty")
    if difficulty:
        text += f", difficulty {difficulty}/5"
    return text


def describe_exercise_execution(execution: dict) -> tuple[str, str, list[str]]:
    """Return the title, progress line and series lines for one exercise."""

    series = sorted(
        get_field(execution, "seriesExecutions", []),
        key=lambda s: get_field(s, "seriesNumber"),
    )
    name = get_field(execution, "exerciseName", "") or get_field(
        get_field(execution, "exercise", {}), "name", ""
    )
    planned = get_field(execution, "plannedSeries")
    done = get_field(execution, "completedSeries", len(series))
    progress = f"{done} of {planned} series" if planned else f"{done} series"
    if get_field(execution, "isCompleted", False):
        progress += ", completed"
    return name, progress, [describe_series(s) for s in series]


def describe_distribution(items: list[dict] | None, label_key: str) -> list[str]:
    """Lines such as ``Monday: 3 (25%)`` for weekly pattern or muscle group stats."""

    lines = []
    for item in items or []:
        label = get_field(item, label_key, "")
        label = MUSCLE_GROUPS.get(label, label)
        lines.append(
            f"{label}: {get_field(item, 'count')} ({float(get_field(item, 'percentage')):g}%)"
        )
    return lines
