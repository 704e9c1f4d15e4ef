"""Read-only analytics endpoints under ``/reports``.

All figures are computed by the API; the responses are returned as parsed
JSON for the reports screen to render.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from tracker.api import ApiClient, clean_params, get_field

METRICS = ("weight", "reps", "volume")
SERIES_TYPES = ("max", "average", "all")
PERIODS = ("week", "month", "year")


class ReportsService:
    def __init__(self, api: ApiClient) -> None:
        self._api = api

    def _get(self, endpoint: str, **params: Any) -> Any:
        return self._api.get(f"/reports/{endpoint}", params=clean_params(params))

    def get_workout_overview(
        self, start_date: date | None = None, end_date: date | None = None
    ) -> dict:
        return self._get("overview", startDate=start_date, endDate=end_date)

    def get_exercise_evolution(
        self,
        exercise_id: str,
        series_type: str = "max",
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> dict:
        if series_type not in SERIES_TYPES:
            raise ValueError(f"Unknown series type '{series_type}'")
        return self._get(
            "evolution",
            exerciseId=exercise_id,
            seriesType=series_type,
            startDate=start_date,
            endDate=end_date,
        )

    def compare_exercises(
        self,
        exercise_ids: list[str],
        metric: str = "weight",
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> dict:
        if metric not in METRICS:
            raise ValueError(f"Unknown metric '{metric}'")
        return self._get(
            "compare-exercises",
            exerciseIds=exercise_ids,
            metric=metric,
            startDate=start_date,
            endDate=end_date,
        )

    def get_personal_records(self, **params: Any) -> list[dict]:
        return self._get("personal-records", **params)

    def get_exercise_progress(self, **params: Any) -> Any:
        return self._get("exercise-progress", **params)

    def get_workout_frequency(self, period: str = "week", **params: Any) -> dict:
        if period not in PERIODS:
            raise ValueError(f"Unknown period '{period}'")
        return self._get("frequency", period=period, **params)

    def get_muscle_group_analysis(self, **params: Any) -> dict:
        return self._get("muscle-groups", **params)

    def get_volume_analysis(self, **params: Any) -> Any:
        return self._get("volume", **params)

    def get_workout_duration(self, **params: Any) -> Any:
        return self._get("duration", **params)

    def get_workout_consistency(self, **params: Any) -> Any:
        return self._get("consistency", **params)

    def get_strength_analysis(self, **params: Any) -> Any:
        return self._get("strength-analysis", **params)

    def get_complete_report(self, **params: Any) -> Any:
        return self._get("complete", **params)


def overview_cards(overview: dict | None) -> list[tuple[str, str]]:
    """Return ``(title, value)`` pairs for the figures of a workout overview."""

    totals = get_field(overview, "totals", {})
    averages = get_field(overview, "averages", {})
    return [
        ("Workouts", str(get_field(totals, "workouts"))),
        ("Exercises", str(get_field(totals, "exercises"))),
        ("Series", str(get_field(totals, "series"))),
        ("Volume (kg)", f"{float(get_field(totals, 'volume')):g}"),
        ("Exercises / workout", str(round(get_field(averages, "exercisesPerWorkout")))),
        ("Series / workout", str(round(get_field(averages, "seriesPerWorkout")))),
        ("Avg. duration", f"{get_field(averages, 'durationMinutes')} min"),
    ]


def describe_personal_record(record: dict) -> tuple[str, str]:
    """Return the exercise name and the record line for one personal record."""

    best = get_field(record, "record", {})
    text = f"{float(get_field(best, 'value')):g} kg"
    reps = get_field(best, "reps")
    if reps:
        text += f" x {reps}"
    day = get_field(best, "date", "")[:10]
    if day:
        text += f" on {day}"
    return get_field(record, "exerciseName", ""), text
