"""In-memory representation of workouts as returned by the workout API.

The API is the system of record.  These objects are a local cache of its
responses: identifiers are only ever copied from response payloads, never
generated here.  Payloads use camelCase keys, which :meth:`from_dict` and the
various ``to_*`` helpers translate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from tracker import DEFAULT_REST_TIME
from tracker.errors import InvalidTransition


def _parse_datetime(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _parse_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # the API sends full timestamps for dates, e.g. 2025-03-14T00:00:00.000Z
    return date.fromisoformat(str(value)[:10])


def _format_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class WorkoutStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self is not WorkoutStatus.IN_PROGRESS


@dataclass
class Exercise:
    """Catalog exercise owned by the user."""

    id: str
    name: str
    muscle_groups: list[str] = field(default_factory=list)
    equipment: str | None = None
    instructions: str | None = None
    user_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            muscle_groups=list(data.get("muscleGroups") or []),
            equipment=data.get("equipment"),
            instructions=data.get("instructions"),
            user_id=data.get("userId"),
        )

    def to_dict(self) -> dict:
        """Return the payload used to create or update the exercise."""
        data: dict[str, Any] = {
            "name": self.name,
            "muscleGroups": list(self.muscle_groups),
        }
        if self.equipment:
            data["equipment"] = self.equipment
        if self.instructions:
            data["instructions"] = self.instructions
        return data


@dataclass
class SeriesExecution:
    """One logged set.

    A series without an ``id`` is a local placeholder that still waits for
    the user's input; it becomes registered once the API returns it.
    """

    series_number: int
    exercise_execution_id: str = ""
    id: str = ""
    weight: float = 0.0
    reps: int = 0
    rest_time: int = DEFAULT_REST_TIME
    difficulty: int | None = None
    notes: str | None = None
    created_at: datetime | None = None

    @property
    def is_registered(self) -> bool:
        return bool(self.id)

    @property
    def volume(self) -> float:
        return self.weight * self.reps

    @classmethod
    def placeholder(
        cls, exercise_execution_id: str, series_number: int
    ) -> "SeriesExecution":
        return cls(
            series_number=series_number,
            exercise_execution_id=exercise_execution_id,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "SeriesExecution":
        rest = data.get("restTime")
        return cls(
            series_number=int(data["seriesNumber"]),
            exercise_execution_id=str(data.get("exerciseExecutionId", "")),
            id=str(data.get("id") or ""),
            weight=float(data.get("weight") or 0),
            reps=int(data.get("reps") or 0),
            rest_time=DEFAULT_REST_TIME if rest is None else int(rest),
            difficulty=data.get("difficulty"),
            notes=data.get("notes"),
            created_at=_parse_datetime(data.get("createdAt")),
        )

    def to_payload(self) -> dict:
        """Return the body sent when registering this series."""
        data: dict[str, Any] = {
            "weight": self.weight,
            "reps": self.reps,
            "restTime": self.rest_time,
        }
        if self.difficulty is not None:
            data["difficulty"] = self.difficulty
        if self.notes:
            data["notes"] = self.notes
        return data


@dataclass
class ExerciseExecution:
    """A catalog exercise attached to a workout session."""

    id: str
    exercise_id: str
    exercise_name: str
    order: int
    workout_execution_id: str = ""
    # ``None`` until the user plans the series for this exercise
    planned_series: int | None = None
    is_completed: bool = False
    exercise: Exercise | None = None
    series: list[SeriesExecution] = field(default_factory=list)

    @property
    def muscle_groups(self) -> list[str]:
        return self.exercise.muscle_groups if self.exercise else []

    @property
    def equipment(self) -> str | None:
        return self.exercise.equipment if self.exercise else None

    @property
    def is_planned(self) -> bool:
        return self.planned_series is not None

    @property
    def registered_series(self) -> list[SeriesExecution]:
        return [s for s in self.series if s.is_registered]

    @property
    def registered_count(self) -> int:
        return len(self.registered_series)

    def plan_series(self, count: int) -> None:
        """Fix the planned series count and create the placeholders."""

        if self.planned_series is not None and self.planned_series != count:
            raise InvalidTransition(
                f"{self.exercise_name} already has {self.planned_series} series planned"
            )
        self.planned_series = count
        self.fill_placeholders()

    def fill_placeholders(self) -> None:
        """Ensure a series entry exists for every number in ``1..planned``."""

        if self.planned_series is None:
            return
        existing = {s.series_number: s for s in self.series}
        self.series = [
            existing.get(number) or SeriesExecution.placeholder(self.id, number)
            for number in range(1, self.planned_series + 1)
        ]

    def get_series(self, series_number: int) -> SeriesExecution:
        for series in self.series:
            if series.series_number == series_number:
                return series
        raise KeyError(f"Series {series_number} is not planned for {self.exercise_name}")

    def replace_series(self, registered: SeriesExecution) -> None:
        """Swap the placeholder for ``registered`` as returned by the API."""

        for idx, series in enumerate(self.series):
            if series.series_number == registered.series_number:
                self.series[idx] = registered
                return
        raise KeyError(
            f"Series {registered.series_number} is not planned for {self.exercise_name}"
        )

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseExecution":
        exercise_data = data.get("exercise")
        planned = data.get("plannedSeries") or None
        series = [SeriesExecution.from_dict(s) for s in data.get("seriesExecutions") or []]
        series.sort(key=lambda s: s.series_number)
        return cls(
            id=str(data["id"]),
            exercise_id=str(data.get("exerciseId", "")),
            exercise_name=data.get("exerciseName")
            or (exercise_data or {}).get("name", ""),
            order=int(data.get("order") or 0),
            workout_execution_id=str(data.get("workoutExecutionId", "")),
            planned_series=planned,
            is_completed=bool(data.get("isCompleted", False)),
            exercise=Exercise.from_dict(exercise_data) if exercise_data else None,
            series=series,
        )


@dataclass
class WorkoutSession:
    """One workout execution for one calendar day."""

    id: str
    muscle_groups: list[str]
    status: WorkoutStatus = WorkoutStatus.IN_PROGRESS
    date: date | None = None
    day_of_week: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    notes: str | None = None
    user_id: str | None = None
    exercise_executions: list[ExerciseExecution] = field(default_factory=list)

    @property
    def is_in_progress(self) -> bool:
        return self.status is WorkoutStatus.IN_PROGRESS

    def _close(self, status: WorkoutStatus, end_time: datetime | None) -> None:
        if self.status.is_terminal:
            raise InvalidTransition(
                f"Workout {self.id} is already {self.status.value}"
            )
        self.status = status
        self.end_time = end_time or datetime.now()

    def complete(self, end_time: datetime | None = None) -> None:
        self._close(WorkoutStatus.COMPLETED, end_time)

    def cancel(self, end_time: datetime | None = None) -> None:
        self._close(WorkoutStatus.CANCELLED, end_time)

    def is_on(self, day: date) -> bool:
        return self.date == day

    def duration_minutes(self) -> int | None:
        if not self.start_time or not self.end_time:
            return None
        return int((self.end_time - self.start_time).total_seconds() // 60)

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutSession":
        executions = [
            ExerciseExecution.from_dict(e) for e in data.get("exerciseExecutions") or []
        ]
        executions.sort(key=lambda e: e.order)
        return cls(
            id=str(data["id"]),
            muscle_groups=list(data.get("muscleGroups") or []),
            status=WorkoutStatus(data.get("status", WorkoutStatus.IN_PROGRESS.value)),
            date=_parse_date(data.get("date")),
            day_of_week=data.get("dayOfWeek", ""),
            start_time=_parse_datetime(data.get("startTime")),
            end_time=_parse_datetime(data.get("endTime")),
            notes=data.get("notes"),
            user_id=data.get("userId"),
            exercise_executions=executions,
        )

    def to_dict(self) -> dict:
        """Return a JSON-serialisable summary of the session."""

        return {
            "id": self.id,
            "date": self.date.isoformat() if self.date else None,
            "dayOfWeek": self.day_of_week,
            "muscleGroups": list(self.muscle_groups),
            "status": self.status.value,
            "startTime": _format_datetime(self.start_time),
            "endTime": _format_datetime(self.end_time),
            "notes": self.notes,
            "exerciseExecutions": [
                {
                    "id": ex.id,
                    "exerciseName": ex.exercise_name,
                    "order": ex.order,
                    "plannedSeries": ex.planned_series or 0,
                    "isCompleted": ex.is_completed,
                    "seriesExecutions": [
                        {"id": s.id, "seriesNumber": s.series_number, **s.to_payload()}
                        for s in ex.registered_series
                    ],
                }
                for ex in self.exercise_executions
            ],
        }
