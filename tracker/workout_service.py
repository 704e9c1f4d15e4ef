"""
Client for the ``/workout-executions`` endpoints.

Every workout action the user takes while training goes through
:class:`WorkoutService`.  Responses are converted into :mod:`tracker.models`
objects; nothing is cached here.
"""

import logging
from datetime import date
from typing import Optional

from tracker import MAX_SERIES_COUNT, MIN_SERIES_COUNT
from tracker.api import ApiClient
from tracker.errors import ValidationError
from tracker.models import Exercise, SeriesExecution, WorkoutSession, WorkoutStatus

logger = logging.getLogger(__name__)


class WorkoutService:
    """Workout execution operations backed by the workout API."""

    def __init__(self, api: ApiClient):
        self._api = api

    @staticmethod
    def _path(workout_id: str, *parts: object) -> str:
        suffix = "".join(f"/{p}" for p in parts)
        return f"/workout-executions/{workout_id}{suffix}"

    def start_workout(
        self, muscle_groups: list[str], notes: Optional[str] = None
    ) -> WorkoutSession:
        """
        Start today's workout for ``muscle_groups``.

        Raises:
            ValidationError: If no muscle group is given
            ConflictError: If a workout already exists for today
        """
        if not muscle_groups:
            raise ValidationError("Select at least one muscle group")
        payload: dict = {"muscleGroups": list(muscle_groups)}
        if notes:
            payload["notes"] = notes
        data = self._api.post("/workout-executions/start", json=payload)
        session = WorkoutSession.from_dict(data)
        logger.info(f"Started workout {session.id} for {', '.join(muscle_groups)}")
        return session

    def get_available_exercises(self, workout_id: str) -> list[Exercise]:
        data = self._api.get(self._path(workout_id, "available-exercises"))
        return [Exercise.from_dict(item) for item in data or []]

    def select_exercises(self, workout_id: str, exercise_ids: list[str]) -> None:
        if not exercise_ids:
            raise ValidationError("Select at least one exercise")
        self._api.post(
            self._path(workout_id, "select-exercises"),
            json={"exerciseIds": list(exercise_ids)},
        )

    def define_series_count(
        self, workout_id: str, exercise_execution_id: str, count: int
    ) -> None:
        if not MIN_SERIES_COUNT <= count <= MAX_SERIES_COUNT:
            raise ValidationError(
                f"Series count must be between {MIN_SERIES_COUNT} and {MAX_SERIES_COUNT}"
            )
        self._api.put(
            self._path(workout_id, "exercises", exercise_execution_id, "series-count"),
            json={"plannedSeries": count},
        )

    def register_series(
        self,
        workout_id: str,
        exercise_execution_id: str,
        series_number: int,
        data: dict,
    ) -> SeriesExecution:
        """
        Register one series and return it with its server-assigned id.

        ``data`` holds ``weight``, ``reps`` and optionally ``restTime``,
        ``difficulty`` and ``notes``.
        """
        response = self._api.post(
            self._path(
                workout_id, "exercises", exercise_execution_id, "series", series_number
            ),
            json=data,
        )
        series = SeriesExecution.from_dict(response)
        if not series.exercise_execution_id:
            series.exercise_execution_id = exercise_execution_id
        return series

    def complete_exercise(self, workout_id: str, exercise_execution_id: str) -> None:
        self._api.put(
            self._path(workout_id, "exercises", exercise_execution_id, "complete")
        )

    def finish_workout(self, workout_id: str, notes: Optional[str] = None) -> None:
        self._api.post(self._path(workout_id, "finish"), json={"notes": notes})
        logger.info(f"Finished workout {workout_id}")

    def get_workout_details(self, workout_id: str) -> WorkoutSession:
        return WorkoutSession.from_dict(self._api.get(self._path(workout_id)))

    def list_user_workouts(self) -> list[WorkoutSession]:
        data = self._api.get("/workout-executions")
        return [WorkoutSession.from_dict(item) for item in data or []]

    def delete_workout(self, workout_id: str) -> None:
        self._api.delete(self._path(workout_id))
        logger.info(f"Deleted workout {workout_id}")

    def get_active_workout(self, today: Optional[date] = None) -> Optional[WorkoutSession]:
        """Return today's in-progress workout, if any."""
        today = today or date.today()
        for workout in self.list_user_workouts():
            if workout.status is WorkoutStatus.IN_PROGRESS and workout.is_on(today):
                return workout
        return None

    def get_today_workout(self, today: Optional[date] = None) -> Optional[WorkoutSession]:
        """Return any workout dated today regardless of status."""
        today = today or date.today()
        for workout in self.list_user_workouts():
            if workout.is_on(today):
                return workout
        return None
