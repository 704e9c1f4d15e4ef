import copy
from datetime import date
from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from tracker.errors import ConflictError
from tracker.models import (
    Exercise,
    ExerciseExecution,
    SeriesExecution,
    WorkoutSession,
    WorkoutStatus,
)

TODAY = date(2025, 3, 14)


def make_exercises() -> list[Exercise]:
    return [
        Exercise(id="e1", name="Bench Press", muscle_groups=["chest", "triceps"], equipment="Barbell"),
        Exercise(id="e2", name="Incline Dumbbell Press", muscle_groups=["chest", "shoulders"]),
        Exercise(id="e3", name="Squat", muscle_groups=["legs", "glutes"], equipment="Barbell"),
        Exercise(id="e4", name="Leg Press", muscle_groups=["legs"], equipment="Machine"),
        Exercise(id="e5", name="Pull Up", muscle_groups=["back", "biceps"]),
    ]


class FakeScheduler:
    """Stand-in for ``kivy.clock.Clock`` recording scheduled intervals."""

    class Event:
        def __init__(self, callback, interval):
            self.callback = callback
            self.interval = interval
            self.cancelled = False

        def cancel(self):
            self.cancelled = True

    def __init__(self):
        self.events = []

    def schedule_interval(self, callback, interval):
        event = self.Event(callback, interval)
        self.events.append(event)
        return event

    @property
    def active(self):
        return [e for e in self.events if not e.cancelled]


class FakeWorkoutService:
    """In-memory workout API with the :class:`WorkoutService` interface.

    Every call is appended to ``calls``.  Put an exception in ``fail`` under a
    method name to make the next call to that method raise it.
    """

    def __init__(self, exercises=None, today=TODAY):
        self.catalog = list(exercises if exercises is not None else make_exercises())
        self.today = today
        self.workouts: dict[str, WorkoutSession] = {}
        self.calls: list[tuple] = []
        self.fail: dict[str, Exception] = {}
        self.hook = None
        self._next_id = 1

    def _call(self, name, *args):
        self.calls.append((name, *args))
        if self.hook:
            self.hook(name)
        error = self.fail.pop(name, None)
        if error is not None:
            raise error

    def call_names(self):
        return [c[0] for c in self.calls]

    def add_workout(self, session: WorkoutSession) -> WorkoutSession:
        self.workouts[session.id] = session
        return session

    def start_workout(self, muscle_groups, notes=None):
        self._call("start_workout", muscle_groups, notes)
        if any(w.is_on(self.today) for w in self.workouts.values()):
            raise ConflictError("Workout already exists for today", 409)
        workout_id = f"w{self._next_id}"
        self._next_id += 1
        session = WorkoutSession(
            id=workout_id,
            muscle_groups=list(muscle_groups),
            date=self.today,
            day_of_week="Friday",
            notes=notes,
        )
        self.workouts[workout_id] = session
        return copy.deepcopy(session)

    def get_available_exercises(self, workout_id):
        self._call("get_available_exercises", workout_id)
        return list(self.catalog)

    def select_exercises(self, workout_id, exercise_ids):
        self._call("select_exercises", workout_id, exercise_ids)
        by_id = {ex.id: ex for ex in self.catalog}
        self.workouts[workout_id].exercise_executions = [
            ExerciseExecution(
                id=f"x{order}",
                exercise_id=eid,
                exercise_name=by_id[eid].name,
                order=order,
                workout_execution_id=workout_id,
                exercise=by_id[eid],
            )
            for order, eid in enumerate(exercise_ids, start=1)
        ]

    def _execution(self, workout_id, exercise_execution_id):
        for ex in self.workouts[workout_id].exercise_executions:
            if ex.id == exercise_execution_id:
                return ex
        raise KeyError(exercise_execution_id)

    def define_series_count(self, workout_id, exercise_execution_id, count):
        self._call("define_series_count", workout_id, exercise_execution_id, count)
        self._execution(workout_id, exercise_execution_id).planned_series = count

    def register_series(self, workout_id, exercise_execution_id, series_number, data):
        self._call("register_series", workout_id, exercise_execution_id, series_number, data)
        series = SeriesExecution(
            series_number=series_number,
            exercise_execution_id=exercise_execution_id,
            id=f"s-{exercise_execution_id}-{series_number}",
            weight=data["weight"],
            reps=data["reps"],
            rest_time=data.get("restTime", 90),
            difficulty=data.get("difficulty"),
            notes=data.get("notes"),
        )
        self._execution(workout_id, exercise_execution_id).series.append(copy.deepcopy(series))
        return series

    def complete_exercise(self, workout_id, exercise_execution_id):
        self._call("complete_exercise", workout_id, exercise_execution_id)
        self._execution(workout_id, exercise_execution_id).is_completed = True

    def finish_workout(self, workout_id, notes=None):
        self._call("finish_workout", workout_id, notes)
        workout = self.workouts[workout_id]
        workout.status = WorkoutStatus.COMPLETED
        workout.notes = notes

    def get_workout_details(self, workout_id):
        self._call("get_workout_details", workout_id)
        return copy.deepcopy(self.workouts[workout_id])

    def list_user_workouts(self):
        self._call("list_user_workouts")
        return [copy.deepcopy(w) for w in self.workouts.values()]

    def delete_workout(self, workout_id):
        self._call("delete_workout", workout_id)
        del self.workouts[workout_id]

    def get_active_workout(self, today=None):
        self._call("get_active_workout", today)
        today = today or self.today
        for workout in self.workouts.values():
            if workout.is_in_progress and workout.is_on(today):
                return copy.deepcopy(workout)
        return None


@pytest.fixture
def sample_exercises() -> list[Exercise]:
    return make_exercises()


@pytest.fixture
def fake_service(sample_exercises) -> FakeWorkoutService:
    return FakeWorkoutService(sample_exercises)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()
