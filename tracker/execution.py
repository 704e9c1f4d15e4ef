"""Drive a single workout from muscle-group choice to completion.

:class:`WorkoutController` owns the local copy of one :class:`WorkoutSession`
and moves it through explicit states::

    Planning -> Selecting -> Executing(cursor, phase) -> Finished

While executing, the current exercise is either waiting for its series to be
planned (:class:`SeriesPlanning`) or collecting series one at a time
(:class:`SeriesRegistration`).  Each action checks the current state first and
raises :class:`InvalidTransition` when it does not apply.

Local changes are applied only after the workout API confirms them, so a
failed request leaves the controller exactly as it was before the call.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterator, Union

from tracker import DEFAULT_SERIES_COUNT, MAX_SERIES_COUNT, MIN_SERIES_COUNT
from tracker.errors import (
    ConflictError,
    InvalidTransition,
    OperationInProgress,
    ValidationError,
)
from tracker.exercise_filter import ExerciseSelection
from tracker.models import ExerciseExecution, SeriesExecution, WorkoutSession
from tracker.rest_timer import RestTimer

logger = logging.getLogger(__name__)

FINISH_NOTE = "Workout completed successfully!"


@dataclass
class Planning:
    """No workout yet; the user is choosing muscle groups."""


@dataclass
class Selecting:
    session: WorkoutSession
    selection: ExerciseSelection = field(default_factory=ExerciseSelection)


@dataclass
class SeriesPlanning:
    series_count: int = DEFAULT_SERIES_COUNT


@dataclass
class SeriesRegistration:
    """Series are planned; the lowest unregistered one is current."""


Phase = Union[SeriesPlanning, SeriesRegistration]


@dataclass
class Executing:
    session: WorkoutSession
    cursor: int
    phase: Phase


@dataclass
class Finished:
    session: WorkoutSession


State = Union[Planning, Selecting, Executing, Finished]


@dataclass
class StartOutcome:
    """Result of :meth:`WorkoutController.start_workout`.

    When ``conflict`` is true no workout was created; ``session`` is today's
    existing workout (if one could be found) and may be resumed.
    """

    session: WorkoutSession | None
    conflict: bool = False


def _phase_for(exercise: ExerciseExecution) -> Phase:
    if exercise.is_planned:
        return SeriesRegistration()
    return SeriesPlanning()


def _validate_series_count(count: int) -> None:
    if not isinstance(count, int) or not MIN_SERIES_COUNT <= count <= MAX_SERIES_COUNT:
        raise ValidationError(
            f"Series count must be between {MIN_SERIES_COUNT} and {MAX_SERIES_COUNT}"
        )


_EDITABLE_SERIES_FIELDS = {"weight", "reps", "rest_time", "difficulty", "notes"}


def _editable(values: dict) -> dict:
    # ids and series numbers only ever come from the API
    unknown = set(values) - _EDITABLE_SERIES_FIELDS
    if unknown:
        raise TypeError(f"Unknown series fields: {', '.join(sorted(unknown))}")
    return values


def _validate_series_values(series: SeriesExecution, *, for_submit: bool) -> None:
    if series.weight < 0 or series.reps < 0:
        raise ValidationError("Weight and reps cannot be negative")
    if for_submit and (series.weight <= 0 or series.reps <= 0):
        raise ValidationError("Enter a valid weight and number of reps")
    if series.rest_time is not None and series.rest_time < 0:
        raise ValidationError("Rest time cannot be negative")
    if series.difficulty is not None and not 1 <= series.difficulty <= 5:
        raise ValidationError("Difficulty must be between 1 and 5")


class WorkoutController:
    """State machine for one workout, backed by a :class:`WorkoutService`."""

    def __init__(self, service, rest_timer: RestTimer | None = None) -> None:
        self.service = service
        self.rest_timer = rest_timer or RestTimer()
        self.state: State = Planning()
        self._busy = False

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _request(self) -> Iterator[None]:
        """Mark a service call as pending for the duration of the block."""
        if self._busy:
            raise OperationInProgress("Please wait for the previous action to finish")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    def _require(self, state_type: type, phase_type: type | None = None):
        if not isinstance(self.state, state_type):
            raise InvalidTransition(
                f"Cannot do this while {type(self.state).__name__.lower()}"
            )
        if phase_type is not None and not isinstance(self.state.phase, phase_type):
            raise InvalidTransition(
                f"Cannot do this during {type(self.state.phase).__name__}"
            )
        return self.state

    def _enter(self, session: WorkoutSession) -> None:
        """Pick the state matching a freshly loaded ``session``."""

        if not session.is_in_progress:
            self.state = Finished(session)
        elif not session.exercise_executions:
            self.state = Selecting(session)
        else:
            for exercise in session.exercise_executions:
                exercise.fill_placeholders()
            cursor = next(
                (
                    idx
                    for idx, ex in enumerate(session.exercise_executions)
                    if not ex.is_completed
                ),
                len(session.exercise_executions) - 1,
            )
            exercise = session.exercise_executions[cursor]
            self.state = Executing(session, cursor, _phase_for(exercise))
        logger.info(f"Workout {session.id} is now {type(self.state).__name__}")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def is_finished(self) -> bool:
        return isinstance(self.state, Finished)

    @property
    def session(self) -> WorkoutSession | None:
        return getattr(self.state, "session", None)

    @property
    def selection(self) -> ExerciseSelection | None:
        if isinstance(self.state, Selecting):
            return self.state.selection
        return None

    @property
    def current_exercise(self) -> ExerciseExecution | None:
        if not isinstance(self.state, Executing):
            return None
        return self.state.session.exercise_executions[self.state.cursor]

    @property
    def series_count(self) -> int | None:
        """Value of the series count selector while planning."""
        if isinstance(self.state, Executing) and isinstance(
            self.state.phase, SeriesPlanning
        ):
            return self.state.phase.series_count
        return None

    @property
    def current_series(self) -> SeriesExecution | None:
        """Lowest-numbered series of the current exercise not yet registered."""
        exercise = self.current_exercise
        if exercise is None or not isinstance(self.state.phase, SeriesRegistration):
            return None
        pending = [s for s in exercise.series if not s.is_registered]
        return min(pending, key=lambda s: s.series_number) if pending else None

    @property
    def current_series_number(self) -> int | None:
        series = self.current_series
        return series.series_number if series else None

    @property
    def completed_series_count(self) -> int:
        exercise = self.current_exercise
        return exercise.registered_count if exercise else 0

    @property
    def can_complete_exercise(self) -> bool:
        exercise = self.current_exercise
        return (
            exercise is not None
            and exercise.planned_series is not None
            and exercise.registered_count == exercise.planned_series
        )

    @property
    def is_last_exercise(self) -> bool:
        if not isinstance(self.state, Executing):
            return False
        return self.state.cursor == len(self.state.session.exercise_executions) - 1

    @property
    def progress(self) -> float:
        """Fraction of the workout reached, counting the current exercise."""
        if isinstance(self.state, Finished):
            return 1.0
        if not isinstance(self.state, Executing):
            return 0.0
        total = len(self.state.session.exercise_executions) or 1
        return (self.state.cursor + 1) / total

    @property
    def position_label(self) -> str:
        if not isinstance(self.state, Executing):
            return ""
        total = len(self.state.session.exercise_executions)
        return f"{self.state.cursor + 1} of {total}"

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def start_workout(
        self, muscle_groups: list[str], notes: str | None = None, today: date | None = None
    ) -> StartOutcome:
        """Create today's workout, or report the one that already exists.

        A conflict leaves the controller in :class:`Planning`; call
        :meth:`resume` with the returned session id to continue it.
        """

        self._require(Planning)
        if not muscle_groups:
            raise ValidationError("Select at least one muscle group")
        with self._request():
            try:
                session = self.service.start_workout(list(muscle_groups), notes or None)
            except ConflictError:
                logger.info("A workout already exists for today")
                existing = self.service.get_active_workout(today)
                return StartOutcome(existing, conflict=True)
        self.state = Selecting(session)
        logger.info(f"Workout {session.id} started")
        return StartOutcome(session)

    def resume(self, workout_id: str) -> State:
        """Rehydrate ``workout_id`` from the API and continue where it stopped."""

        self._require(Planning)
        with self._request():
            session = self.service.get_workout_details(workout_id)
        self._enter(session)
        return self.state

    def reload(self) -> State:
        """Replace the local copy with the API's view of the current workout."""

        if not isinstance(self.state, (Selecting, Executing)):
            raise InvalidTransition("There is no workout in progress to reload")
        session = self.state.session
        with self._request():
            fresh = self.service.get_workout_details(session.id)
        self.rest_timer.skip()
        self._enter(fresh)
        return self.state

    # ------------------------------------------------------------------
    # Exercise selection
    # ------------------------------------------------------------------

    def load_available_exercises(self) -> ExerciseSelection:
        state = self._require(Selecting)
        with self._request():
            exercises = self.service.get_available_exercises(state.session.id)
        state.selection.set_exercises(exercises)
        return state.selection

    def submit_selection(self) -> State:
        """Persist the chosen exercises and start executing the first one."""

        state = self._require(Selecting)
        selected = list(state.selection.selected)
        if not selected:
            raise ValidationError("Select at least one exercise")
        with self._request():
            self.service.select_exercises(state.session.id, selected)
            session = self.service.get_workout_details(state.session.id)
        self._enter(session)
        return self.state

    # ------------------------------------------------------------------
    # Series planning
    # ------------------------------------------------------------------

    def choose_series_count(self, count: int) -> None:
        state = self._require(Executing, SeriesPlanning)
        _validate_series_count(count)
        state.phase.series_count = count

    def confirm_series_count(self, count: int | None = None) -> list[SeriesExecution]:
        """Persist the planned count and create the series placeholders."""

        state = self._require(Executing, SeriesPlanning)
        count = state.phase.series_count if count is None else count
        _validate_series_count(count)
        exercise = self.current_exercise
        with self._request():
            self.service.define_series_count(state.session.id, exercise.id, count)
        exercise.plan_series(count)
        state.phase = SeriesRegistration()
        logger.info(f"Planned {count} series for {exercise.exercise_name}")
        return exercise.series

    # ------------------------------------------------------------------
    # Series registration
    # ------------------------------------------------------------------

    def update_series(self, series_number: int, **values) -> SeriesExecution:
        """Edit the local values of a series that is not registered yet.

        Accepts ``weight``, ``reps``, ``rest_time``, ``difficulty`` and
        ``notes``.
        """

        self._require(Executing, SeriesRegistration)
        exercise = self.current_exercise
        try:
            series = exercise.get_series(series_number)
        except KeyError:
            raise ValidationError(
                f"Series {series_number} is not planned for {exercise.exercise_name}"
            ) from None
        if series.is_registered:
            raise InvalidTransition(f"Series {series_number} is already registered")
        updated = replace(series, **_editable(values))
        _validate_series_values(updated, for_submit=False)
        exercise.replace_series(updated)
        return updated

    def register_series(self, series_number: int | None = None, **values) -> SeriesExecution:
        """Send the current series to the API and store the registered copy.

        Weight and reps must both be positive; otherwise nothing is sent and
        the placeholder is left untouched.  Only the current series may be
        registered.
        """

        state = self._require(Executing, SeriesRegistration)
        current = self.current_series
        if current is None:
            raise InvalidTransition("All planned series are already registered")
        if series_number is not None and series_number != current.series_number:
            raise ValidationError(
                f"Series {current.series_number} must be registered first"
            )
        candidate = replace(current, **_editable(values))
        _validate_series_values(candidate, for_submit=True)

        exercise = self.current_exercise
        with self._request():
            registered = self.service.register_series(
                state.session.id,
                exercise.id,
                candidate.series_number,
                candidate.to_payload(),
            )
        exercise.replace_series(registered)
        logger.info(
            f"Registered series {registered.series_number}/{exercise.planned_series} "
            f"of {exercise.exercise_name}"
        )

        rest = candidate.rest_time or 0
        if candidate.series_number < exercise.planned_series and rest > 0:
            self.rest_timer.start(rest)
        return registered

    def skip_rest(self) -> None:
        self.rest_timer.skip()

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def complete_exercise(self, notes: str | None = None) -> State:
        """Mark the current exercise done and move on or finish the workout."""

        state = self._require(Executing, SeriesRegistration)
        if not self.can_complete_exercise:
            raise InvalidTransition("Register every planned series first")
        exercise = self.current_exercise
        session = state.session

        if not exercise.is_completed:
            with self._request():
                self.service.complete_exercise(session.id, exercise.id)
            exercise.is_completed = True
            logger.info(f"Completed {exercise.exercise_name}")

        if not self.is_last_exercise:
            self.rest_timer.skip()
            state.cursor += 1
            state.phase = _phase_for(self.current_exercise)
            return self.state

        with self._request():
            self.service.finish_workout(session.id, notes or FINISH_NOTE)
        self.rest_timer.skip()
        session.complete()
        if notes:
            session.notes = notes
        self.state = Finished(session)
        logger.info(f"Workout {session.id} completed")
        return self.state

    def cancel(self) -> State:
        """Delete the workout on the API and stop tracking it."""

        if not isinstance(self.state, (Selecting, Executing)):
            raise InvalidTransition("There is no workout in progress")
        session = self.state.session
        with self._request():
            self.service.delete_workout(session.id)
        self.rest_timer.skip()
        session.cancel()
        self.state = Finished(session)
        logger.info(f"Workout {session.id} cancelled")
        return self.state
