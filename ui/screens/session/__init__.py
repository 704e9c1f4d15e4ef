"""Screens used during an active workout session."""

from .execute_workout_screen import ExecuteWorkoutScreen, SeriesRow
from .exercise_selection_screen import ExerciseSelectionScreen
from .start_workout_screen import StartWorkoutScreen

__all__ = [
    "ExecuteWorkoutScreen",
    "ExerciseSelectionScreen",
    "SeriesRow",
    "StartWorkoutScreen",
]
