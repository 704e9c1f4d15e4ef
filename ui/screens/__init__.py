"""UI screen modules for the workout tracker."""

from .session import (
    ExecuteWorkoutScreen,
    ExerciseSelectionScreen,
    StartWorkoutScreen,
)
from .general import (
    DashboardScreen,
    EditExerciseScreen,
    ExerciseLibraryScreen,
    LoginScreen,
    ReportsScreen,
    SettingsScreen,
    WorkoutDetailsScreen,
    WorkoutHistoryScreen,
)

__all__ = [
    "DashboardScreen",
    "EditExerciseScreen",
    "ExecuteWorkoutScreen",
    "ExerciseLibraryScreen",
    "ExerciseSelectionScreen",
    "LoginScreen",
    "ReportsScreen",
    "SettingsScreen",
    "StartWorkoutScreen",
    "WorkoutDetailsScreen",
    "WorkoutHistoryScreen",
]
