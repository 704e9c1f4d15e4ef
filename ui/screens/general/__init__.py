"""Screens not directly part of the workout session loop."""

from .dashboard_screen import DashboardScreen
from .edit_exercise_screen import EditExerciseScreen
from .exercise_library_screen import ExerciseLibraryScreen
from .login_screen import LoginScreen
from .reports_screen import ReportsScreen
from .settings_screen import SettingsScreen
from .workout_details_screen import WorkoutDetailsScreen
from .workout_history_screen import WorkoutHistoryScreen

__all__ = [
    "DashboardScreen",
    "EditExerciseScreen",
    "ExerciseLibraryScreen",
    "LoginScreen",
    "ReportsScreen",
    "SettingsScreen",
    "WorkoutDetailsScreen",
    "WorkoutHistoryScreen",
]
