"""Home screen with the workout summary cards and recent workouts."""

from __future__ import annotations

from kivy.properties import BooleanProperty, NumericProperty, ObjectProperty, StringProperty
from kivymd.app import MDApp
from kivymd.uix.list import TwoLineListItem
from kivymd.uix.screen import MDScreen

from tracker.history import STATUS_LABELS, dashboard_stats
from ui.dialogs import confirm, run_request

class DashboardScreen(MDScreen):
    """Shows totals, the current streak and lets the user start or resume."""

    greeting = StringProperty("")
    total_workouts = NumericProperty(0)
    weekly_workouts = NumericProperty(0)
    monthly_workouts = NumericProperty(0)
    current_streak = NumericProperty(0)
    total_exercises = NumericProperty(0)
    has_active_workout = BooleanProperty(False)
    recent_list = ObjectProperty(None)

    _active_workout = None

    def on_pre_enter(self, *args):
        app = MDApp.get_running_app()
        user = app.services.credentials.user
        self.greeting = f"Hello, {user.name}" if user else ""
        run_request(self._load, self._show, text="Loading workouts...")
        return super().on_pre_enter(*args)

    def _load(self):
        services = MDApp.get_running_app().services
        return services.workouts.list_user_workouts(), services.exercises.get_all()

    def _show(self, result) -> None:
        workouts, exercises = result
        stats = dashboard_stats(workouts)
        self.total_workouts = stats.total_workouts
        self.weekly_workouts = stats.weekly_workouts
        self.monthly_workouts = stats.monthly_workouts
        self.current_streak = stats.current_streak
        self.total_exercises = len(exercises)
        self._active_workout = stats.active_workout
        self.has_active_workout = stats.active_workout is not None

        if not self.recent_list:
            return
        self.recent_list.clear_widgets()
        for workout in workouts[:5]:
            day = workout.date.isoformat() if workout.date else ""
            self.recent_list.add_widget(
                TwoLineListItem(
                    text=f"{workout.day_of_week} {day}".strip(),
                    secondary_text=(
                        f"{', '.join(workout.muscle_groups)} - "
                        f"{STATUS_LABELS.get(workout.status.value, workout.status.value)}"
                    ),
                )
            )

    def start_workout(self) -> None:
        MDApp.get_running_app().go_to("start_workout")

    def continue_workout(self) -> None:
        if self._active_workout:
            MDApp.get_running_app().resume_workout(self._active_workout.id)

    def confirm_logout(self) -> None:
        confirm(
            "Log out?",
            "You will need to log in again to track workouts.",
            MDApp.get_running_app().logout,
        )

    def open_settings(self) -> None:
        app = MDApp.get_running_app()
        app.root.get_screen("settings").return_to = "dashboard"
        app.go_to("settings")
