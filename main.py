import logging
import os
import sys
from pathlib import Path

from kivy.clock import Clock
from kivy.core.window import Window
from kivy.lang import Builder
from kivymd.app import MDApp
from kivymd.toast import toast

from tracker.execution import Executing, Finished, Selecting, WorkoutController
from tracker.rest_timer import RestTimer
from tracker.services import create_services
from ui.dialogs import run_request

# Register the screen classes referenced from main.kv
from ui.screens import (  # noqa: F401
    DashboardScreen,
    EditExerciseScreen,
    ExecuteWorkoutScreen,
    ExerciseLibraryScreen,
    ExerciseSelectionScreen,
    LoginScreen,
    ReportsScreen,
    SettingsScreen,
    StartWorkoutScreen,
    WorkoutDetailsScreen,
    WorkoutHistoryScreen,
)

logger = logging.getLogger(__name__)


if os.name == "nt" or sys.platform.startswith("win"):
    Window.size = (280, 280 * (20 / 9))


class WorkoutTrackerApp(MDApp):
    services = None
    controller: WorkoutController | None = None

    def build(self):
        self.services = create_services()
        return Builder.load_file(str(Path(__file__).with_name("main.kv")))

    def on_start(self):
        if self.services.credentials.is_authenticated:
            self.go_to("dashboard")
        else:
            self.go_to("login")

    def on_stop(self):
        if self.controller:
            self.controller.rest_timer.clear()
        if self.services:
            self.services.close()

    def go_to(self, name: str) -> None:
        self.root.current = name

    def new_controller(self) -> WorkoutController:
        """Replace the current controller with a fresh one in planning state."""

        if self.controller:
            self.controller.rest_timer.clear()
        self.controller = WorkoutController(
            self.services.workouts, RestTimer(scheduler=Clock)
        )
        return self.controller

    def resume_workout(self, workout_id: str) -> None:
        controller = self.new_controller()
        run_request(
            lambda: controller.resume(workout_id),
            lambda _state: self.show_controller_state(),
            text="Loading workout...",
        )

    def show_controller_state(self) -> None:
        """Switch to the screen matching the controller's state."""

        state = self.controller.state if self.controller else None
        if isinstance(state, Selecting):
            self.go_to("select_exercises")
        elif isinstance(state, Executing):
            screen = self.root.get_screen("execute")
            if self.root.current == "execute":
                screen.refresh()
            else:
                self.go_to("execute")
        elif isinstance(state, Finished):
            self.controller = None
            self.go_to("dashboard")
        else:
            self.go_to("start_workout")

    def handle_auth_failure(self) -> None:
        toast("Your session expired, please log in again")
        self.logout()

    def logout(self) -> None:
        logger.info("Logging out")
        if self.controller:
            self.controller.rest_timer.clear()
        self.services.auth.logout()
        self.controller = None
        self.go_to("login")

    def reload_services(self) -> None:
        """Rebuild the API client after the settings changed."""

        credentials = self.services.credentials
        self.services.close()
        self.services = create_services(credentials=credentials)
        if self.controller:
            self.controller.service = self.services.workouts


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    WorkoutTrackerApp().run()
