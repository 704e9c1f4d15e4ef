"""Exercise library screen listing the user's catalog."""

from __future__ import annotations

from kivy.clock import Clock
from kivy.properties import ListProperty, NumericProperty, ObjectProperty, StringProperty
from kivymd.app import MDApp
from kivymd.uix.list import TwoLineListItem
from kivymd.uix.screen import MDScreen

from tracker.exercise_filter import filter_exercises
from tracker.exercises import to_labels
from ui.dialogs import run_request


class ExerciseLibraryScreen(MDScreen):
    """Screen allowing the user to browse, add and edit exercises."""

    previous_screen = StringProperty("dashboard")
    exercise_list = ObjectProperty(None)
    search_text = StringProperty("")
    exercise_count = NumericProperty(0)
    all_exercises = ListProperty([])

    _search_event = None

    def on_pre_enter(self, *args):
        """Reload the catalog each time the screen is shown."""
        exercises = MDApp.get_running_app().services.exercises
        run_request(exercises.get_all, self._loaded, text="Loading exercises...")
        return super().on_pre_enter(*args)

    def _loaded(self, exercises) -> None:
        self.all_exercises = sorted(exercises, key=lambda ex: ex.name.lower())
        self.populate()

    def populate(self) -> None:
        if not self.exercise_list:
            return
        self.exercise_list.clear_widgets()
        shown = filter_exercises(self.all_exercises, self.search_text)
        for exercise in shown:
            details = ", ".join(to_labels(exercise.muscle_groups))
            if exercise.equipment:
                details = f"{details} - {exercise.equipment}"
            self.exercise_list.add_widget(
                TwoLineListItem(
                    text=exercise.name,
                    secondary_text=details,
                    on_release=lambda _, eid=exercise.id: self.open_exercise(eid),
                )
            )
        self.exercise_count = len(shown)

    def update_search(self, text: str) -> None:
        """Update search text with debounce to limit populate frequency."""
        self.search_text = text
        if self._search_event:
            self._search_event.cancel()

        def do_populate(dt):
            self._search_event = None
            self.populate()

        self._search_event = Clock.schedule_once(do_populate, 0.2)

    def open_exercise(self, exercise_id: str) -> None:
        """Navigate to ``EditExerciseScreen`` with ``exercise_id`` loaded."""
        self._edit(exercise_id)

    def new_exercise(self) -> None:
        """Open ``EditExerciseScreen`` to create a new exercise."""
        self._edit("")

    def _edit(self, exercise_id: str) -> None:
        app = MDApp.get_running_app()
        screen = app.root.get_screen("edit_exercise")
        screen.exercise_id = exercise_id
        screen.previous_screen = "exercise_library"
        app.go_to("edit_exercise")

    def go_back(self) -> None:
        MDApp.get_running_app().go_to(self.previous_screen)
