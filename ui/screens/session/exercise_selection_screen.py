"""Screen for choosing which exercises make up the current workout."""

from __future__ import annotations

from kivy.clock import Clock
from kivy.properties import ListProperty, NumericProperty, ObjectProperty, StringProperty
from kivymd.app import MDApp
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.label import MDLabel
from kivymd.uix.screen import MDScreen
from kivymd.uix.selectioncontrol import MDCheckbox

from tracker.exercises import MUSCLE_GROUPS
from ui.dialogs import run_request

ALL_GROUPS = "All muscle groups"


class ExerciseSelectionScreen(MDScreen):
    """Filterable catalog with checkboxes and a select-all toggle."""

    exercise_list = ObjectProperty(None)
    workout_info = StringProperty("")
    selected_count = NumericProperty(0)
    filtered_count = NumericProperty(0)
    muscle_group_options = ListProperty([ALL_GROUPS])

    _search_event = None

    @property
    def selection(self):
        return MDApp.get_running_app().controller.selection

    def on_pre_enter(self, *args):
        controller = MDApp.get_running_app().controller
        session = controller.session
        self.workout_info = (
            f"{session.day_of_week} - {', '.join(session.muscle_groups)}" if session else ""
        )
        self.ids.search_field.text = ""
        self.ids.group_spinner.text = ALL_GROUPS
        run_request(controller.load_available_exercises, self._loaded, text="Loading exercises...")
        return super().on_pre_enter(*args)

    def _loaded(self, selection) -> None:
        self.muscle_group_options = [ALL_GROUPS] + [
            MUSCLE_GROUPS.get(g, g) for g in selection.muscle_groups
        ]
        self.populate()

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def on_search_text(self, text: str) -> None:
        """Debounce typing before refiltering."""
        if self._search_event:
            self._search_event.cancel()
        self._search_event = Clock.schedule_once(lambda _dt: self._apply_search(text), 0.3)

    def _apply_search(self, text: str) -> None:
        self._search_event = None
        if self.selection is None:
            return
        self.selection.set_search(text)
        self.populate()

    def on_group_selected(self, label: str) -> None:
        if self.selection is None:
            return
        group = None
        if label != ALL_GROUPS:
            keys = {v: k for k, v in MUSCLE_GROUPS.items()}
            group = keys.get(label, label)
        self.selection.set_muscle_group(group)
        self.populate()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def populate(self) -> None:
        selection = self.selection
        if not self.exercise_list or selection is None:
            return
        self.exercise_list.clear_widgets()
        for exercise in selection.filtered:
            row = MDBoxLayout(orientation="horizontal", size_hint_y=None, height="56dp")
            checkbox = MDCheckbox(
                size_hint_x=None, width="48dp", active=selection.is_selected(exercise.id)
            )
            checkbox.bind(on_release=lambda _cb, eid=exercise.id: self.toggle(eid))
            row.add_widget(checkbox)
            details = ", ".join(MUSCLE_GROUPS.get(g, g) for g in exercise.muscle_groups)
            if exercise.equipment:
                details = f"{details} - {exercise.equipment}"
            row.add_widget(
                MDLabel(text=f"{exercise.name}\n[size=12sp]{details}[/size]", markup=True)
            )
            self.exercise_list.add_widget(row)
        self.selected_count = len(selection.selected)
        self.filtered_count = len(selection.filtered)

    def toggle(self, exercise_id: str) -> None:
        self.selection.toggle(exercise_id)
        self.selected_count = len(self.selection.selected)

    def toggle_all(self) -> None:
        self.selection.toggle_all()
        self.populate()

    def new_exercise(self) -> None:
        app = MDApp.get_running_app()
        screen = app.root.get_screen("edit_exercise")
        screen.exercise_id = ""
        screen.previous_screen = "select_exercises"
        app.go_to("edit_exercise")

    def submit(self) -> None:
        app = MDApp.get_running_app()
        run_request(
            app.controller.submit_selection,
            lambda _state: app.show_controller_state(),
            text="Saving exercises...",
        )
