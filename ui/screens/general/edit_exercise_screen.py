"""Screen for creating a catalog exercise or editing an existing one."""

from __future__ import annotations

from kivy.properties import BooleanProperty, ListProperty, ObjectProperty, StringProperty
from kivymd.app import MDApp
from kivymd.toast import toast
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.button import MDRaisedButton
from kivymd.uix.dialog import MDDialog
from kivymd.uix.label import MDLabel
from kivymd.uix.selectioncontrol import MDCheckbox
from kivymd.uix.screen import MDScreen

from tracker.exercises import EQUIPMENT_OPTIONS, MUSCLE_GROUPS, validate_exercise
from tracker.models import Exercise
from ui.dialogs import confirm, run_request

NO_EQUIPMENT = "No equipment"


class EditExerciseScreen(MDScreen):
    """Edit the name, muscle groups, equipment and instructions of an exercise.

    An empty ``exercise_id`` creates a new exercise on save.
    """

    exercise_id = StringProperty("")
    previous_screen = StringProperty("exercise_library")
    selected_groups = ListProperty([])
    equipment_options = ListProperty([NO_EQUIPMENT, *EQUIPMENT_OPTIONS])
    group_list = ObjectProperty(None)
    save_enabled = BooleanProperty(False)
    error_text = StringProperty("")
    is_new = BooleanProperty(True)

    _loading = False

    def on_exercise_id(self, _instance, value: str) -> None:
        self.is_new = not value

    def on_pre_enter(self, *args):
        self.error_text = ""
        self.save_enabled = False
        if self.is_new:
            self._fill(Exercise(id="", name=""))
        else:
            exercises = MDApp.get_running_app().services.exercises
            exercise_id = self.exercise_id
            run_request(
                lambda: exercises.get_by_id(exercise_id), self._fill, text="Loading exercise..."
            )
        return super().on_pre_enter(*args)

    def _fill(self, exercise: Exercise) -> None:
        # setting the fields fires their change handlers
        self._loading = True
        self.ids.name_field.text = exercise.name
        self.ids.name_field.error = False
        self.ids.instructions_field.text = exercise.instructions or ""
        self.ids.equipment_spinner.text = exercise.equipment or NO_EQUIPMENT
        self.selected_groups = list(exercise.muscle_groups)
        self._populate_groups()
        self._loading = False
        self.save_enabled = False

    def _populate_groups(self) -> None:
        if not self.group_list:
            return
        self.group_list.clear_widgets()
        for key, label in MUSCLE_GROUPS.items():
            row = MDBoxLayout(orientation="horizontal", size_hint_y=None, height="40dp")
            checkbox = MDCheckbox(
                size_hint_x=None, width="48dp", active=key in self.selected_groups
            )
            checkbox.bind(active=lambda _cb, value, k=key: self.toggle_group(k, value))
            row.add_widget(checkbox)
            row.add_widget(MDLabel(text=label))
            self.group_list.add_widget(row)

    def toggle_group(self, key: str, active: bool) -> None:
        if active and key not in self.selected_groups:
            self.selected_groups.append(key)
        elif not active and key in self.selected_groups:
            self.selected_groups.remove(key)
        self.mark_changed()

    def mark_changed(self, *args) -> None:
        if not self._loading:
            self.save_enabled = True
            self.error_text = ""

    def _form(self) -> dict:
        equipment = self.ids.equipment_spinner.text
        return {
            "name": self.ids.name_field.text.strip(),
            "muscle_groups": list(self.selected_groups),
            "equipment": None if equipment == NO_EQUIPMENT else equipment,
            "instructions": self.ids.instructions_field.text.strip() or None,
        }

    def save_exercise(self) -> None:
        form = self._form()
        errors = validate_exercise(form["name"], form["muscle_groups"])
        if errors:
            self.ids.name_field.error = any("Name" in e for e in errors)
            self.error_text = "\n".join(errors)
            return

        exercises = MDApp.get_running_app().services.exercises
        exercise_id = self.exercise_id

        def action():
            if not exercise_id:
                return exercises.create(Exercise(id="", **form))
            return exercises.update(exercise_id, **form)

        run_request(action, self._saved, text="Saving exercise...")

    def _saved(self, exercise: Exercise) -> None:
        toast(f"{exercise.name} saved")
        self.save_enabled = False
        self.go_back()

    def confirm_delete(self) -> None:
        if self.is_new:
            return
        exercises = MDApp.get_running_app().services.exercises
        exercise_id = self.exercise_id
        name = self.ids.name_field.text
        confirm(
            "Delete exercise?",
            f"Delete {name} from your catalog?",
            lambda: run_request(
                lambda: exercises.delete(exercise_id),
                self._deleted,
                text="Deleting...",
            ),
            confirm_text="Delete",
            cancel_text="Keep",
        )

    def _deleted(self, _result) -> None:
        toast("Exercise deleted")
        self.save_enabled = False
        self.go_back()

    def go_back(self) -> None:
        if self.save_enabled:
            dialog = None

            def discard(*args):
                if dialog:
                    dialog.dismiss()
                self.save_enabled = False
                MDApp.get_running_app().go_to(self.previous_screen)

            dialog = MDDialog(
                title="Discard Changes?",
                text="You have unsaved changes. Discard them?",
                buttons=[
                    MDRaisedButton(text="Cancel", on_release=lambda *a: dialog.dismiss()),
                    MDRaisedButton(text="Discard", on_release=discard),
                ],
            )
            dialog.open()
        else:
            MDApp.get_running_app().go_to(self.previous_screen)
