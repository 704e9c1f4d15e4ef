"""Screen showing one past workout with its exercises and series."""

from __future__ import annotations

from kivy.properties import ObjectProperty, StringProperty
from kivymd.app import MDApp
from kivymd.toast import toast
from kivymd.uix.list import OneLineListItem, TwoLineListItem
from kivymd.uix.screen import MDScreen

from tracker.api import get_field
from tracker.exercises import to_labels
from tracker.history import describe_exercise_execution, describe_workout_details
from ui.dialogs import confirm, run_request


class WorkoutDetailsScreen(MDScreen):
    """Exercises and series of ``workout_id`` with duplicate and delete actions."""

    workout_id = StringProperty("")
    return_to = StringProperty("history")
    workout_title = StringProperty("")
    summary = StringProperty("")
    notes = StringProperty("")
    details_list = ObjectProperty(None)

    def on_pre_enter(self, *args):
        self.workout_title = ""
        self.summary = ""
        self.notes = ""
        if self.details_list:
            self.details_list.clear_widgets()
        self.populate()
        return super().on_pre_enter(*args)

    def populate(self) -> None:
        history = MDApp.get_running_app().services.history
        workout_id = self.workout_id
        run_request(
            lambda: history.get_workout_details(workout_id),
            self._show,
            text="Loading workout...",
        )

    def _show(self, details) -> None:
        groups = ", ".join(to_labels(get_field(details, "muscleGroups", [])))
        day = get_field(details, "date", "")[:10]
        self.workout_title = f"{get_field(details, 'dayOfWeek', '')} {day}".strip()
        self.summary = f"{groups}\n{describe_workout_details(details)}"
        self.notes = get_field(details, "notes", "")

        if not self.details_list:
            return
        self.details_list.clear_widgets()
        executions = sorted(
            get_field(details, "exerciseExecutions", []),
            key=lambda e: get_field(e, "order"),
        )
        for execution in executions:
            name, progress, series_lines = describe_exercise_execution(execution)
            self.details_list.add_widget(TwoLineListItem(text=name, secondary_text=progress))
            for line in series_lines:
                self.details_list.add_widget(OneLineListItem(text=line))

    def duplicate(self) -> None:
        history = MDApp.get_running_app().services.history
        workout_id = self.workout_id
        run_request(
            lambda: history.duplicate_workout(workout_id),
            self._duplicated,
            text="Copying workout...",
        )

    def _duplicated(self, result) -> None:
        new_id = get_field(result, "id", "")
        if not new_id:
            toast("The workout could not be copied")
            return
        toast("Workout copied to today")
        MDApp.get_running_app().resume_workout(new_id)

    def confirm_delete(self) -> None:
        history = MDApp.get_running_app().services.history
        workout_id = self.workout_id
        confirm(
            "Delete workout?",
            "The workout and its series will be removed from your history.",
            lambda: run_request(
                lambda: history.delete_workout(workout_id),
                self._deleted,
                text="Deleting...",
            ),
            confirm_text="Delete",
            cancel_text="Keep",
        )

    def _deleted(self, _result) -> None:
        toast("Workout deleted")
        self.go_back(keep_page=False)

    def go_back(self, keep_page: bool = True) -> None:
        app = MDApp.get_running_app()
        if self.return_to == "history":
            app.root.get_screen("history").keep_page = keep_page
        app.go_to(self.return_to)
