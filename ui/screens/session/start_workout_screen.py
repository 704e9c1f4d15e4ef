"""Screen where the user picks today's muscle groups and starts a workout."""

from __future__ import annotations

from datetime import date

from kivy.properties import ListProperty, ObjectProperty, StringProperty
from kivymd.app import MDApp
from kivymd.toast import toast
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.label import MDLabel
from kivymd.uix.screen import MDScreen
from kivymd.uix.selectioncontrol import MDCheckbox

from tracker.exercises import MUSCLE_GROUPS
from ui.dialogs import confirm, run_request


class StartWorkoutScreen(MDScreen):
    selected_groups = ListProperty([])
    today_label = StringProperty("")
    group_list = ObjectProperty(None)

    def on_pre_enter(self, *args):
        today = date.today()
        self.today_label = f"{today.strftime('%A')}, {today.isoformat()}"
        self.selected_groups = []
        self.ids.notes_field.text = ""
        self._populate_groups()
        return super().on_pre_enter(*args)

    def _populate_groups(self) -> None:
        if not self.group_list:
            return
        self.group_list.clear_widgets()
        for key, label in MUSCLE_GROUPS.items():
            row = MDBoxLayout(orientation="horizontal", size_hint_y=None, height="40dp")
            checkbox = MDCheckbox(size_hint_x=None, width="48dp")
            checkbox.bind(active=lambda _cb, value, k=key: self.toggle_group(k, value))
            row.add_widget(checkbox)
            row.add_widget(MDLabel(text=label))
            self.group_list.add_widget(row)

    def toggle_group(self, key: str, active: bool) -> None:
        if active and key not in self.selected_groups:
            self.selected_groups.append(key)
        elif not active and key in self.selected_groups:
            self.selected_groups.remove(key)

    def start(self) -> None:
        if not self.selected_groups:
            toast("Select at least one muscle group")
            return
        app = MDApp.get_running_app()
        controller = app.new_controller()
        notes = self.ids.notes_field.text.strip() or None
        groups = list(self.selected_groups)
        run_request(
            lambda: controller.start_workout(groups, notes),
            self._started,
            text="Starting workout...",
        )

    def _started(self, outcome) -> None:
        app = MDApp.get_running_app()
        if not outcome.conflict:
            app.show_controller_state()
            return
        existing = outcome.session
        if existing is None:
            toast("You already trained today")
            app.go_to("dashboard")
            return
        confirm(
            "Workout in progress",
            f"You already have a workout in progress today ({existing.day_of_week}). "
            "Continue it?",
            lambda: app.resume_workout(existing.id),
            confirm_text="Continue",
            cancel_text="Back",
            on_cancel=lambda: app.go_to("dashboard"),
        )
