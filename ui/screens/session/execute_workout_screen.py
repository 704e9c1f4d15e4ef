"""Screen shown while a workout is being executed.

The screen only renders :class:`~tracker.execution.WorkoutController` state.
Every button forwards to a controller action and :meth:`refresh` redraws the
header, the series planning panel or the series rows afterwards.
"""

from __future__ import annotations

from kivy.properties import BooleanProperty, NumericProperty, ObjectProperty, StringProperty
from kivymd.app import MDApp
from kivymd.toast import toast
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.button import MDIconButton, MDRaisedButton
from kivymd.uix.label import MDLabel
from kivymd.uix.screen import MDScreen
from kivymd.uix.textfield import MDTextField

from tracker import DEFAULT_SERIES_COUNT
from tracker.errors import InvalidTransition, ValidationError
from tracker.execution import Finished
from tracker.rest_timer import format_time
from ui.dialogs import confirm, run_request


def _number(text: str, cast, field_name: str):
    text = text.strip().replace(",", ".")
    if not text:
        return cast(0)
    try:
        return cast(float(text))
    except ValueError:
        raise ValidationError(f"{field_name} must be a number") from None


class SeriesRow(MDBoxLayout):
    """One line of the series table with its inputs and action button."""

    def __init__(self, screen: "ExecuteWorkoutScreen", series, is_current: bool, **kwargs):
        super().__init__(
            orientation="horizontal", size_hint_y=None, height="56dp", spacing="4dp", **kwargs
        )
        self.screen = screen
        self.series_number = series.series_number
        registered = series.is_registered

        self.add_widget(
            MDLabel(text=f"#{series.series_number}", size_hint_x=None, width="32dp")
        )
        self.weight_field = MDTextField(
            hint_text="kg",
            text=f"{series.weight:g}" if series.weight else "",
            input_filter="float",
            disabled=registered,
        )
        self.reps_field = MDTextField(
            hint_text="reps",
            text=str(series.reps) if series.reps else "",
            input_filter="int",
            disabled=registered,
        )
        self.rest_field = MDTextField(
            hint_text="rest (s)",
            text=str(series.rest_time or ""),
            input_filter="int",
            disabled=registered,
        )
        for field in (self.weight_field, self.reps_field, self.rest_field):
            field.bind(focus=self._on_focus)
            self.add_widget(field)

        if registered:
            self.add_widget(
                MDIconButton(icon="check-circle", disabled=True, size_hint_x=None, width="48dp")
            )
        else:
            button = MDRaisedButton(text="Save", disabled=not is_current)
            button.bind(on_release=lambda *_: screen.register_series(self))
            self.add_widget(button)

    def values(self) -> dict:
        return {
            "weight": _number(self.weight_field.text, float, "Weight"),
            "reps": _number(self.reps_field.text, int, "Reps"),
            "rest_time": _number(self.rest_field.text, int, "Rest time"),
        }

    def _on_focus(self, _field, focused: bool) -> None:
        # rows are rebuilt after each registration; ignore fields already removed
        if not focused and self.parent is not None:
            self.screen.update_series(self)


class ExecuteWorkoutScreen(MDScreen):
    """Walks through the chosen exercises one at a time."""

    exercise_name = StringProperty("")
    exercise_details = StringProperty("")
    position_label = StringProperty("")
    progress = NumericProperty(0)
    series_progress = StringProperty("")

    planning = BooleanProperty(False)
    series_count = NumericProperty(DEFAULT_SERIES_COUNT)
    can_complete = BooleanProperty(False)
    is_last_exercise = BooleanProperty(False)

    rest_active = BooleanProperty(False)
    rest_label = StringProperty("0:00")

    series_list = ObjectProperty(None)

    @property
    def controller(self):
        return MDApp.get_running_app().controller

    def on_pre_enter(self, *args):
        timer = self.controller.rest_timer
        timer.on_tick = self._on_rest_tick
        timer.on_finish = self._on_rest_finish
        self.rest_active = timer.is_running
        self.rest_label = timer.label
        self.refresh()
        return super().on_pre_enter(*args)

    def on_leave(self, *args):
        controller = MDApp.get_running_app().controller
        if controller:
            controller.rest_timer.on_tick = None
            controller.rest_timer.on_finish = None
        return super().on_leave(*args)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        controller = self.controller
        exercise = controller.current_exercise
        if exercise is None:
            return
        self.exercise_name = exercise.exercise_name
        details = ", ".join(exercise.muscle_groups)
        if exercise.equipment:
            details = f"{details} - {exercise.equipment}"
        self.exercise_details = details
        self.position_label = f"Exercise {controller.position_label}"
        self.progress = controller.progress * 100
        self.is_last_exercise = controller.is_last_exercise
        self.can_complete = controller.can_complete_exercise
        self.planning = controller.series_count is not None
        if self.planning:
            self.series_count = controller.series_count
            self.series_progress = ""
        else:
            self.series_progress = (
                f"{controller.completed_series_count} of {exercise.planned_series} series done"
            )
        self._populate_series()

    def _populate_series(self) -> None:
        if not self.series_list:
            return
        self.series_list.clear_widgets()
        if self.planning:
            return
        current = self.controller.current_series_number
        for series in self.controller.current_exercise.series:
            self.series_list.add_widget(
                SeriesRow(self, series, is_current=series.series_number == current)
            )

    # ------------------------------------------------------------------
    # Rest timer
    # ------------------------------------------------------------------

    def _on_rest_tick(self, remaining: int) -> None:
        self.rest_active = remaining > 0
        self.rest_label = format_time(remaining)

    def _on_rest_finish(self) -> None:
        self.rest_active = False
        toast("Rest is over")

    def skip_rest(self) -> None:
        self.controller.skip_rest()

    # ------------------------------------------------------------------
    # Series planning
    # ------------------------------------------------------------------

    def change_series_count(self, delta: int) -> None:
        try:
            self.controller.choose_series_count(int(self.series_count) + delta)
        except (ValidationError, InvalidTransition) as exc:
            toast(str(exc))
            return
        self.series_count = self.controller.series_count

    def confirm_series_count(self) -> None:
        run_request(
            self.controller.confirm_series_count,
            lambda _series: self.refresh(),
            text="Saving series...",
        )

    # ------------------------------------------------------------------
    # Series registration
    # ------------------------------------------------------------------

    def update_series(self, row: SeriesRow) -> None:
        try:
            self.controller.update_series(row.series_number, **row.values())
        except (ValidationError, InvalidTransition) as exc:
            toast(str(exc))

    def register_series(self, row: SeriesRow) -> None:
        try:
            values = row.values()
        except ValidationError as exc:
            toast(str(exc))
            return
        run_request(
            lambda: self.controller.register_series(row.series_number, **values),
            lambda _series: self.refresh(),
            text="Saving series...",
        )

    # ------------------------------------------------------------------
    # Completion
    # ------------------------------------------------------------------

    def complete_exercise(self) -> None:
        if self.is_last_exercise:
            confirm(
                "Finish workout?",
                "This is the last exercise. The workout will be marked as completed.",
                self._complete,
                confirm_text="Finish",
                cancel_text="Back",
            )
        else:
            self._complete()

    def _complete(self) -> None:
        run_request(self.controller.complete_exercise, self._completed, text="Saving...")

    def _completed(self, state) -> None:
        if isinstance(state, Finished):
            toast("Workout completed!")
            MDApp.get_running_app().show_controller_state()
            return
        self.refresh()

    def reload(self) -> None:
        """Fetch the workout again, dropping values that were not saved yet."""
        run_request(
            self.controller.reload,
            lambda _state: MDApp.get_running_app().show_controller_state(),
            text="Reloading workout...",
        )

    def confirm_cancel(self) -> None:
        confirm(
            "Cancel workout?",
            "The workout and every registered series will be deleted.",
            lambda: run_request(
                self.controller.cancel,
                lambda _state: MDApp.get_running_app().show_controller_state(),
                text="Cancelling workout...",
            ),
            confirm_text="Delete",
            cancel_text="Keep",
        )
