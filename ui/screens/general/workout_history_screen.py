from kivy.properties import BooleanProperty, NumericProperty, StringProperty
from kivymd.app import MDApp
from kivymd.uix.list import TwoLineListItem
from kivymd.uix.screen import MDScreen

from tracker.api import get_field
from tracker.history import describe_history_entry, describe_history_stats
from ui.dialogs import run_request

PAGE_SIZE = 10


class WorkoutHistoryScreen(MDScreen):
    """Display past workouts page by page with this month's totals.

    Attributes:
        return_to (str): Name of the screen to return to when the Back
            button is pressed. Defaults to ``"dashboard"``.
    """

    return_to = StringProperty("dashboard")
    """Name of the screen to return to when leaving the history screen."""

    page = NumericProperty(1)
    total_pages = NumericProperty(1)
    has_prev = BooleanProperty(False)
    has_next = BooleanProperty(False)
    summary = StringProperty("")
    keep_page = BooleanProperty(False)
    """Stay on the current page next time, e.g. when coming back from a workout."""

    def on_pre_enter(self, *args):
        """Load the page before the screen becomes visible."""
        if not self.keep_page:
            self.page = 1
        self.keep_page = False
        self.populate()
        return super().on_pre_enter(*args)

    def populate(self) -> None:
        history = MDApp.get_running_app().services.history
        page = self.page
        run_request(
            lambda: (
                history.get_workout_history(page=page, limit=PAGE_SIZE),
                history.get_history_stats("month"),
            ),
            self._show,
            text="Loading history...",
        )

    def _show(self, result) -> None:
        data, stats = result
        pagination = get_field(data, "pagination", {})
        self.total_pages = get_field(pagination, "totalPages", 1) or 1
        self.has_prev = bool(get_field(pagination, "hasPrev", False))
        self.has_next = bool(get_field(pagination, "hasNext", False))
        self.summary = describe_history_stats(stats)

        lst = self.ids.get("history_list")
        if not lst:
            return
        lst.clear_widgets()
        for entry in get_field(data, "data", []):
            title, subtitle = describe_history_entry(entry)
            item = TwoLineListItem(
                text=title,
                secondary_text=subtitle,
                on_release=lambda _, wid=entry["id"]: self.open_details(wid),
            )
            lst.add_widget(item)

    def next_page(self) -> None:
        if self.has_next:
            self.page += 1
            self.populate()

    def previous_page(self) -> None:
        if self.has_prev:
            self.page -= 1
            self.populate()

    def open_details(self, workout_id: str) -> None:
        app = MDApp.get_running_app()
        screen = app.root.get_screen("workout_details")
        screen.workout_id = workout_id
        screen.return_to = "history"
        app.go_to("workout_details")
