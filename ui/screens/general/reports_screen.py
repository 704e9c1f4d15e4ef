"""Reports screen with overview figures, personal records and training patterns."""

from __future__ import annotations

from datetime import date, timedelta

from kivy.factory import Factory
from kivy.properties import ObjectProperty, StringProperty
from kivymd.app import MDApp
from kivymd.uix.list import OneLineListItem, TwoLineListItem
from kivymd.uix.screen import MDScreen

from tracker.history import describe_distribution
from tracker.reports import describe_personal_record, overview_cards
from ui.dialogs import run_request

# Number of days covered by each choice of the period spinner; None means all time
PERIOD_DAYS = {
    "Last 30 days": 30,
    "Last 90 days": 90,
    "Last year": 365,
    "All time": None,
}


class ReportsScreen(MDScreen):
    """Aggregate performance figures computed by the API."""

    period = StringProperty("Last 30 days")
    card_grid = ObjectProperty(None)
    records_list = ObjectProperty(None)
    pattern_list = ObjectProperty(None)

    def on_pre_enter(self, *args):
        self.populate()
        return super().on_pre_enter(*args)

    def on_period_selected(self, label: str) -> None:
        if label != self.period:
            self.period = label
            self.populate()

    def populate(self) -> None:
        services = MDApp.get_running_app().services
        days = PERIOD_DAYS.get(self.period)
        start = end = None
        if days:
            end = date.today()
            start = end - timedelta(days=days)

        def load():
            return (
                services.reports.get_workout_overview(start, end),
                services.reports.get_personal_records(type="weight"),
                services.history.get_weekly_pattern(start, end),
                services.history.get_muscle_group_stats(start, end),
            )

        run_request(load, self._show, text="Loading reports...")

    def _show(self, result) -> None:
        overview, records, weekly, muscle_groups = result
        if self.card_grid:
            self.card_grid.clear_widgets()
            for title, value in overview_cards(overview):
                self.card_grid.add_widget(Factory.StatCard(title=title, value=value))

        if self.records_list:
            self.records_list.clear_widgets()
            for record in records or []:
                name, text = describe_personal_record(record)
                self.records_list.add_widget(TwoLineListItem(text=name, secondary_text=text))
            if not records:
                self.records_list.add_widget(OneLineListItem(text="No records yet"))

        if self.pattern_list:
            self.pattern_list.clear_widgets()
            for line in describe_distribution(weekly, "dayOfWeek"):
                self.pattern_list.add_widget(OneLineListItem(text=line))
            for line in describe_distribution(muscle_groups, "name"):
                self.pattern_list.add_widget(OneLineListItem(text=line))
