from __future__ import annotations

"""Screen for modifying app settings."""

import logging

from kivy.properties import StringProperty
from kivymd.app import MDApp
from kivymd.toast import toast
from kivymd.uix.screen import MDScreen

from tracker import settings as app_settings


class SettingsScreen(MDScreen):
    """Display and persist user-configurable settings."""

    return_to = StringProperty("dashboard")
    """Name of the screen to return to when leaving settings."""

    def on_pre_enter(self, *args) -> None:
        """Populate controls from stored settings."""
        self.ids.api_url_field.text = app_settings.get_value("api_base_url") or ""
        self.ids.timeout_field.text = str(app_settings.get_value("request_timeout"))
        return super().on_pre_enter(*args)

    def save(self) -> None:
        url = self.ids.api_url_field.text.strip()
        if not url.startswith(("http://", "https://")):
            self.ids.api_url_field.error = True
            toast("Enter a URL starting with http:// or https://")
            return
        try:
            timeout = float(self.ids.timeout_field.text)
        except ValueError:
            self.ids.timeout_field.error = True
            toast("Timeout must be a number of seconds")
            return
        if timeout <= 0:
            self.ids.timeout_field.error = True
            toast("Timeout must be positive")
            return

        app_settings.set_value("api_base_url", url)
        app_settings.set_value("request_timeout", timeout)
        logging.info("API settings changed to %s (timeout %ss)", url, timeout)
        MDApp.get_running_app().reload_services()
        toast("Settings saved")
        self.manager.current = self.return_to
