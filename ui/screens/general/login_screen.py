"""Login and account registration screen."""

from __future__ import annotations

from kivy.properties import BooleanProperty, StringProperty
from kivymd.app import MDApp
from kivymd.toast import toast
from kivymd.uix.screen import MDScreen

from ui.dialogs import run_request


class LoginScreen(MDScreen):
    """Collect credentials and log the user in, or create an account."""

    register_mode = BooleanProperty(False)
    error_text = StringProperty("")

    def on_pre_enter(self, *args):
        self.error_text = ""
        self.ids.password_field.text = ""
        return super().on_pre_enter(*args)

    def toggle_mode(self) -> None:
        self.register_mode = not self.register_mode
        self.error_text = ""

    def submit(self) -> None:
        app = MDApp.get_running_app()
        email = self.ids.email_field.text.strip()
        password = self.ids.password_field.text
        if not email or not password:
            self.error_text = "Enter your email and password"
            return

        if self.register_mode:
            name = self.ids.name_field.text.strip()

            def registered(_result):
                toast("Account created, you can log in now")
                self.register_mode = False

            run_request(
                lambda: app.services.auth.register(name, email, password),
                registered,
                text="Creating account...",
            )
        else:
            run_request(
                lambda: app.services.auth.login(email, password),
                lambda _user: app.go_to("dashboard"),
                text="Logging in...",
            )
