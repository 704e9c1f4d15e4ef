"""Dialogs shared by the screens and the helper that runs API requests.

Requests to the workout API block, so :func:`run_request` shows a
:class:`LoadingDialog`, defers the work to the next frame with
:class:`~kivy.clock.Clock` and then reports the outcome:

* validation problems and actions that are not allowed right now are shown
  as a toast next to the control that triggered them,
* network and server errors open a dialog offering to retry,
* authentication failures log the user out.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from kivy.clock import Clock
from kivymd.app import MDApp
from kivymd.toast import toast
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.button import MDFlatButton, MDRaisedButton
from kivymd.uix.dialog import MDDialog
from kivymd.uix.label import MDLabel
from kivymd.uix.spinner import MDSpinner

from tracker.errors import (
    ApiError,
    AuthenticationError,
    InvalidTransition,
    OperationInProgress,
    ServiceUnavailable,
    ValidationError,
)

logger = logging.getLogger(__name__)


class LoadingDialog(MDDialog):
    """Simple dialog displaying a spinner while work is performed."""

    def __init__(self, text: str = "Loading...", **kwargs):
        box = MDBoxLayout(
            orientation="vertical",
            spacing="8dp",
            size_hint_y=None,
            height="72dp",
        )
        spinner = MDSpinner(size_hint=(None, None), size=("48dp", "48dp"))
        spinner.pos_hint = {"center_x": 0.5}
        box.add_widget(spinner)
        box.add_widget(MDLabel(text=text, halign="center"))
        super().__init__(type="custom", content_cls=box, auto_dismiss=False, **kwargs)


def confirm(title: str, text: str, on_confirm: Callable[[], None], confirm_text: str = "Yes",
            cancel_text: str = "No", on_cancel: Callable[[], None] | None = None) -> MDDialog:
    dialog = None

    def do_confirm(*_):
        dialog.dismiss()
        on_confirm()

    def do_cancel(*_):
        dialog.dismiss()
        if on_cancel:
            on_cancel()

    dialog = MDDialog(
        title=title,
        text=text,
        buttons=[
            MDFlatButton(text=cancel_text, on_release=do_cancel),
            MDRaisedButton(text=confirm_text, on_release=do_confirm),
        ],
    )
    dialog.open()
    return dialog


def show_retry(exc: Exception, retry: Callable[[], None]) -> MDDialog:
    """Tell the user a request failed and offer to send it again."""

    if isinstance(exc, ServiceUnavailable):
        text = "Could not reach the server. Check your connection and try again."
    else:
        text = f"Something went wrong: {exc}"
    return confirm("Request failed", text, retry, confirm_text="Retry", cancel_text="Close")


def run_request(
    action: Callable[[], Any],
    on_success: Callable[[Any], None] | None = None,
    text: str = "Loading...",
) -> None:
    """Run ``action`` behind a loading dialog and dispatch its outcome."""

    dialog = LoadingDialog(text)
    dialog.open()

    def _run(_dt):
        try:
            result = action()
        except AuthenticationError:
            dialog.dismiss()
            logger.warning("Credential rejected; returning to login")
            app = MDApp.get_running_app()
            if app:
                app.handle_auth_failure()
            return
        except (ValidationError, InvalidTransition, OperationInProgress) as exc:
            dialog.dismiss()
            toast(str(exc))
            return
        except (ServiceUnavailable, ApiError) as exc:
            dialog.dismiss()
            show_retry(exc, lambda: run_request(action, on_success, text))
            return
        dialog.dismiss()
        if on_success:
            on_success(result)

    Clock.schedule_once(_run, 0)
