from __future__ import annotations

"""Wiring of the API client and the service classes used by the screens.

This keeps the UI layer free from direct knowledge of URLs, credentials and
settings; screens only talk to the :class:`Services` bundle.
"""

from dataclasses import dataclass

import httpx

from tracker import settings
from tracker.api import ApiClient
from tracker.auth import CREDENTIALS_PATH, AuthService, CredentialStore
from tracker.exercises import ExerciseService
from tracker.history import HistoryService
from tracker.reports import ReportsService
from tracker.workout_service import WorkoutService


@dataclass
class Services:
    api: ApiClient
    credentials: CredentialStore
    auth: AuthService
    workouts: WorkoutService
    exercises: ExerciseService
    history: HistoryService
    reports: ReportsService

    def close(self) -> None:
        self.api.close()


def create_services(
    base_url: str | None = None,
    credentials: CredentialStore | None = None,
    transport: httpx.BaseTransport | None = None,
) -> Services:
    """Build every service against ``base_url`` (defaults to the settings)."""

    credentials = credentials or CredentialStore(CREDENTIALS_PATH)
    api = ApiClient(
        base_url or settings.api_base_url(),
        credentials=credentials,
        timeout=settings.request_timeout(),
        transport=transport,
    )
    return Services(
        api=api,
        credentials=credentials,
        auth=AuthService(api, credentials),
        workouts=WorkoutService(api),
        exercises=ExerciseService(api),
        history=HistoryService(api),
        reports=ReportsService(api),
    )
