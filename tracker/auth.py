"""Login state and the account endpoints.

:class:`CredentialStore` keeps the bearer token and the logged-in user and is
handed to :class:`tracker.api.ApiClient`, which reads its ``token`` on every
request.  The store is persisted as JSON next to the settings file so the
user stays logged in across app restarts.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from tracker import DATA_DIR
from tracker.api import ApiClient
from tracker.errors import ValidationError

logger = logging.getLogger(__name__)

CREDENTIALS_PATH = DATA_DIR / "credentials.json"


@dataclass
class User:
    id: str
    name: str
    email: str
    role: str = "CLIENT"

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            email=data.get("email", ""),
            role=data.get("role", "CLIENT"),
        )


class CredentialStore:
    """Holds the current token and user, optionally persisted to ``path``."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self.token: str | None = None
        self.user: User | None = None
        if path is not None:
            self.load()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    def load(self) -> None:
        """Read stored credentials, discarding them if the file is unreadable."""

        if self.path is None or not self.path.exists():
            return
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
            self.token = data["token"]
            self.user = User.from_dict(data["user"])
        except (OSError, ValueError, KeyError, TypeError):
            logger.exception("Discarding unreadable credentials at %s", self.path)
            self.clear()

    def save(self, token: str, user: User) -> None:
        self.token = token
        self.user = user
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            json.dump({"token": token, "user": asdict(user)}, fh)

    def clear(self) -> None:
        self.token = None
        self.user = None
        if self.path is not None:
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass


class AuthService:
    """Account registration, login and logout."""

    def __init__(self, api: ApiClient, credentials: CredentialStore) -> None:
        self._api = api
        self.credentials = credentials

    def login(self, email: str, password: str) -> User:
        if not email or not password:
            raise ValidationError("Enter your email and password")
        data = self._api.post("/sessions", json={"email": email, "password": password})
        user = User.from_dict(data["user"])
        self.credentials.save(data["access_token"], user)
        logger.info("Logged in as %s", user.email)
        return user

    def register(self, name: str, email: str, password: str) -> None:
        if not name or not email or not password:
            raise ValidationError("Name, email and password are required")
        self._api.post(
            "/accounts", json={"name": name, "email": email, "password": password}
        )
        logger.info("Registered account for %s", email)

    def logout(self) -> None:
        self.credentials.clear()
        logger.info("Logged out")
