"""
HTTP client for the workout API.

Wraps :class:`httpx.Client` with the bearer credential handling and the
translation of error responses into :mod:`tracker.errors` exceptions that the
service classes share.
"""

import logging
from typing import Any, Optional

import httpx

from tracker.errors import (
    ApiError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ServiceUnavailable,
)

logger = logging.getLogger(__name__)

# Phrases the API uses when refusing to create a duplicate resource
_CONFLICT_MARKERS = ("already exists", "já existe")


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(data, dict):
        message = data.get("message") or data.get("error") or data.get("detail")
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        if message:
            return str(message)
    return response.text or response.reason_phrase


def _raise_for_status(response: httpx.Response) -> None:
    status = response.status_code
    if status < 400:
        return
    message = _error_message(response)
    logger.error(f"Workout API error: {status} - {message}")
    if status in (401, 403):
        raise AuthenticationError(message, status)
    if status == 404:
        raise NotFoundError(message, status)
    if status == 409 or any(m in message.lower() for m in _CONFLICT_MARKERS):
        raise ConflictError(message, status)
    raise ApiError(message, status)


class ApiClient:
    """
    Thin JSON client for the workout API.

    ``credentials`` is any object exposing a ``token`` attribute (for example
    :class:`tracker.auth.CredentialStore`) or a callable returning the token.
    When a token is present it is sent
    as a bearer ``Authorization`` header with every request.
    """

    def __init__(
        self,
        base_url: str,
        credentials: Any = None,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the API (e.g., "http://localhost:3000")
            credentials: Provider of the current bearer token
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self._base_url = base_url.rstrip("/")
        self._credentials = credentials
        self._client = httpx.Client(
            base_url=self._base_url, timeout=timeout, transport=transport
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if callable(self._credentials):
            token = self._credentials()
        else:
            token = getattr(self._credentials, "token", None)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request and return the decoded JSON body.

        Returns:
            The parsed body, or ``None`` for empty responses

        Raises:
            ServiceUnavailable: If the API is not reachable or times out
            ApiError: If the API returns an error response
        """
        try:
            response = self._client.request(
                method, path, json=json, params=params, headers=self._headers()
            )
        except httpx.TimeoutException as e:
            logger.error(f"Workout API timeout: {method} {path}: {e}")
            raise ServiceUnavailable("Workout API request timed out") from e
        except httpx.TransportError as e:
            logger.error(f"Workout API unavailable: {e}")
            raise ServiceUnavailable(
                f"Workout API is not available at {self._base_url}"
            ) from e

        _raise_for_status(response)
        if not response.content:
            return None
        return response.json()

    def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)

    def close(self) -> None:
        self._client.close()


def clean_params(params: dict[str, Any]) -> dict[str, str]:
    """Drop empty values and join lists with commas for query strings."""

    cleaned: dict[str, str] = {}
    for key, value in params.items():
        if value is None or value == "":
            continue
        if isinstance(value, (list, tuple)):
            cleaned[key] = ",".join(str(v) for v in value)
        elif isinstance(value, bool):
            cleaned[key] = "true" if value else "false"
        else:
            cleaned[key] = str(value)
    return cleaned


def get_field(data: Any, key: str, default: Any = 0) -> Any:
    """Read ``key`` from a JSON object, using ``default`` for missing or null values."""

    if not isinstance(data, dict):
        return default
    value = data.get(key)
    return default if value is None else value
