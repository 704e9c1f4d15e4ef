import json

import httpx
import pytest

from tracker.api import ApiClient, clean_params, get_field
from tracker.errors import (
    ApiError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ServiceUnavailable,
)


class Token:
    def __init__(self, token):
        self.token = token


def client_for(handler, credentials=None):
    return ApiClient(
        "http://api.test/", credentials=credentials, transport=httpx.MockTransport(handler)
    )


def test_bearer_token_is_sent():
    seen = {}

    def handler(request):
        seen["auth"] = request.headers.get("Authorization")
        seen["url"] = str(request.url)
        return httpx.Response(200, json={"ok": True})

    api = client_for(handler, Token("abc"))
    assert api.get("/exercises", params={"muscleGroups": "chest"}) == {"ok": True}
    assert seen["auth"] == "Bearer abc"
    assert seen["url"] == "http://api.test/exercises?muscleGroups=chest"


def test_token_from_callable_and_missing_token():
    headers = []

    def handler(request):
        headers.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={})

    client_for(handler, lambda: "xyz").get("/a")
    client_for(handler, Token(None)).get("/a")
    assert headers == ["Bearer xyz", None]


def test_empty_body_returns_none():
    api = client_for(lambda request: httpx.Response(204))
    assert api.delete("/workout-executions/w1") is None


def test_json_body_is_posted():
    def handler(request):
        assert request.method == "POST"
        assert json.loads(request.content) == {"notes": "done"}
        return httpx.Response(201, json={"id": "w1"})

    api = client_for(handler)
    assert api.post("/workout-executions/w1/finish", json={"notes": "done"}) == {"id": "w1"}


@pytest.mark.parametrize(
    "status,body,error",
    [
        (401, {"message": "Unauthorized"}, AuthenticationError),
        (403, {"message": "Forbidden"}, AuthenticationError),
        (404, {"message": "Workout not found"}, NotFoundError),
        (409, {"message": "Conflict"}, ConflictError),
        (400, {"message": "Workout already exists for today"}, ConflictError),
        (400, {"message": "Já existe um treino para hoje"}, ConflictError),
        (400, {"message": ["weight must be positive", "reps must be positive"]}, ApiError),
        (500, {"error": "Internal"}, ApiError),
    ],
)
def test_error_responses_are_translated(status, body, error):
    api = client_for(lambda request: httpx.Response(status, json=body))
    with pytest.raises(error) as excinfo:
        api.get("/workout-executions")
    assert excinfo.value.status_code == status


def test_validation_messages_are_joined():
    body = {"message": ["weight must be positive", "reps must be positive"]}
    api = client_for(lambda request: httpx.Response(400, json=body))
    with pytest.raises(ApiError, match="weight must be positive; reps must be positive"):
        api.post("/x")


def test_plain_text_error_body():
    api = client_for(lambda request: httpx.Response(502, text="Bad gateway"))
    with pytest.raises(ApiError, match="Bad gateway"):
        api.get("/x")


def test_connection_failure_is_service_unavailable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ServiceUnavailable):
        client_for(handler).get("/x")


def test_timeout_is_service_unavailable():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(ServiceUnavailable, match="timed out"):
        client_for(handler).get("/x")


def test_clean_params():
    params = {
        "page": 1,
        "status": None,
        "search": "",
        "muscleGroups": ["chest", "back"],
        "includeDetails": True,
        "startDate": "2025-03-01",
    }
    assert clean_params(params) == {
        "page": "1",
        "muscleGroups": "chest,back",
        "includeDetails": "true",
        "startDate": "2025-03-01",
    }


def test_get_field_treats_null_as_missing():
    data = {"volume": None, "series": 0, "date": "2025-03-14"}
    assert get_field(data, "volume") == 0
    assert get_field(data, "series", 5) == 0
    assert get_field(data, "missing", "") == ""
    assert get_field(data, "date", "") == "2025-03-14"
    assert get_field(None, "date", "") == ""
