import json

import httpx
import pytest

from tracker.api import ApiClient
from tracker.auth import AuthService, CredentialStore, User
from tracker.errors import AuthenticationError, ValidationError

USER = {"id": "u1", "name": "Ana", "email": "ana@example.com", "role": "ADMIN"}


def auth_for(handler, path=None):
    credentials = CredentialStore(path)
    api = ApiClient("http://api.test", credentials, transport=httpx.MockTransport(handler))
    return AuthService(api, credentials), credentials


def test_login_stores_token_and_user(tmp_path):
    requests = []

    def handler(request):
        requests.append(request)
        if request.url.path == "/sessions":
            return httpx.Response(201, json={"access_token": "tok", "user": USER})
        return httpx.Response(200, json=[])

    path = tmp_path / "credentials.json"
    auth, credentials = auth_for(handler, path)
    user = auth.login("ana@example.com", "secret")

    assert user.is_admin
    assert credentials.is_authenticated
    assert json.loads(requests[0].content) == {"email": "ana@example.com", "password": "secret"}

    # later requests carry the token
    auth._api.get("/workout-executions")
    assert requests[1].headers["Authorization"] == "Bearer tok"

    restored = CredentialStore(path)
    assert restored.token == "tok"
    assert restored.user == User("u1", "Ana", "ana@example.com", "ADMIN")


def test_failed_login_keeps_logged_out():
    auth, credentials = auth_for(
        lambda request: httpx.Response(401, json={"message": "Invalid credentials"})
    )
    with pytest.raises(AuthenticationError):
        auth.login("ana@example.com", "wrong")
    assert not credentials.is_authenticated


def test_login_requires_both_fields():
    auth, _ = auth_for(lambda request: pytest.fail("no request expected"))
    with pytest.raises(ValidationError):
        auth.login("", "secret")


def test_register_posts_account():
    bodies = []

    def handler(request):
        bodies.append((request.url.path, json.loads(request.content)))
        return httpx.Response(201)

    auth, credentials = auth_for(handler)
    auth.register("Ana", "ana@example.com", "secret")
    assert bodies == [
        ("/accounts", {"name": "Ana", "email": "ana@example.com", "password": "secret"})
    ]
    assert not credentials.is_authenticated
    with pytest.raises(ValidationError):
        auth.register("", "ana@example.com", "secret")


def test_logout_removes_stored_credentials(tmp_path):
    path = tmp_path / "credentials.json"
    store = CredentialStore(path)
    store.save("tok", User("u1", "Ana", "ana@example.com"))
    assert path.exists()

    auth = AuthService(ApiClient("http://api.test", store), store)
    auth.logout()
    assert not path.exists()
    assert store.token is None
    assert not CredentialStore(path).is_authenticated


def test_unreadable_credentials_are_discarded(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_text("{not json")
    store = CredentialStore(path)
    assert not store.is_authenticated
    assert not path.exists()
