import json

import pytest

from tracker import settings


@pytest.fixture(autouse=True)
def settings_file(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr(settings, "SETTINGS_PATH", path)
    monkeypatch.delenv(settings.API_URL_ENV, raising=False)
    settings.reset_cache()
    yield path
    settings.reset_cache()


def test_defaults_written_on_first_load(settings_file):
    assert settings.get_value("api_base_url") == "http://localhost:3000"
    assert settings.request_timeout() == 30.0
    stored = json.loads(settings_file.read_text())
    assert [item["key"] for item in stored] == ["api_base_url", "request_timeout"]


def test_set_value_persists(settings_file):
    settings.set_value("api_base_url", "https://gym.example.com")
    settings.reset_cache()
    assert settings.api_base_url() == "https://gym.example.com"


def test_unknown_key_is_appended(settings_file):
    settings.set_value("theme", "dark")
    stored = json.loads(settings_file.read_text())
    assert {"key": "theme", "value": "dark", "type": "str"} in stored
    assert settings.get_value("missing") is None


def test_environment_overrides_stored_url(monkeypatch):
    settings.set_value("api_base_url", "https://gym.example.com")
    monkeypatch.setenv(settings.API_URL_ENV, "http://10.0.0.2:3000")
    assert settings.api_base_url() == "http://10.0.0.2:3000"


def test_malformed_file_falls_back_to_defaults(settings_file):
    settings_file.write_text('{"api_base_url": "nope"}')
    assert settings.get_value("api_base_url") == "http://localhost:3000"


def test_missing_entry_uses_default(settings_file):
    settings_file.write_text(json.dumps([{"key": "api_base_url", "value": "http://x", "type": "str"}]))
    assert settings.request_timeout() == 30.0
