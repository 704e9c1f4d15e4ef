import json

import httpx
import pytest

from tracker.api import ApiClient
from tracker.errors import ValidationError
from tracker.exercises import ExerciseService, to_keys, to_labels, validate_exercise
from tracker.models import Exercise


def service_for(handler):
    return ExerciseService(ApiClient("http://api.test", transport=httpx.MockTransport(handler)))


@pytest.mark.parametrize(
    "name,groups,expected",
    [
        ("Bench Press", ["chest"], []),
        ("  ab ", ["abs"], ["Name must be at least 3 characters long"]),
        ("Row", [], ["Select at least one muscle group"]),
        ("", [], ["Name must be at least 3 characters long", "Select at least one muscle group"]),
    ],
)
def test_validate_exercise(name, groups, expected):
    assert validate_exercise(name, groups) == expected


def test_label_conversion_keeps_unknown_groups():
    assert to_labels(["chest", "forearms"]) == ["Chest", "forearms"]
    assert to_keys(["Legs", "Glutes"]) == ["legs", "glutes"]


def test_get_by_muscle_groups_joins_keys():
    seen = []

    def handler(request):
        seen.append(request.url.params["muscleGroups"])
        return httpx.Response(200, json=[{"id": "e1", "name": "Squat", "muscleGroups": ["legs"]}])

    exercises = service_for(handler).get_by_muscle_groups(["Legs", "glutes"])
    assert seen == ["legs,glutes"]
    assert exercises[0].name == "Squat"


def test_create_validates_before_sending():
    service = service_for(lambda request: pytest.fail("no request expected"))
    with pytest.raises(ValidationError):
        service.create(Exercise(id="", name="ab", muscle_groups=["abs"]))


def test_create_and_update_payloads():
    bodies = []

    def handler(request):
        body = json.loads(request.content)
        bodies.append((request.method, request.url.path, body))
        return httpx.Response(200, json={"id": "e9", **body})

    service = service_for(handler)
    created = service.create(
        Exercise(id="", name=" Hip Thrust ", muscle_groups=["Glutes"], equipment="Barbell")
    )
    assert created.id == "e9"
    assert bodies[0] == (
        "POST",
        "/exercises",
        {"name": "Hip Thrust", "muscleGroups": ["glutes"], "equipment": "Barbell"},
    )

    service.update("e9", muscle_groups=["Legs"], instructions="Pause at the top")
    assert bodies[1] == (
        "PUT",
        "/exercises/e9",
        {"muscleGroups": ["legs"], "instructions": "Pause at the top"},
    )
