"""Exercise catalog endpoints and muscle group helpers."""

from __future__ import annotations

from typing import Iterable

from tracker.api import ApiClient
from tracker.errors import ValidationError
from tracker.models import Exercise

# Muscle group keys understood by the API mapped to display labels
MUSCLE_GROUPS: dict[str, str] = {
    "chest": "Chest",
    "back": "Back",
    "shoulders": "Shoulders",
    "biceps": "Biceps",
    "triceps": "Triceps",
    "legs": "Legs",
    "glutes": "Glutes",
    "abs": "Abs",
    "calves": "Calves",
    "cardio": "Cardio",
}

EQUIPMENT_OPTIONS = (
    "Bodyweight",
    "Dumbbells",
    "Barbell",
    "Machine",
    "Cable",
    "Kettlebell",
    "Resistance band",
    "Swiss ball",
    "TRX",
    "Other",
)

_KEYS_BY_LABEL = {label: key for key, label in MUSCLE_GROUPS.items()}


def to_labels(groups: Iterable[str]) -> list[str]:
    """Return display labels for API ``groups``, keeping unknown values."""
    return [MUSCLE_GROUPS.get(g, g) for g in groups]


def to_keys(groups: Iterable[str]) -> list[str]:
    """Return API keys for display ``groups``, keeping unknown values."""
    return [_KEYS_BY_LABEL.get(g, g) for g in groups]


def validate_exercise(name: str, muscle_groups: list[str]) -> list[str]:
    """Return a list of problems with the exercise data; empty when valid."""

    errors = []
    if not name or len(name.strip()) < 3:
        errors.append("Name must be at least 3 characters long")
    if not muscle_groups:
        errors.append("Select at least one muscle group")
    return errors


class ExerciseService:
    """CRUD operations on the user's exercise catalog."""

    def __init__(self, api: ApiClient) -> None:
        self._api = api

    def get_all(self) -> list[Exercise]:
        return [Exercise.from_dict(item) for item in self._api.get("/exercises") or []]

    def get_by_muscle_groups(self, muscle_groups: list[str]) -> list[Exercise]:
        params = {"muscleGroups": ",".join(to_keys(muscle_groups))}
        data = self._api.get("/exercises", params=params)
        return [Exercise.from_dict(item) for item in data or []]

    def get_by_id(self, exercise_id: str) -> Exercise:
        return Exercise.from_dict(self._api.get(f"/exercises/{exercise_id}"))

    def create(self, exercise: Exercise) -> Exercise:
        errors = validate_exercise(exercise.name, exercise.muscle_groups)
        if errors:
            raise ValidationError("; ".join(errors))
        payload = exercise.to_dict()
        payload["name"] = exercise.name.strip()
        payload["muscleGroups"] = to_keys(exercise.muscle_groups)
        return Exercise.from_dict(self._api.post("/exercises", json=payload))

    def update(self, exercise_id: str, **changes) -> Exercise:
        """Update ``exercise_id`` with the given ``name``/``muscle_groups``/... values."""

        payload: dict = {}
        if "name" in changes:
            payload["name"] = changes["name"]
        if "muscle_groups" in changes:
            payload["muscleGroups"] = to_keys(changes["muscle_groups"])
        for key in ("equipment", "instructions"):
            if key in changes:
                payload[key] = changes[key]
        return Exercise.from_dict(self._api.put(f"/exercises/{exercise_id}", json=payload))

    def delete(self, exercise_id: str) -> None:
        self._api.delete(f"/exercises/{exercise_id}")
