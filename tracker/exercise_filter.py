"""Search, filter and selection helpers for choosing workout exercises.

Everything here is synchronous and free of side effects; the selection
screen recomputes the filtered view whenever the search text, the muscle
group filter or the catalog changes.
"""

from __future__ import annotations

from typing import Iterable

from tracker.models import Exercise


def filter_exercises(
    exercises: Iterable[Exercise],
    search: str = "",
    muscle_group: str | None = None,
) -> list[Exercise]:
    """Return exercises matching ``search`` and ``muscle_group``.

    ``search`` matches case-insensitively against the exercise name or any of
    its muscle groups.  ``muscle_group`` must be one of the exercise's
    groups.  Both conditions apply together.
    """

    result = list(exercises)
    if search:
        s = search.lower()
        result = [
            ex
            for ex in result
            if s in ex.name.lower() or any(s in m.lower() for m in ex.muscle_groups)
        ]
    if muscle_group:
        result = [ex for ex in result if muscle_group in ex.muscle_groups]
    return result


def toggle_exercise(selected: list[str], exercise_id: str) -> list[str]:
    """Add ``exercise_id`` to the selection or remove it if present."""

    if exercise_id in selected:
        return [eid for eid in selected if eid != exercise_id]
    return [*selected, exercise_id]


def toggle_select_all(selected: list[str], filtered: list[Exercise]) -> list[str]:
    """Clear the selection if it is as large as the filtered view.

    Otherwise every currently filtered exercise becomes selected.
    """

    if len(selected) == len(filtered):
        return []
    return [ex.id for ex in filtered]


def unique_muscle_groups(exercises: Iterable[Exercise]) -> list[str]:
    seen: dict[str, None] = {}
    for ex in exercises:
        for group in ex.muscle_groups:
            seen.setdefault(group, None)
    return list(seen)


class ExerciseSelection:
    """Catalog, filter inputs and the ids chosen for a workout."""

    def __init__(self, exercises: Iterable[Exercise] = ()) -> None:
        self.exercises: list[Exercise] = list(exercises)
        self.search = ""
        self.muscle_group: str | None = None
        self.selected: list[str] = []
        self.filtered: list[Exercise] = list(self.exercises)

    def _refresh(self) -> None:
        self.filtered = filter_exercises(self.exercises, self.search, self.muscle_group)

    def set_exercises(self, exercises: Iterable[Exercise]) -> None:
        self.exercises = list(exercises)
        known = {ex.id for ex in self.exercises}
        self.selected = [eid for eid in self.selected if eid in known]
        self._refresh()

    def set_search(self, text: str) -> None:
        self.search = text.strip()
        self._refresh()

    def set_muscle_group(self, group: str | None) -> None:
        self.muscle_group = group or None
        self._refresh()

    def toggle(self, exercise_id: str) -> None:
        self.selected = toggle_exercise(self.selected, exercise_id)

    def toggle_all(self) -> None:
        self.selected = toggle_select_all(self.selected, self.filtered)

    def is_selected(self, exercise_id: str) -> bool:
        return exercise_id in self.selected

    @property
    def muscle_groups(self) -> list[str]:
        return unique_muscle_groups(self.exercises)
