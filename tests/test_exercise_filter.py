import pytest

from tracker.exercise_filter import (
    ExerciseSelection,
    filter_exercises,
    toggle_exercise,
    toggle_select_all,
    unique_muscle_groups,
)
from tracker.models import Exercise


def names(exercises):
    return [ex.name for ex in exercises]


def test_no_filters_returns_everything(sample_exercises):
    assert filter_exercises(sample_exercises) == sample_exercises


def test_search_matches_name_case_insensitively(sample_exercises):
    assert names(filter_exercises(sample_exercises, "PRESS")) == [
        "Bench Press",
        "Incline Dumbbell Press",
        "Leg Press",
    ]


def test_search_matches_muscle_groups(sample_exercises):
    assert names(filter_exercises(sample_exercises, "legs")) == ["Squat", "Leg Press"]


def test_search_and_muscle_group_are_combined(sample_exercises):
    # "e" also matches the "legs" group of Squat
    result = filter_exercises(sample_exercises, "e", "legs")
    assert names(result) == ["Squat", "Leg Press"]
    assert names(filter_exercises(sample_exercises, "press", "legs")) == ["Leg Press"]


def test_muscle_group_only(sample_exercises):
    assert names(filter_exercises(sample_exercises, muscle_group="chest")) == [
        "Bench Press",
        "Incline Dumbbell Press",
    ]


def test_no_match(sample_exercises):
    assert filter_exercises(sample_exercises, "zzz") == []


def test_toggle_exercise_preserves_order():
    selected = toggle_exercise([], "a")
    selected = toggle_exercise(selected, "b")
    selected = toggle_exercise(selected, "c")
    assert selected == ["a", "b", "c"]
    assert toggle_exercise(selected, "b") == ["a", "c"]


@pytest.mark.parametrize(
    "selected,expected",
    [
        ([], ["e3", "e4"]),
        (["e3"], ["e3", "e4"]),
        (["e3", "e4"], []),
        # only the sizes are compared
        (["e1", "e2"], []),
    ],
)
def test_toggle_select_all(sample_exercises, selected, expected):
    filtered = filter_exercises(sample_exercises, muscle_group="legs")
    assert toggle_select_all(selected, filtered) == expected


def test_unique_muscle_groups_first_seen_order(sample_exercises):
    assert unique_muscle_groups(sample_exercises) == [
        "chest",
        "triceps",
        "shoulders",
        "legs",
        "glutes",
        "back",
        "biceps",
    ]


def test_selection_recomputes_filtered_view(sample_exercises):
    selection = ExerciseSelection(sample_exercises)
    selection.set_search("  press ")
    assert selection.search == "press"
    assert len(selection.filtered) == 3

    selection.set_muscle_group("legs")
    assert names(selection.filtered) == ["Leg Press"]

    selection.set_muscle_group("")
    selection.set_search("")
    assert selection.filtered == sample_exercises


def test_selection_toggle_all_uses_filtered_view(sample_exercises):
    selection = ExerciseSelection(sample_exercises)
    selection.set_muscle_group("chest")
    selection.toggle_all()
    assert selection.selected == ["e1", "e2"]
    assert selection.is_selected("e1")
    selection.toggle_all()
    assert selection.selected == []


def test_new_catalog_drops_unknown_selection(sample_exercises):
    selection = ExerciseSelection(sample_exercises)
    selection.toggle("e1")
    selection.toggle("e5")
    selection.set_exercises([ex for ex in sample_exercises if ex.id != "e5"])
    assert selection.selected == ["e1"]
    assert "biceps" not in selection.muscle_groups


def test_exercise_without_groups_only_matches_by_name():
    plank = Exercise(id="p", name="Plank")
    assert filter_exercises([plank], "plank") == [plank]
    assert filter_exercises([plank], muscle_group="abs") == []
