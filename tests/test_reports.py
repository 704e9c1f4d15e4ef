from datetime import date

import httpx
import pytest

from tracker.api import ApiClient
from tracker.reports import ReportsService, describe_personal_record, overview_cards


@pytest.fixture
def reports():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"endpoint": request.url.path})

    api = ApiClient("http://api.test", transport=httpx.MockTransport(handler))
    service = ReportsService(api)
    service.requests = requests
    return service


def test_overview_dates(reports):
    result = reports.get_workout_overview(date(2025, 1, 1), date(2025, 1, 31))
    assert result == {"endpoint": "/reports/overview"}
    assert dict(reports.requests[0].url.params) == {
        "startDate": "2025-01-01",
        "endDate": "2025-01-31",
    }


def test_compare_exercises_joins_ids(reports):
    reports.compare_exercises(["e1", "e2"], metric="volume")
    params = dict(reports.requests[0].url.params)
    assert params == {"exerciseIds": "e1,e2", "metric": "volume"}


def test_evolution(reports):
    reports.get_exercise_evolution("e1", "average")
    assert dict(reports.requests[0].url.params) == {"exerciseId": "e1", "seriesType": "average"}


@pytest.mark.parametrize(
    "call",
    [
        lambda r: r.compare_exercises(["e1"], metric="speed"),
        lambda r: r.get_exercise_evolution("e1", "median"),
        lambda r: r.get_workout_frequency("decade"),
    ],
)
def test_invalid_options_are_rejected(reports, call):
    with pytest.raises(ValueError):
        call(reports)
    assert reports.requests == []


@pytest.mark.parametrize(
    "method,endpoint",
    [
        ("get_personal_records", "personal-records"),
        ("get_exercise_progress", "exercise-progress"),
        ("get_workout_frequency", "frequency"),
        ("get_muscle_group_analysis", "muscle-groups"),
        ("get_volume_analysis", "volume"),
        ("get_workout_duration", "duration"),
        ("get_workout_consistency", "consistency"),
        ("get_strength_analysis", "strength-analysis"),
        ("get_complete_report", "complete"),
    ],
)
def test_report_endpoints(reports, method, endpoint):
    assert getattr(reports, method)() == {"endpoint": f"/reports/{endpoint}"}


def test_overview_cards():
    overview = {
        "totals": {"workouts": 12, "exercises": 48, "series": 150, "volume": 30250.5},
        "averages": {"exercisesPerWorkout": 4.2, "seriesPerWorkout": 12.6, "durationMinutes": 55},
    }
    assert overview_cards(overview) == [
        ("Workouts", "12"),
        ("Exercises", "48"),
        ("Series", "150"),
        ("Volume (kg)", "30250.5"),
        ("Exercises / workout", "4"),
        ("Series / workout", "13"),
        ("Avg. duration", "55 min"),
    ]


def test_overview_cards_without_data():
    cards = dict(overview_cards({"totals": None, "averages": {"durationMinutes": None}}))
    assert cards["Workouts"] == "0"
    assert cards["Volume (kg)"] == "0"
    assert cards["Avg. duration"] == "0 min"


def test_personal_record_text():
    record = {
        "exerciseName": "Squat",
        "record": {"value": 120, "reps": 5, "date": "2025-02-10T00:00:00.000Z"},
        "type": "weight",
    }
    assert describe_personal_record(record) == ("Squat", "120 kg x 5 on 2025-02-10")
    assert describe_personal_record({"exerciseName": "Row", "record": None}) == ("Row", "0 kg")
