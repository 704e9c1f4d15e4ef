import pytest

from tracker.rest_timer import RestTimer, format_time


@pytest.mark.parametrize(
    "seconds,expected",
    [(0, "0:00"), (5, "0:05"), (60, "1:00"), (90, "1:30"), (605, "10:05"), (-3, "0:00")],
)
def test_format_time(seconds, expected):
    assert format_time(seconds) == expected


@pytest.mark.parametrize("seconds", [1, 3, 90])
def test_countdown_clears_after_all_ticks(seconds, scheduler):
    ticks = []
    finished = []
    timer = RestTimer(scheduler, on_tick=ticks.append, on_finish=lambda: finished.append(True))

    timer.start(seconds)
    assert timer.is_running
    assert scheduler.events[0].interval == 1

    for _ in range(seconds):
        timer.tick()

    assert timer.remaining == 0
    assert not timer.is_running
    assert scheduler.active == []
    assert finished == [True]
    assert ticks == list(range(seconds, -1, -1))


def test_extra_ticks_are_ignored():
    finished = []
    timer = RestTimer(on_finish=lambda: finished.append(True))
    timer.start(1)
    timer.tick()
    timer.tick()
    assert timer.remaining == 0
    assert finished == [True]


def test_skip_stops_immediately(scheduler):
    ticks = []
    timer = RestTimer(scheduler, on_tick=ticks.append)
    timer.start(90)
    timer.tick()

    timer.skip()
    assert timer.remaining == 0
    assert not timer.is_running
    assert scheduler.active == []
    assert ticks[-1] == 0


def test_skip_when_idle_does_nothing():
    ticks = []
    timer = RestTimer(on_tick=ticks.append)
    timer.skip()
    assert ticks == []


def test_start_replaces_running_countdown(scheduler):
    timer = RestTimer(scheduler)
    timer.start(90)
    timer.start(30)
    assert timer.remaining == 30
    assert timer.duration == 30
    assert len(scheduler.active) == 1
    assert scheduler.events[0].cancelled


@pytest.mark.parametrize("seconds", [0, -10])
def test_start_requires_positive_seconds(seconds):
    timer = RestTimer()
    with pytest.raises(ValueError):
        timer.start(seconds)
    assert not timer.is_running


def test_fractional_seconds_below_one_are_rejected(scheduler):
    timer = RestTimer(scheduler)
    with pytest.raises(ValueError):
        timer.start(0.5)
    assert scheduler.events == []
    assert timer.duration == 0


def test_interval_callback_unschedules_at_zero(scheduler):
    timer = RestTimer(scheduler)
    timer.start(2)
    callback = scheduler.events[0].callback
    assert callback(1.0) is True
    assert callback(1.0) is False
    assert timer.label == "0:00"
