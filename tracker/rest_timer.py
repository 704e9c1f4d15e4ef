"""Countdown shown between consecutive series of an exercise.

:class:`RestTimer` keeps the remaining seconds and nothing else.  The
one-second interval is delegated to a *scheduler* following the
:class:`kivy.clock.Clock` contract (``schedule_interval(callback, interval)``
returning an event with ``cancel()``).  The app passes Kivy's ``Clock``;
tests pass nothing and call :meth:`RestTimer.tick` themselves.
"""

from __future__ import annotations

from typing import Any, Callable


def format_time(seconds: int) -> str:
    """Return ``seconds`` as ``m:ss``."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}:{secs:02d}"


class RestTimer:
    """Single countdown; starting a new one replaces the running one."""

    def __init__(
        self,
        scheduler: Any = None,
        on_tick: Callable[[int], None] | None = None,
        on_finish: Callable[[], None] | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.on_tick = on_tick
        self.on_finish = on_finish
        self.remaining = 0
        self.duration = 0
        self._event = None

    @property
    def is_running(self) -> bool:
        return self.remaining > 0

    @property
    def label(self) -> str:
        return format_time(self.remaining)

    def start(self, seconds: int) -> None:
        """Begin counting down ``seconds`` one second at a time."""

        seconds = int(seconds)
        if seconds <= 0:
            raise ValueError("Rest time must be positive")
        self.clear()
        self.duration = seconds
        self.remaining = seconds
        if self.scheduler is not None:
            self._event = self.scheduler.schedule_interval(self._on_interval, 1)
        if self.on_tick:
            self.on_tick(self.remaining)

    def _on_interval(self, dt: float) -> bool:
        self.tick()
        # returning False also unschedules a Kivy interval
        return self.is_running

    def tick(self) -> None:
        """Advance the countdown by one second."""

        if not self.is_running:
            return
        self.remaining -= 1
        if self.on_tick:
            self.on_tick(self.remaining)
        if self.remaining == 0:
            self.clear()
            if self.on_finish:
                self.on_finish()

    def skip(self) -> None:
        """Stop immediately regardless of the remaining time."""

        was_running = self.is_running
        self.remaining = 0
        self.clear()
        if was_running and self.on_tick:
            self.on_tick(0)

    def clear(self) -> None:
        """Cancel the scheduled interval, if any."""

        if self._event is not None:
            self._event.cancel()
            self._event = None
