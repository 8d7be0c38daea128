"""
Frame-driven timers.

Nothing here reads the wall clock: the host loop passes elapsed seconds to
``tick(dt)``. This keeps every timed behavior synchronously testable.
"""

from __future__ import annotations


class Countdown:
    """
    One-shot countdown, used for input debounce windows.

    Usage:
        cooldown = Countdown()
        cooldown.start(0.3)
        cooldown.tick(dt)
        if not cooldown.active: ...
    """

    def __init__(self):
        self._remaining = 0.0

    @property
    def active(self) -> bool:
        return self._remaining > 0.0

    @property
    def remaining(self) -> float:
        return self._remaining

    def start(self, duration: float) -> None:
        self._remaining = max(0.0, float(duration))

    def cancel(self) -> None:
        self._remaining = 0.0

    def tick(self, dt: float) -> None:
        if self._remaining > 0.0:
            self._remaining = max(0.0, self._remaining - dt)


class Ticker:
    """
    Fixed-interval pulse generator.

    ``tick(dt)`` returns how many whole intervals elapsed since the last call,
    carrying the remainder over. An interval of zero or less fires
    ``burst`` pulses per tick so instant reveal still terminates.
    """

    def __init__(self, interval: float, burst: int = 1_000_000):
        self.interval = interval
        self._burst = burst
        self._accumulated = 0.0

    def reset(self) -> None:
        self._accumulated = 0.0

    def tick(self, dt: float) -> int:
        if self.interval <= 0:
            return self._burst

        self._accumulated += dt
        pulses = int(self._accumulated // self.interval)
        self._accumulated -= pulses * self.interval
        return pulses
