"""
Frame Clock
============
Turns raw frame timestamps into a normalized step multiplier.
"""

TARGET_FPS = 60
NOMINAL_FRAME_MS = 1000.0 / TARGET_FPS
MAX_FRAME_DELAY_MS = 32.0


class FrameClock:
    """
    Normalizes frame timestamps (milliseconds) to simulation steps.

    A nominal frame (~16.67ms) maps to 1.0. The raw delay is clamped to
    max_delay_ms first so a stalled host cannot jump the simulation.
    The first tick after reset() always yields the nominal step.
    """

    def __init__(self, nominal_ms: float = NOMINAL_FRAME_MS,
                 max_delay_ms: float = MAX_FRAME_DELAY_MS):
        if nominal_ms <= 0 or max_delay_ms <= 0:
            raise ValueError('clock durations must be positive')
        self.nominal_ms = nominal_ms
        self.max_delay_ms = max_delay_ms
        self._last_ms = None
        self.last_dt = 1.0

    def reset(self):
        """Forget the previous timestamp (new run or restart)."""
        self._last_ms = None

    def tick(self, timestamp_ms: float, time_scale: float = 1.0) -> float:
        """Advance to timestamp_ms and return the step multiplier."""
        if self._last_ms is None:
            delay = self.nominal_ms
        else:
            delay = timestamp_ms - self._last_ms
            # Repeated or backwards timestamps fall back to a nominal frame
            if delay <= 0:
                delay = self.nominal_ms
        self._last_ms = timestamp_ms

        delay = min(self.max_delay_ms, delay)
        self.last_dt = delay / self.nominal_ms * time_scale
        return self.last_dt
