"""Conversion progress reporting."""

from collections.abc import Callable


class ProgressReporter:
    """Forward fractional progress to a callback, clamped and never decreasing.

    The sampler calls the reporter once per sampled index and once more at the
    end, so the number of calls is not the number of frames written.
    """

    def __init__(self, callback: Callable[[float], None] | None = None):
        self.callback = callback
        self.current = 0.0
        self.calls = 0
        self.completed = False

    def __call__(self, value: float) -> float:
        return self.report(value)

    def report(self, value: float) -> float:
        """Forward ``value`` clamped to [0, 1] and to the last forwarded value."""
        clamped = min(1.0, max(0.0, float(value)))
        self.current = max(self.current, clamped)
        self.calls += 1
        if self.current >= 1.0:
            self.completed = True
        if self.callback:
            self.callback(self.current)
        return self.current

    def complete(self) -> float:
        """Forward the terminal 1.0."""
        return self.report(1.0)

    @property
    def progress(self) -> float:
        """Last forwarded value."""
        return self.current
