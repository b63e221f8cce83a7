from __future__ import annotations

from typing import Optional


class GravityTimer:
    """Accumulates elapsed time and reports when a gravity tick is due.

    A disarmed timer ignores elapsed time. Arming always starts a fresh
    period, so a level change or resume never fires early.
    """

    def __init__(self) -> None:
        self.interval_ms: Optional[float] = None
        self.elapsed_ms = 0.0

    @property
    def armed(self) -> bool:
        return self.interval_ms is not None

    def arm(self, interval_ms: float) -> None:
        if interval_ms <= 0:
            raise ValueError(f"gravity interval must be positive, got {interval_ms}")
        self.interval_ms = float(interval_ms)
        self.elapsed_ms = 0.0

    def cancel(self) -> None:
        self.interval_ms = None
        self.elapsed_ms = 0.0

    def advance(self, elapsed_ms: float) -> None:
        if self.interval_ms is not None and elapsed_ms > 0:
            self.elapsed_ms += elapsed_ms

    def pop_due(self) -> bool:
        if self.interval_ms is None or self.elapsed_ms < self.interval_ms:
            return False
        self.elapsed_ms -= self.interval_ms
        return True
