from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

from .models import AltimeterMode


@dataclass
class SwitchStats:
    """Aggregated altimeter statistics for a flight."""
    auto_switches: int = 0
    user_switches: int = 0
    overrides_cleared: int = 0
    min_interval_s: float = field(default=float("inf"))
    time_in_agl_s: float = 0.0
    time_in_asl_s: float = 0.0

    @property
    def total_switches(self) -> int:
        return self.auto_switches + self.user_switches


class SwitchMonitor:
    """
    Tracks how often and how closely together the altimeter mode changes.

    Every change is recorded as automatic or manual; the shortest gap
    between two changes shows whether the dwell time is being honoured.
    """

    def __init__(self) -> None:
        self.stats = SwitchStats()
        self._last_change_s: Optional[float] = None

    def record_change(self, now: float, by_user: bool) -> None:
        if by_user:
            self.stats.user_switches += 1
        else:
            self.stats.auto_switches += 1
        if self._last_change_s is not None:
            gap = now - self._last_change_s
            if gap < self.stats.min_interval_s:
                self.stats.min_interval_s = gap
        self._last_change_s = now

    def record_override_cleared(self) -> None:
        self.stats.overrides_cleared += 1

    def record_time(self, mode: AltimeterMode, dt: float) -> None:
        if mode == AltimeterMode.AGL:
            self.stats.time_in_agl_s += dt
        elif mode == AltimeterMode.ASL:
            self.stats.time_in_asl_s += dt

    def summary(self) -> SwitchStats:
        """Return aggregated switch statistics."""
        return self.stats
