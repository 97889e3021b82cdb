from __future__ import annotations

import os
import time
from typing import Callable, Optional

from ..models.schemas import HealthStatus

HEALTH_MESSAGE = "API is running"


def process_start_time() -> float:
    """Return the epoch time at which this process was started.

    Reads ``/proc/self/stat`` and the boot time from ``/proc/stat`` the same
    way ``prometheus_client.ProcessCollector`` does.  Where ``/proc`` is not
    available the time this module was imported is used.
    """

    try:
        with open("/proc/self/stat", "rb") as handle:
            stat = handle.read().decode("utf-8", "replace")
        with open("/proc/stat", "rb") as handle:
            boot_time = next(
                float(line.split()[1])
                for line in handle.read().decode("utf-8").splitlines()
                if line.startswith("btime ")
            )
        # Fields after the command name; starttime is field 22 overall.
        start_ticks = float(stat.rpartition(")")[2].split()[19])
        return boot_time + start_ticks / os.sysconf("SC_CLK_TCK")
    except (OSError, ValueError, IndexError, StopIteration):
        return time.time()


# Process start expressed on the monotonic clock, fixed once per process.
PROCESS_STARTED = time.monotonic() - max(0.0, time.time() - process_start_time())


class StatusReporter:
    """Build liveness payloads from the process clocks.

    Parameters
    ----------
    started_at:
        Reading of ``clock`` at process start.  Defaults to
        ``PROCESS_STARTED`` so every reporter in the process agrees.
    clock:
        Monotonic clock used for uptime.  Injected by tests.
    wall_clock:
        Wall clock returning epoch seconds.  Injected by tests.
    """

    def __init__(
        self,
        started_at: Optional[float] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._clock = clock
        self._wall_clock = wall_clock
        self._started_at = PROCESS_STARTED if started_at is None else started_at

    def uptime(self) -> float:
        """Return seconds elapsed since ``started_at``, never negative."""
        return max(0.0, self._clock() - self._started_at)

    def get_health(self) -> HealthStatus:
        return HealthStatus(
            success=True,
            message=HEALTH_MESSAGE,
            timestamp=int(self._wall_clock() * 1000),
            uptime=self.uptime(),
        )
