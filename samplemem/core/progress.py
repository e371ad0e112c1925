"""Self-calibrating progress cadence for a running scan."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from samplemem.core.model import ProgressStatus

DEFAULT_INITIAL_COUNTDOWN = 10
DEFAULT_INTERVAL_S = 1.0


def format_elapsed(seconds: float) -> str:
    """Format whole elapsed seconds as M:SS, or H:MM:SS from one hour on."""
    total = int(seconds)
    minutes, sec = divmod(total, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{sec:02d}"
    return f"{minutes}:{sec:02d}"


@dataclass
class ProgressState:
    started_at: float
    samples_done: int = 0
    countdown: int = DEFAULT_INITIAL_COUNTDOWN


class ProgressEstimator:
    """Decides when to emit a status line and what it says.

    The countdown starts small so the first status appears quickly. Each time
    it runs out, the measured time per sample is used to size the next
    countdown so that updates land roughly `interval_s` apart in wall time,
    whatever the device throughput.
    """

    def __init__(
        self,
        sample_count: int,
        *,
        initial_countdown: int = DEFAULT_INITIAL_COUNTDOWN,
        interval_s: float = DEFAULT_INTERVAL_S,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.sample_count = sample_count
        self.initial_countdown = initial_countdown
        self.interval_s = interval_s
        self._clock = clock
        self.state = ProgressState(started_at=clock(), countdown=initial_countdown)

    def tick(self, samples_done: int, bad_block_count: int) -> ProgressStatus | None:
        self.state.samples_done = samples_done
        if self.state.countdown > 0:
            self.state.countdown -= 1
            return None

        elapsed = self._clock() - self.state.started_at
        if elapsed > 0 and samples_done > 0:
            time_per_sample = elapsed / samples_done
            self.state.countdown = round(self.interval_s / time_per_sample)
        else:
            self.state.countdown = max(samples_done, self.initial_countdown)
        return self.status(bad_block_count, elapsed=elapsed)

    def status(self, bad_block_count: int, *, elapsed: float | None = None) -> ProgressStatus:
        if elapsed is None:
            elapsed = self._clock() - self.state.started_at
        return ProgressStatus(
            percent=self.state.samples_done / self.sample_count * 100,
            elapsed_s=elapsed,
            elapsed_text=format_elapsed(elapsed),
            bad_block_count=bad_block_count,
        )
