"""
Frame Scheduler - fixed-step plugin execution decoupled from display refresh

Accumulator-based timing: each host callback adds
    elapsed_seconds * base_rate * playback_multiplier
steps to the backlog and drains whole steps from it. Each drained step
calls step_callback(timestamp_ms, delta_ms), which applies modulation and
runs the plugin, then advances the logical frame counter and timestamp.

Key invariants:
- Starting owes exactly one step, so the first callback draws immediately
- At most max_steps_per_callback steps per callback; when the cap is hit
  the backlog collapses to at most one step
- Changing the playback multiplier keeps fractional progress toward the
  next step (the accumulator is counted in steps, not milliseconds)
- Stopping cancels the pending callback; logical state is kept for resume
"""

import time
from typing import Callable, Optional, Protocol

from gensynth.config import BASE_ITERATIONS_PER_SECOND, MAX_RUNS_PER_FRAME
from gensynth.params.normalize import to_number
from gensynth.utils.logger import logger


class FrameTimer(Protocol):
    """Host hook that calls back once per display frame."""

    def request(self, callback: Callable[[float], None]) -> None:
        """Schedule callback(timestamp_ms) for the next frame."""

    def cancel(self) -> None:
        """Cancel a pending callback, if any."""


def monotonic_ms() -> float:
    """Monotonic time in milliseconds."""
    return time.monotonic() * 1000.0


class FrameScheduler:
    """Fixed-step accumulator loop driven by a FrameTimer."""

    def __init__(
        self,
        step_callback: Callable[[float, float], bool],
        frame_timer: FrameTimer,
        clock: Callable[[], float] = monotonic_ms,
        base_rate: float = BASE_ITERATIONS_PER_SECOND,
        max_steps_per_callback: int = MAX_RUNS_PER_FRAME,
        on_params_changed: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            step_callback: Called per step with (timestamp_ms, delta_ms);
                returns True when a visible parameter value changed
            frame_timer: Host callback source
            clock: Millisecond clock used to seed the logical timestamp
            base_rate: Steps per second at playback multiplier 1
            max_steps_per_callback: Backpressure cap per host callback
            on_params_changed: Called once per callback if any step changed params
        """
        self._step_callback = step_callback
        self._frame_timer = frame_timer
        self._clock = clock
        self.base_rate = base_rate
        self.max_steps_per_callback = max_steps_per_callback
        self._on_params_changed = on_params_changed

        self.running = False
        self.frame = 0
        self.playback_multiplier = 1.0
        self.accumulated_steps = 0.0
        self.last_timestamp: Optional[float] = None
        self.run_timestamp = self._clock()

    @property
    def steps_per_second(self) -> float:
        return self.base_rate * self.playback_multiplier

    @property
    def step_interval_ms(self) -> float:
        return 1000.0 / self.steps_per_second

    # === Lifecycle ===

    def start(self) -> bool:
        """Start ticking. Returns False if already running."""
        if self.running:
            return False
        self.running = True
        self.last_timestamp = None
        self.accumulated_steps = 1.0
        self.run_timestamp = self._clock()
        self._frame_timer.request(self.tick)
        logger.debug("Scheduler started", component="SCHED")
        return True

    def stop(self) -> bool:
        """Stop ticking and cancel the pending callback. Returns False if not running."""
        if not self.running:
            return False
        self.running = False
        self._frame_timer.cancel()
        logger.debug(f"Scheduler stopped at frame {self.frame}", component="SCHED")
        return True

    def reset_counters(self) -> None:
        """Zero the frame counter and restart the logical timeline."""
        self.frame = 0
        self.owe_one_step()

    def owe_one_step(self) -> None:
        """Drop any backlog and owe exactly one step (resize/restart/switch)."""
        self.last_timestamp = None
        self.accumulated_steps = 1.0
        self.run_timestamp = self._clock()

    def set_playback_multiplier(self, multiplier) -> bool:
        """Set the playback multiplier (positive real). Invalid values are ignored."""
        value = to_number(multiplier, None)
        if value is None or not value > 0:
            return False
        self.playback_multiplier = value
        return True

    # === Host callback ===

    def tick(self, timestamp: float) -> int:
        """
        Host frame callback. Drains whole steps from the accumulator.

        Returns:
            Number of steps run during this callback
        """
        if not self.running:
            return 0

        if self.last_timestamp is None:
            self.last_timestamp = timestamp
        delta_ms = max(0.0, timestamp - self.last_timestamp)
        self.last_timestamp = timestamp

        steps_per_second = self.steps_per_second
        step_delta_ms = 1000.0 / steps_per_second
        self.accumulated_steps += (delta_ms / 1000.0) * steps_per_second

        runs = 0
        params_changed = False
        while self.accumulated_steps >= 1 and runs < self.max_steps_per_callback:
            self.accumulated_steps -= 1
            self.run_timestamp += step_delta_ms
            if self._step_callback(self.run_timestamp, step_delta_ms):
                params_changed = True
            self.frame += 1
            runs += 1
            if not self.running:
                break

        if runs >= self.max_steps_per_callback and self.accumulated_steps > 1:
            logger.debug(f"Step cap hit, dropping {self.accumulated_steps - 1:.1f} steps",
                         component="SCHED")
            self.accumulated_steps = 1.0

        if params_changed and self._on_params_changed is not None:
            self._on_params_changed()

        if self.running:
            self._frame_timer.request(self.tick)
        return runs
