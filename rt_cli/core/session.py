"""Live tracking session state machine.

Distance is an estimate: elapsed time divided by an assumed pace, since no
position sensor is available. The repeating tick is a cancellable task on a
single-threaded asyncio loop; with no scheduler the caller drives ``tick()``.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import math
import time
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Protocol

from rt_cli.core.constants import (
    ASSUMED_SECONDS_PER_KM,
    LIVE_TRACKED_TYPE,
    RESUME_MODES,
    TICK_SECONDS,
)
from rt_cli.core.models import InvalidInputError, InvalidTransitionError, Workout
from rt_cli.core.store import WorkoutStore
from rt_cli.utils.formatting import format_pace, format_time, round_half_up

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass(frozen=True)
class LiveSnapshot:
    state: SessionState
    elapsed_seconds: int
    distance_km: float

    @property
    def elapsed(self) -> str:
        return format_time(self.elapsed_seconds)

    @property
    def pace(self) -> str:
        return format_pace(self.elapsed_seconds / 60, self.distance_km)

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "elapsed_seconds": self.elapsed_seconds,
            "elapsed": self.elapsed,
            "distance_km": self.distance_km,
            "pace": self.pace,
        }


class TaskHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, interval: float, callback: Callable[[], None]) -> TaskHandle: ...


class RepeatingTask:
    """Calls ``callback`` every ``interval`` seconds until cancelled."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self.cancelled = False
        self._handle: Optional[asyncio.TimerHandle] = loop.call_later(interval, self._run)

    def _run(self) -> None:
        if self.cancelled:
            return
        self._callback()
        if not self.cancelled:
            self._handle = self._loop.call_later(self._interval, self._run)

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class LoopScheduler:
    """Schedules repeating tasks on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def schedule(self, interval: float, callback: Callable[[], None]) -> RepeatingTask:
        loop = self._loop or asyncio.get_running_loop()
        return RepeatingTask(loop, interval, callback)


class ManualClock:
    """Clock that only moves when advanced; used for simulated sessions."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class LiveSession:
    """One in-progress tracked run that becomes a workout on stop."""

    def __init__(
        self,
        store: WorkoutStore,
        clock: Callable[[], float] = time.monotonic,
        scheduler: Optional[Scheduler] = None,
        seconds_per_km: float = ASSUMED_SECONDS_PER_KM,
        tick_seconds: float = TICK_SECONDS,
        resume_mode: str = "restart",
        today: Callable[[], date] = date.today,
        on_tick: Optional[Callable[[LiveSnapshot], None]] = None,
    ) -> None:
        if resume_mode not in RESUME_MODES:
            raise ValueError(f"resume_mode must be one of {'|'.join(RESUME_MODES)}")
        if seconds_per_km <= 0:
            raise ValueError("seconds_per_km must be greater than 0")
        self.store = store
        self.clock = clock
        self.scheduler = scheduler
        self.seconds_per_km = seconds_per_km
        self.tick_seconds = tick_seconds
        self.resume_mode = resume_mode
        self.today = today
        self.on_tick = on_tick

        self.state = SessionState.IDLE
        self.start_time: Optional[float] = None
        self.elapsed_seconds = 0
        self.distance_km = 0.0
        self._paused_raw = 0.0
        self._task: Optional[TaskHandle] = None

    def snapshot(self) -> LiveSnapshot:
        return LiveSnapshot(
            state=self.state,
            elapsed_seconds=self.elapsed_seconds,
            distance_km=self.distance_km,
        )

    def _require(self, action: str, *allowed: SessionState) -> None:
        if self.state not in allowed:
            raise InvalidTransitionError(f"Cannot {action} a session that is {self.state.value}")

    def _cancel_tick(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()

    def _begin(self, offset: float = 0.0) -> None:
        self.state = SessionState.RUNNING
        self.start_time = self.clock() - offset
        self.elapsed_seconds = int(offset)
        self.distance_km = round(self.elapsed_seconds / self.seconds_per_km, 2)
        if self.scheduler is not None:
            self._task = self.scheduler.schedule(self.tick_seconds, self.tick)

    def start(self) -> LiveSnapshot:
        self._require("start", SessionState.IDLE)
        self._begin()
        logger.debug("Live session started")
        return self.snapshot()

    def tick(self) -> LiveSnapshot:
        """Recompute elapsed time and estimated distance."""
        if self.state is not SessionState.RUNNING or self.start_time is None:
            return self.snapshot()
        self.elapsed_seconds = max(int(math.floor(self.clock() - self.start_time)), 0)
        self.distance_km = round(self.elapsed_seconds / self.seconds_per_km, 2)
        snap = self.snapshot()
        if self.on_tick is not None:
            self.on_tick(snap)
        return snap

    def pause(self) -> LiveSnapshot:
        """Pause a running session, or resume a paused one."""
        if self.state is SessionState.PAUSED:
            return self.resume()
        self._require("pause", SessionState.RUNNING)
        self._cancel_tick()
        if self.start_time is not None:
            self._paused_raw = self.clock() - self.start_time
        self.state = SessionState.PAUSED
        logger.debug("Live session paused at %ss", self.elapsed_seconds)
        return self.snapshot()

    def resume(self) -> LiveSnapshot:
        """Resume a paused session.

        ``restart`` mode re-runs the start transition, so elapsed time and
        distance begin again from zero. ``continue`` mode picks up from the
        paused values.
        """
        self._require("resume", SessionState.PAUSED)
        offset = self._paused_raw if self.resume_mode == "continue" else 0.0
        self._begin(offset)
        logger.debug("Live session resumed (%s)", self.resume_mode)
        return self.snapshot()

    def stop(self) -> Optional[Workout]:
        """Stop the session and commit a workout if any distance was covered.

        The session is reset to idle even when the commit is rejected; the
        rejection is re-raised to the caller.
        """
        self._require("stop", SessionState.RUNNING, SessionState.PAUSED)
        self._cancel_tick()
        self.state = SessionState.STOPPED

        committed: Optional[Workout] = None
        try:
            if self.distance_km > 0:
                committed = self.store.append(
                    {
                        "date": self.today().isoformat(),
                        "distance": self.distance_km,
                        "duration": round_half_up(self.elapsed_seconds / 60),
                        "type": LIVE_TRACKED_TYPE,
                        "kudos": 0,
                    }
                )
                logger.debug("Live session saved: %.2f km", committed.distance)
        except InvalidInputError as exc:
            logger.warning("Live session could not be saved: %s", exc)
            raise
        finally:
            self._reset()
        return committed

    def _reset(self) -> None:
        self.state = SessionState.IDLE
        self.start_time = None
        self.elapsed_seconds = 0
        self.distance_km = 0.0
        self._paused_raw = 0.0
