"""Live tracking command."""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import nullcontext
from typing import Any, Dict, Optional

import typer
from rich.live import Live

from rt_cli.commands.common import fail, get_state, print_json_payload, warn_if_unsaved
from rt_cli.core.constants import RESUME_MODES
from rt_cli.core.models import InvalidTransitionError, TrackerError, Workout
from rt_cli.core.session import (
    LiveSession,
    LiveSnapshot,
    LoopScheduler,
    ManualClock,
    SessionState,
)
from rt_cli.core.state import AppState
from rt_cli.utils.formatting import convert_distance

logger = logging.getLogger(__name__)

CONTROLS_HELP = "Type p + Enter to pause/resume, s + Enter to stop."


def build_session(state: AppState, **overrides: Any) -> LiveSession:
    """Create a live session configured from the ``live`` config table."""
    live_cfg = state.config.get("live", {})
    options: Dict[str, Any] = {
        "seconds_per_km": float(live_cfg.get("seconds_per_km", 360)),
        "tick_seconds": float(live_cfg.get("tick_seconds", 1.0)),
        "resume_mode": str(live_cfg.get("resume_mode", "restart")),
    }
    options.update({key: value for key, value in overrides.items() if value is not None})
    return LiveSession(state.store, **options)


def _render(state: AppState, snap: LiveSnapshot) -> str:
    distance = convert_distance(snap.distance_km, state.settings.imperial)
    return f"{snap.state.value:<8} {snap.elapsed}  {distance}  {snap.pace} /km"


def _simulate(
    state: AppState,
    seconds: int,
    pause_at: Optional[int] = None,
    resume_after: int = 0,
    resume_mode: Optional[str] = None,
) -> Optional[Workout]:
    """Fast-forward ``seconds`` of running time on a manual clock.

    With ``pause_at`` the run is paused after that many running seconds and
    resumed ``resume_after`` seconds later.
    """
    clock = ManualClock()
    session = build_session(state, clock=clock, resume_mode=resume_mode)
    session.start()
    running = 0.0
    paused_once = False
    while running < seconds:
        if pause_at is not None and not paused_once and running >= pause_at:
            paused_once = True
            session.pause()
            clock.advance(resume_after)
            snap = session.resume()
            if state.verbose and not state.json_output:
                state.console.print(_render(state, snap), markup=False)
        clock.advance(session.tick_seconds)
        running += session.tick_seconds
        snap = session.tick()
        if state.verbose and not state.json_output:
            state.console.print(_render(state, snap), markup=False)
    return session.stop()


def handle_control(session: LiveSession, command: str, done: asyncio.Event) -> None:
    """Apply one typed control line to a running session."""
    key = command.strip().lower()[:1]
    try:
        if key == "p":
            snap = session.pause()
        elif key == "r":
            snap = session.resume()
        elif key in {"s", "q"}:
            done.set()
            return
        else:
            return
    except InvalidTransitionError as exc:
        logger.warning("%s", exc)
        return
    if session.on_tick is not None:
        session.on_tick(snap)


def _attach_controls(
    loop: asyncio.AbstractEventLoop, session: LiveSession, done: asyncio.Event
) -> bool:
    fd = sys.stdin.fileno()

    def _on_input() -> None:
        line = sys.stdin.readline()
        if not line:
            loop.remove_reader(fd)
            return
        handle_control(session, line, done)

    try:
        loop.add_reader(fd, _on_input)
    except NotImplementedError:
        logger.debug("Keyboard controls are not supported by this event loop")
        return False
    return True


async def _run_live(session: LiveSession, seconds: Optional[int], controls: bool) -> None:
    loop = asyncio.get_running_loop()
    session.scheduler = LoopScheduler(loop)
    done = asyncio.Event()
    session.start()
    attached = controls and _attach_controls(loop, session, done)
    try:
        if seconds is None:
            await done.wait()
        else:
            try:
                await asyncio.wait_for(done.wait(), seconds + session.tick_seconds / 2)
            except asyncio.TimeoutError:
                pass
    finally:
        if attached:
            loop.remove_reader(sys.stdin.fileno())


def _realtime(
    state: AppState, seconds: Optional[int], resume_mode: Optional[str] = None
) -> Optional[Workout]:
    session = build_session(state, resume_mode=resume_mode)
    interactive = not (state.json_output or state.plain_output or state.quiet)
    controls = interactive and sys.stdin.isatty()
    live: Optional[Live] = None
    if interactive:
        if controls:
            state.console.print(CONTROLS_HELP)
        live = Live(_render(state, session.snapshot()), console=state.console, transient=True)
        session.on_tick = lambda snap: live.update(_render(state, snap))

    with live if live is not None else nullcontext():
        try:
            asyncio.run(_run_live(session, seconds, controls))
        except KeyboardInterrupt:
            pass
        if session.state is SessionState.RUNNING:
            session.tick()
    return session.stop()


def track_command(
    ctx: typer.Context,
    seconds: Optional[int] = typer.Option(
        None, help="Stop automatically after N seconds (default: run until stopped)"
    ),
    simulate: bool = typer.Option(
        False, "--simulate", help="Fast-forward a simulated clock instead of waiting"
    ),
    pause_at: Optional[int] = typer.Option(
        None, help="With --simulate: pause after N running seconds"
    ),
    resume_after: int = typer.Option(
        0, help="With --simulate: resume a paused run after N seconds"
    ),
    resume_mode: Optional[str] = typer.Option(
        None, help="restart|continue (default: live.resume_mode from config)"
    ),
) -> None:
    """Track a live run; distance is estimated from elapsed time.

    Interactive runs accept p (pause/resume), r (resume) and s (stop) on stdin.
    """
    state = get_state(ctx)
    if seconds is not None and seconds <= 0:
        raise typer.BadParameter("--seconds must be greater than 0")
    if simulate and seconds is None:
        raise typer.BadParameter("--simulate requires --seconds")
    if pause_at is not None and not simulate:
        raise typer.BadParameter("--pause-at requires --simulate")
    if pause_at is not None and pause_at < 0:
        raise typer.BadParameter("--pause-at cannot be negative")
    if resume_after < 0:
        raise typer.BadParameter("--resume-after cannot be negative")
    if resume_mode is not None and resume_mode not in RESUME_MODES:
        raise typer.BadParameter(f"--resume-mode must be {'|'.join(RESUME_MODES)}")

    try:
        if simulate:
            workout = _simulate(state, seconds, pause_at, resume_after, resume_mode)
        else:
            workout = _realtime(state, seconds, resume_mode)
    except TrackerError as exc:
        fail(state, exc)
    warn_if_unsaved(state)

    if state.json_output:
        print_json_payload(
            state,
            {"status": "saved" if workout else "discarded", "workout": workout.to_dict() if workout else None},
        )
        return
    if state.plain_output:
        typer.echo("status\tsaved" if workout else "status\tdiscarded")
        return
    if workout is None:
        state.console.print("No distance covered; nothing saved.")
        return
    state.console.print(
        f"Run saved! Distance: {convert_distance(workout.distance, state.settings.imperial)}, "
        f"Time: {workout.duration:g} min"
    )
