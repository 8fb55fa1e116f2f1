from __future__ import annotations

import asyncio
import logging
from typing import List

import pytest

from rt_cli.commands.track import handle_control
from rt_cli.core.session import LiveSession, LiveSnapshot, ManualClock, SessionState
from rt_cli.core.store import WorkoutStore


def _run(session: LiveSession, lines: List[str]) -> bool:
    async def scenario() -> bool:
        done = asyncio.Event()
        for line in lines:
            handle_control(session, line, done)
        return done.is_set()

    return asyncio.run(scenario())


def test_p_toggles_pause_and_resume(store: WorkoutStore) -> None:
    clock = ManualClock()
    seen: List[LiveSnapshot] = []
    session = LiveSession(store, clock=clock, resume_mode="continue", on_tick=seen.append)
    session.start()
    clock.advance(120)
    session.tick()

    assert not _run(session, ["p\n"])
    assert session.state is SessionState.PAUSED
    assert seen[-1].state is SessionState.PAUSED

    clock.advance(30)
    _run(session, ["P\n"])
    assert session.state is SessionState.RUNNING
    assert session.elapsed_seconds == 120


def test_r_resumes_and_s_stops(store: WorkoutStore) -> None:
    session = LiveSession(store, clock=ManualClock())
    session.start()
    assert _run(session, ["p", "r", "s"])
    assert session.state is SessionState.RUNNING


def test_invalid_control_is_logged(store: WorkoutStore, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.WARNING)
    session = LiveSession(store, clock=ManualClock())
    session.start()
    assert not _run(session, ["r\n", "x\n", "\n"])
    assert session.state is SessionState.RUNNING
    assert "Cannot resume" in caplog.text
