from __future__ import annotations

import asyncio
import logging

import pytest

from aawaaj_admin.security.inactivity import QUALIFYING_EVENTS, InactivityMonitor


def test_timeout_fires_once_after_idle_period() -> None:
    calls: list[str] = []

    async def scenario() -> InactivityMonitor:
        monitor = InactivityMonitor(lambda: calls.append("signed-out"), timeout_ms=20)
        monitor.start()
        await asyncio.sleep(0.08)
        return monitor

    monitor = asyncio.run(scenario())

    assert calls == ["signed-out"]
    assert monitor.expired
    assert not monitor.active


def test_qualifying_events_reset_the_countdown() -> None:
    calls: list[str] = []

    async def scenario() -> list[str]:
        monitor = InactivityMonitor(lambda: calls.append("signed-out"), timeout_ms=100)
        monitor.start()
        for _ in range(4):
            await asyncio.sleep(0.03)
            assert monitor.notify("keydown")
        observed = list(calls)
        await asyncio.sleep(0.25)
        monitor.close()
        return observed

    before_idle = asyncio.run(scenario())

    assert before_idle == []
    assert calls == ["signed-out"]


def test_other_events_do_not_count_as_activity() -> None:
    calls: list[str] = []

    async def scenario() -> None:
        monitor = InactivityMonitor(lambda: calls.append("signed-out"), timeout_ms=40)
        monitor.start()
        await asyncio.sleep(0.02)
        assert not monitor.notify("mouseover")
        await asyncio.sleep(0.1)

    asyncio.run(scenario())

    assert calls == ["signed-out"]
    assert QUALIFYING_EVENTS == {
        "mousemove",
        "mousedown",
        "pointermove",
        "pointerdown",
        "keydown",
        "touchstart",
        "scroll",
    }


def test_mouse_events_reset_the_countdown() -> None:
    calls: list[str] = []

    async def scenario() -> list[str]:
        monitor = InactivityMonitor(lambda: calls.append("signed-out"), timeout_ms=100)
        monitor.start()
        for event in ("mousemove", "mousedown", "mousemove", "mousedown"):
            await asyncio.sleep(0.03)
            assert monitor.notify(event)
        observed = list(calls)
        await asyncio.sleep(0.25)
        monitor.close()
        return observed

    before_idle = asyncio.run(scenario())

    assert before_idle == []
    assert calls == ["signed-out"]


def test_failing_sign_out_is_logged_and_monitor_still_expires(caplog: pytest.LogCaptureFixture) -> None:
    def sign_out() -> None:
        raise RuntimeError("auth service unreachable")

    async def scenario() -> InactivityMonitor:
        monitor = InactivityMonitor(sign_out, timeout_ms=10)
        monitor.start()
        await asyncio.sleep(0.06)
        return monitor

    with caplog.at_level(logging.ERROR, logger="aawaaj.security"):
        monitor = asyncio.run(scenario())

    assert monitor.expired
    assert not monitor.active
    failures = [record for record in caplog.records if record.getMessage() == "session.inactivity_signout_failed"]
    assert len(failures) == 1
    assert failures[0].exc_info is not None


def test_close_cancels_pending_countdown() -> None:
    calls: list[str] = []

    async def scenario() -> InactivityMonitor:
        async with InactivityMonitor(lambda: calls.append("signed-out"), timeout_ms=30) as monitor:
            assert monitor.active
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.06)
        return monitor

    monitor = asyncio.run(scenario())

    assert calls == []
    assert not monitor.expired
    assert not monitor.notify("scroll")


def test_async_callback_is_awaited() -> None:
    calls: list[str] = []

    async def sign_out() -> None:
        await asyncio.sleep(0)
        calls.append("signed-out")

    async def scenario() -> None:
        monitor = InactivityMonitor(sign_out, timeout_ms=10)
        monitor.start()
        await asyncio.sleep(0.06)

    asyncio.run(scenario())

    assert calls == ["signed-out"]


def test_timeout_must_be_positive() -> None:
    with pytest.raises(ValueError):
        InactivityMonitor(lambda: None, timeout_ms=0)
