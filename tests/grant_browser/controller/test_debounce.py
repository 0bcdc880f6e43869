from __future__ import annotations

import asyncio
import logging

from grant_browser.controller.debounce import Debouncer


def test_only_last_call_in_quiet_period_runs():
    calls = []

    async def scenario():
        debouncer = Debouncer(0.02)
        for value in ("F", "Fo", "For", "Ford"):
            debouncer.schedule(calls.append, value)
            await asyncio.sleep(0.005)
        assert debouncer.pending
        await asyncio.sleep(0.05)
        assert not debouncer.pending

    asyncio.run(scenario())

    assert calls == ["Ford"]


def test_cancel_drops_pending_call():
    calls = []

    async def scenario():
        debouncer = Debouncer(0.01)
        debouncer.schedule(calls.append, "x")
        debouncer.cancel()
        await asyncio.sleep(0.03)

    asyncio.run(scenario())

    assert calls == []


def test_callback_errors_are_logged_not_raised(caplog):
    def boom():
        raise RuntimeError("search backend down")

    async def scenario():
        debouncer = Debouncer(0.0)
        debouncer.schedule(boom)
        await asyncio.sleep(0.01)

    with caplog.at_level(logging.ERROR):
        asyncio.run(scenario())

    assert "Debounced callback failed" in caplog.text
