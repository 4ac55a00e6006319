"""Tests for cooperative cancellation."""

from __future__ import annotations

import asyncio

import pytest

from promptforge.common.cancellation import CancellationToken, check_cancelled
from promptforge.common.errors import GenerationCancelledError


@pytest.mark.unit
class TestCancellationToken:
    def test_initial_state(self) -> None:
        token = CancellationToken()
        assert token.cancelled is False
        token.raise_if_cancelled()
        check_cancelled(None)

    def test_cancel_is_idempotent_and_keeps_first_reason(self) -> None:
        token = CancellationToken()
        token.cancel("first")
        token.cancel("second")
        assert token.cancelled
        with pytest.raises(GenerationCancelledError, match="first"):
            token.raise_if_cancelled()

    def test_default_reason(self) -> None:
        token = CancellationToken()
        token.cancel()
        with pytest.raises(GenerationCancelledError, match="Aborted by user"):
            check_cancelled(token)

    async def test_race_returns_result(self) -> None:
        async def work() -> int:
            return 42

        assert await CancellationToken().race(work()) == 42

    async def test_race_aborts_in_flight_work(self) -> None:
        token = CancellationToken()
        started = asyncio.Event()
        finished = False

        async def slow() -> None:
            nonlocal finished
            started.set()
            await asyncio.sleep(10)
            finished = True

        async def cancel_soon() -> None:
            await started.wait()
            token.cancel()

        canceller = asyncio.create_task(cancel_soon())
        with pytest.raises(GenerationCancelledError):
            await token.race(slow())
        await canceller
        assert finished is False

    async def test_race_with_already_cancelled_token(self) -> None:
        token = CancellationToken()
        token.cancel()
        calls = 0

        async def work() -> None:
            nonlocal calls
            calls += 1

        with pytest.raises(GenerationCancelledError):
            await token.race(work())
        assert calls == 0

    def test_cancelled_error_shape(self) -> None:
        err = GenerationCancelledError()
        assert err.status_code == 499
        assert err.error_type == "cancelled"
