"""
Cooperative cancellation for long-running generation flows.

A token is created by the caller and threaded through every suspension
point. Adapters check it at defined checkpoints (before a call, at each poll
iteration). ``race`` additionally aborts an in-flight awaitable, which is
used only for the final media download.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from promptforge.common.errors import GenerationCancelledError

T = TypeVar("T")


class CancellationToken:
    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "Aborted by user") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise GenerationCancelledError(self.reason or "Aborted by user")

    async def wait(self) -> None:
        await self._event.wait()

    async def race(self, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` unless the token fires first.

        If the token fires, the pending task is cancelled and
        GenerationCancelledError is raised.
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled()

        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            work.cancel()
            raise
        finally:
            waiter.cancel()

        if work in done:
            return work.result()

        work.cancel()
        try:
            await work
        except asyncio.CancelledError:
            pass
        raise GenerationCancelledError(self.reason or "Aborted by user")


def check_cancelled(token: CancellationToken | None) -> None:
    """Raise GenerationCancelledError if an optional token has fired."""
    if token is not None:
        token.raise_if_cancelled()
