"""
Server-Sent Events (SSE) streaming for long-running generation jobs.

Handles the full streaming lifecycle:
  1. Run the job with a progress callback that feeds a queue
  2. Format each progress update as an SSE line, in order
  3. Cancel the job when the client goes away
  4. Finish with exactly one terminal event: ready, error or cancelled
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, AsyncIterator, Awaitable, Callable

import structlog

from promptforge.common.cancellation import CancellationToken
from promptforge.common.errors import GenerationCancelledError, PromptForgeError

logger = structlog.stdlib.get_logger()

ProgressCallback = Callable[[str], None]
DisconnectCheck = Callable[[], Awaitable[bool]]


def format_sse(data: dict[str, Any] | str) -> str:
    """Format a single SSE event line."""
    if isinstance(data, dict):
        payload = json.dumps(data, separators=(",", ":"))
    else:
        payload = data
    return f"data: {payload}\n\n"


class ProgressChannel:
    """Synchronous progress callback that buffers statuses for the stream."""

    def __init__(self) -> None:
        self.queue: asyncio.Queue[str] = asyncio.Queue()

    def __call__(self, status: str) -> None:
        self.queue.put_nowait(status)

    def drain(self) -> list[str]:
        items = []
        while not self.queue.empty():
            items.append(self.queue.get_nowait())
        return items


def _retrieve(task: asyncio.Future[Any]) -> None:
    if not task.cancelled():
        task.exception()


async def stream_job_events(
    run: Callable[[ProgressCallback], Awaitable[str]],
    cancel: CancellationToken,
    is_disconnected: DisconnectCheck,
    check_interval: float = 1.0,
    ready_payload: Callable[[str], dict[str, Any]] | None = None,
) -> AsyncIterator[str]:
    """
    Drive ``run`` and yield its progress as SSE lines.

    ``run`` receives the progress callback and returns the result handle.
    Disconnects are checked every ``check_interval`` seconds while no progress
    arrives; a disconnect fires ``cancel`` so the job stops at its next
    checkpoint.
    """
    channel = ProgressChannel()
    task = asyncio.ensure_future(run(channel))
    task.add_done_callback(_retrieve)

    try:
        while not task.done():
            getter = asyncio.ensure_future(channel.queue.get())
            done, _ = await asyncio.wait(
                {task, getter}, timeout=check_interval, return_when=asyncio.FIRST_COMPLETED
            )
            if getter in done:
                yield format_sse({"type": "progress", "status": getter.result()})
                continue
            getter.cancel()
            if not done and await is_disconnected():
                await logger.ainfo("stream.client_disconnected")
                cancel.cancel("Client disconnected")

        for status in channel.drain():
            yield format_sse({"type": "progress", "status": status})

        try:
            handle = task.result()
        except GenerationCancelledError as exc:
            yield format_sse({"type": "cancelled", "message": exc.message})
        except PromptForgeError as exc:
            await logger.aerror("stream.error", error_type=exc.error_type, error=exc.message)
            yield format_sse({"type": "error", **exc.to_response()})
        except Exception as exc:
            await logger.aerror("stream.error", error=str(exc))
            yield format_sse(
                {
                    "type": "error",
                    "error": {"message": f"Stream interrupted: {exc}", "type": "stream_error"},
                }
            )
        else:
            payload = ready_payload(handle) if ready_payload else {"handle": handle}
            yield format_sse({"type": "ready", **payload})

    finally:
        if not task.done():
            cancel.cancel("Client disconnected")
            task.cancel()
