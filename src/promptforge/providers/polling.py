"""
Long-running job polling for video generation.

States:
  CREATED   -> job handle returned by the provider
  POLLING   -> waiting for the provider to flip ``done``
  COMPLETED -> done, no error reported
  FAILED    -> done with an error, or the poll cap was hit
  CANCELLED -> cancellation observed at an iteration boundary

Per iteration: check cancellation → sleep → emit "Checking progress..." →
re-fetch status. Cancellation is only observed between iterations; an
in-flight status fetch is never aborted.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

import structlog

from promptforge.common.cancellation import CancellationToken
from promptforge.common.errors import GenerationCancelledError, ProviderError
from promptforge.providers.base import ProgressCallback
from promptforge.schemas.generation import GenerationJob, JobState

logger = structlog.stdlib.get_logger()

STATUS_CHECKING = "Checking progress..."

StatusFetcher = Callable[[GenerationJob], Awaitable[GenerationJob]]


def emit_progress(callback: ProgressCallback | None, status: str) -> None:
    """Fire-and-forget progress update; a failing callback never breaks generation."""
    if callback is None:
        return
    try:
        callback(status)
    except Exception as e:  # noqa: BLE001
        logger.warning("progress.callback_failed", status=status, error=str(e))


class VideoJobPoller:
    def __init__(
        self,
        fetch_status: StatusFetcher,
        on_progress: ProgressCallback | None,
        interval: float = 10.0,
        max_polls: int = 0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.fetch_status = fetch_status
        self.on_progress = on_progress
        self.interval = interval
        self.max_polls = max_polls
        self._sleep = sleep

    async def run(self, job: GenerationJob, cancel: CancellationToken | None = None) -> GenerationJob:
        """Poll ``job`` until done; returns the terminal job snapshot."""
        if not job.done:
            job = job.model_copy(update={"state": JobState.POLLING})

        while not job.done:
            if cancel is not None and cancel.cancelled:
                job.state = JobState.CANCELLED
                await logger.ainfo("video.job.cancelled", operation=job.operation_name, polls=job.polls)
                raise GenerationCancelledError(cancel.reason or "Aborted by user")

            if self.max_polls and job.polls >= self.max_polls:
                job.state = JobState.FAILED
                raise ProviderError(
                    f"Video generation did not finish after {job.polls} status checks.",
                    details={"operation": job.operation_name, "polls": job.polls},
                )

            await self._sleep(self.interval)
            emit_progress(self.on_progress, STATUS_CHECKING)

            polls = job.polls + 1
            job = await self.fetch_status(job)
            job = job.model_copy(
                update={"polls": polls, "state": JobState.POLLING if not job.done else job.state}
            )
            await logger.adebug(
                "video.job.poll",
                operation=job.operation_name,
                polls=polls,
                done=job.done,
            )

        job.state = JobState.FAILED if job.error else JobState.COMPLETED
        return job
