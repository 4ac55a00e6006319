"""Generation request/response schemas and the video job model."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, Field


class TextGenerationRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    config_id: str | None = None


class TextGenerationResponse(BaseModel):
    text: str
    provider: str
    model: str


class SpeechGenerationRequest(BaseModel):
    text: str = Field(..., min_length=1)
    config_id: str | None = None


class SpeechGenerationResponse(BaseModel):
    audio_base64: str
    sample_rate: int
    channels: int
    encoding: str = "pcm_s16le"


class VideoGenerationRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    config_id: str | None = None
    aspect_ratio: str | None = None
    resolution: str | None = None
    model: str | None = None


class JobState(str, enum.Enum):
    CREATED = "created"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATES = frozenset({JobState.COMPLETED, JobState.FAILED, JobState.CANCELLED})


class GenerationJob(BaseModel):
    """A long-running provider operation, mutated only by re-polling."""

    operation_name: str
    done: bool = False
    result_uri: str | None = None
    error: dict[str, Any] | None = None
    state: JobState = JobState.CREATED
    polls: int = 0

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES
