"""
Generation endpoints.

POST /v1/generate/text    -> text from the selected provider
POST /v1/generate/speech  -> base64 PCM JSON, or WAV bytes with ?format=wav
POST /v1/generate/video   -> SSE stream of progress, ending in ready/error/cancelled

The provider config is resolved before any work starts, so a missing or
unknown config fails as a plain JSON error rather than inside the stream.
"""

from __future__ import annotations

import enum

import structlog
from fastapi import APIRouter, Query, Request
from fastapi.responses import Response, StreamingResponse

from promptforge.api.deps import AppSettings, Dispatcher, ProviderConfigs
from promptforge.common.cancellation import CancellationToken
from promptforge.common.streaming import stream_job_events
from promptforge.core.media.audio import pcm_to_wav
from promptforge.providers.base import ProgressCallback
from promptforge.schemas.generation import (
    SpeechGenerationRequest,
    SpeechGenerationResponse,
    TextGenerationRequest,
    TextGenerationResponse,
    VideoGenerationRequest,
)

logger = structlog.stdlib.get_logger()

router = APIRouter(prefix="/generate", tags=["Generation"])


class AudioFormat(str, enum.Enum):
    JSON = "json"
    WAV = "wav"


@router.post("/text", response_model=TextGenerationResponse, summary="Generate text")
async def generate_text(
    body: TextGenerationRequest,
    configs: ProviderConfigs,
    dispatcher: Dispatcher,
) -> TextGenerationResponse:
    config = await configs.resolve(body.config_id)
    text = await dispatcher.generate_text(body.prompt, config)
    return TextGenerationResponse(text=text, provider=config.provider.value, model=config.model)


@router.post(
    "/speech",
    response_model=SpeechGenerationResponse,
    summary="Synthesize speech",
    responses={200: {"content": {"audio/wav": {}}}},
)
async def generate_speech(
    body: SpeechGenerationRequest,
    configs: ProviderConfigs,
    dispatcher: Dispatcher,
    settings: AppSettings,
    format: AudioFormat = Query(default=AudioFormat.JSON),
) -> SpeechGenerationResponse | Response:
    config = await configs.resolve(body.config_id)
    audio = await dispatcher.generate_speech(body.text, config)

    speech = settings.speech
    if format == AudioFormat.WAV:
        wav = pcm_to_wav(audio, sample_rate=speech.sample_rate, channels=speech.channels)
        return Response(content=wav, media_type="audio/wav")
    return SpeechGenerationResponse(
        audio_base64=audio, sample_rate=speech.sample_rate, channels=speech.channels
    )


@router.post(
    "/video",
    summary="Generate video",
    description="Streams progress as SSE; closing the connection cancels the job.",
    responses={200: {"content": {"text/event-stream": {}}}},
)
async def generate_video(
    body: VideoGenerationRequest,
    request: Request,
    configs: ProviderConfigs,
    dispatcher: Dispatcher,
) -> StreamingResponse:
    config = await configs.resolve(body.config_id)
    cancel = CancellationToken()
    request_id = getattr(request.state, "request_id", "unknown")

    async def run(on_progress: ProgressCallback) -> str:
        return await dispatcher.generate_video(
            body.prompt,
            config,
            on_progress,
            cancel,
            aspect_ratio=body.aspect_ratio,
            resolution=body.resolution,
            model=body.model,
        )

    def ready_payload(handle: str) -> dict[str, str]:
        return {"handle": handle, "url": f"/v1/{handle}"}

    return StreamingResponse(
        content=stream_job_events(
            run, cancel, request.is_disconnected, ready_payload=ready_payload
        ),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
            "x-promptforge-request-id": request_id,
        },
    )
