"""
Google Gemini native multimodal adapter (Generative Language REST API).

Capabilities:
  - Text:   POST /v1beta/models/{model}:generateContent
  - Speech: generateContent on the TTS model with responseModalities=["AUDIO"];
            returns base64 16-bit PCM from candidates[0].content.parts[0].inlineData.data
  - Video:  POST /v1beta/models/{model}:predictLongRunning, then poll
            GET /v1beta/{operation name} until done, then download the
            sample URI and register it in the media store
  - Auth:   API key as the ``key`` query parameter
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import httpx
import structlog

from promptforge.common.cancellation import CancellationToken, check_cancelled
from promptforge.common.errors import (
    EmptyOrBlockedResponseError,
    GenerationCancelledError,
    MalformedResponseError,
    MissingCredentialError,
    NoAudioDataError,
    NoVideoLinkError,
    ProviderError,
    VideoFetchFailedError,
)
from promptforge.config import SpeechSettings, VideoSettings
from promptforge.core.media.store import MediaStore
from promptforge.providers.base import ProgressCallback, ProviderAdapter
from promptforge.providers.polling import VideoJobPoller, emit_progress
from promptforge.schemas.generation import GenerationJob
from promptforge.schemas.providers import ProviderConfig, ProviderKind

logger = structlog.stdlib.get_logger()

DEFAULT_GEMINI_BASE = "https://generativelanguage.googleapis.com"

SPEECH_INSTRUCTION = "Say with a calm and engaging voice: "
VIDEO_INSTRUCTION = "An animated, whimsical short film based on this story: "

STATUS_INITIALIZING = "Initializing video generation..."
STATUS_IN_PROGRESS = "Generation in progress... This may take a few minutes."
STATUS_FETCHING = "Fetching video..."
STATUS_READY = "Video ready!"
STATUS_FAILED = "An error occurred during video generation."

TTS_ERROR_PREFIX = "TTS API Error: "
VIDEO_ERROR_PREFIX = "Video API Error: "


class GoogleAdapter(ProviderAdapter):
    kind = ProviderKind.GEMINI
    supports_speech = True
    supports_video = True

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        media_store: MediaStore,
        api_base: str = DEFAULT_GEMINI_BASE,
        speech: SpeechSettings | None = None,
        video: VideoSettings | None = None,
        timeout: float = 120.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(http_client)
        self.media_store = media_store
        self.api_base = api_base.rstrip("/") or DEFAULT_GEMINI_BASE
        self.speech = speech or SpeechSettings()
        self.video = video or VideoSettings()
        self.timeout = timeout
        self._sleep = sleep

    @property
    def label(self) -> str:
        return "Gemini"

    # Request Transform

    @staticmethod
    def _require_key(config: ProviderConfig) -> str:
        if not config.api_key:
            raise MissingCredentialError(
                "API Key not set for the selected provider. Please configure it in the settings.",
                details={"provider": ProviderKind.GEMINI.value, "config": config.id},
            )
        return config.api_key

    def _model_url(self, model: str, method: str, api_key: str) -> str:
        return f"{self.api_base}/v1beta/models/{model}:{method}?key={api_key}"

    def transform_text_request(self, prompt: str, config: ProviderConfig) -> tuple[str, dict[str, Any]]:
        url = self._model_url(config.model, "generateContent", config.api_key)
        body = {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}
        return url, body

    def transform_speech_request(self, text: str, config: ProviderConfig) -> tuple[str, dict[str, Any]]:
        url = self._model_url(self.speech.model, "generateContent", config.api_key)
        body = {
            "contents": [{"parts": [{"text": f"{SPEECH_INSTRUCTION}{text}"}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {
                    "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": self.speech.voice}},
                },
            },
        }
        return url, body

    def transform_video_request(
        self,
        prompt: str,
        config: ProviderConfig,
        aspect_ratio: str | None = None,
        resolution: str | None = None,
        model: str | None = None,
    ) -> tuple[str, dict[str, Any]]:
        url = self._model_url(model or self.video.model, "predictLongRunning", config.api_key)
        body = {
            "instances": [{"prompt": f"{VIDEO_INSTRUCTION}{prompt}"}],
            "parameters": {
                # REST spelling of numberOfVideos
                "sampleCount": 1,
                "resolution": resolution or self.video.resolution,
                "aspectRatio": aspect_ratio or self.video.aspect_ratio,
            },
        }
        return url, body

    # Response Transform

    @staticmethod
    def extract_text(raw_response: dict[str, Any]) -> str:
        candidates = raw_response.get("candidates") or []
        text = ""
        if candidates and isinstance(candidates[0], dict):
            parts = (candidates[0].get("content") or {}).get("parts") or []
            text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        if not text:
            raise EmptyOrBlockedResponseError(
                "Invalid response from Gemini API. The response may be empty or blocked.",
                details={"prompt_feedback": raw_response.get("promptFeedback")},
            )
        return text

    @staticmethod
    def extract_audio(raw_response: dict[str, Any]) -> str:
        try:
            data = raw_response["candidates"][0]["content"]["parts"][0]["inlineData"]["data"]
        except (KeyError, IndexError, TypeError):
            data = None
        if not data or not isinstance(data, str):
            raise NoAudioDataError("Failed to generate audio. No data received.")
        return data

    @staticmethod
    def parse_operation(raw_response: dict[str, Any]) -> GenerationJob:
        name = raw_response.get("name")
        if not name or not isinstance(name, str):
            raise MalformedResponseError("Video operation response has no operation name.")

        uri = None
        try:
            samples = raw_response["response"]["generateVideoResponse"]["generatedSamples"]
            uri = samples[0]["video"]["uri"]
        except (KeyError, IndexError, TypeError):
            pass

        return GenerationJob(
            operation_name=name,
            done=bool(raw_response.get("done")),
            result_uri=uri if isinstance(uri, str) and uri else None,
            error=raw_response.get("error"),
        )

    # Transport

    async def _request_json(
        self, method: str, url: str, config: ProviderConfig, body: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        response = await self.client.request(
            method,
            url,
            json=body,
            headers={"Content-Type": "application/json"},
            timeout=self.timeout,
        )
        if not response.is_success:
            await self._log_error_response(response, model=config.model, config=config.id)
            raise ProviderError(
                self.error_detail(response),
                details={"provider": self.kind.value, "status_code": response.status_code},
            )
        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError("Invalid response structure from the API.") from e
        if not isinstance(data, dict):
            raise MalformedResponseError("Invalid response structure from the API.")
        return data

    # Text

    async def generate_text(self, prompt: str, config: ProviderConfig) -> str:
        try:
            self._require_key(config)
            url, body = self.transform_text_request(prompt, config)
            raw = await self._request_json("POST", url, config, body)
            return self.extract_text(raw)
        except Exception as e:
            raise self.qualify(e) from e

    # Speech

    async def generate_speech(
        self,
        text: str,
        config: ProviderConfig,
        cancel: CancellationToken | None = None,
    ) -> str:
        check_cancelled(cancel)
        try:
            self._require_key(config)
            url, body = self.transform_speech_request(text, config)
            raw = await self._request_json("POST", url, config, body)
            audio = self.extract_audio(raw)
        except Exception as e:
            raise self.qualify(e, TTS_ERROR_PREFIX) from e

        await logger.ainfo("speech.generated", model=self.speech.model, bytes_b64=len(audio))
        return audio

    # Video

    async def _fetch_operation(self, job: GenerationJob, config: ProviderConfig) -> GenerationJob:
        url = f"{self.api_base}/v1beta/{job.operation_name}?key={config.api_key}"
        raw = await self._request_json("GET", url, config)
        return self.parse_operation(raw)

    async def _download(
        self, uri: str, config: ProviderConfig, cancel: CancellationToken | None
    ) -> tuple[bytes, str]:
        separator = "&" if "?" in uri else "?"
        request = self.client.get(
            f"{uri}{separator}key={config.api_key}",
            timeout=self.timeout,
            follow_redirects=True,
        )
        # The only call that honours an in-flight abort
        response = await (cancel.race(request) if cancel is not None else request)

        if not response.is_success:
            raise VideoFetchFailedError(
                f"Failed to fetch video data. Status: {response.reason_phrase or response.status_code}",
                details={"status_code": response.status_code},
            )
        content_type = response.headers.get("content-type", "video/mp4").split(";")[0]
        return response.content, content_type

    async def generate_video(
        self,
        prompt: str,
        config: ProviderConfig,
        on_progress: ProgressCallback,
        cancel: CancellationToken | None = None,
        *,
        aspect_ratio: str | None = None,
        resolution: str | None = None,
        model: str | None = None,
    ) -> str:
        last_status: str | None = None

        def progress(status: str) -> None:
            nonlocal last_status
            last_status = status
            emit_progress(on_progress, status)

        check_cancelled(cancel)

        try:
            self._require_key(config)

            progress(STATUS_INITIALIZING)
            url, body = self.transform_video_request(prompt, config, aspect_ratio, resolution, model)
            job = self.parse_operation(await self._request_json("POST", url, config, body))
            progress(STATUS_IN_PROGRESS)
            await logger.ainfo("video.job.created", operation=job.operation_name, done=job.done)

            poller = VideoJobPoller(
                fetch_status=lambda j: self._fetch_operation(j, config),
                on_progress=progress,
                interval=self.video.poll_interval_seconds,
                max_polls=self.video.max_polls,
                sleep=self._sleep,
            )
            job = await poller.run(job, cancel)

            if job.error or not job.result_uri:
                raise NoVideoLinkError(
                    "Video generation failed or returned no link.",
                    details={"operation": job.operation_name, "operation_error": job.error},
                )

            progress(STATUS_FETCHING)
            data, content_type = await self._download(job.result_uri, config, cancel)
            handle = self.media_store.put(data, content_type)

            progress(STATUS_READY)
            await logger.ainfo(
                "video.job.completed",
                operation=job.operation_name,
                polls=job.polls,
                bytes=len(data),
            )
            return handle

        except GenerationCancelledError:
            await logger.ainfo("video.job.aborted", last_status=last_status)
            raise
        except Exception as e:
            failed_at = last_status
            emit_progress(on_progress, STATUS_FAILED)
            error = self.qualify(e, VIDEO_ERROR_PREFIX)
            error.details["last_status"] = failed_at
            await logger.aerror("video.job.failed", error=error.message, last_status=failed_at)
            raise error from e
