"""
Unified error handling.

Every PromptForge error carries a human-readable message and maps to a JSON
error envelope so the browser UI can display a single descriptive line.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse

logger = structlog.stdlib.get_logger()


class PromptForgeError(Exception):
    """Base exception for all PromptForge errors."""

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def with_prefix(self, prefix: str) -> PromptForgeError:
        """Return a copy of this error with a provider-qualified message."""
        return type(self)(f"{prefix}{self.message}", details=dict(self.details))

    def to_response(self) -> dict[str, Any]:
        return {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.status_code,
                **self.details,
            }
        }


class ValidationError(PromptForgeError):
    status_code = 400
    error_type = "invalid_request_error"


class AuthenticationError(PromptForgeError):
    status_code = 401
    error_type = "authentication_error"


class NotFoundError(PromptForgeError):
    status_code = 404
    error_type = "not_found"


class ConflictError(PromptForgeError):
    status_code = 409
    error_type = "conflict"


# Generation errors


class MissingCredentialError(PromptForgeError):
    status_code = 400
    error_type = "missing_credential"


class UnsupportedProviderError(PromptForgeError):
    status_code = 400
    error_type = "unsupported_provider"


class CapabilityNotSupportedError(PromptForgeError):
    status_code = 400
    error_type = "capability_not_supported"


class ProviderError(PromptForgeError):
    status_code = 502
    error_type = "provider_error"


class MalformedResponseError(ProviderError):
    error_type = "malformed_response"


class EmptyOrBlockedResponseError(ProviderError):
    error_type = "empty_or_blocked_response"


class NoAudioDataError(ProviderError):
    error_type = "no_audio_data"


class NoVideoLinkError(ProviderError):
    error_type = "no_video_link"


class VideoFetchFailedError(ProviderError):
    error_type = "video_fetch_failed"


class NetworkError(ProviderError):
    error_type = "network_error"


class GenerationCancelledError(PromptForgeError):
    """User-initiated stop. Callers suppress it from error display."""

    status_code = 499
    error_type = "cancelled"

    def __init__(
        self, message: str = "Aborted by user", *, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message, details=details)


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(PromptForgeError)
    async def promptforge_error_handler(request: Request, exc: PromptForgeError) -> ORJSONResponse:
        await logger.awarning(
            "promptforge.error",
            error_type=exc.error_type,
            message=exc.message,
            status_code=exc.status_code,
            path=request.url.path,
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content=exc.to_response(),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
        await logger.aexception(
            "promptforge.unhandled_error",
            path=request.url.path,
            error=str(exc),
        )
        return ORJSONResponse(
            status_code=500,
            content={
                "error": {
                    "message": "An internal error occurred.",
                    "type": "internal_error",
                    "code": 500,
                }
            },
        )
