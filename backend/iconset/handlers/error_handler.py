"""Error types for icon set generation and their mapping to API responses."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from google.api_core.exceptions import (
    DeadlineExceeded,
    GoogleAPIError,
    PermissionDenied,
    ResourceExhausted,
    Unauthenticated,
)
from google.genai import errors as genai_errors
from openai import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    PermissionDeniedError,
    RateLimitError,
)
from replicate.exceptions import ModelError, ReplicateError

from iconset.models.generate import FailureKind, TaskFailure
from iconset.utility.logger import AppLogger

logger = AppLogger.get_logger(__name__)

STATUS_BY_KIND: Dict[FailureKind, int] = {
    FailureKind.VALIDATION: 400,
    FailureKind.RATE_LIMITED: 429,
    FailureKind.UNAUTHENTICATED: 503,
    FailureKind.TIMED_OUT: 504,
    FailureKind.INSUFFICIENT_RESULTS: 500,
    FailureKind.UNKNOWN: 500,
}

MESSAGE_BY_KIND: Dict[FailureKind, str] = {
    FailureKind.VALIDATION: "Validation failed",
    FailureKind.RATE_LIMITED: "Rate limit exceeded - please wait a moment",
    FailureKind.UNAUTHENTICATED: "API configuration error",
    FailureKind.TIMED_OUT: "Request timeout - please try again",
    FailureKind.INSUFFICIENT_RESULTS: "Failed to generate icons",
    FailureKind.UNKNOWN: "Failed to generate icons",
}

# Most actionable first: a batch where every task hit the same wall reports it.
KIND_PRIORITY = (
    FailureKind.UNAUTHENTICATED,
    FailureKind.RATE_LIMITED,
    FailureKind.TIMED_OUT,
)


class EscapedJSONResponse(JSONResponse):
    """
    JSON response written as ASCII with `\\uXXXX` escapes.
    Prompts echo client text, which may hold unpaired surrogates that
    cannot be encoded as UTF-8.
    """

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=True,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("ascii")


@dataclass(eq=False)
class IconSetError(Exception):
    """
    Base error for every failure surfaced by the icon set service.
    The exception handler renders it as JSON with a status taken from `kind`.
    """

    message: str
    kind: FailureKind = FailureKind.UNKNOWN
    details: Any = None

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND.get(self.kind, 500)

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class ValidationError(IconSetError):
    """The request violated one or more input rules. Carries every violation."""

    def __init__(self, errors: Sequence[str]) -> None:
        super().__init__(
            message="Validation failed",
            kind=FailureKind.VALIDATION,
            details=list(errors),
        )


class BackendError(IconSetError):
    """A single call to an image backend failed."""

    def __init__(
        self,
        provider: str,
        message: str,
        kind: FailureKind = FailureKind.UNKNOWN,
        details: Any = None,
    ) -> None:
        super().__init__(message=message, kind=kind, details=details)
        self.provider = provider

    def __str__(self) -> str:
        return f"[{self.provider}] {self.kind.value}: {self.message}"


class BackendConfigurationError(IconSetError):
    """Backend credentials or provider selection are unusable."""

    def __init__(self, message: str) -> None:
        super().__init__(
            message=MESSAGE_BY_KIND[FailureKind.UNAUTHENTICATED],
            kind=FailureKind.UNAUTHENTICATED,
            details=message,
        )


class InsufficientResultsError(IconSetError):
    """Too few variations succeeded to return an icon set."""

    def __init__(
        self, succeeded: int, expected: int, failures: Sequence[TaskFailure] = ()
    ) -> None:
        self.succeeded = succeeded
        self.expected = expected
        self.failures = sorted(failures, key=lambda f: f.index)
        kind = self.dominant_kind(self.failures)
        super().__init__(
            message=MESSAGE_BY_KIND[kind],
            kind=kind,
            details=(
                "Failed to generate sufficient icons. "
                f"Only {succeeded}/{expected} succeeded."
            ),
        )

    @staticmethod
    def dominant_kind(failures: Sequence[TaskFailure]) -> FailureKind:
        kinds = {f.kind for f in failures}
        for kind in KIND_PRIORITY:
            if kind in kinds:
                return kind
        return FailureKind.INSUFFICIENT_RESULTS


class MapExceptions:
    """Translate provider SDK exceptions into BackendError with a FailureKind.

    The kind is decided here, where the exception type is still known, so
    status mapping never depends on message text.
    """

    def map_exception(self, provider: str, exc: Exception) -> BackendError:
        """Dispatch to the provider specific mapper."""
        if isinstance(exc, BackendError):
            return exc
        mappers = {
            "replicate": self.map_replicate_exception,
            "gemini": self.map_gemini_exception,
            "openai": self.map_openai_exception,
        }
        mapper = mappers.get(provider)
        if mapper is None:
            return self._map_common(provider, exc) or self._unknown(provider, exc)
        return mapper(exc)

    def _map_common(self, provider: str, exc: Exception) -> Optional[BackendError]:
        """Handle transport level failures shared by every SDK."""
        if isinstance(exc, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)):
            return BackendError(
                provider=provider,
                message=f"{provider} timed out while generating the image.",
                kind=FailureKind.TIMED_OUT,
            )
        if isinstance(exc, httpx.HTTPStatusError):
            return self._from_status(provider, exc.response.status_code)
        return None

    def _from_status(
        self, provider: str, status: Optional[int]
    ) -> Optional[BackendError]:
        if status == 429:
            return BackendError(
                provider=provider,
                message=f"{provider} rate limit reached. Please try again in a moment.",
                kind=FailureKind.RATE_LIMITED,
            )
        if status in (401, 403):
            return BackendError(
                provider=provider,
                message=f"Authentication with {provider} failed. Check API key configuration.",
                kind=FailureKind.UNAUTHENTICATED,
            )
        if status in (408, 504):
            return BackendError(
                provider=provider,
                message=f"{provider} timed out while generating the image.",
                kind=FailureKind.TIMED_OUT,
            )
        return None

    def _unknown(self, provider: str, exc: Exception) -> BackendError:
        return BackendError(
            provider=provider,
            message=str(exc) or f"Unexpected error while generating the image with {provider}.",
            kind=FailureKind.UNKNOWN,
            details={"exception_type": exc.__class__.__name__},
        )

    def map_replicate_exception(self, exc: Exception) -> BackendError:
        """Map Replicate client exceptions."""
        mapped = self._map_common("replicate", exc)
        if mapped is not None:
            return mapped
        if isinstance(exc, ModelError):
            return BackendError(
                provider="replicate",
                message=f"Replicate prediction failed: {exc}",
                kind=FailureKind.UNKNOWN,
            )
        if isinstance(exc, ReplicateError):
            mapped = self._from_status(
                "replicate", getattr(exc, "status", None)
            )
            if mapped is not None:
                return mapped
        return self._unknown("replicate", exc)

    def map_gemini_exception(self, exc: Exception) -> BackendError:
        """Map google-genai and google-api-core exceptions."""
        mapped = self._map_common("gemini", exc)
        if mapped is not None:
            return mapped
        if isinstance(exc, genai_errors.APIError):
            mapped = self._from_status("gemini", getattr(exc, "code", None))
            if mapped is not None:
                return mapped
        if isinstance(exc, ResourceExhausted):
            return BackendError(
                provider="gemini",
                message="Gemini usage limits reached. Please try again later.",
                kind=FailureKind.RATE_LIMITED,
            )
        if isinstance(exc, DeadlineExceeded):
            return BackendError(
                provider="gemini",
                message="Gemini timed out while generating the image.",
                kind=FailureKind.TIMED_OUT,
            )
        if isinstance(exc, (PermissionDenied, Unauthenticated)):
            return BackendError(
                provider="gemini",
                message="Access denied when calling Gemini. Check credentials or project permissions.",
                kind=FailureKind.UNAUTHENTICATED,
            )
        if isinstance(exc, GoogleAPIError):
            return BackendError(
                provider="gemini",
                message="Gemini encountered an internal error while generating the image.",
                kind=FailureKind.UNKNOWN,
            )
        return self._unknown("gemini", exc)

    def map_openai_exception(self, exc: Exception) -> BackendError:
        """Map OpenAI SDK exceptions."""
        if isinstance(exc, RateLimitError):
            return BackendError(
                provider="openai",
                message="OpenAI rate limit reached. Please try again in a moment.",
                kind=FailureKind.RATE_LIMITED,
            )
        if isinstance(exc, APITimeoutError):
            return BackendError(
                provider="openai",
                message="OpenAI timed out while generating the image.",
                kind=FailureKind.TIMED_OUT,
            )
        if isinstance(exc, (AuthenticationError, PermissionDeniedError)):
            return BackendError(
                provider="openai",
                message="Authentication with OpenAI failed. Check API key configuration.",
                kind=FailureKind.UNAUTHENTICATED,
            )
        if isinstance(exc, BadRequestError):
            return BackendError(
                provider="openai",
                message="Invalid request sent to OpenAI. Please verify your prompt or parameters.",
                kind=FailureKind.UNKNOWN,
            )
        if isinstance(exc, APIConnectionError):
            return BackendError(
                provider="openai",
                message="Could not connect to OpenAI. Please check network or OpenAI status.",
                kind=FailureKind.UNKNOWN,
            )
        if isinstance(exc, APIError):
            return BackendError(
                provider="openai",
                message="OpenAI encountered an internal error while generating the image.",
                kind=FailureKind.UNKNOWN,
            )
        return self._map_common("openai", exc) or self._unknown("openai", exc)

    @staticmethod
    def register_exception_handlers(app: FastAPI) -> None:
        """
        Register the JSON error handlers once on the FastAPI app:

            app = FastAPI()
            MapExceptions.register_exception_handlers(app)
        """

        @app.exception_handler(IconSetError)
        async def icon_set_error_handler(
            request: Request, exc: IconSetError
        ) -> JSONResponse:
            if isinstance(exc, ValidationError):
                logger.info("Rejected request: %s", exc.details)
                return EscapedJSONResponse(
                    status_code=exc.status_code,
                    content={"error": exc.message, "details": exc.details},
                )

            logger.error(
                "IconSetError caught by FastAPI handler: %s",
                exc,
                extra={"kind": exc.kind.value},
            )
            content: Dict[str, Any] = {"error": exc.message, "details": exc.details}
            failures: List[TaskFailure] = getattr(exc, "failures", [])
            if failures:
                content["errors"] = [
                    {"index": f.index, "error": f.reason} for f in failures
                ]
            return EscapedJSONResponse(status_code=exc.status_code, content=content)

        @app.exception_handler(RequestValidationError)
        async def request_validation_handler(
            request: Request, exc: RequestValidationError
        ) -> JSONResponse:
            details = [str(err.get("msg", err)) for err in exc.errors()]
            logger.info("Rejected malformed request body: %s", details)
            return EscapedJSONResponse(
                status_code=400,
                content={"error": "Validation failed", "details": details},
            )
