"""
Custom exception classes and the plain-text error handler.

Every pipeline failure maps to one subclass of AppException. The handler
renders ``detail`` as the response body so the UI can show it verbatim,
and exposes the error kind through the ``X-Error-Type`` header.
"""
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from loguru import logger


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        status_code: int,
        error_type: str,
        title: str,
        detail: str,
        headers: dict[str, str] | None = None,
    ):
        self.status_code = status_code
        self.error_type = error_type
        self.title = title
        self.detail = detail
        self.headers = headers or {}
        super().__init__(detail)


class InvalidUrlError(AppException):
    """The input does not contain a recognizable YouTube video id."""

    def __init__(self, value: str):
        super().__init__(
            status_code=400,
            error_type="invalid-url",
            title="Invalid URL",
            detail=f"Invalid or unsupported YouTube URL: {value}",
        )


class TranscriptUnavailableError(AppException):
    """Captions are disabled, missing or empty, or the video does not exist."""

    def __init__(self, video_id: str, reason: str = "No captions available"):
        super().__init__(
            status_code=404,
            error_type="transcript-unavailable",
            title="Transcript Unavailable",
            detail=f"Transcript unavailable for video '{video_id}': {reason}",
        )


class TranscriptNetworkError(AppException):
    """Transport failure while talking to YouTube."""

    def __init__(self, video_id: str, reason: str):
        super().__init__(
            status_code=502,
            error_type="network-error",
            title="Network Error",
            detail=f"Network error while fetching transcript for '{video_id}': {reason}",
        )


class BackendUnavailableError(AppException):
    """The inference backend could not be reached."""

    def __init__(self, base_url: str, reason: str = "connection refused"):
        super().__init__(
            status_code=502,
            error_type="backend-unavailable",
            title="Backend Unavailable",
            detail=f"Inference backend at {base_url} is unavailable: {reason}",
        )


class BackendTimeoutError(AppException):
    """The configured inference timeout elapsed."""

    def __init__(self, timeout: float):
        super().__init__(
            status_code=504,
            error_type="backend-timeout",
            title="Backend Timeout",
            detail=f"Inference backend did not respond within {timeout:g} seconds.",
        )


class BackendError(AppException):
    """The backend answered with an error status or an unusable body."""

    def __init__(self, detail: str, status: int | None = None):
        self.backend_status = status
        prefix = f"Ollama error ({status})" if status else "Ollama error"
        super().__init__(
            status_code=502,
            error_type="backend-error",
            title="Backend Error",
            detail=f"{prefix}: {detail}",
        )


class OverloadedError(AppException):
    """Every worker is busy and the waiting queue is full."""

    def __init__(self, retry_after: int = 5):
        super().__init__(
            status_code=503,
            error_type="overloaded",
            title="Service Unavailable",
            detail="Server is busy, please try again shortly.",
            headers={"Retry-After": str(retry_after)},
        )


class ClientDisconnectedError(AppException):
    """The client went away before the summary was ready."""

    def __init__(self):
        super().__init__(
            status_code=499,
            error_type="client-disconnected",
            title="Client Closed Request",
            detail="Client disconnected before the request completed.",
        )


async def app_exception_handler(request: Request, exc: AppException) -> PlainTextResponse:
    """Render an AppException as a plain-text response."""
    logger.warning(f"{exc.title} on {request.url.path}: {exc.detail}")
    return PlainTextResponse(
        exc.detail,
        status_code=exc.status_code,
        headers={"X-Error-Type": exc.error_type, **exc.headers},
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> PlainTextResponse:
    """Render request body validation errors as readable text."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location or 'body'}: {error.get('msg')}")
    detail = "Invalid request: " + "; ".join(problems)
    logger.warning(f"Rejected request on {request.url.path}: {detail}")
    return PlainTextResponse(
        detail,
        status_code=422,
        headers={"X-Error-Type": "invalid-request"},
    )
