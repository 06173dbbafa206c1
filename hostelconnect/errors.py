"""Domain exceptions and their HTTP translation.

Services raise these; routers never re-implement the checks behind them.
``register_exception_handlers`` installs one handler per class on the
FastAPI app so every error reaches the client in the same shape::

    {"detail": "Booking not found", "code": "not_found"}
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class HostelConnectError(Exception):
    """Base class for all domain errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialise for the JSON error body."""
        body: dict[str, Any] = {"detail": self.message, "code": self.code}
        body.update(self.details)
        return body

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r})"


class NotAuthorized(HostelConnectError):
    """Role or ownership mismatch."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "not_authorized"


class NotFound(HostelConnectError):
    """Referenced entity is absent (or not visible to the caller)."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ValidationError(HostelConnectError):
    """Malformed input, reported field by field."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "validation_error"

    def __init__(self, errors: dict[str, str], message: str = "Invalid input") -> None:
        self.errors = errors
        super().__init__(message, details={"errors": errors})


class InvalidTransition(HostelConnectError):
    """Booking state machine violation."""

    status_code = status.HTTP_409_CONFLICT
    code = "invalid_transition"


class DuplicateRequest(HostelConnectError):
    """A pending booking already exists for the same student and hostel."""

    status_code = status.HTTP_409_CONFLICT
    code = "duplicate_request"


class UpstreamError(HostelConnectError):
    """The assistant's completion API failed.

    The message is always the generic notice; upstream detail is logged
    where the failure happens and never sent to the client.
    """

    status_code = status.HTTP_502_BAD_GATEWAY
    code = "upstream_error"
    public_message = "Could not get a response from the assistant. Please try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.public_message)


async def _handle_domain_error(request: Request, exc: HostelConnectError) -> JSONResponse:
    logger.warning(
        "%s on %s %s: %s",
        exc.__class__.__name__,
        request.method,
        request.url.path,
        exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    """Install the translation from domain errors to JSON responses."""
    app.add_exception_handler(HostelConnectError, _handle_domain_error)  # type: ignore[arg-type]
