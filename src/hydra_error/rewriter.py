"""Rewrites error responses into the Hydra problem description.

The rewriter is a pure function of (outcome, options): it holds no state
besides the frozen options it was built with, performs no I/O, and never
raises. The FastAPI wiring lives in ``hydra_error.plugin``.
"""

import http
import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from starlette.responses import JSONResponse, Response

from hydra_error.config import HydraErrorOptions
from hydra_error.schemas.error import HydraError

JSON_LD_CONTEXT_REL = "http://www.w3.org/ns/json-ld#context"
JSON_LD_MEDIA_TYPE = "application/ld+json"

INTERNAL_ERROR_MESSAGE = "An internal server error occurred"


def reason_phrase(status_code: int) -> str:
    """Return the standard reason phrase for ``status_code`` ("Unknown" if unregistered)."""
    try:
        return http.HTTPStatus(status_code).phrase
    except ValueError:
        return "Unknown"


def summarize_errors(errors: Sequence[Mapping[str, Any]]) -> list[tuple[str, str]]:
    """Flatten pydantic error dicts into ``(location, message)`` pairs.

    ``("query", "limit")`` becomes ``"query.limit"``. Errors on the root
    object have an empty location and are reported as ``"options"``.
    """
    summary = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()))
        summary.append((location or "options", str(error.get("msg", ""))))
    return summary


@dataclass(frozen=True)
class ErrorInfo:
    """An error condition produced by a request handler."""

    status_code: int
    title: str
    description: str
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_http_exception(cls, exc: HTTPException) -> "ErrorInfo":
        title = reason_phrase(exc.status_code)
        detail = exc.detail
        # FastAPI allows any JSON value as detail; the payload needs a string
        if detail and not isinstance(detail, str):
            detail = json.dumps(detail)
        return cls(
            status_code=exc.status_code,
            title=title,
            description=detail or title,
            headers=dict(exc.headers or {}),
        )

    @classmethod
    def from_validation_error(cls, exc: RequestValidationError) -> "ErrorInfo":
        status_code = 422
        description = "; ".join(
            f"{location}: {message}" for location, message in summarize_errors(exc.errors())
        )
        return cls(
            status_code=status_code,
            title=reason_phrase(status_code),
            description=description or reason_phrase(status_code),
        )

    @classmethod
    def internal(cls) -> "ErrorInfo":
        """The error reported for unhandled exceptions. Never leaks exception details."""
        status_code = 500
        return cls(
            status_code=status_code,
            title=reason_phrase(status_code),
            description=INTERNAL_ERROR_MESSAGE,
        )


@dataclass(frozen=True)
class Success:
    """A handler outcome that is not an error. It is sent exactly as produced."""


@dataclass(frozen=True)
class Failure:
    """A handler outcome that represents a request failure."""

    error: ErrorInfo


Outcome: TypeAlias = Success | Failure


def classify(exc: HTTPException) -> Outcome:
    """Decide whether a raised ``HTTPException`` is an error condition.

    Starlette lets handlers raise ``HTTPException`` with any status code,
    including redirects and ``304 Not Modified``. Only 4xx and 5xx are errors.
    """
    if exc.status_code < 400:
        return Success()
    return Failure(ErrorInfo.from_http_exception(exc))


class ErrorRewriter:
    """Turns error outcomes into Hydra error responses.

    Usage:
        rewriter = ErrorRewriter(HydraErrorOptions(context={"path": "/error.jsonld"}))
        response = rewriter.rewrite(classify(exc))
        if response is None:
            ...  # not an error, send the original response
    """

    def __init__(self, options: HydraErrorOptions) -> None:
        self.options = options
        self.link_header = (
            f'<{options.context.path}>; rel="{JSON_LD_CONTEXT_REL}"; type="{JSON_LD_MEDIA_TYPE}"'
        )

    def rewrite(self, outcome: Outcome) -> Response | None:
        """Return the replacement response for an error, or None to leave the outcome unchanged."""
        match outcome:
            case Success():
                return None
            case Failure(error=error):
                return self.render(error)

    def render(self, error: ErrorInfo) -> Response:
        """Build the Hydra error response for ``error``."""
        payload = HydraError(title=error.title, description=error.description)
        response = JSONResponse(content=payload.model_dump(), status_code=error.status_code)

        # Copy the error's own headers (e.g. WWW-Authenticate, Allow)
        for key, value in error.headers.items():
            response.headers[key] = value

        # Appended, not set: an existing Link header from the handler is kept
        response.headers.append("Link", self.link_header)
        return response
