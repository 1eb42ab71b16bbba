"""FastAPI integration.

register() validates the plugin options and installs the error rewriter as
exception handlers, which FastAPI runs after a route handler has raised and
before the response is sent. Responses returned normally never reach them.
"""

from collections.abc import Mapping
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException
from starlette.responses import Response

from hydra_error.config import HydraErrorOptions
from hydra_error.exceptions import PluginNotRegisteredError, PluginRegistrationError
from hydra_error.logging import get_logger
from hydra_error.rewriter import ErrorInfo, ErrorRewriter, classify, summarize_errors

PLUGIN_NAME = "hydra-error"

# app.state attribute holding the validated options
_STATE_KEY = "hydra_error"

logger = get_logger(__name__)


def _validate_options(options: Any) -> HydraErrorOptions:
    """Validate raw options, raising PluginRegistrationError with every failing field."""
    if isinstance(options, HydraErrorOptions):
        return options
    try:
        return HydraErrorOptions.model_validate(options)
    except ValidationError as exc:
        errors = summarize_errors(exc.errors())
        logger.warning("plugin_registration_failed", plugin=PLUGIN_NAME, errors=errors)
        details = "; ".join(f"{location}: {message}" for location, message in errors)
        raise PluginRegistrationError(f"invalid {PLUGIN_NAME} options: {details}", errors) from exc


def register(app: FastAPI, options: Mapping[str, Any] | HydraErrorOptions) -> HydraErrorOptions:
    """Install the Hydra error rewriter on ``app``.

    Must be called before the application serves its first request, since
    Starlette builds its exception middleware once at startup.

    Args:
        app: The FastAPI application.
        options: ``{"context": {"path": "/error.jsonld"}}`` or a HydraErrorOptions.

    Returns:
        The validated options, also available later through get_options(app).

    Raises:
        PluginRegistrationError: options are invalid, or the plugin is
            already registered on ``app``. Nothing is installed in that case.
    """
    if getattr(app.state, _STATE_KEY, None) is not None:
        raise PluginRegistrationError(f"plugin {PLUGIN_NAME!r} is already registered")

    settings = _validate_options(options)
    rewriter = ErrorRewriter(settings)

    def _sent(request: Request, response: Response) -> Response:
        logger.debug(
            "error_rewritten",
            status_code=response.status_code,
            path=request.url.path,
            method=request.method,
        )
        return response

    @app.exception_handler(HTTPException)
    async def handle_http_exception(request: Request, exc: HTTPException) -> Response:
        """Rewrite 4xx/5xx raised by handlers and by routing (404, 405)."""
        response = rewriter.rewrite(classify(exc))
        if response is None:
            return await http_exception_handler(request, exc)
        return _sent(request, response)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> Response:
        """Rewrite request validation failures as 422."""
        return _sent(request, rewriter.render(ErrorInfo.from_validation_error(exc)))

    @app.exception_handler(Exception)
    async def handle_unhandled_exception(request: Request, exc: Exception) -> Response:
        """Log unhandled exceptions and return a generic 500 without exception details."""
        logger.exception("unhandled_exception", path=request.url.path, method=request.method)
        return _sent(request, rewriter.render(ErrorInfo.internal()))

    setattr(app.state, _STATE_KEY, settings)
    logger.info("plugin_registered", plugin=PLUGIN_NAME, context_path=settings.context.path)
    return settings


def get_options(app: FastAPI) -> HydraErrorOptions:
    """Return the options the plugin was registered with on ``app``."""
    options = getattr(app.state, _STATE_KEY, None)
    if options is None:
        raise PluginNotRegisteredError(PLUGIN_NAME)
    return options
