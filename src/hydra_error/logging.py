"""Structured logging for the plugin.

The plugin logs through structlog with stdlib integration. Being a library, it
never configures logging on import: host applications call configure_logging()
once at startup (or configure structlog themselves). Plugin loggers always
wrap a stdlib logger, so until then the host's stdlib logging setup decides
what is emitted and nothing is printed by default.
"""

import logging
import logging.config
import sys

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from structlog.stdlib import BoundLogger
from structlog.typing import Processor


class LoggingSettings(BaseSettings):
    """Logging settings from environment variables.

    LOG_LEVEL  - threshold for the root logger (default INFO)
    LOG_JSON   - JSON lines when true, key=value console output when false
    """

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


def _shared_processors() -> list[Processor]:
    """Processors applied to both structlog and foreign (stdlib) log records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        # logger.exception() in the 500 handler
        structlog.processors.format_exc_info,
    ]


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Route structlog through stdlib logging and render to stdout.

    Uvicorn and FastAPI log through stdlib; their records pass through the
    same processor chain so the output format stays uniform.
    """
    settings = settings or LoggingSettings()
    processors = _shared_processors()
    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": renderer,
                    "foreign_pre_chain": processors,
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "structured",
                    "stream": sys.stdout,
                },
            },
            "loggers": {
                "": {
                    "handlers": ["stdout"],
                    "level": settings.log_level.upper(),
                },
            },
        }
    )


def get_logger(name: str) -> BoundLogger:
    """Get a structured logger backed by the stdlib logger ``name``.

    structlog.get_logger() would fall back to printing to stdout while
    structlog is unconfigured; wrapping a stdlib logger keeps the plugin
    subject to the host's logging levels and handlers.

    Example:
        logger = get_logger(__name__)
        logger.info("plugin_registered", context_path="/error.jsonld")
        # {"event": "plugin_registered", "context_path": "/error.jsonld", "level": "info", ...}
    """
    return structlog.wrap_logger(  # type: ignore[no-any-return]
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
