"""Tests for the opt-in structlog configuration."""

import json
import logging
from collections.abc import Iterator

import pytest
import structlog
from fastapi import FastAPI
from httpx import AsyncClient

import hydra_error
from hydra_error.logging import LoggingSettings, configure_logging, get_logger


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo configure_logging() so other tests keep structlog's defaults."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_configure_logging_emits_json(
    capsys: pytest.CaptureFixture[str], restore_logging: None
) -> None:
    configure_logging(LoggingSettings(LOG_LEVEL="INFO", LOG_JSON=True))

    get_logger("tests.logging").info("plugin_registered", context_path="/error.jsonld")

    record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert record["event"] == "plugin_registered"
    assert record["context_path"] == "/error.jsonld"
    assert record["level"] == "info"
    assert record["logger"] == "tests.logging"
    assert record["timestamp"].endswith("Z")


def test_configure_logging_respects_level(
    capsys: pytest.CaptureFixture[str], restore_logging: None
) -> None:
    configure_logging(LoggingSettings(LOG_LEVEL="warning"))

    logger = get_logger("tests.logging")
    logger.info("not_shown")
    logger.warning("visible")

    out = capsys.readouterr().out
    assert "not_shown" not in out
    assert "visible" in out


def test_configure_logging_console_output(
    capsys: pytest.CaptureFixture[str], restore_logging: None
) -> None:
    configure_logging(LoggingSettings(LOG_JSON=False))

    get_logger("tests.logging").info("error_rewritten", status_code=404)

    line = capsys.readouterr().out.strip().splitlines()[-1]
    assert not line.startswith("{")
    assert "error_rewritten" in line
    assert "status_code=404" in line


@pytest.mark.asyncio
async def test_plugin_is_silent_until_logging_is_configured(
    capsys: pytest.CaptureFixture[str], client: AsyncClient
) -> None:
    with pytest.raises(hydra_error.PluginRegistrationError):
        hydra_error.register(FastAPI(), {})

    assert (await client.get("/bad-request")).status_code == 400
    assert (await client.get("/crash")).status_code == 500

    assert capsys.readouterr().out == ""
