from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

import hydra_error
from tests.apps import CONTEXT_PATH, build_app


@pytest.fixture
def app() -> FastAPI:
    """App with the plugin registered against /error.jsonld."""
    app = build_app()
    hydra_error.register(app, {"context": {"path": CONTEXT_PATH}})
    return app


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """HTTP client bound to the app.

    raise_app_exceptions=False: Starlette re-raises unhandled exceptions after
    sending the 500 response, and the tests need to see that response.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client
