"""
Fixtures for API route tests.

Builds the FastAPI app without running its lifespan; every test overrides
the service dependencies it touches.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from ragchat.api.main import create_app


@pytest.fixture
def app() -> FastAPI:
    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Client used without a context manager so startup hooks do not run."""
    return TestClient(app)
