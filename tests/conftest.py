import pytest
from fastapi import FastAPI

from routedocs.main.config import reset_settings


@pytest.fixture(autouse=True)
def reset_settings_after_test():
    """Reset settings after each test to prevent state leakage."""
    yield
    reset_settings()


@pytest.fixture
def app() -> FastAPI:
    """A FastAPI app without its own OpenAPI and docs routes."""
    return FastAPI(openapi_url=None)
