"""
Global test configuration and shared fixtures.
"""

import os

import pytest

from gemini_hiring import (
    HiringSettings,
    PipelineLogger,
    StructuredGenerationPipeline,
    default_registry,
)
from tests.helpers import ScriptedModelClient


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_gemini_env(request, monkeypatch):
    """Ensure a clean GEMINI_* environment for each test.

    Escape hatch: mark a test with @pytest.mark.allow_env_pollution to keep
    the current environment unchanged.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("GEMINI_"):
            monkeypatch.delenv(key, raising=False)


def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Component integration tests with scripted model clients",
        "allow_env_pollution: Keep GEMINI_* environment variables for this test",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def mock_api_key():
    """Provide a consistent, fake API key for tests."""
    return "test_api_key_12345_67890_abcdef_ghijkl"


@pytest.fixture
def settings(mock_api_key):
    return HiringSettings(api_key=mock_api_key)


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def call_log():
    """A fresh, isolated pipeline logger per test."""
    return PipelineLogger(capacity=100)


@pytest.fixture
def make_pipeline(settings, registry, call_log):
    """Factory building a pipeline around a scripted model client."""

    def _make(*script, delay: float = 0.0, **kwargs):
        client = ScriptedModelClient(*script, delay=delay)
        pipeline = StructuredGenerationPipeline(
            client,
            call_log,
            settings=kwargs.pop("settings", settings),
            registry=kwargs.pop("registry", registry),
            **kwargs,
        )
        return pipeline, client

    return _make
