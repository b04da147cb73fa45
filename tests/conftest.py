"""
Pytest configuration and shared fixtures for provenance anchor tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Configures pytest markers and settings
"""

import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_common = importlib.import_module("fixtures.common")
_storage = importlib.import_module("fixtures.storage_fixtures")

FIXED_TIME = _common.FIXED_TIME
fixed_clock = _common.fixed_clock
fixed_did = _common.fixed_did
RecordingGateway = _storage.RecordingGateway


# =============================================================================
# Environment isolation
# =============================================================================

_CONFIG_ENV_VARS = (
    "IPFS_URL",
    "IPFS_PROJECT_ID",
    "IPFS_PROJECT_SECRET",
    "ANCHOR_STORAGE_BACKEND",
    "ANCHOR_STORAGE_TIMEOUT",
    "ANCHOR_STORAGE_MAX_RETRIES",
    "HOST",
    "PORT",
    "ENVIRONMENT",
    "ANCHOR_LOG_LEVEL",
    "ANCHOR_HTTP_PROXY",
)


@pytest.fixture(autouse=True)
def _clean_config_env(monkeypatch):
    """Keep a developer's .env or shell from leaking into config tests."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture
def memory_gateway():
    """A fresh recording in-memory gateway."""
    return RecordingGateway()


@pytest.fixture
def pipeline(memory_gateway):
    """Deterministic pipeline over the in-memory gateway."""
    from orchestrator.pipeline import StagePipeline

    return StagePipeline(
        memory_gateway,
        clock=fixed_clock(),
        did_factory=fixed_did(),
    )


@pytest.fixture
def memory_config():
    """RuntimeConfig selecting the in-memory backend."""
    from core.config.runtime import RuntimeConfig

    return RuntimeConfig.from_dict({"storage": {"backend": "memory"}})


@pytest.fixture
def api_client(memory_config, memory_gateway):
    """TestClient over an app wired to the in-memory gateway."""
    from fastapi.testclient import TestClient

    from api.app import create_app

    app = create_app(memory_config, memory_gateway)
    app.state.pipeline._clock = fixed_clock()
    return TestClient(app, raise_server_exceptions=False)


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
