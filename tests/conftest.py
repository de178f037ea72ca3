import os
import tempfile

import pytest

# Route log files to a scratch directory before utils.logger is imported
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="meta-client-logs-"))
os.environ.setdefault("LOG_TO_CONSOLE", "false")

PROVIDER_KEY_VARS = (
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_GEMINI_API_KEY",
    "XAI_API_KEY",
    "TAVILY_API_KEY",
    "META_SUMMARY_API_KEY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep tests offline: no provider, retrieval or synthesis credentials."""
    for name in PROVIDER_KEY_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mock_env(monkeypatch):
    """Fixture to mock server-side credentials for testing."""
    env_vars = {
        "OPENAI_API_KEY": "sk-test-openai",
        "GEMINI_API_KEY": "test-gemini-key",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars
