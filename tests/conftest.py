"""Shared pytest fixtures and configuration.

Fixture Categories:
1. Adapter: messenger, mock_messenger_api
2. Webhook payloads: sample_webhook_payload, multi_entry_payload
3. Infrastructure: mock_settings, mock_logfire, logfire_capture, test_client
"""

import os
from contextlib import contextmanager
from unittest.mock import MagicMock, Mock, patch

import pytest
import respx

# Allow logfire calls in tests without a configured project
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

from fbmessenger.services.messenger import Messenger  # noqa: E402

TEST_API_URL = "https://graph.test/v2.6"
TEST_SEND_URL = f"{TEST_API_URL}/me/messages"


# =============================================================================
# Adapter
# =============================================================================


@pytest.fixture
def messenger():
    """Messenger adapter pointed at a mock Graph API base URL."""
    return Messenger(
        access_token="test-page-token",
        verify_token="abc",
        page_id="page-123",
        api_url=TEST_API_URL,
    )


@pytest.fixture
def api_url():
    """Mock Graph API base URL the test adapter is configured with."""
    return TEST_API_URL


@pytest.fixture
def send_url():
    """Send API endpoint under the mock base URL."""
    return TEST_SEND_URL


@pytest.fixture
def mock_messenger_api():
    """Respx router for the mock Send API endpoint."""
    with respx.mock(assert_all_called=False) as router:
        yield router


# =============================================================================
# Webhook Payloads
# =============================================================================


@pytest.fixture
def sample_webhook_payload():
    """Single text message webhook, as Facebook sends it."""
    return {
        "object": "page",
        "entry": [
            {
                "id": "page-123",
                "time": 1458692752478,
                "messaging": [
                    {
                        "sender": {"id": "1254459154682919"},
                        "recipient": {"id": "682498171943165"},
                        "timestamp": 1458692752478,
                        "message": {
                            "mid": "mid.1457764197618:41d102a3e1ae206a38",
                            "seq": 73,
                            "text": "hello, world!",
                        },
                    }
                ],
            }
        ],
    }


@pytest.fixture
def multi_entry_payload():
    """Two entries carrying one event of each kind, plus an empty event."""
    return {
        "object": "page",
        "entry": [
            {
                "id": "111",
                "time": 1000,
                "messaging": [
                    {
                        "sender": {"id": "1"},
                        "recipient": {"id": "111"},
                        "timestamp": 1001,
                        "message": {"mid": "m-1", "seq": 1, "text": "hi"},
                    },
                    {
                        "sender": {"id": "2"},
                        "recipient": {"id": "111"},
                        "timestamp": 1002,
                        "delivery": {"mids": ["m-0"], "watermark": 999, "seq": 2},
                    },
                    {
                        "sender": {"id": "3"},
                        "recipient": {"id": "111"},
                        "timestamp": 1003,
                        "postback": {"payload": "GET_STARTED", "title": "Get Started"},
                    },
                ],
            },
            {
                "id": "222",
                "time": 2000,
                "messaging": [
                    {
                        "sender": {"id": "4"},
                        "recipient": {"id": "222"},
                        "timestamp": 2001,
                        "optin": {"ref": "PASS_THROUGH_PARAM"},
                    },
                    {
                        "sender": {"id": "5"},
                        "recipient": {"id": "222"},
                        "timestamp": 2002,
                        "read": {"watermark": 1999, "seq": 5},
                    },
                    {
                        "sender": {"id": "6"},
                        "recipient": {"id": "222"},
                        "timestamp": 2003,
                    },
                ],
            },
        ],
    }


# =============================================================================
# Infrastructure
# =============================================================================


@pytest.fixture
def mock_settings(monkeypatch):
    """Mock application settings."""
    from fbmessenger.config import Settings

    settings = Settings(
        facebook_page_access_token="test-page-token",
        facebook_verify_token="abc",
        facebook_page_id="page-123",
        facebook_api_base_url=TEST_API_URL,
        env="local",
        logfire_token=None,
        sentry_dsn=None,
    )

    monkeypatch.setattr("fbmessenger.config.get_settings", lambda: settings)
    # Patch where get_settings is imported so callers see the mock
    monkeypatch.setattr("fbmessenger.main.get_settings", lambda: settings)
    monkeypatch.setattr("fbmessenger.logging_config.get_settings", lambda: settings)
    monkeypatch.setattr("fbmessenger.cli.get_settings", lambda: settings)
    return settings


@pytest.fixture
def logfire_capture():
    """Capture Logfire calls for assertion as (level, args, kwargs) tuples."""
    captured_logs = []

    def capture(level):
        def _capture(*args, **kwargs):
            captured_logs.append((level, args, kwargs))

        return _capture

    with (
        patch("logfire.info", side_effect=capture("info")),
        patch("logfire.warn", side_effect=capture("warn")),
        patch("logfire.error", side_effect=capture("error")),
    ):
        yield captured_logs


@pytest.fixture
def mock_logfire(monkeypatch):
    """Mock Logfire so tests don't emit or configure real telemetry."""

    @contextmanager
    def mock_span(*args, **kwargs):
        yield {}

    mock_logfire_module = MagicMock()
    mock_logfire_module.info = Mock()
    mock_logfire_module.warn = Mock()
    mock_logfire_module.error = Mock()
    mock_logfire_module.span = mock_span
    mock_logfire_module.configure = Mock()
    mock_logfire_module.instrument_fastapi = Mock()
    mock_logfire_module.instrument_pydantic = Mock()

    for module in (
        "fbmessenger.services.messenger",
        "fbmessenger.services.dispatcher",
        "fbmessenger.services.decoder",
        "fbmessenger.logging_config",
        "fbmessenger.main",
    ):
        monkeypatch.setattr(f"{module}.logfire", mock_logfire_module)

    return mock_logfire_module


@pytest.fixture
def test_client(messenger, mock_logfire):
    """FastAPI TestClient with the test adapter attached (lifespan not run)."""
    from fastapi.testclient import TestClient

    from fbmessenger.main import create_app

    return TestClient(create_app(messenger=messenger))
