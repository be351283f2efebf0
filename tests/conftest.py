"""
Pytest fixtures for georisk.

Provides:
- Signal factory
- Settings and a shared error log
- Stubbed HTTP responses (requests.get is patched; no network)
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from georisk.config import Settings
from georisk.errors import ErrorLog
from georisk.models import Signal

FIXED_NOW = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# SIGNAL FIXTURES
# =============================================================================

def build_signal(id="test-signal", score=50, confidence="high", region="global", **kw):
    kw.setdefault("name", id.replace("-", " ").title())
    kw.setdefault("last_updated", FIXED_NOW)
    return Signal(id=id, score=score, confidence=confidence, region=region, **kw)


@pytest.fixture
def make_signal():
    """Factory: make_signal(id=..., score=..., confidence=..., region=...)."""
    return build_signal


# =============================================================================
# CONFIG FIXTURES
# =============================================================================

@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def error_log():
    return ErrorLog(50)


# =============================================================================
# HTTP FIXTURES
# =============================================================================

def fake_response(payload=None, status=200, bad_json=False):
    resp = MagicMock()
    resp.status_code = status
    if bad_json:
        resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture
def mock_get():
    """Patched requests.get as seen by the adapters."""
    with patch("georisk.sources.base.requests.get") as m:
        yield m
