"""Tests for the Pentagon Pizza Index adapter."""

from datetime import datetime, timezone

import pytest
import requests

from georisk.config import Settings
from georisk.errors import FetchError
from georisk.sources.osint import PentagonPizzaAdapter, dc_hour, is_late_night, score_alert_level

from conftest import fake_response


class TestAlertLevels:

    @pytest.mark.parametrize("level,score", [
        ("CRITICAL", 85), ("High", 85), ("DEFCON 1", 85),
        ("elevated", 60), ("Warning", 60), ("defcon 2", 60),
        ("guarded", 45), ("DEFCON 3", 45),
        ("normal", 25), ("", 25), (None, 25),
    ])
    def test_mapping(self, level, score):
        assert score_alert_level(level) == score


class TestDcClock:

    def test_dc_hour_winter(self):
        # EST is UTC-5
        assert dc_hour(datetime(2025, 1, 15, 3, 30, tzinfo=timezone.utc)) == 22

    def test_dc_hour_summer(self):
        # EDT is UTC-4
        assert dc_hour(datetime(2025, 7, 15, 16, 0, tzinfo=timezone.utc)) == 12

    @pytest.mark.parametrize("hour,late", [(21, False), (22, True), (0, True), (3, True), (4, False), (12, False)])
    def test_late_night_window(self, hour, late):
        assert is_late_night(hour) is late


class TestPentagonPizzaAdapter:

    def test_live_status(self, mock_get):
        mock_get.return_value = fake_response({"alertLevel": "Elevated", "locations": 6, "spikeDetected": True})
        sig = PentagonPizzaAdapter(Settings()).fetch()
        assert sig.id == "pentagon-pizza"
        assert sig.region == "north-america"
        assert sig.score == 60
        assert sig.confidence == "medium"
        assert "spike detected" in sig.explanation
        assert sig.baseline_comparison == "Monitoring 6 pizza locations"

    def test_level_key_fallback(self, mock_get):
        mock_get.return_value = fake_response({"level": "guarded"})
        sig = PentagonPizzaAdapter(Settings()).fetch()
        assert sig.score == 45
        assert sig.baseline_comparison == "Monitoring 8 pizza locations"

    def test_api_down_uses_clock_fallback(self, mock_get, error_log):
        mock_get.return_value = fake_response(None, status=404)
        sig = PentagonPizzaAdapter(Settings(), error_log).fetch()
        assert sig.is_fallback
        assert sig.confidence == "low"
        assert sig.source_name == "Pentagon Pizza (Fallback)"
        assert sig.score in (22, 40)
        assert error_log.recent()[0].error_type == "network"

    def test_connection_failure_uses_plain_tier(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("reset")
        sig = PentagonPizzaAdapter(Settings()).fetch()
        assert sig.is_fallback
        assert sig.score in (20, 35)

    # January: 04:00 UTC is 23:00 EST, 16:00 UTC is 11:00 EST
    @pytest.mark.parametrize("utc_hour,score", [(4, 35), (16, 20)])
    def test_unreachable_fallback_by_dc_hour(self, utc_hour, score):
        now = datetime(2025, 1, 15, utc_hour, tzinfo=timezone.utc)
        sig = PentagonPizzaAdapter(Settings()).fallback(FetchError("down"), now=now)
        assert sig.score == score
        assert sig.is_fallback
        assert sig.baseline_comparison.startswith("Fallback: API unavailable")

    @pytest.mark.parametrize("utc_hour,score", [(4, 40), (16, 22)])
    def test_http_error_fallback_by_dc_hour(self, utc_hour, score):
        now = datetime(2025, 1, 15, utc_hour, tzinfo=timezone.utc)
        error = FetchError("HTTP 503", "PizzINT", status_code=503)
        sig = PentagonPizzaAdapter(Settings()).fallback(error, now=now)
        assert sig.score == score
        assert sig.confidence == "low"
        assert sig.baseline_comparison == f"DC time: {(utc_hour - 5) % 24}:00 ET"

    def test_late_night_http_error_explanation(self):
        now = datetime(2025, 1, 15, 4, tzinfo=timezone.utc)
        error = FetchError("HTTP 500", status_code=500)
        sig = PentagonPizzaAdapter(Settings()).fallback(error, now=now)
        assert "No spike data available" in sig.explanation
