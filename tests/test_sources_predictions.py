"""Tests for the Polymarket and Kalshi adapters."""

from datetime import datetime, timezone

import pytest

from georisk.config import Settings
from georisk.sources.predictions import (
    KalshiAdapter,
    PolymarketAdapter,
    filter_crisis_markets,
    filter_kalshi_markets,
    score_crisis_probability,
    score_kalshi,
    volume_weight,
)

from conftest import fake_response

NOW = datetime(2025, 3, 14, tzinfo=timezone.utc)


def pm_market(question, yes="0.2", volume=1000, end="2030-01-01T00:00:00Z", **kw):
    m = {
        "question": question,
        "outcomePrices": f'["{yes}", "{1 - float(yes):.2f}"]',
        "volume": str(volume),
        "endDate": end,
    }
    m.update(kw)
    return m


def kalshi_market(title, yes_bid=50, volume=0, category="Politics"):
    return {"title": title, "yes_bid": yes_bid, "volume": volume, "category": category}


# =============================================================================
# POLYMARKET
# =============================================================================

class TestPolymarketScoring:

    def test_curve(self):
        assert score_crisis_probability(0) == 25
        assert score_crisis_probability(0.5) == pytest.approx(70)
        assert score_crisis_probability(1) == 100

    def test_curve_never_decreases(self):
        scores = [score_crisis_probability(p / 20) for p in range(0, 21)]
        assert scores == sorted(scores)
        assert scores[-1] == 100

    def test_volume_weight_floor(self):
        assert volume_weight(0) == 2
        assert volume_weight(1_000_000) == pytest.approx(6)

    def test_filter(self):
        markets = [
            pm_market("Will Russia and Ukraine agree to a ceasefire?"),
            pm_market("Will the Lakers win the title?"),
            pm_market("Will China invade Taiwan?", closed=True),
            pm_market("Will Iran test a nuclear weapon?", end="2024-01-01T00:00:00Z"),
            pm_market("Will NATO deploy troops?", outcomePrices="not json"),
            "garbage",
        ]
        out = filter_crisis_markets(markets, now=NOW)
        assert [m["question"] for m in out] == ["Will Russia and Ukraine agree to a ceasefire?"]
        assert out[0]["yes_price"] == pytest.approx(0.2)
        assert out[0]["volume"] == 1000

    def test_non_finite_values(self):
        markets = [
            pm_market("War in F?", volume="NaN"),
            pm_market("Missile test in G?", volume="inf"),
            pm_market("Conflict in H?", yes="nan"),
        ]
        out = filter_crisis_markets(markets, now=NOW)
        assert [m["question"] for m in out] == ["War in F?", "Missile test in G?"]
        assert [m["volume"] for m in out] == [0.0, 0.0]


class TestPolymarketAdapter:

    def test_three_markets_high_confidence(self, mock_get):
        mock_get.return_value = fake_response([
            pm_market("War between A and B?"),
            pm_market("Missile strike on C?"),
            pm_market("Military coup in D?"),
        ])
        sig = PolymarketAdapter(Settings()).fetch()
        assert sig.id == "polymarket-crisis"
        assert sig.score == 43
        assert sig.confidence == "high"
        assert not sig.is_fallback
        assert mock_get.call_args.kwargs["params"] == {"closed": "false", "limit": 200}

    def test_volume_weighted(self, mock_get):
        mock_get.return_value = fake_response([
            pm_market("Nuclear test this year?", yes="0.9", volume=1_000_000),
            pm_market("Sanctions on E?", yes="0.1", volume=10),
        ])
        # (0.9*6 + 0.1*2) / 8 = 0.7 -> 25 + 63
        sig = PolymarketAdapter(Settings()).fetch()
        assert sig.score == 88
        assert sig.confidence == "medium"
        assert "High probability" in sig.explanation

    def test_one_nan_market_does_not_discard_reading(self, mock_get, error_log):
        markets = [pm_market(f"War scenario {i}?") for i in range(4)]
        markets.append(pm_market("Invasion of J?", volume="NaN"))
        mock_get.return_value = fake_response(markets)
        sig = PolymarketAdapter(Settings(), error_log).fetch()
        assert sig.score == 43
        assert sig.confidence == "high"
        assert not sig.is_fallback
        assert len(error_log) == 0

    def test_no_crisis_markets_is_low_confidence_baseline(self, mock_get):
        mock_get.return_value = fake_response([pm_market("Best picture winner?")])
        sig = PolymarketAdapter(Settings()).fetch()
        assert sig.score == 25
        assert sig.confidence == "low"
        assert not sig.is_fallback

    def test_failure_publishes_fallback(self, mock_get, error_log):
        mock_get.return_value = fake_response(None, status=503)
        sig = PolymarketAdapter(Settings(), error_log).fetch()
        assert sig.score == 30
        assert sig.confidence == "low"
        assert sig.is_fallback
        assert sig.source_name == "Polymarket (Fallback)"
        assert error_log.recent()[0].error_type == "network"

    def test_unexpected_shape_publishes_fallback(self, mock_get, error_log):
        mock_get.return_value = fake_response({"markets": []})
        sig = PolymarketAdapter(Settings(), error_log).fetch()
        assert sig.is_fallback
        assert error_log.recent()[0].error_type == "validation"


# =============================================================================
# KALSHI
# =============================================================================

class TestKalshiScoring:

    def test_curve(self):
        assert score_kalshi(0, 0, 10) == 30
        assert score_kalshi(10, 0, 10) == 70
        assert score_kalshi(10, 20, 10) == 100

    @pytest.mark.parametrize("curve", [
        lambda n: score_kalshi(n, 0, 20),
        lambda n: score_kalshi(0, n, 20),
    ])
    def test_curve_never_decreases(self, curve):
        scores = [curve(n) for n in range(0, 21)]
        assert scores == sorted(scores)
        assert all(0 <= s <= 100 for s in scores)

    def test_filter_by_category_or_keyword(self):
        markets = [
            kalshi_market("Anything", category="World"),
            kalshi_market("Will the Senate pass the bill?", category="Sports"),
            kalshi_market("Who wins the Super Bowl?", category="Sports"),
        ]
        assert len(filter_kalshi_markets(markets)) == 2


class TestKalshiAdapter:

    def test_volatile_high_stakes(self, mock_get):
        mock_get.return_value = fake_response({
            "markets": [kalshi_market(f"Election {i}", yes_bid=50, volume=20000) for i in range(5)],
        })
        sig = KalshiAdapter(Settings()).fetch()
        assert sig.id == "kalshi-political-risk"
        assert sig.region == "north-america"
        # 30 + 1.0*40 + 5*3
        assert sig.score == 85
        assert sig.confidence == "high"

    def test_calm_markets(self, mock_get):
        mock_get.return_value = fake_response({"markets": [
            kalshi_market("Fed cuts rate?", yes_bid=10),
            kalshi_market("Recession in 2025?", yes_bid=90),
            kalshi_market("Who wins the Super Bowl?", category="Sports"),
        ]})
        sig = KalshiAdapter(Settings()).fetch()
        assert sig.score == 30
        assert sig.confidence == "medium"

    def test_no_markets(self, mock_get):
        mock_get.return_value = fake_response({"markets": []})
        sig = KalshiAdapter(Settings()).fetch()
        assert (sig.score, sig.confidence, sig.is_fallback) == (25, "low", False)

    def test_missing_markets_key_falls_back(self, mock_get, error_log):
        mock_get.return_value = fake_response({"cursor": "x"})
        sig = KalshiAdapter(Settings(), error_log).fetch()
        assert (sig.score, sig.confidence, sig.is_fallback) == (25, "low", True)
        assert error_log.count_for_signal("kalshi-political-risk") == 1

    def test_non_finite_quotes_skipped(self, mock_get, error_log):
        mock_get.return_value = fake_response({"markets": [
            kalshi_market("Election A", yes_bid=50, volume=20000),
            kalshi_market("Election B", yes_bid="NaN", volume=20000),
            kalshi_market("Election C", yes_bid=50, volume="inf"),
        ]})
        sig = KalshiAdapter(Settings(), error_log).fetch()
        # 2 volatile of 3, 1 high-stakes: 30 + 26.67 + 3
        assert sig.score == 60
        assert not sig.is_fallback
        assert len(error_log) == 0
