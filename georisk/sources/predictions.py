"""
Prediction market sources (Polymarket, Kalshi).

Both publish a low-confidence fallback signal when the API is unreachable so
the dashboard keeps a marker for them; the fallback is flagged ``is_fallback``
and weighted as ``low`` confidence in the composite.
"""

import json
import math
from datetime import datetime, timezone

import numpy as np
from dateutil import parser as dateparser

from georisk.errors import ValidationError
from georisk.scoring import clamp
from georisk.sources.base import SourceAdapter

# ============================================================
# CONFIG — KEYWORDS
# ============================================================

CRISIS_KEYWORDS = [
    "war", "invasion", "invade", "attack", "military", "nuclear",
    "russia", "ukraine", "china", "taiwan", "iran", "israel", "gaza",
    "ceasefire", "conflict", "troops", "missile", "nato", "hamas",
    "sanctions", "embargo", "crisis", "emergency", "martial law",
]

KALSHI_CATEGORIES = ["Politics", "World", "Economics"]
KALSHI_KEYWORDS = [
    "president", "congress", "senate", "election", "impeach", "resign",
    "fed", "inflation", "recession", "unemployment", "gdp", "rate",
    "war", "sanctions", "tariff", "shutdown", "default", "debt ceiling",
]

NO_MARKETS_SCORE = 25
HIGH_PROB_THRESHOLD = 0.4
KALSHI_HIGH_STAKES_VOLUME = 10000


# ============================================================
# SCORING CURVES
# ============================================================

def volume_weight(volume):
    return math.log10(max(volume, 100))


def score_crisis_probability(avg_prob):
    """Volume-weighted mean yes-probability (0-1) → score. 20% → 43, 50% → 70."""
    return clamp(25 + avg_prob * 90)


def score_kalshi(volatile_count, high_stakes_count, market_count):
    ratio = volatile_count / max(market_count, 1)
    return clamp(30 + ratio * 40 + high_stakes_count * 3)


def _parse_prices(raw):
    prices = json.loads(raw) if isinstance(raw, str) else raw
    return float(prices[0]) if prices else 0.0


def _finite_or_zero(value):
    try:
        n = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    return n if math.isfinite(n) else 0.0


def _is_expired(end_date, now):
    if not end_date:
        return False
    try:
        edt = dateparser.parse(end_date)
    except (ValueError, OverflowError):
        return False
    if edt.tzinfo is None:
        edt = edt.replace(tzinfo=timezone.utc)
    return edt < now


# ============================================================
# POLYMARKET
# ============================================================

def filter_crisis_markets(markets, now=None):
    now = now or datetime.now(timezone.utc)
    crisis = []
    for m in markets:
        if not isinstance(m, dict) or m.get("closed") or m.get("resolved"):
            continue
        q = (m.get("question") or "").lower()
        if not any(k in q for k in CRISIS_KEYWORDS):
            continue
        if _is_expired(m.get("endDate") or m.get("end_date_iso"), now):
            continue
        try:
            yp = _parse_prices(m.get("outcomePrices", "[]"))
        except (ValueError, TypeError, IndexError):
            continue
        if not math.isfinite(yp):
            continue
        vol = _finite_or_zero(m.get("volume"))
        crisis.append({"question": m.get("question", ""), "yes_price": clamp(yp, 0.0, 1.0), "volume": vol})
    return crisis


class PolymarketAdapter(SourceAdapter):
    signal_id = "polymarket-crisis"
    name = "Polymarket Crisis Odds"
    source_name = "Polymarket"
    source_url = "https://polymarket.com"
    URL = "https://gamma-api.polymarket.com/markets"

    def collect(self):
        markets = self.http_get(self.URL, params={"closed": "false", "limit": 200})
        if not isinstance(markets, list):
            raise ValidationError("Expected a list of markets", self.source_name)
        crisis = filter_crisis_markets(markets)
        if not crisis:
            return self.make_signal(
                NO_MARKETS_SCORE,
                "No active crisis-related prediction markets found.",
                "Monitoring active",
                confidence="low",
            )
        probs = [m["yes_price"] for m in crisis]
        weights = [volume_weight(m["volume"]) for m in crisis]
        avg = float(np.average(probs, weights=weights))
        high = [
            f"{m['question'][:50]}... ({m['yes_price'] * 100:.0f}%)"
            for m in crisis if m["yes_price"] > HIGH_PROB_THRESHOLD
        ]
        total_vol = sum(m["volume"] for m in crisis)
        return self.make_signal(
            score_crisis_probability(avg),
            f"{len(crisis)} crisis markets tracked. Avg probability: {avg * 100:.1f}%. "
            + (f"High probability: {'; '.join(high[:2])}" if high else "No high-probability events."),
            f"{len(crisis)} active markets, ${total_vol / 1e6:.1f}M volume",
            confidence="high" if len(crisis) >= 3 else "medium",
        )

    def fallback(self, error):
        return self.make_fallback(30, "Prediction market data temporarily unavailable.")


# ============================================================
# KALSHI
# ============================================================

def filter_kalshi_markets(markets):
    out = []
    for m in markets:
        if not isinstance(m, dict):
            continue
        title = (m.get("title") or "").lower()
        if m.get("category") in KALSHI_CATEGORIES or any(k in title for k in KALSHI_KEYWORDS):
            out.append(m)
    return out


class KalshiAdapter(SourceAdapter):
    signal_id = "kalshi-political-risk"
    name = "Kalshi Political Risk"
    source_name = "Kalshi"
    source_url = "https://kalshi.com"
    region = "north-america"
    URL = "https://api.elections.kalshi.com/trade-api/v2/markets"

    def collect(self):
        data = self.http_get(self.URL, params={"status": "open", "limit": 100})
        markets = self.require(data, "markets")
        if not isinstance(markets, list):
            raise ValidationError("'markets' is not a list", self.source_name)
        relevant = filter_kalshi_markets(markets)
        if not relevant:
            return self.make_signal(
                NO_MARKETS_SCORE,
                "No active political risk markets found on Kalshi.",
                "Monitoring active",
                confidence="low",
            )
        volatile = high_stakes = 0
        key_events = []
        for m in relevant:
            # yes_bid is quoted in cents
            try:
                yp = float(m.get("yes_bid") or 0) / 100
            except (TypeError, ValueError):
                continue
            if not math.isfinite(yp):
                continue
            vol = _finite_or_zero(m.get("volume"))
            if 0.3 < yp < 0.7:
                volatile += 1
            if vol > KALSHI_HIGH_STAKES_VOLUME:
                high_stakes += 1
                key_events.append(f"{(m.get('title') or '')[:40]}... ({yp * 100:.0f}%)")
        return self.make_signal(
            score_kalshi(volatile, high_stakes, len(relevant)),
            f"{len(relevant)} political/economic markets. {volatile} volatile (30-70% odds). "
            + (f"Key: {'; '.join(key_events[:2])}" if key_events else "Markets stable."),
            f"{high_stakes} high-volume events, {volatile} uncertain outcomes",
            confidence="high" if len(relevant) >= 5 else "medium",
        )

    def fallback(self, error):
        return self.make_fallback(25, "Political risk monitoring active (API fallback).")
