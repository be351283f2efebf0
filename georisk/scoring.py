"""
Normalisation helpers, composite aggregation, trend and regional breakdowns.

Everything here is a pure function of its arguments. The only state that
crosses cycles (the previous global score) is passed in by the caller.
"""

import math

from georisk.config import (
    CONFIDENCE_WEIGHTS,
    GLOBAL,
    NEUTRAL_SCORE,
    REGIONS,
    TREND_THRESHOLD,
)
from georisk.models import GlobalRisk, score_to_status, utcnow

# ============================================================
# HELPERS — NORMALISATION
# ============================================================


def clamp(value, lo=0.0, hi=100.0):
    return min(max(value, lo), hi)


def round_score(value):
    """Clamp to 0-100 and round half up to an int score."""
    if value is None or math.isnan(value):
        raise ValueError("Cannot round a missing score")
    return int(math.floor(clamp(value) + 0.5))


def pct_deviation(value, baseline):
    if not baseline:
        raise ValueError("Baseline must be non-zero")
    return (value - baseline) / baseline * 100


def risk_level(score):
    if score < 30:   return "LOW"
    elif score < 60: return "MODERATE"
    elif score < 80: return "ELEVATED"
    else:            return "HIGH"


# ============================================================
# COMPOSITE SCORING
# ============================================================

def signal_weight(signal, weights=None):
    weights = weights or CONFIDENCE_WEIGHTS
    try:
        return float(weights[signal.confidence])
    except KeyError:
        raise ValueError(f"No weight configured for confidence {signal.confidence!r}") from None


def compute_trend(new_score, previous_score, threshold=TREND_THRESHOLD):
    if previous_score is None:
        return "stable"
    if new_score > previous_score + threshold:
        return "up"
    if new_score < previous_score - threshold:
        return "down"
    return "stable"


def aggregate(signals, previous_score=None, weights=None, now=None):
    """Confidence-weighted mean of all signals in the cycle."""
    now = now or utcnow()
    signals = list(signals)
    if not signals:
        return GlobalRisk(score=0, trend="stable", signal_count=0, last_updated=now)
    total_w = weighted = 0.0
    for s in signals:
        w = signal_weight(s, weights)
        total_w += w
        weighted += s.score * w
    if total_w <= 0:
        raise ValueError("Confidence weights must be positive")
    score = round_score(weighted / total_w)
    return GlobalRisk(
        score=score,
        trend=compute_trend(score, previous_score),
        signal_count=len(signals),
        last_updated=now,
    )


# ============================================================
# REGIONAL
# ============================================================

def _check_region(region):
    if region not in REGIONS:
        raise ValueError(f"Unknown region {region!r}; expected one of {', '.join(REGIONS)}")


def filter_by_region(signals, region):
    """Signals visible for a region: its own plus every global signal."""
    _check_region(region)
    if region == GLOBAL:
        return list(signals)
    return [s for s in signals if s.region == region or s.region == GLOBAL]


def regional_score(signals, region):
    matched = filter_by_region(signals, region)
    if not matched:
        return 0
    return round_score(sum(s.score for s in matched) / len(matched))


def regional_scores(signals):
    signals = list(signals)
    return {rk: regional_score(signals, rk) for rk in REGIONS}


# ============================================================
# DISPLAY SUMMARIES
# ============================================================

def status_counts(signals):
    counts = {"normal": 0, "elevated": 0, "high": 0}
    for s in signals:
        counts[score_to_status(s.score)] += 1
    return counts


def top_drivers(signals, limit=3):
    """Signals furthest from the neutral midpoint, with each one's share of
    the returned drivers' total deviation (percent)."""
    ranked = sorted(signals, key=lambda s: (-abs(s.score - NEUTRAL_SCORE), s.id))[:limit]
    total = sum(abs(s.score - NEUTRAL_SCORE) for s in ranked) or 1
    return [(s, round(abs(s.score - NEUTRAL_SCORE) / total * 100)) for s in ranked]
