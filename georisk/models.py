"""Signal, GlobalRisk and Snapshot: the values one polling cycle produces."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from georisk.config import CONFIDENCE_LEVELS, ELEVATED_MAX, NORMAL_MAX, REGIONS

TRENDS = ("up", "down", "stable")


def score_to_status(score):
    if score <= NORMAL_MAX:
        return "normal"
    if score <= ELEVATED_MAX:
        return "elevated"
    return "high"


def utcnow():
    return datetime.now(timezone.utc)


def _iso(ts):
    return ts.isoformat() if ts else None


@dataclass(frozen=True)
class Signal:
    """One source's risk reading for a single cycle.

    ``status`` is derived from ``score`` on every read and cannot be set.
    """
    id: str
    name: str
    region: str
    score: int
    confidence: str
    explanation: str = ""
    baseline_comparison: str = ""
    source_name: str = ""
    source_url: str = ""
    last_updated: datetime = field(default_factory=utcnow)
    is_fallback: bool = False

    def __post_init__(self):
        if self.region not in REGIONS:
            raise ValueError(f"Unknown region {self.region!r} for signal {self.id}")
        if self.confidence not in CONFIDENCE_LEVELS:
            raise ValueError(f"Unknown confidence {self.confidence!r} for signal {self.id}")
        if isinstance(self.score, bool) or not isinstance(self.score, int):
            raise TypeError(f"Signal {self.id} score must be int, got {type(self.score).__name__}")
        if not 0 <= self.score <= 100:
            raise ValueError(f"Signal {self.id} score {self.score} outside 0-100")

    @property
    def status(self):
        return score_to_status(self.score)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "region": self.region,
            "status": self.status,
            "score": self.score,
            "explanation": self.explanation,
            "baselineComparison": self.baseline_comparison,
            "confidence": self.confidence,
            "sourceUrl": self.source_url,
            "sourceName": self.source_name,
            "lastUpdated": _iso(self.last_updated),
            "isMocked": self.is_fallback,
        }


@dataclass(frozen=True)
class GlobalRisk:
    score: int
    trend: str
    signal_count: int
    last_updated: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        if self.trend not in TRENDS:
            raise ValueError(f"Unknown trend {self.trend!r}")

    def to_dict(self):
        return {
            "score": self.score,
            "trend": self.trend,
            "signalCount": self.signal_count,
            "lastUpdated": _iso(self.last_updated),
        }


@dataclass(frozen=True)
class Snapshot:
    """Everything published for one completed cycle."""
    signals: tuple
    global_risk: GlobalRisk
    regional: dict
    cycle: int = 0
    duration: float = 0.0

    def to_dict(self):
        return {
            "globalRisk": self.global_risk.to_dict(),
            "regional": dict(self.regional),
            "signals": [s.to_dict() for s in self.signals],
            "cycle": self.cycle,
            "durationSeconds": round(self.duration, 2),
        }
