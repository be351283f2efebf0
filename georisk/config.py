"""Static configuration: scoring policy, regions, per-source baselines, env settings."""

import os
from dataclasses import dataclass, field

# ============================================================
# CONFIG — SCORING
# ============================================================

# Status bands are fixed: 0-34 normal, 35-64 elevated, 65-100 high
NORMAL_MAX = 34
ELEVATED_MAX = 64

CONFIDENCE_WEIGHTS = {"high": 2.0, "medium": 1.5, "low": 1.0}
TREND_THRESHOLD = 3
NEUTRAL_SCORE = 50

# ============================================================
# CONFIG — REGIONS
# ============================================================

GLOBAL = "global"

REGIONS = (
    "global",
    "north-america",
    "europe",
    "asia-pacific",
    "middle-east",
    "africa",
    "south-america",
)

REGION_LABELS = {
    "global": "Global",
    "north-america": "North America",
    "europe": "Europe",
    "asia-pacific": "Asia-Pacific",
    "middle-east": "Middle East",
    "africa": "Africa",
    "south-america": "South America",
}

CONFIDENCE_LEVELS = ("low", "medium", "high")

# ============================================================
# CONFIG — HTTP
# ============================================================

USER_AGENT = "Mozilla/5.0 (compatible; georisk-signal-fetcher/1.0)"
DEFAULT_TIMEOUT = 10
SLOW_TIMEOUT = 20


# ============================================================
# BASELINES + SETTINGS
# ============================================================

@dataclass(frozen=True)
class MarketBaselines:
    """Reference levels the price-deviation sources measure against."""
    chf: float = 0.88    # USD/CHF
    jpy: float = 150.0   # USD/JPY
    oil: float = 72.0    # WTI $/bbl
    gold: float = 2000.0  # $/oz
    dxy: float = 100.0

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            chf=_env_float(env, "GEORISK_BASELINE_CHF", defaults.chf),
            jpy=_env_float(env, "GEORISK_BASELINE_JPY", defaults.jpy),
            oil=_env_float(env, "GEORISK_BASELINE_OIL", defaults.oil),
            gold=_env_float(env, "GEORISK_BASELINE_GOLD", defaults.gold),
            dxy=_env_float(env, "GEORISK_BASELINE_DXY", defaults.dxy),
        )


@dataclass(frozen=True)
class Settings:
    fred_api_key: str = ""
    http_timeout: float = DEFAULT_TIMEOUT
    slow_timeout: float = SLOW_TIMEOUT
    max_workers: int = 8
    poll_interval: float = 60
    error_log_size: int = 50
    port: int = 5000
    baselines: MarketBaselines = field(default_factory=MarketBaselines)
    confidence_weights: dict = field(default_factory=lambda: dict(CONFIDENCE_WEIGHTS))

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        return cls(
            fred_api_key=env.get("FRED_API_KEY", ""),
            http_timeout=_env_float(env, "GEORISK_HTTP_TIMEOUT", DEFAULT_TIMEOUT),
            slow_timeout=_env_float(env, "GEORISK_SLOW_TIMEOUT", SLOW_TIMEOUT),
            max_workers=int(_env_float(env, "GEORISK_MAX_WORKERS", 8)),
            poll_interval=_env_float(env, "GEORISK_POLL_INTERVAL", 60),
            error_log_size=int(_env_float(env, "GEORISK_ERROR_LOG_SIZE", 50)),
            port=int(_env_float(env, "PORT", 5000)),
            baselines=MarketBaselines.from_env(env),
        )


def _env_float(env, key, default):
    raw = env.get(key, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be numeric, got {raw!r}") from None
