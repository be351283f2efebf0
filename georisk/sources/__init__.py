"""Source adapters, one per upstream indicator."""

from georisk.config import Settings
from georisk.errors import ErrorLog
from georisk.sources.attention import GdeltAdapter, WikipediaAdapter
from georisk.sources.base import SourceAdapter
from georisk.sources.hazards import EarthquakeAdapter, NaturalEventsAdapter
from georisk.sources.infrastructure import FlightAnomalyAdapter, InternetOutageAdapter
from georisk.sources.markets import (
    CreditSpreadAdapter,
    DollarIndexAdapter,
    GoldPriceAdapter,
    OilPriceAdapter,
    SafeHavenAdapter,
    VixAdapter,
)
from georisk.sources.osint import PentagonPizzaAdapter
from georisk.sources.predictions import KalshiAdapter, PolymarketAdapter

ALL_ADAPTERS = [
    WikipediaAdapter,
    SafeHavenAdapter,
    EarthquakeAdapter,
    NaturalEventsAdapter,
    GdeltAdapter,
    InternetOutageAdapter,
    FlightAnomalyAdapter,
    VixAdapter,
    CreditSpreadAdapter,
    OilPriceAdapter,
    GoldPriceAdapter,
    DollarIndexAdapter,
    PolymarketAdapter,
    KalshiAdapter,
    PentagonPizzaAdapter,
]


def build_default_adapters(settings=None, error_log=None):
    """One instance of every adapter, all sharing one error log."""
    settings = settings or Settings()
    if error_log is None:
        error_log = ErrorLog(settings.error_log_size)
    return [cls(settings, error_log) for cls in ALL_ADAPTERS]
