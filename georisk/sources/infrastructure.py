"""
Infrastructure sources: IODA internet outages and OpenSky flight anomalies.
"""

import logging
import time

from georisk.errors import FetchError, SourceTimeoutError
from georisk.geo import country_to_region
from georisk.scoring import clamp
from georisk.sources.base import SourceAdapter

log = logging.getLogger(__name__)

OUTAGE_SEVERITY = {"critical": 3, "warning": 2}
DAILY_OUTAGE_AVG = 3
DAILY_ALERT_AVG = 5
EMERGENCY_SQUAWKS = ("7500", "7600", "7700")
LOW_ALTITUDE_M = 100

# OpenSky state vector indices
_ALTITUDE, _ON_GROUND, _SQUAWK = 7, 8, 14


def score_outages(outage_count, max_severity):
    return clamp(outage_count * 6 + max_severity * 10 + 10)


def score_alerts(alert_count):
    return clamp(alert_count * 8 + 15)


def score_flights(anomaly_count):
    return clamp(anomaly_count * 15 + 20)


def outage_severity(level):
    return OUTAGE_SEVERITY.get((level or "").lower(), 1)


def _signed_int(n):
    return f"{'+' if n > 0 else ''}{n}"


# ============================================================
# IODA
# ============================================================

class InternetOutageAdapter(SourceAdapter):
    """Raw country signals first; the alerts feed is used when that endpoint
    is unreachable or erroring."""
    signal_id = "internet-outages"
    name = "Internet Connectivity Disruptions"
    source_name = "IODA (Georgia Tech)"
    source_url = "https://ioda.inetintel.cc.gatech.edu/"
    BASE = "https://api.ioda.inetintel.cc.gatech.edu/v2"

    def window(self):
        now = int(time.time())
        return {"from": now - 86400, "until": now}

    def collect(self):
        params = self.window()
        try:
            data = self.http_get(f"{self.BASE}/signals/raw/country", params=params)
        except (FetchError, SourceTimeoutError) as e:
            log.info(f"IODA: raw signals unavailable ({e}), trying alerts")
            return self.collect_alerts(params)
        outages = [o for o in self.require_list(data, "data") if isinstance(o, dict)]

        top_country, max_sev = "", 0
        for o in outages:
            sev = outage_severity(o.get("level"))
            if sev > max_sev:
                max_sev, top_country = sev, o.get("entityCode") or ""

        n = len(outages)
        return self.make_signal(
            score_outages(n, max_sev),
            f"{n} connectivity disruption{'' if n == 1 else 's'} detected. "
            + ("Elevated severity in some regions." if max_sev > 1 else "Minor disruptions only."),
            f"{_signed_int(n - DAILY_OUTAGE_AVG)} vs daily avg",
            confidence="medium",
            region=country_to_region(top_country),
        )

    def collect_alerts(self, params):
        data = self.http_get(f"{self.BASE}/alerts", params=dict(params, limit=20))
        n = len(self.require_list(data, "data"))
        return self.make_signal(
            score_alerts(n),
            f"{n} connectivity alerts detected globally in past 24 hours.",
            f"{_signed_int(n - DAILY_ALERT_AVG)} vs daily avg",
            confidence="medium",
        )


# ============================================================
# OPENSKY
# ============================================================

def count_flight_anomalies(states):
    """-> (emergency_squawks, low_altitude_airborne)"""
    emergency = low = 0
    for s in states:
        if not isinstance(s, (list, tuple)) or len(s) <= _SQUAWK:
            continue
        if s[_SQUAWK] in EMERGENCY_SQUAWKS:
            emergency += 1
        alt = s[_ALTITUDE]
        if not s[_ON_GROUND] and isinstance(alt, (int, float)) and alt < LOW_ALTITUDE_M:
            low += 1
    return emergency, low


class FlightAnomalyAdapter(SourceAdapter):
    signal_id = "flight-anomalies"
    name = "Aviation Traffic Patterns"
    source_name = "OpenSky Network"
    source_url = "https://opensky-network.org/"
    region = "north-america"
    slow = True
    URL = "https://opensky-network.org/api/states/all"
    BOUNDS = {"lamin": 25, "lomin": -130, "lamax": 50, "lomax": -60}

    def collect(self):
        data = self.http_get(self.URL, params=self.BOUNDS)
        # "states" is null when nothing is in the box
        states = self.require_list(data, "states", null_is_empty=True)
        emergency, low = count_flight_anomalies(states)
        anomalies = emergency + low
        return self.make_signal(
            score_flights(anomalies),
            f"{len(states)} flights tracked. {emergency} emergency squawks, {low} altitude anomalies.",
            f"{'Above' if anomalies > 2 else 'At'} normal levels",
            confidence="medium",
        )
