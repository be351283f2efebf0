"""
Pentagon Pizza Index: late-night food delivery activity near the Pentagon,
as published by pizzint.watch.
"""

from datetime import datetime

from dateutil import tz

from georisk.errors import FetchError, ValidationError
from georisk.sources.base import SourceAdapter

DC_TZ = tz.gettz("America/New_York")

# First matching marker wins
ALERT_LEVELS = [
    (("critical", "high", "defcon 1"), 85),
    (("elevated", "warning", "defcon 2"), 60),
    (("guarded", "defcon 3"), 45),
]
NORMAL_SCORE = 25
# Fallback tiers as (late night, daytime)
HTTP_ERROR_SCORES = (40, 22)
UNREACHABLE_SCORES = (35, 20)
DEFAULT_LOCATIONS = 8


def score_alert_level(level):
    level = (level or "").lower()
    for markers, score in ALERT_LEVELS:
        if any(m in level for m in markers):
            return score
    return NORMAL_SCORE


def dc_hour(now=None):
    now = now or datetime.now(tz.UTC)
    return now.astimezone(DC_TZ).hour


def is_late_night(hour):
    """22:00-03:59 Eastern."""
    return hour >= 22 or hour < 4


class PentagonPizzaAdapter(SourceAdapter):
    signal_id = "pentagon-pizza"
    name = "Pentagon Pizza Index"
    source_name = "PizzINT"
    source_url = "https://pizzint.watch"
    region = "north-america"
    URL = "https://www.pizzint.watch/api/status"

    def collect(self):
        data = self.http_get(self.URL)
        if not isinstance(data, dict):
            raise ValidationError("Expected a JSON object", self.source_name)
        level = data.get("alertLevel") or data.get("level") or ""
        if not isinstance(level, str):
            raise ValidationError(f"Alert level is not text: {level!r}", self.source_name)
        activity = (
            "Late-night activity spike detected near Pentagon."
            if data.get("spikeDetected") else "Normal activity patterns."
        )
        return self.make_signal(
            score_alert_level(level),
            f"Alert level: {level.lower() or 'normal'}. {activity}",
            f"Monitoring {data.get('locations') or DEFAULT_LOCATIONS} pizza locations",
            confidence="medium",
        )

    def fallback(self, error, now=None):
        """The site answering with an error status gets the higher tier;
        a connection failure or bad body gets the plain one."""
        hour = dc_hour(now)
        late = is_late_night(hour)
        if isinstance(error, FetchError) and error.status_code is not None:
            late_score, day_score = HTTP_ERROR_SCORES
            explanation = (
                "Late-night hours in DC (monitoring active). No spike data available."
                if late else "Normal business hours. Pentagon area activity baseline."
            )
            comparison = f"DC time: {hour}:00 ET"
        else:
            late_score, day_score = UNREACHABLE_SCORES
            explanation = "Classic OSINT indicator monitoring Pentagon area activity."
            comparison = f"Fallback: API unavailable (DC time {hour}:00 ET)"
        return self.make_signal(
            late_score if late else day_score,
            explanation,
            comparison,
            confidence="low",
            source_name="Pentagon Pizza (Fallback)",
            is_fallback=True,
        )
