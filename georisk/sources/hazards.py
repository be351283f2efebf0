"""Natural hazard sources: USGS earthquakes and NASA EONET events."""

from georisk.errors import ValidationError
from georisk.geo import region_from_coordinates
from georisk.scoring import clamp
from georisk.sources.base import SourceAdapter

MAJOR_MAGNITUDE = 6.0
SIGNIFICANT_MAGNITUDE = 4.5
DAILY_SIGNIFICANT_AVG = 5
WEEKLY_EVENT_AVG = 20


def score_seismic(major_count, significant_count):
    return clamp(major_count * 25 + significant_count * 5 + 10)


def score_natural_events(wildfires, storms, volcanoes):
    return clamp(wildfires * 4 + storms * 6 + volcanoes * 8 + 15)


def _lat_lng(coords):
    """GeoJSON order is [lng, lat, (depth)]."""
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        return None, None
    lng, lat = coords[0], coords[1]
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return None, None
    return lat, lng


def _magnitude(feature):
    mag = (feature.get("properties") or {}).get("mag")
    return float(mag) if isinstance(mag, (int, float)) else 0.0


class EarthquakeAdapter(SourceAdapter):
    signal_id = "seismic-activity"
    name = "Seismic Activity Monitor"
    source_name = "USGS Earthquake Hazards"
    source_url = "https://earthquake.usgs.gov/"
    URL = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/2.5_day.geojson"

    def collect(self):
        data = self.http_get(self.URL)
        features = self.require(data, "features")
        if not isinstance(features, list):
            raise ValidationError("'features' is not a list", self.source_name)
        features = [f for f in features if isinstance(f, dict)]

        mags = [_magnitude(f) for f in features]
        major = sum(1 for m in mags if m >= MAJOR_MAGNITUDE)
        significant = sum(1 for m in mags if m >= SIGNIFICANT_MAGNITUDE)

        region, largest_txt = None, "none"
        if features:
            largest = max(features, key=_magnitude)
            lat, lng = _lat_lng((largest.get("geometry") or {}).get("coordinates"))
            region = region_from_coordinates(lat, lng)
            place = (largest.get("properties") or {}).get("place") or "N/A"
            largest_txt = f"M{_magnitude(largest):.1f} {place}"

        diff = significant - DAILY_SIGNIFICANT_AVG
        return self.make_signal(
            score_seismic(major, significant),
            f"{len(features)} earthquakes M2.5+ in 24h. {major} major (6.0+), "
            f"{significant} significant (4.5+). Largest: {largest_txt}.",
            f"{'+' if diff > 0 else ''}{diff} vs daily avg",
            region=region,
        )


class NaturalEventsAdapter(SourceAdapter):
    signal_id = "natural-events"
    name = "Natural Disaster Events"
    source_name = "NASA EONET"
    source_url = "https://eonet.gsfc.nasa.gov/"
    URL = "https://eonet.gsfc.nasa.gov/api/v3/events"

    @staticmethod
    def count_category(events, category_id):
        return sum(
            1 for e in events
            if any(c.get("id") == category_id for c in e.get("categories") or [] if isinstance(c, dict))
        )

    def collect(self):
        data = self.http_get(self.URL, params={"days": 7, "limit": 50})
        events = self.require(data, "events")
        if not isinstance(events, list):
            raise ValidationError("'events' is not a list", self.source_name)
        events = [e for e in events if isinstance(e, dict)]

        wildfires = self.count_category(events, "wildfires")
        storms = self.count_category(events, "severeStorms")
        volcanoes = self.count_category(events, "volcanoes")

        region = None
        if events:
            geometry = events[0].get("geometry") or []
            if geometry and isinstance(geometry[0], dict):
                lat, lng = _lat_lng(geometry[0].get("coordinates"))
                region = region_from_coordinates(lat, lng)

        diff = len(events) - WEEKLY_EVENT_AVG
        return self.make_signal(
            score_natural_events(wildfires, storms, volcanoes),
            f"{len(events)} active events: {wildfires} wildfires, {storms} severe storms, {volcanoes} volcanic.",
            f"{'+' if diff > 0 else ''}{diff} vs weekly avg",
            region=region,
        )
