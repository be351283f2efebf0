"""
Public attention sources: Wikipedia trending articles and GDELT news tone.
"""

from collections import Counter
from datetime import timedelta, timezone

import numpy as np
from dateutil import parser as dateparser

from georisk.errors import ValidationError
from georisk.geo import country_to_region
from georisk.models import utcnow
from georisk.scoring import clamp
from georisk.sources.base import SourceAdapter

# ============================================================
# CONFIG — KEYWORDS
# ============================================================

WIKI_CRISIS_KEYWORDS = [
    "war", "military_conflict", "invasion", "coup", "nuclear", "martial_law",
    "emergency", "assassination", "terrorist", "bombing", "missile", "attack",
]

# Entertainment titles that match a crisis keyword ("Star_Wars", "Attack_on_Titan")
WIKI_EXCLUDE_MARKERS = [
    "star_wars", "_(film)", "_(tv_series)", "_(video_game)", "_(novel)",
    "_(album)", "_(song)", "_(band)", "attack_on_titan",
]

WIKI_TOP_N = 100
GDELT_QUERY = "conflict OR military OR protest OR crisis"


# ============================================================
# SCORING CURVES
# ============================================================

def score_wikipedia(crisis_count):
    return clamp(crisis_count * 12 + 15)


def score_gdelt(avg_tone, article_count):
    """Negative tone raises the score; volume adds a little on top."""
    return clamp(50 - avg_tone * 5 + article_count / 5)


def is_crisis_article(title):
    t = (title or "").lower()
    if any(x in t for x in WIKI_EXCLUDE_MARKERS):
        return False
    return any(k in t for k in WIKI_CRISIS_KEYWORDS)


def tone_label(avg_tone):
    if avg_tone < -2: return "Negative"
    if avg_tone > 2:  return "Positive"
    return "Neutral"


# ============================================================
# WIKIPEDIA
# ============================================================

class WikipediaAdapter(SourceAdapter):
    signal_id = "wikipedia-spikes"
    name = "Wikipedia Attention Spikes"
    source_name = "Wikimedia API"
    source_url = "https://wikimedia.org/api/rest_v1/"
    URL = "https://wikimedia.org/api/rest_v1/metrics/pageviews/top/en.wikipedia/all-access/{y}/{m}/{d}"

    def url_for(self, day):
        return self.URL.format(y=f"{day.year:04d}", m=f"{day.month:02d}", d=f"{day.day:02d}")

    def collect(self, now=None):
        yesterday = (now or utcnow()) - timedelta(days=1)
        data = self.http_get(self.url_for(yesterday))
        articles = self.require(data, "items", 0, "articles")
        if not isinstance(articles, list):
            raise ValidationError("'articles' is not a list", self.source_name)

        crisis = [
            a.get("article", "") for a in articles[:WIKI_TOP_N]
            if isinstance(a, dict) and is_crisis_article(a.get("article"))
        ]
        n = len(crisis)
        if n:
            titles = ", ".join(t.replace("_", " ") for t in crisis[:3])
            explanation = f"{n} crisis-related article{'s' if n > 1 else ''} trending in top {WIKI_TOP_N} Wikipedia pages ({titles})."
        else:
            explanation = "No significant crisis-related articles trending."
        return self.make_signal(
            score_wikipedia(n),
            explanation,
            f"{n} of top {WIKI_TOP_N} pages",
            confidence="medium",
        )


# ============================================================
# GDELT
# ============================================================

def _tone(article):
    t = article.get("tone")
    return float(t) if isinstance(t, (int, float)) else 0.0


def _seen(article):
    try:
        ts = dateparser.isoparse(article.get("seendate") or "")
    except (ValueError, OverflowError, TypeError):
        return None
    return ts.astimezone(timezone.utc) if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


class GdeltAdapter(SourceAdapter):
    signal_id = "gdelt-news"
    name = "Global News Sentiment"
    source_name = "GDELT Project"
    source_url = "https://www.gdeltproject.org/"
    URL = "https://api.gdeltproject.org/api/v2/doc/doc"

    def collect(self):
        data = self.http_get(self.URL, params={
            "query": GDELT_QUERY, "mode": "artlist", "maxrecords": 50,
            "format": "json", "timespan": "24h",
        })
        if not isinstance(data, dict):
            raise ValidationError("Expected a JSON object", self.source_name)
        # GDELT omits the key entirely when nothing matched
        raw = self.require_list(data, "articles") if "articles" in data else []
        articles = [a for a in raw if isinstance(a, dict)]

        avg_tone = float(np.mean([_tone(a) for a in articles])) if articles else 0.0
        regions = Counter(country_to_region(a.get("sourcecountry", "")) for a in articles)
        top_region = regions.most_common(1)[0][0] if regions else None

        seen = [d for d in (_seen(a) for a in articles) if d is not None]
        latest = f" Latest article {max(seen):%H:%M} UTC." if seen else ""
        return self.make_signal(
            score_gdelt(avg_tone, len(articles)),
            f"{len(articles)} crisis-related articles in 24h. "
            f"Average tone: {avg_tone:.2f} (negative = concerning).{latest}",
            f"{tone_label(avg_tone)} sentiment",
            confidence="medium",
            region=top_region,
        )
