"""
Base class for source adapters.

An adapter turns one upstream response into at most one Signal. ``fetch()``
never raises: failures are classified, written to the error log, and either
dropped or replaced by the adapter's explicit low-confidence fallback.
"""

import logging

import requests

from georisk.config import GLOBAL, USER_AGENT, Settings
from georisk.errors import (
    ErrorLog,
    FetchError,
    ParseError,
    SourceTimeoutError,
    ValidationError,
    classify_error,
)
from georisk.models import Signal, utcnow
from georisk.scoring import round_score

log = logging.getLogger(__name__)


class SourceAdapter:
    signal_id = None
    name = None
    source_name = None
    source_url = None
    region = GLOBAL
    # Known rate-limited sources get the longer timeout
    slow = False

    def __init__(self, settings=None, error_log=None):
        self.settings = settings or Settings()
        self.error_log = error_log if error_log is not None else ErrorLog(self.settings.error_log_size)
        self.timeout = self.settings.slow_timeout if self.slow else self.settings.http_timeout

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.signal_id}>"

    # --- hooks -------------------------------------------------

    def collect(self):
        """Fetch, validate and score. Raise a SourceError on any failure."""
        raise NotImplementedError

    def fallback(self, error):
        """Signal to publish when collect() failed; None drops the source."""
        return None

    # --- entry point -------------------------------------------

    def fetch(self):
        try:
            return self.collect()
        except Exception as e:
            self.record_failure(e)
            error = e
        try:
            return self.fallback(error)
        except Exception as fe:
            self.record_failure(fe)
            return None

    def record_failure(self, error):
        error_type = classify_error(error)
        self.error_log.record(self.signal_id, self.source_name, error, error_type)
        log.warning(f"{self.source_name} ({self.signal_id}): {error_type} error: {error}")

    # --- HTTP --------------------------------------------------

    def http_get(self, url, params=None, headers=None):
        hdrs = {"Accept": "application/json", "User-Agent": USER_AGENT}
        hdrs.update(headers or {})
        try:
            r = requests.get(url, params=params, headers=hdrs, timeout=self.timeout)
        except requests.Timeout as e:
            raise SourceTimeoutError(f"Timed out after {self.timeout}s", self.source_name, e)
        except requests.RequestException as e:
            raise FetchError("Connection error", self.source_name, original_error=e)
        if r.status_code == 429:
            raise FetchError("Rate limited (HTTP 429)", self.source_name, status_code=429)
        if r.status_code >= 400:
            raise FetchError(f"HTTP {r.status_code}", self.source_name, status_code=r.status_code)
        try:
            return r.json()
        except ValueError as e:
            raise ParseError("Malformed JSON body", self.source_name, e)

    # --- payload helpers ---------------------------------------

    def require(self, payload, *path):
        """Walk ``path`` through nested dicts/lists; a missing step is a
        validation failure."""
        node = payload
        for key in path:
            try:
                node = node[key]
            except (KeyError, IndexError, TypeError):
                node = None
            if node is None:
                where = ".".join(str(p) for p in path)
                raise ValidationError(f"Missing field '{where}'", self.source_name)
        return node

    def require_list(self, payload, key, null_is_empty=False):
        """``payload[key]`` from a JSON object body, which must be a list.
        With ``null_is_empty`` an explicit null reads as []."""
        if not isinstance(payload, dict):
            raise ValidationError(f"Expected a JSON object, got {type(payload).__name__}", self.source_name)
        if key not in payload:
            raise ValidationError(f"Missing field '{key}'", self.source_name)
        value = payload[key]
        if value is None and null_is_empty:
            return []
        if not isinstance(value, list):
            raise ValidationError(f"'{key}' is not a list", self.source_name)
        return value

    def require_number(self, value, label):
        try:
            n = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{label} is not numeric: {value!r}", self.source_name) from None
        if n != n or n in (float("inf"), float("-inf")):
            raise ValidationError(f"{label} is not finite", self.source_name)
        return n

    def make_signal(self, score, explanation, baseline_comparison, confidence="high",
                    region=None, source_name=None, is_fallback=False, name=None):
        return Signal(
            id=self.signal_id,
            name=name or self.name,
            region=region or self.region,
            score=round_score(score),
            confidence=confidence,
            explanation=explanation,
            baseline_comparison=baseline_comparison,
            source_name=source_name or self.source_name,
            source_url=self.source_url,
            last_updated=utcnow(),
            is_fallback=is_fallback,
        )

    def make_fallback(self, score, explanation, baseline_comparison="Fallback: API unavailable"):
        return self.make_signal(
            score, explanation, baseline_comparison, confidence="low",
            source_name=f"{self.source_name} (Fallback)", is_fallback=True,
        )
