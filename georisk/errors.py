"""
Source failure taxonomy and the bounded operational error log.

Every adapter failure is classified into one of network, parsing,
validation, timeout or unknown and recorded here. Nothing reads this log to
change scoring; it exists for operational visibility only.
"""

import json
import threading
from collections import deque
from dataclasses import dataclass, field

import requests

from georisk.models import utcnow

ERROR_TYPES = ("network", "parsing", "validation", "timeout", "unknown")


# ============================================================
# EXCEPTIONS
# ============================================================

class SourceError(Exception):
    """Base for failures raised inside a source adapter."""
    error_type = "unknown"

    def __init__(self, message, source_name=None, original_error=None):
        super().__init__(message)
        self.message = message
        self.source_name = source_name
        self.original_error = original_error

    def __str__(self):
        s = self.message
        if self.original_error is not None:
            s += f" (caused by: {self.original_error})"
        return s


class FetchError(SourceError):
    """Connection failure or non-2xx response."""
    error_type = "network"

    def __init__(self, message, source_name=None, status_code=None, original_error=None):
        super().__init__(message, source_name, original_error)
        self.status_code = status_code


class SourceTimeoutError(SourceError):
    error_type = "timeout"


class ParseError(SourceError):
    """Body could not be decoded."""
    error_type = "parsing"


class ValidationError(SourceError):
    """Body decoded but a required field is missing or unusable."""
    error_type = "validation"


def classify_error(exc):
    if isinstance(exc, SourceError):
        return exc.error_type
    # requests' JSONDecodeError is also a RequestException
    if isinstance(exc, (json.JSONDecodeError, UnicodeDecodeError)):
        return "parsing"
    if isinstance(exc, requests.Timeout):
        return "timeout"
    if isinstance(exc, requests.RequestException):
        return "network"
    if isinstance(exc, (KeyError, IndexError, TypeError, ValueError)):
        return "validation"
    return "unknown"


# ============================================================
# ERROR LOG
# ============================================================

@dataclass(frozen=True)
class ErrorEntry:
    signal_id: str
    source_name: str
    error: str
    error_type: str
    timestamp: object = field(default_factory=utcnow)

    def to_dict(self):
        return {
            "signalId": self.signal_id,
            "sourceName": self.source_name,
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
            "errorType": self.error_type,
        }


class ErrorLog:
    """Fixed-capacity log of recent failures; the oldest entry is evicted first."""

    def __init__(self, capacity=50):
        if capacity < 1:
            raise ValueError("ErrorLog capacity must be at least 1")
        self.capacity = capacity
        self._entries = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def record(self, signal_id, source_name, error, error_type=None):
        if error_type is None:
            error_type = classify_error(error) if isinstance(error, BaseException) else "unknown"
        if error_type not in ERROR_TYPES:
            error_type = "unknown"
        entry = ErrorEntry(signal_id, source_name, str(error), error_type)
        with self._lock:
            self._entries.append(entry)
        return entry

    def recent(self, limit=None):
        """Most recent first."""
        with self._lock:
            entries = list(reversed(self._entries))
        return entries if limit is None else entries[:limit]

    def for_signal(self, signal_id):
        return [e for e in self.recent() if e.signal_id == signal_id]

    def for_source(self, source_name):
        return [e for e in self.recent() if e.source_name == source_name]

    def count_for_signal(self, signal_id):
        return len(self.for_signal(signal_id))

    def count_for_source(self, source_name):
        return len(self.for_source(source_name))

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return len(self._entries)
