"""
Fetch orchestration and cycle publication.

``collect_signals`` fans out to every adapter on a thread pool and joins with
``as_completed``; one slow or broken source never holds back or cancels the
others. ``RiskMonitor`` owns the only state carried between cycles (the last
published snapshot and the previous global score).
"""

import logging
import threading
import time

from concurrent.futures import ThreadPoolExecutor, as_completed

from georisk.config import Settings
from georisk.errors import ErrorLog
from georisk.models import Signal, Snapshot
from georisk.scoring import aggregate, regional_scores

log = logging.getLogger(__name__)


def collect_signals(adapters, max_workers=8, error_log=None):
    """Run every adapter's fetch concurrently. Returns signals sorted by id."""
    adapters = list(adapters)
    if not adapters:
        return []
    results = [None] * len(adapters)
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(adapters)))) as executor:
        futures = {executor.submit(a.fetch): i for i, a in enumerate(adapters)}
        for fut in as_completed(futures):
            i = futures[fut]
            adapter = adapters[i]
            try:
                result = fut.result()
            except Exception as e:
                log.error(f"{adapter.source_name} ({adapter.signal_id}): escaped adapter boundary: {e!r}")
                if error_log is not None:
                    error_log.record(adapter.signal_id, adapter.source_name, e, "unknown")
                continue
            if result is not None and not isinstance(result, Signal):
                log.error(f"{adapter.source_name}: fetch returned {type(result).__name__}, not a Signal")
                if error_log is not None:
                    error_log.record(adapter.signal_id, adapter.source_name,
                                     f"fetch returned {type(result).__name__}", "unknown")
                continue
            results[i] = result

    # Input order decides which duplicate survives, not completion order
    by_id = {}
    for adapter, sig in zip(adapters, results):
        if sig is None:
            continue
        if sig.id in by_id:
            log.warning(f"Duplicate signal id {sig.id} from {adapter!r}; keeping the first")
            continue
        by_id[sig.id] = sig
    return [by_id[k] for k in sorted(by_id)]


class RiskMonitor:
    def __init__(self, adapters, settings=None, error_log=None):
        self.adapters = list(adapters)
        self.settings = settings or Settings()
        self._error_log = error_log if error_log is not None else ErrorLog(self.settings.error_log_size)
        self._snapshot = None
        self._previous_score = None
        self._cycle = 0
        # _run_lock serialises whole cycles; _lock only guards the published state
        self._run_lock = threading.Lock()
        self._lock = threading.Lock()

    @property
    def snapshot(self):
        with self._lock:
            return self._snapshot

    @property
    def previous_score(self):
        with self._lock:
            return self._previous_score

    @property
    def error_log(self):
        return self._error_log

    def run_cycle(self):
        """Collect, aggregate and publish one snapshot.

        Nothing is published if any step raises; the last good snapshot and
        the carried score stay as they were.
        """
        with self._run_lock:
            start = time.monotonic()
            signals = collect_signals(self.adapters, self.settings.max_workers, self._error_log)
            with self._lock:
                previous, cycle = self._previous_score, self._cycle + 1
            risk = aggregate(signals, previous, weights=self.settings.confidence_weights)
            snapshot = Snapshot(
                signals=tuple(signals),
                global_risk=risk,
                regional=regional_scores(signals),
                cycle=cycle,
                duration=time.monotonic() - start,
            )
            with self._lock:
                self._snapshot = snapshot
                self._previous_score = risk.score
                self._cycle = cycle

        failed = len(self.adapters) - len(signals)
        fallbacks = sum(1 for s in signals if s.is_fallback)
        if not signals:
            log.warning(f"Cycle {cycle}: no signals collected from {len(self.adapters)} sources")
        log.info(
            f"Cycle {cycle}: global {risk.score} ({risk.trend}), {len(signals)} signals, "
            f"{fallbacks} fallback, {failed} excluded, {snapshot.duration:.1f}s"
        )
        return snapshot
