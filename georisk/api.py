"""Flask JSON surface over the latest published snapshot and the error log."""

import json

from flask import Flask, request

from georisk.config import GLOBAL, REGION_LABELS, REGIONS
from georisk.scoring import filter_by_region, risk_level, status_counts, top_drivers


def _json(payload, status=200):
    return json.dumps(payload), status, {"Content-Type": "application/json"}


def snapshot_view(snapshot, region=GLOBAL):
    """Snapshot JSON as seen from one region's filter."""
    signals = filter_by_region(snapshot.signals, region)
    score = snapshot.global_risk.score if region == GLOBAL else snapshot.regional.get(region, 0)
    view = snapshot.to_dict()
    view.update({
        "region": region,
        "regionLabel": REGION_LABELS[region],
        "regionScore": score,
        "riskLevel": risk_level(score),
        "signals": [s.to_dict() for s in signals],
        "statusCounts": status_counts(signals),
        "topDrivers": [
            {"id": s.id, "name": s.name, "score": s.score, "share": share}
            for s, share in top_drivers(signals)
        ],
    })
    return view


def create_app(monitor):
    app = Flask(__name__)

    @app.route("/health")
    def health():
        return "ok", 200

    @app.route("/api/scores")
    def api_scores():
        """Latest published snapshot, optionally filtered by ?region=."""
        region = request.args.get("region", GLOBAL)
        if region not in REGIONS:
            return _json({"error": f"Unknown region {region!r}", "regions": list(REGIONS)}, 400)
        snapshot = monitor.snapshot
        if snapshot is None:
            return _json({"error": "No data yet"}, 503)
        return _json(snapshot_view(snapshot, region))

    @app.route("/api/errors")
    def api_errors():
        limit = request.args.get("limit")
        if limit is not None:
            try:
                limit = int(limit)
            except ValueError:
                return _json({"error": "limit must be an integer"}, 400)
            if limit < 1:
                return _json({"error": "limit must be at least 1"}, 400)
        signal_id = request.args.get("signal")
        source = request.args.get("source")

        log = monitor.error_log
        if signal_id:
            entries = log.for_signal(signal_id)
        elif source:
            entries = log.for_source(source)
        else:
            entries = log.recent()
        if signal_id and source:
            entries = [e for e in entries if e.source_name == source]
        if limit is not None:
            entries = entries[:limit]
        return _json({"count": len(entries), "errors": [e.to_dict() for e in entries]})

    return app
