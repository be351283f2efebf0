"""
Geopolitical risk signal engine: poll loop + JSON API.

Polls every source adapter once per GEORISK_POLL_INTERVAL seconds on a
background thread and serves the latest snapshot over Flask. Works under
`python main.py` or `gunicorn main:app`.
"""

import logging
import os
import threading
import time as _time

from georisk.api import create_app
from georisk.config import Settings
from georisk.engine import RiskMonitor
from georisk.errors import ErrorLog
from georisk.sources import build_default_adapters

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("georisk")

# ============================================================
# WIRING
# ============================================================

settings = Settings.from_env()
error_log = ErrorLog(settings.error_log_size)
monitor = RiskMonitor(build_default_adapters(settings, error_log), settings, error_log)
app = create_app(monitor)


# ============================================================
# STARTUP
# ============================================================

_threads_started = False

def _poll_loop():
    """Runs a cycle every poll interval. A failed cycle is logged and the
    previous snapshot stays published."""
    while True:
        started = _time.monotonic()
        try:
            monitor.run_cycle()
        except Exception:
            log.exception("Poll cycle failed")
        _time.sleep(max(0.0, settings.poll_interval - (_time.monotonic() - started)))

def start_background_threads():
    global _threads_started
    if _threads_started: return
    _threads_started = True
    threading.Thread(target=_poll_loop, name="georisk-poll", daemon=True).start()
    log.info(f"Background thread started: poll loop every {settings.poll_interval:g}s "
             f"over {len(monitor.adapters)} sources")

start_background_threads()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=settings.port, debug=False)
