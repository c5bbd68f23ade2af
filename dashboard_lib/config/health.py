"""Server health utilities.

Provides a simple `get_health` function returning server status,
start time and uptime in seconds.
"""
from datetime import datetime, timezone
import time
from typing import Optional

# record process start time at import
_START_TIME = time.time()


def get_health(app_name: Optional[str] = None, version: Optional[str] = None) -> dict:
    """Return a dict representing server health.

    Fields:
    - status: always 'ok' while the process serves requests
    - start_time: ISO 8601 UTC timestamp when the process started
    - uptime_seconds: integer seconds since start
    - app_name / version: taken from the dashboard configuration
    """
    now = time.time()
    uptime = int(now - _START_TIME)
    start_dt = datetime.fromtimestamp(_START_TIME, tz=timezone.utc)
    return {
        "status": "ok",
        "start_time": start_dt.isoformat(),
        "uptime_seconds": uptime,
        "app_name": app_name,
        "version": version or "unknown",
    }
