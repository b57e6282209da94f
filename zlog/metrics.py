"""
Prometheus metric definitions.

All metrics prefixed with zlog_ to avoid naming collisions.
"""

from prometheus_client import Counter

# --- Record metrics ---
RECORDS_EMITTED = Counter(
    "zlog_records_total",
    "Log records written to the sink",
    ["level"],
)

ALERT_RECORDS = Counter("zlog_alerts_total", "Log records flagged with alert=true")

# --- Terminal calls ---
FATAL_EXITS = Counter("zlog_fatal_total", "Fatal calls that terminated the process")
