"""
Prometheus metrics
"""

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "venue_admin_requests_total",
    "Total requests",
    ["method", "endpoint", "status"]
)

REQUEST_DURATION = Histogram(
    "venue_admin_request_duration_seconds",
    "Request duration",
    ["method", "endpoint"]
)

PROVISIONING_STEP_FAILURES = Counter(
    "venue_admin_provisioning_step_failures_total",
    "Venue provisioning steps that failed",
    ["step"]
)

VENUES_CREATED = Counter(
    "venue_admin_venues_created_total",
    "Venues created"
)
