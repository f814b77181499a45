# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "matrix_badge_requests_total",
    "Total HTTP requests to the badge service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "matrix_badge_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "matrix_badge_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Upstream Metrics (used by the JSON requester) ──
UPSTREAM_REQUESTS = Counter(
    "matrix_badge_upstream_requests_total",
    "Requests sent to Matrix homeservers",
    ["endpoint", "status"],
)
UPSTREAM_LATENCY = Histogram(
    "matrix_badge_upstream_duration_seconds",
    "Latency of requests sent to Matrix homeservers",
    ["endpoint"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# ── Business Metrics (updated by service layer only) ──
DISCOVERY_OUTCOMES = Counter(
    "matrix_badge_discovery_total",
    "Homeserver discovery outcomes",
    ["outcome"],
)
REGISTRATIONS = Counter(
    "matrix_badge_registrations_total",
    "Ephemeral account registrations attempted",
    ["kind", "outcome"],
)
PIPELINE_RUNS = Counter(
    "matrix_badge_pipeline_runs_total",
    "Member count resolutions by outcome",
    ["outcome"],
)
CACHE_LOOKUPS = Counter(
    "matrix_badge_cache_lookups_total",
    "Member count cache lookups",
    ["result"],
)
