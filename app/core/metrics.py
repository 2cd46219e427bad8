"""
Prometheus metrics for monitoring.

Metrics collected:
- HTTP request duration, count and in-flight requests
- Cache hit/miss rate
- Tenant resolution outcomes and latency
- Portal refreshes (published and discarded)
- Route guard decisions
"""

from prometheus_client import Counter, Gauge, Histogram, Info


# Application info
app_info = Info("mspportal_app", "MSP portal application information")

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0),
)

http_requests_in_progress = Gauge(
    "http_requests_in_progress",
    "Number of HTTP requests in progress",
    ["method", "endpoint"],
)

# Cache metrics
cache_operations_total = Counter(
    "cache_operations_total",
    "Total cache operations",
    ["operation", "hit"],
)

# Tenant resolution
tenant_resolutions_total = Counter(
    "tenant_resolutions_total",
    "Tenant resolution attempts by outcome",
    ["outcome"],  # resolved, not_found, failed, cached
)

tenant_resolution_duration_seconds = Histogram(
    "tenant_resolution_duration_seconds",
    "Time spent resolving an origin to a tenant",
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
)

# Portal session
portal_refreshes_total = Counter(
    "portal_refreshes_total",
    "Portal refreshes that published a configuration",
    ["portal_type"],
)

portal_refresh_discarded_total = Counter(
    "portal_refresh_discarded_total",
    "Portal refreshes superseded before they could publish",
)

portal_refresh_errors_total = Counter(
    "portal_refresh_errors_total",
    "Portal refreshes that ended in an error state",
    ["error_type"],
)

# Route guard
guard_decisions_total = Counter(
    "guard_decisions_total",
    "Route guard decisions",
    ["decision"],
)
