"""
Prometheus metrics definitions for fitquest.

Organized by category:
- HTTP/API metrics: Request counts, errors
- Gamification metrics: Activities recorded, XP, badges, level ups
- Error metrics: Recorder failures by type

Metrics are exposed at the /metrics endpoint for Prometheus scraping.
"""

import logging
from prometheus_client import Counter, Histogram

logger = logging.getLogger(__name__)

# =============================================================================
# HTTP/API Metrics
# =============================================================================

http_requests_total = Counter(
    "fitquest_http_requests_total",
    "Total HTTP requests received",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "fitquest_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0],
)

# =============================================================================
# Gamification Metrics
# =============================================================================

activities_recorded_total = Counter(
    "fitquest_activities_recorded_total",
    "Total activities recorded by the gamification engine",
    ["category"],  # workout/meal/water
)

xp_awarded_total = Counter(
    "fitquest_xp_awarded_total",
    "Total XP awarded",
    ["category"],
)

badges_unlocked_total = Counter(
    "fitquest_badges_unlocked_total",
    "Total badges unlocked",
    ["badge"],
)

level_ups_total = Counter(
    "fitquest_level_ups_total",
    "Total level ups",
    ["level"],  # level reached: Silver/Gold/Platinum
)

recorder_duration_seconds = Histogram(
    "fitquest_recorder_duration_seconds",
    "Time to record one activity (store round-trips included)",
    ["category"],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# =============================================================================
# Error Metrics
# =============================================================================

recorder_failures_total = Counter(
    "fitquest_recorder_failures_total",
    "Recorder calls that raised",
    ["category", "error_type"],
)
