"""
Prometheus metrics for the booking engine, outbound push delivery and logins.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Metric Types:
    - Counter: Cumulative metrics that only increase (e.g., bookings created)
    - Histogram: Observations bucketed by value (e.g., create latency)

Example:
    >>> from homestay.metrics import booking_create_duration, bookings_created
    >>> with booking_create_duration.time():
    ...     booking = create_booking(engine, guest_id, payload)
    ...     bookings_created.inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Booking Metrics
# =============================================================================

bookings_created = Counter(
    "homestay_bookings_created_total",
    "Total number of bookings created",
)
"""Counter for bookings successfully persisted in PENDING state."""

bookings_rejected = Counter(
    "homestay_bookings_rejected_total",
    "Total number of booking requests rejected",
    ["reason"],
)
"""
Counter for rejected booking requests.

Labels:
    reason: Error kind (validation_error, conflict, not_found, forbidden)
"""

booking_create_duration = Histogram(
    "homestay_booking_create_duration_seconds",
    "Duration of booking creation (lock, overlap check, insert) in seconds",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")),
)
"""
Histogram for booking creation latency, including time spent waiting on
the per-listing lock.

Buckets: 0.01s, 0.05s, 0.1s, 0.25s, 0.5s, 1s, 2.5s, 5s, +Inf
"""

booking_transitions = Counter(
    "homestay_booking_transitions_total",
    "Total booking status transitions applied",
    ["from_status", "to_status", "role"],
)
"""
Counter for applied status transitions.

Labels:
    from_status: Status before the change
    to_status: Status after the change
    role: host or guest
"""

# =============================================================================
# Push Notification Metrics
# =============================================================================

push_requests = Counter(
    "homestay_push_requests_total",
    "Total push notification requests sent",
    ["status"],
)
"""
Counter for push delivery attempts.

Labels:
    status: success or failure
"""

push_latency = Histogram(
    "homestay_push_latency_seconds",
    "Push API request latency in seconds",
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")),
)

# =============================================================================
# Account Metrics
# =============================================================================

login_attempts = Counter(
    "homestay_login_attempts_total",
    "Total password login attempts",
    ["result"],
)
"""
Counter for login attempts.

Labels:
    result: success, invalid (unknown email or wrong password) or inactive
"""
