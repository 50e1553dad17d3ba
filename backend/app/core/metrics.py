"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# GraphQL operation outcomes
graphql_operations = Counter(
    'graphql_operations_total',
    'GraphQL operations handled',
    ['operation', 'status']  # success, error
)

# Booking metrics
booking_attempts = Counter(
    'booking_attempts_total',
    'Total booking attempts',
    ['status']  # success, duplicate, not_found
)

# Auth metrics
auth_attempts = Counter(
    'auth_attempts_total',
    'Login and registration attempts',
    ['operation', 'result']
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# Convenience functions for instrumentation
def record_operation(operation: str, success: bool):
    graphql_operations.labels(operation=operation, status="success" if success else "error").inc()


def record_booking_attempt(status: str):
    """Record booking attempt. Status: success, duplicate, not_found"""
    booking_attempts.labels(status=status).inc()


def record_auth_attempt(operation: str, result: str):
    auth_attempts.labels(operation=operation, result=result).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
