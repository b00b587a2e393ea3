"""
Prometheus metrics configuration
"""
from prometheus_client import (CONTENT_TYPE_LATEST, Counter, Histogram, Info,
                               generate_latest)
from prometheus_client.registry import REGISTRY

# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

http_errors_total = Counter(
    'http_errors_total',
    'Total number of HTTP errors',
    ['method', 'endpoint', 'status_code', 'error_type']
)

# ============================================================================
# Authentication Metrics
# ============================================================================

auth_registrations_total = Counter(
    'auth_registrations_total',
    'Total number of registration attempts',
    ['status']  # status: 'success', 'duplicate', 'invalid'
)

auth_logins_total = Counter(
    'auth_logins_total',
    'Total number of login attempts',
    ['status']  # status: 'success', 'failed'
)

auth_token_rejections_total = Counter(
    'auth_token_rejections_total',
    'Bearer credentials rejected by identity resolution',
    ['reason']  # reason: 'missing', 'invalid', 'expired', 'malformed', 'unknown_user'
)

# ============================================================================
# Contact Metrics
# ============================================================================

contact_operations_total = Counter(
    'contact_operations_total',
    'Total number of contact operations',
    ['operation', 'status']
)

# ============================================================================
# Database Metrics
# ============================================================================

db_queries_total = Counter(
    'db_queries_total',
    'Total number of database queries',
    ['operation']
)

db_query_duration_seconds = Histogram(
    'db_query_duration_seconds',
    'Database query duration in seconds',
    ['operation'],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0)
)

# ============================================================================
# Application Info
# ============================================================================

app_info = Info(
    'app_info',
    'Application information'
)


def set_app_info(app_name: str, app_env: str, version: str):
    """Publish static application info"""
    app_info.info({
        'app_name': app_name,
        'app_env': app_env,
        'version': version,
    })


def get_metrics():
    """
    Get Prometheus metrics in text format

    Returns:
        bytes: Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_metrics_content_type():
    """Content type for the metrics endpoint"""
    return CONTENT_TYPE_LATEST
