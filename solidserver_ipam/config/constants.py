"""Constants and configuration values for the SOLIDserver IPAM core.

Centralizes the retry timings, candidate caps and other magic numbers used
by the transport and the allocation engine.
"""


class RequestTimings:
    """Per HTTP method jitter (milliseconds) and timeout attempt budget"""
    JITTER_MS = 16           # Random 0..15ms sleep before each attempt
    MAX_TRY = {
        "get": 6,            # Reads are idempotent, retried on timeout
        "post": 1,
        "put": 1,
        "delete": 1,
    }


class StatusRetry:
    """Retry on transient HTTP statuses reported by the server itself"""
    MAX_ATTEMPTS = 3
    MIN_DELAY_S = 1
    MAX_DELAY_S = 15
    ALWAYS = frozenset({429, 500})
    AUTHENTICATED_ONLY = frozenset({401, 408})


class HTTPStatus:
    """Status range that marks the session as authenticated"""
    AUTH_MIN = 200
    AUTH_MAX = 204


class CandidateLimits:
    """Maximum number of candidates returned by the allocation engine"""
    ADDRESSES = 32
    SUBNETS = 16
    VLANS = 16
    VLANS_PER_RANGE = 8


class AssignmentOrder:
    """Free address enumeration strategies"""
    START = "start"          # Ascending from the start of each free range
    END = "end"              # Descending from the end of each free range
    OPTIMIZED = "optimized"  # Server side placement


class Defaults:
    """Connection defaults"""
    TIMEOUT_S = 10
    LOG_FILE = "solidserver_ipam.log"


class PerformanceThresholds:
    """Performance monitoring thresholds in milliseconds"""
    SOLIDSERVER_SLOW_WARNING = 2000   # Warn if an allocation probe > 2 seconds


class ExecutorConfig:
    """Thread pool executor configuration"""
    READ_WORKERS = 30    # Workers for blocking SOLIDserver reads from the API


# Export all constant classes
__all__ = [
    "RequestTimings",
    "StatusRetry",
    "HTTPStatus",
    "CandidateLimits",
    "AssignmentOrder",
    "Defaults",
    "PerformanceThresholds",
    "ExecutorConfig",
]
