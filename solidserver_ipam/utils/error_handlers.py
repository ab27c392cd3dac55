"""
Error Handling Utilities and Resilience Patterns

This module provides the exception hierarchy for SOLIDserver API calls, the
status based retry layer used by the transport, and the decorator converting
transport failures into HTTP errors for the API routes.
"""

import logging
import random
import time
from typing import Callable, Any, Iterable
from functools import wraps
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class SOLIDserverAPIError(Exception):
    """Custom exception for SOLIDserver API errors"""
    def __init__(self, message: str, status_code: int = None, original_error: Exception = None):
        self.message = message
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(self.message)


class NetworkTimeoutError(SOLIDserverAPIError):
    """Custom exception for network timeouts"""
    pass


class RetryExhaustedError(NetworkTimeoutError):
    """Every attempt allowed for the HTTP method timed out"""
    pass


class NonRetryableError(SOLIDserverAPIError):
    """Transport failure other than a timeout (DNS, connection refused, TLS...)"""
    pass


class VersionError(SOLIDserverAPIError):
    """The SOLIDserver version could neither be probed nor taken from settings"""
    pass


class ConfigurationError(ValueError):
    """Invalid or missing connection settings"""
    pass


class InvalidAddressError(ValueError):
    """An address the codec cannot convert was supplied where one is required"""
    pass


def retry_on_http_status(max_attempts: int = 3, min_delay: int = 1, max_delay: int = 15):
    """
    Decorator to retry a SOLIDserver request on transient HTTP statuses

    The decorated method must return an object with a `status_code` and be
    bound to an object exposing `retryable_statuses()`. The set is read
    again before every attempt since it depends on the authentication state.
    A single random delay between min_delay and max_delay seconds is drawn
    per call and used between attempts.

    Usage:
        @retry_on_http_status(max_attempts=3)
        def request(self, method, service, parameters=None):
            ...
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(self, *args, **kwargs):
            delay = random.randint(min_delay, max_delay)
            response = None

            for attempt in range(max_attempts):
                response = func(self, *args, **kwargs)

                if response.status_code not in self.retryable_statuses():
                    return response

                if attempt < max_attempts - 1:
                    logger.warning(
                        f"SOLIDserver answered HTTP {response.status_code} in {func.__name__} "
                        f"(attempt {attempt + 1}/{max_attempts}). Retrying in {delay}s..."
                    )
                    time.sleep(delay)

            logger.error(
                f"SOLIDserver still answered HTTP {response.status_code} in {func.__name__} "
                f"after {max_attempts} attempts"
            )
            return response

        return wrapper
    return decorator


def handle_solidserver_errors(func: Callable):
    """
    Decorator to handle SOLIDserver errors and convert them to appropriate HTTP exceptions

    Usage:
        @router.get("/subnets/{subnet_id}/free-addresses")
        @handle_solidserver_errors
        async def free_addresses(...):
            ...
    """
    @wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except (InvalidAddressError, ConfigurationError) as e:
            logger.warning(f"Invalid input in {func.__name__}: {e}")
            raise HTTPException(status_code=400, detail=str(e))

        except NetworkTimeoutError as e:
            logger.error(f"Timeout talking to SOLIDserver in {func.__name__}: {e}")
            raise HTTPException(
                status_code=504,
                detail="SOLIDserver API request timed out. Please try again."
            )

        except SOLIDserverAPIError as e:
            logger.error(f"SOLIDserver error in {func.__name__}: {e}")
            raise HTTPException(
                status_code=503,
                detail=f"Unable to reach SOLIDserver: {e.message}"
            )

        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            raise HTTPException(
                status_code=500,
                detail=f"Internal server error: {str(e)}"
            )

    return wrapper


def require_candidates(candidates: Iterable[Any], resource_type: str) -> list:
    """
    Turn an empty candidate list into a 404

    Args:
        candidates: Candidates returned by the allocation engine
        resource_type: Type of resource for error message

    Returns:
        The candidates as a list

    Raises:
        HTTPException: If there is no candidate
    """
    candidates = list(candidates)
    if not candidates:
        logger.info(f"No free {resource_type} found")
        raise HTTPException(
            status_code=404,
            detail=f"Unable to find a suitable {resource_type}"
        )

    return candidates
