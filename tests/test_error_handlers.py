"""Tests for error handling and logging decorators."""

import asyncio
import logging

import pytest
from fastapi import HTTPException

from solidserver_ipam.utils.error_handlers import (
    SOLIDserverAPIError, NetworkTimeoutError, InvalidAddressError, ConfigurationError,
    handle_solidserver_errors, require_candidates
)
from solidserver_ipam.utils.logging_decorators import log_operation_timing


def _raising(error):
    @handle_solidserver_errors
    async def endpoint():
        raise error
    return endpoint


class TestHandleSOLIDserverErrors:

    @pytest.mark.parametrize("error,status_code", [
        (InvalidAddressError("bad address"), 400),
        (ConfigurationError("bad settings"), 400),
        (NetworkTimeoutError("slow"), 504),
        (SOLIDserverAPIError("down"), 503),
        (RuntimeError("bug"), 500),
    ])
    def test_status_mapping(self, error, status_code):
        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(_raising(error)())

        assert exc_info.value.status_code == status_code

    def test_http_exception_passes_through(self):
        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(_raising(HTTPException(status_code=404, detail="nope"))())

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "nope"

    def test_result_is_returned(self):
        @handle_solidserver_errors
        async def endpoint(value):
            return value * 2

        assert asyncio.run(endpoint(21)) == 42


class TestRequireCandidates:

    def test_returns_list(self):
        assert require_candidates(iter([1, 2]), "vlan ID") == [1, 2]

    def test_empty_is_404(self):
        with pytest.raises(HTTPException) as exc_info:
            require_candidates([], "IP subnet")

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "Unable to find a suitable IP subnet"


class TestLogOperationTiming:

    def test_slow_operation_warns(self, caplog):
        @log_operation_timing("operation", threshold_ms=-1)
        def operation():
            return "done"

        with caplog.at_level(logging.WARNING):
            assert operation() == "done"

        assert "SLOW: operation" in caplog.text

    def test_failure_is_logged_and_raised(self, caplog):
        @log_operation_timing("operation")
        def operation():
            raise SOLIDserverAPIError("down")

        with caplog.at_level(logging.ERROR):
            with pytest.raises(SOLIDserverAPIError):
                operation()

        assert "FAILED: operation" in caplog.text

    def test_async_operation(self):
        @log_operation_timing("async operation")
        async def operation():
            return 7

        assert asyncio.run(operation()) == 7
