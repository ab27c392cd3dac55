"""Pytest configuration and shared fixtures."""

import json
import time
from unittest.mock import MagicMock

import pytest

from solidserver_ipam.server.solidserver_client import SOLIDserver, SOLIDserverResponse
from solidserver_ipam.server.solidserver_constants import capabilities_for_version


class FakeServer:
    """Stand-in for a SOLIDserver session answering from a queue of responses

    Every call is recorded as (method, service, parameters). When the queue
    holds a single response it is reused for every call.
    """

    def __init__(self, responses=None, version=800):
        self.responses = list(responses or [])
        self.calls = []
        self.host = "sds.test"
        self.authenticated = True
        self.version = version
        self.capabilities = capabilities_for_version(version)

    def set_version(self, version):
        self.version = version
        self.capabilities = capabilities_for_version(version)

    def supports(self, capability):
        return capability in self.capabilities

    def request(self, method, service, parameters=None):
        self.calls.append((method, service, dict(parameters or {})))
        if len(self.responses) > 1:
            return self.responses.pop(0)
        if self.responses:
            return self.responses[0]
        return SOLIDserverResponse(204, "")


def answer(status_code=200, records=None):
    """Build a SOLIDserverResponse carrying JSON records"""
    return SOLIDserverResponse(status_code, json.dumps(records if records is not None else []))


def http_response(status_code=200, text="[]"):
    """Build a mock of a requests.Response"""
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    return response


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    """Skip the jitter and backoff sleeps, recording the requested delays."""
    delays = []
    monkeypatch.setattr(time, "sleep", delays.append)
    return delays


@pytest.fixture
def server():
    """SOLIDserver session whose HTTP layer is a mock."""
    session = SOLIDserver("sds.test", "ipmadmin", "secret")
    session.http_session.request = MagicMock(return_value=http_response(200, "[]"))
    yield session
    session.close()


@pytest.fixture
def fake_server():
    return FakeServer()


@pytest.fixture
def make_answer():
    return answer


@pytest.fixture
def make_http_response():
    return http_response
