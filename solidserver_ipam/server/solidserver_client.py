"""
SOLIDserver Client Management

Handles the SOLIDserver session: TLS trust, authenticated HTTP calls with
method specific retries, version discovery and the thread pool executor
used to run blocking calls from the async API.
"""

import asyncio
import base64
import concurrent.futures
import json
import logging
import random
import ssl
import threading
import time
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar
from urllib.parse import urlencode

import requests
import urllib3
from pydantic import ValidationError
from requests.adapters import HTTPAdapter

from ..config.constants import RequestTimings, StatusRetry, HTTPStatus, Defaults, ExecutorConfig
from ..utils.error_handlers import (
    SOLIDserverAPIError, NonRetryableError, RetryExhaustedError, VersionError,
    ConfigurationError, retry_on_http_status
)
from .solidserver_constants import (
    HEADER_USERNAME, HEADER_PASSWORD, SERVICE_MEMBER_LIST, capabilities_for_version
)
from .solidserver_models import MemberRecord, SOLIDserverRecord
from .solidserver_query import WhereClause

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=SOLIDserverRecord)

# Session shared by the API process
_server: Optional["SOLIDserver"] = None


def normalize_version(version: str) -> int:
    """Turn a dotted version string into a single comparable integer

    Up to three components are concatenated as decimal digits, "7.2.1" gives
    721. A non numeric component counts as 0. Values below 100 are multiplied
    by 10 so that two component branch numbers line up, "8.0" gives 800.
    """
    number = 0

    for component in (version or "").split(".")[:3]:
        try:
            digit = int(component)
        except ValueError:
            digit = 0
        number = number * 10 + digit

    if number < 100:
        number = number * 10

    return number


def encode_parameters(parameters: Optional[Dict[str, Any]]) -> str:
    """URL-encode request parameters, sorted by key"""
    if not parameters:
        return ""
    return urlencode(sorted((key, str(value)) for key, value in parameters.items()))


def _b64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


class TrustStoreAdapter(HTTPAdapter):
    """HTTPAdapter verifying certificates against the system CAs plus a PEM bundle"""

    def __init__(self, certs_file: str, **kwargs):
        self.ssl_context = ssl.create_default_context()
        try:
            self.ssl_context.load_verify_locations(cafile=certs_file)
        except (OSError, ssl.SSLError) as e:
            logger.error(f"Failed to append {certs_file!r} to the trusted certificates: {e}")
            raise ConfigurationError(f"Unable to load additional trust certificates from {certs_file!r}: {e}")
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        kwargs["ssl_context"] = self.ssl_context
        return super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, proxy, **proxy_kwargs):
        proxy_kwargs["ssl_context"] = self.ssl_context
        return super().proxy_manager_for(proxy, **proxy_kwargs)


class SOLIDserverResponse:
    """Status code and normalized body of a SOLIDserver answer"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body

    @property
    def ok(self) -> bool:
        return self.status_code in (200, 201)

    def records(self) -> List[Dict[str, Any]]:
        """Decode the body as a list of records ([] when it is not JSON)"""
        try:
            data = json.loads(self.body) if self.body else []
        except ValueError:
            logger.debug(f"Unable to decode SOLIDserver answer (HTTP {self.status_code})")
            return []

        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            return []

        return [record for record in data if isinstance(record, dict)]

    def parse(self, model: Type[RecordT]) -> List[RecordT]:
        """Decode the body into typed records, skipping records that do not validate"""
        parsed = []
        for record in self.records():
            try:
                parsed.append(model.model_validate(record))
            except ValidationError as e:
                logger.debug(f"Skipping malformed {model.__name__} record: {e.error_count()} invalid field(s)")
        return parsed

    @property
    def error_message(self) -> Optional[str]:
        """Business error message carried by the first record, if any"""
        records = self.records()
        if records:
            return records[0].get("errmsg")
        return None

    def __repr__(self) -> str:
        return f"SOLIDserverResponse(status_code={self.status_code}, body={self.body[:80]!r})"


class SOLIDserver:
    """Connection to a SOLIDserver appliance

    The HTTP API is stateless, so no connection is held open. The object
    carries the credentials and TLS settings, the normalized server version
    and whether a call has already succeeded (which widens the set of HTTP
    statuses worth retrying).
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        ssl_verify: bool = True,
        certs_file: str = "",
        timeout: int = Defaults.TIMEOUT_S,
        proxy_url: str = "",
    ):
        self.host = host
        self.username = username
        self.password = password
        self.base_url = f"https://{host}"
        self.ssl_verify = ssl_verify
        self.certs_file = certs_file
        self.timeout = timeout
        self.proxy_url = proxy_url
        self.version = 0
        self.capabilities = frozenset()
        self.authenticated = False
        self._auth_lock = threading.Lock()
        self.http_session = self._build_http_session()

    @classmethod
    def open(
        cls,
        host: str,
        username: str,
        password: str,
        ssl_verify: bool = True,
        certs_file: str = "",
        timeout: int = Defaults.TIMEOUT_S,
        version: str = "",
        proxy_url: str = "",
    ) -> "SOLIDserver":
        """Create a session and resolve the server version

        Raises:
            VersionError: If the version can neither be probed nor taken from `version`
            ConfigurationError: If the additional trust certificates cannot be loaded
        """
        server = cls(host, username, password, ssl_verify, certs_file, timeout, proxy_url)
        server.get_version(version)
        return server

    def _build_http_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            HEADER_USERNAME: _b64(self.username),
            HEADER_PASSWORD: _b64(self.password),
        })

        if not self.ssl_verify:
            # Suppress InsecureRequestWarning when SSL verification is disabled
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            session.verify = False
        elif self.certs_file:
            session.mount("https://", TrustStoreAdapter(self.certs_file))

        if self.proxy_url:
            proxy = self.proxy_url if "://" in self.proxy_url else f"http://{self.proxy_url}"
            session.proxies = {"http": proxy, "https": proxy}

        return session

    def close(self):
        self.http_session.close()

    def retryable_statuses(self) -> frozenset:
        """HTTP statuses retried by the status retry layer"""
        if self.authenticated:
            return StatusRetry.ALWAYS | StatusRetry.AUTHENTICATED_ONLY
        return StatusRetry.ALWAYS

    def supports(self, capability: str) -> bool:
        """Whether the server version offers a feature (see CAPABILITY_MIN_VERSION)"""
        return capability in self.capabilities

    def _set_version(self, version: int) -> None:
        self.version = version
        self.capabilities = capabilities_for_version(version)

    def _mark_authenticated(self) -> None:
        with self._auth_lock:
            if not self.authenticated:
                logger.debug(f"SOLIDserver {self.host}: session authenticated")
                self.authenticated = True

    def _submit_request(self, method: str, service: str, parameters: Optional[Dict[str, Any]] = None) -> SOLIDserverResponse:
        """Send one HTTP call, retrying on timeouts within the method's attempt budget

        Raises:
            RetryExhaustedError: If every attempt timed out
            NonRetryableError: On any other transport error
        """
        method = method.lower()
        max_try = RequestTimings.MAX_TRY.get(method)

        if max_try is None:
            raise SOLIDserverAPIError(f"Unsupported HTTP request '{method}'")

        request_url = f"{self.base_url}/{service}?{encode_parameters(parameters)}"

        for attempt in range(max_try):
            # Random delay to distribute the load of concurrent callers
            time.sleep(random.randrange(RequestTimings.JITTER_MS) / 1000)

            try:
                response = self.http_session.request(method.upper(), request_url, timeout=self.timeout)
            except requests.exceptions.Timeout:
                logger.debug(f"'{method}' API request '{service}' timed out, retry ({attempt + 1}/{max_try})")
                continue
            except requests.exceptions.RequestException as e:
                logger.debug(f"'{method}' API request '{service}' failed: {e}")
                raise NonRetryableError(f"Non-retryable error ({e}): bailing out", original_error=e)

            return SOLIDserverResponse(response.status_code, response.text)

        raise RetryExhaustedError(
            f"Error '{method}' API request '{request_url}': timeout retry count exceeded (maxTry = {max_try})"
        )

    @retry_on_http_status(
        max_attempts=StatusRetry.MAX_ATTEMPTS,
        min_delay=StatusRetry.MIN_DELAY_S,
        max_delay=StatusRetry.MAX_DELAY_S,
    )
    def _send(self, method: str, service: str, parameters: Optional[Dict[str, Any]] = None) -> SOLIDserverResponse:
        return self._submit_request(method, service, parameters)

    def request(self, method: str, service: str, parameters: Optional[Dict[str, Any]] = None) -> SOLIDserverResponse:
        """Perform an HTTP operation against a SOLIDserver service

        HTTP error statuses are returned, not raised: the caller inspects
        `status_code` and `error_message`.

        Args:
            method: get, post, put or delete
            service: Service path, e.g. "rest/ip_free_address_list"
            parameters: Query parameters

        Raises:
            RetryExhaustedError: If every attempt allowed for the method timed out
            NonRetryableError: On any other transport failure
        """
        try:
            response = self._send(method, service, parameters)
        except SOLIDserverAPIError as e:
            logger.error(f"SOLIDserver - Error initiating API call '{method} {service}' ({e.message})")
            raise

        body = response.body
        if len(body) > 0 and body[0] == "{" and body[-1] == "}":
            logger.debug("Repacking HTTP JSON body")
            response.body = f"[{body}]"

        if not self.authenticated and HTTPStatus.AUTH_MIN <= response.status_code <= HTTPStatus.AUTH_MAX:
            self._mark_authenticated()

        return response

    def get_version(self, declared_version: str = "") -> int:
        """Resolve the server version, probing the local member record first

        Falls back to `declared_version` when the probe is answered without a
        version (typically 4xx for API users without admin rights).

        Raises:
            VersionError: If no version can be resolved
        """
        parameters = {"WHERE": str(WhereClause().equals("member_is_me", "1"))}

        try:
            response = self._submit_request("get", SERVICE_MEMBER_LIST, parameters)
        except SOLIDserverAPIError as e:
            raise VersionError(f"Error retrieving SOLIDserver version ({e.message})", original_error=e) from e

        if response.status_code == 200:
            members = response.parse(MemberRecord)
            if members and members[0].member_version:
                self._set_version(normalize_version(members[0].member_version))
                logger.info(f"SOLIDserver version retrieved from {self.host}: {self.version}")
                return self.version

        if response.status_code < 500:
            if declared_version:
                self._set_version(normalize_version(declared_version))
                logger.debug("Error retrieving SOLIDserver version (insufficient permissions)")
                logger.info(f"SOLIDserver version taken from settings: {self.version}")
                return self.version

            raise VersionError(
                "Error retrieving SOLIDserver version (insufficient permissions). "
                "Consider setting the SOLIDserver version in the settings.",
                status_code=response.status_code,
            )

        raise VersionError("Error retrieving SOLIDserver version (no answer)", status_code=response.status_code)


def init_server() -> "SOLIDserver":
    """Open the process wide SOLIDserver session from settings"""
    global _server

    if _server is None:
        from ..config import settings

        logger.info(f"Initializing SOLIDserver session: {settings.SOLIDSERVER_HOST}")
        _server = SOLIDserver.open(
            settings.SOLIDSERVER_HOST,
            settings.SOLIDSERVER_USERNAME,
            settings.SOLIDSERVER_PASSWORD,
            ssl_verify=settings.SOLIDSERVER_SSL_VERIFY,
            certs_file=settings.SOLIDSERVER_CERTS_FILE,
            timeout=settings.SOLIDSERVER_TIMEOUT,
            version=settings.SOLIDSERVER_VERSION,
            proxy_url=settings.SOLIDSERVER_PROXY_URL,
        )

    return _server


def get_server() -> "SOLIDserver":
    """Get the process wide SOLIDserver session"""
    if _server is None:
        raise SOLIDserverAPIError("SOLIDserver session is not initialized")
    return _server


def close_server():
    """Close the process wide SOLIDserver session"""
    global _server
    if _server is not None:
        _server.close()
        _server = None


@lru_cache(maxsize=1)
def get_solidserver_read_executor():
    """Thread pool for blocking SOLIDserver reads issued by the API"""
    return concurrent.futures.ThreadPoolExecutor(
        max_workers=ExecutorConfig.READ_WORKERS,
        thread_name_prefix="solidserver_read_"
    )


async def run_solidserver_get(get_operation: Callable, operation_name: str) -> Any:
    """Run a blocking SOLIDserver read without blocking the event loop"""
    loop = asyncio.get_running_loop()
    executor = get_solidserver_read_executor()

    try:
        return await loop.run_in_executor(executor, get_operation)
    except Exception as e:
        logger.error(f"SOLIDSERVER FAILED: {operation_name} - {e}")
        raise
