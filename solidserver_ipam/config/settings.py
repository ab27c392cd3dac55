import os
import re
import logging
import sys
from urllib.parse import urlparse

from .constants import Defaults
from ..utils.error_handlers import ConfigurationError


def _getenv(name: str, default: str = "") -> str:
    """Read SOLIDSERVER_<name>, falling back to the legacy SOLIDServer_<name> spelling"""
    for key in (f"SOLIDSERVER_{name}", f"SOLIDServer_{name}"):
        value = os.getenv(key)
        if value is not None:
            return value
    return default


def _getenv_bool(name: str, default: bool) -> bool:
    return _getenv(name, "true" if default else "false").lower() in ("true", "1", "yes")


# SOLIDserver Configuration
# CRITICAL: Credentials MUST come from the environment - never hardcode them!
SOLIDSERVER_HOST = _getenv("HOST")
SOLIDSERVER_USERNAME = _getenv("USERNAME")
SOLIDSERVER_PASSWORD = _getenv("PASSWORD")
SOLIDSERVER_SSL_VERIFY = _getenv_bool("SSLVERIFY", True)
SOLIDSERVER_CERTS_FILE = _getenv("ADDITIONALTRUSTCERTSFILE")
_TIMEOUT_SETTING = _getenv("TIMEOUT", str(Defaults.TIMEOUT_S))
# None when not a whole number of seconds; reported by validate_settings()
SOLIDSERVER_TIMEOUT = int(_TIMEOUT_SETTING) if _TIMEOUT_SETTING.strip().isdigit() else None
SOLIDSERVER_VERSION = _getenv("VERSION")
SOLIDSERVER_PROXY_URL = _getenv("PROXY_URL")

# Declared version format, e.g. "7.2.1", "8.0.0.p3" or "6.0.2a"
VERSION_PATTERN = re.compile(r"^([0-9]\.[0-9]\.[0-9]((\.[pP]\d+[a-z]?)|[a-z])?)?$")

# Schemes supported by requests for proxies (socks5 needs the "socks" extra)
PROXY_SCHEMES = ("http", "https", "socks5")


def validate_version(version: str) -> None:
    """Validate the declared SOLIDserver version used when probing is not permitted"""
    if not VERSION_PATTERN.fullmatch(version or ""):
        raise ConfigurationError(
            f"Invalid SOLIDserver version '{version}'. Expected format: 7.2.1"
        )


def validate_proxy_url(proxy_url: str) -> None:
    """Validate the proxy URL; an empty value means direct connectivity and no scheme means http"""
    if not proxy_url or "://" not in proxy_url:
        return

    try:
        parsed = urlparse(proxy_url)
    except ValueError as e:
        raise ConfigurationError(f"Invalid proxy url: {e}")

    if parsed.scheme and parsed.scheme not in PROXY_SCHEMES:
        raise ConfigurationError(f"Unsupported proxy url scheme: {parsed.scheme}")


def validate_settings():
    """Validate connection settings at startup

    Raises:
        ConfigurationError: If a required value is missing or malformed
    """
    missing = [
        name for name, value in (
            ("SOLIDSERVER_HOST", SOLIDSERVER_HOST),
            ("SOLIDSERVER_USERNAME", SOLIDSERVER_USERNAME),
            ("SOLIDSERVER_PASSWORD", SOLIDSERVER_PASSWORD),
        )
        if not value
    ]

    if missing:
        error_msg = (
            f"CRITICAL CONFIGURATION ERROR: {', '.join(missing)} not set!\n"
            "Please set them in your environment or .env file.\n"
            "Example: export SOLIDSERVER_HOST='sds.example.com'"
        )
        print(f"ERROR: {error_msg}", file=sys.stderr)
        raise ConfigurationError(error_msg)

    validate_version(SOLIDSERVER_VERSION)
    validate_proxy_url(SOLIDSERVER_PROXY_URL)

    if SOLIDSERVER_TIMEOUT is None or SOLIDSERVER_TIMEOUT <= 0:
        raise ConfigurationError(
            f"SOLIDSERVER_TIMEOUT must be a positive number of seconds, got {_TIMEOUT_SETTING!r}"
        )

    print(f"INFO: SOLIDserver host: {SOLIDSERVER_HOST} (sslverify={SOLIDSERVER_SSL_VERIFY})", file=sys.stderr)


# Logging Configuration
def setup_logging():
    """Configure logging for the application with rotation"""
    from logging.handlers import RotatingFileHandler

    # Get log level from environment variable, default to INFO
    log_level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    # Create rotating file handler: 50MB per file, keep 5 backup files
    rotating_handler = RotatingFileHandler(
        os.getenv("LOG_FILE", Defaults.LOG_FILE),
        maxBytes=50 * 1024 * 1024,  # 50MB
        backupCount=5,
        encoding='utf-8'
    )

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] %(funcName)s() - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            rotating_handler
        ]
    )
    return logging.getLogger(__name__)


# Server Configuration
SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("SERVER_PORT", "8000"))
