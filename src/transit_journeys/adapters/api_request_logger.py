"""Logging of outgoing backend requests, enabled with TJ_LOG_REQUESTS=true."""

import logging
import os
from collections.abc import Mapping
from urllib.parse import urlencode

logger = logging.getLogger(__name__)

REQUEST_LOGGING_ENV_VAR = "TJ_LOG_REQUESTS"
SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-api-key"})
SENSITIVE_PARAMS = frozenset({"key", "apikey", "api_key", "token"})
REDACTED = "***REDACTED***"


def should_log_requests() -> bool:
    """Check whether request logging is switched on in the environment."""
    return os.getenv(REQUEST_LOGGING_ENV_VAR, "").lower() == "true"


def build_url(url: str, params: Mapping[str, str] | None) -> str:
    """Full request URL with sorted query parameters and secrets redacted."""
    if not params:
        return url
    safe = {k: REDACTED if k.lower() in SENSITIVE_PARAMS else v for k, v in sorted(params.items())}
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(safe, safe=',:')}"


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {k: REDACTED if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()}


def log_api_request(
    method: str,
    url: str,
    params: Mapping[str, str] | None = None,
    headers: Mapping[str, str] | None = None,
) -> None:
    """Log an outgoing request if request logging is enabled."""
    if not should_log_requests():
        return

    line = f"{method} {build_url(url, params)}"
    if headers:
        line += f" headers={redact_headers(headers)}"
    logger.info(f"API Request: {line}")


def log_api_response(url: str, status: int, body_length: int) -> None:
    """Log the status of a response if request logging is enabled."""
    if not should_log_requests():
        return
    logger.info(f"API Response: {status} for {url} ({body_length} bytes)")
