"""Shared PurpleAir HTTP client and retry helpers.

Provides a requests.Session factory, a single-GET helper, and a bounded retry
loop over an explicit set of transient faults (timeouts, rate limiting,
gateway and server errors). Which faults are retried is decided by a
caller-supplied classifier, and each call site picks its own backoff.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Iterable, Mapping, NamedTuple, Optional, TypeVar

import requests

import config
from logging_config import log_api_call

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_RETRY_MAX_WAIT = int(getattr(config, "RETRY_MAX_WAIT", 60))
_DEFAULT_TIMEOUT = int(getattr(config, "PURPLEAIR_TIMEOUT", 30))

# Labels for HTTP statuses worth retrying
TRANSIENT_STATUS = {
    429: "rate_limited",
    500: "internal_server_error",
    502: "bad_gateway",
    503: "service_unavailable",
    504: "gateway_timeout",
}
TRANSIENT_FAULTS = frozenset(TRANSIENT_STATUS.values()) | {"connect_timeout", "read_timeout"}

FaultClassifier = Callable[[BaseException], Optional[str]]


def make_session(timeout: int | None = None) -> requests.Session:
    """Create a requests.Session carrying a default timeout.

    Retries are handled by `fetch_with_retry` rather than a urllib3 Retry
    adapter so that each call site controls its own backoff.
    """
    session = requests.Session()
    session.headers.update({"User-Agent": "purpleair-ingest/1.0"})
    session.timeout = timeout if timeout is not None else _DEFAULT_TIMEOUT
    return session


def get_text(
    session: requests.Session,
    url: str,
    params: Mapping[str, str] | None = None,
    headers: Mapping[str, str] | None = None,
) -> str:
    """Perform one GET and return the body text. Raises on HTTP errors."""
    log_api_call(url)
    resp = session.get(
        url,
        params=params,
        headers=headers,
        timeout=getattr(session, "timeout", _DEFAULT_TIMEOUT),
    )
    resp.raise_for_status()
    return resp.text


def fault_class(exc: BaseException) -> Optional[str]:
    """Label a transport exception, or return None if it is not an HTTP/timeout fault.

    Non-transient HTTP statuses get an ``http_<status>`` label so that
    classifiers can still see them without retrying.
    """
    if isinstance(exc, requests.exceptions.ConnectTimeout):
        return "connect_timeout"
    if isinstance(exc, requests.exceptions.Timeout):
        return "read_timeout"
    if isinstance(exc, requests.exceptions.HTTPError):
        status = getattr(exc.response, "status_code", None)
        if status is None:
            return None
        return TRANSIENT_STATUS.get(status, f"http_{status}")
    return None


def transient_faults(labels: Iterable[str] = TRANSIENT_FAULTS) -> FaultClassifier:
    """Build a classifier that only accepts faults whose label is in `labels`."""
    allowed = frozenset(labels)

    def classify(exc: BaseException) -> Optional[str]:
        label = fault_class(exc)
        return label if label in allowed else None

    return classify


def _parse_retry_after(resp) -> int | None:
    if resp is None:
        return None
    header = resp.headers.get("Retry-After")
    if not header:
        return None
    try:
        # If it's an integer number of seconds
        return int(header)
    except ValueError:
        try:
            # If it's an HTTP date
            t = parsedate_to_datetime(header)
            return max(0, int((t - datetime.now(timezone.utc)).total_seconds()))
        except (TypeError, ValueError):
            return None


def _backoff_for(exc: BaseException, backoff_seconds: float, max_wait: float) -> float:
    retry_after = _parse_retry_after(getattr(exc, "response", None))
    wait = backoff_seconds if retry_after is None else max(backoff_seconds, retry_after)
    return max(0.0, min(wait, max_wait))


class Attempt(NamedTuple):
    value: Any = None
    error: Optional[Exception] = None


def _attempt(request_fn: Callable[[], T]) -> Attempt:
    try:
        return Attempt(value=request_fn())
    except Exception as exc:
        return Attempt(error=exc)


def fetch_with_retry(
    request_fn: Callable[[], T],
    fault_classifier: FaultClassifier,
    max_retries: int = 5,
    backoff_seconds: float = 0,
    *,
    max_elapsed: float | None = None,
    max_wait: float = _RETRY_MAX_WAIT,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """Call `request_fn`, retrying transient faults with a fixed backoff.

    Args:
        request_fn: Zero-argument callable performing the request
        fault_classifier: Returns a fault label for retryable exceptions, None otherwise
        max_retries: Retries allowed after the first call (at most max_retries + 1 calls)
        backoff_seconds: Sleep between attempts; a larger Retry-After header wins
        max_elapsed: Optional wall-clock ceiling in seconds over the whole sequence
        max_wait: Upper bound on any single sleep
        logger: Logger (or run-scoped adapter) receiving retry messages
        sleep: Sleep function, replaceable in tests
        clock: Monotonic clock, replaceable in tests

    Returns:
        Whatever `request_fn` returns on its first successful call

    Raises:
        Exception: The first non-retryable exception, or the last retryable one
            once retries or the time ceiling are exhausted
    """
    log = logger or _logger
    started = clock()
    attempt = 0
    while True:
        result = _attempt(request_fn)
        if result.error is None:
            return result.value

        fault = fault_classifier(result.error)
        if fault is None:
            raise result.error

        attempt += 1
        if attempt > max_retries:
            log.warning("%s persisted, giving up after %d retries", fault, max_retries)
            raise result.error

        wait = _backoff_for(result.error, backoff_seconds, max_wait)
        if max_elapsed is not None and (clock() - started) + wait > max_elapsed:
            log.warning(
                "%s on attempt %d; next wait of %.1fs exceeds the %.1fs ceiling, giving up",
                fault, attempt, wait, max_elapsed,
            )
            raise result.error

        log.info("caught %s, retrying (%d/%d)...", fault, attempt, max_retries)
        if wait > 0:
            sleep(wait)
