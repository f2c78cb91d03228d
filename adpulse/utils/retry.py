# ==============================================================================
# Lookup Retry
# ==============================================================================
"""
Retry policy for the optional public IP lookup.

Event delivery is at-most-once and is never retried. Only the external
"what is my IP" services get a second chance, since their answer merely
enriches events and each attempt is short.

Policy: 3 attempts, exponential backoff of 0.5s then 1s (capped at 4s)
"""

import logging
from typing import Tuple, Type

import requests
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

LOOKUP_ATTEMPTS = 3
LOOKUP_WAIT_MIN = 0.5  # seconds
LOOKUP_WAIT_MAX = 4  # seconds

# Connection problems are worth another try; HTTP error statuses are not
HTTP_RETRY_EXCEPTIONS = (
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
)


def log_lookup_retry(logger: logging.Logger):
    """Build a tenacity before_sleep callback that logs each failed attempt at DEBUG."""

    def _log(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        target = retry_state.args[0] if retry_state.args else "?"
        logger.debug(
            "Lookup %s failed (attempt %d/%d): %s",
            target,
            retry_state.attempt_number,
            LOOKUP_ATTEMPTS,
            error,
        )

    return _log


def retry_lookup(
    logger: logging.Logger,
    exception_types: Tuple[Type[Exception], ...] = HTTP_RETRY_EXCEPTIONS,
):
    """
    Decorate a lookup function with the lookup retry policy.

    The last error is re-raised once the attempts are exhausted.

    Example:
        @retry_lookup(logger)
        def fetch_ip(url, timeout):
            ...
    """
    return retry(
        stop=stop_after_attempt(LOOKUP_ATTEMPTS),
        wait=wait_exponential(multiplier=LOOKUP_WAIT_MIN, max=LOOKUP_WAIT_MAX),
        retry=retry_if_exception_type(exception_types),
        before_sleep=log_lookup_retry(logger),
        reraise=True,
    )
