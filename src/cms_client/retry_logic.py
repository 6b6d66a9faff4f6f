"""Retry with exponential backoff for pages API rate limits.

Only HTTP 429 responses are retried. Waits double on each attempt
(1s, 2s, 4s) unless the server sends a Retry-After header, which takes
precedence. Every other error is re-raised on the first attempt.
"""

import logging
import time
from typing import Callable, Optional, TypeVar

from .errors import APIAccessError

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAX_RETRIES = 3

# Upper bound for a server-provided Retry-After, in seconds
MAX_RETRY_AFTER = 30.0


def retry_on_rate_limit(func: Callable[..., T], *args, **kwargs) -> T:
    """Call func, retrying up to MAX_RETRIES times while it is rate limited.

    Args:
        func: The callable to run
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Whatever func returns

    Raises:
        APIAccessError: If the rate limit persists after all retries
        Other exceptions: Re-raised immediately without retry

    Example:
        >>> page = retry_on_rate_limit(session.get, url, timeout=30)
    """
    for attempt in range(MAX_RETRIES + 1):
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if not _is_rate_limit_error(e):
                raise

            if attempt == MAX_RETRIES:
                logger.error(f"Still rate limited after {MAX_RETRIES} retries, giving up")
                raise APIAccessError(
                    f"Pages API failure (rate limited after {MAX_RETRIES} retries)"
                ) from e

            wait_time = _retry_after(e)
            if wait_time is None:
                wait_time = float(2 ** attempt)
            logger.info(
                f"Rate limited, retrying in {wait_time:g}s "
                f"(retry {attempt + 1}/{MAX_RETRIES})"
            )
            time.sleep(wait_time)

    raise APIAccessError(f"Pages API failure (rate limited after {MAX_RETRIES} retries)")


def _status_code(exception: Exception) -> Optional[int]:
    response = getattr(exception, 'response', None)
    status = getattr(response, 'status_code', None)
    if isinstance(status, int):
        return status
    status = getattr(exception, 'status_code', None)
    if isinstance(status, int):
        return status
    return None


def _is_rate_limit_error(exception: Exception) -> bool:
    """Check whether an exception is an HTTP 429 rate limit response.

    Looks at requests-style response.status_code first, then a bare
    status_code attribute. The message text is only consulted when neither
    is present, since HTTPError messages include the request URL.
    """
    status = _status_code(exception)
    if status is not None:
        return status == 429

    error_msg = str(exception).lower()
    return '429' in error_msg or 'too many requests' in error_msg


def _retry_after(exception: Exception) -> Optional[float]:
    """Read the Retry-After header (in seconds) from a 429 response, if any."""
    response = getattr(exception, 'response', None)
    headers = getattr(response, 'headers', None)
    if not headers:
        return None

    value = headers.get('Retry-After')
    if value is None:
        return None

    try:
        seconds = float(value)
    except (TypeError, ValueError):
        # HTTP-date form is not worth parsing here; fall back to backoff
        return None

    return max(0.0, min(seconds, MAX_RETRY_AFTER))
