r"""Default configuration values for retry execution.

These constants are the defaults used by ``RetryPolicy`` and by the HTTP
helpers in ``superretry.http``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_INITIAL_DELAY_MS",
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_STRATEGY",
    "DEFAULT_TIMEOUT",
    "RETRY_STATUS_CODES",
]

# Name of the backoff strategy used when none is given
DEFAULT_STRATEGY = "exponential"

# Total attempts, including the first one
DEFAULT_MAX_ATTEMPTS = 3

# Base delay handed to the backoff strategy, in milliseconds
# With exponential backoff: 1st retry waits 1s, 2nd waits 2s
DEFAULT_INITIAL_DELAY_MS = 1000

# Default timeout in seconds for HTTP requests made by superretry.http
DEFAULT_TIMEOUT = 10.0

# HTTP status codes treated as transient by is_transient_http_error
# 429: Too Many Requests - Rate limiting
# 500: Internal Server Error - Temporary server issue
# 502: Bad Gateway - Upstream server error
# 503: Service Unavailable - Server overloaded or down
# 504: Gateway Timeout - Upstream server timeout
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)
