r"""Helpers for retrying HTTP calls made with httpx.

``request_json`` performs one logical HTTP request through a ``Retry``,
turning transport failures and error status codes into
``HttpRequestError``. ``is_transient_http_error`` is a ready-made
``retry_if`` predicate that retries timeouts, transport errors and the
status codes in ``RETRY_STATUS_CODES``.

Example:
    ```pycon
    >>> import asyncio
    >>> from superretry import Retry
    >>> from superretry.http import get_json, is_transient_http_error
    >>> retry = Retry(strategy="exponential", max_attempts=3, initial_delay_ms=1000,
    ...               retry_if=is_transient_http_error)
    >>> todo = asyncio.run(
    ...     get_json("https://jsonplaceholder.typicode.com/todos/1", retry=retry)
    ... )  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = ["get_json", "is_transient_http_error", "request_json"]

import logging
from typing import Any

import httpx

from superretry.config import DEFAULT_TIMEOUT, RETRY_STATUS_CODES
from superretry.exceptions import HttpRequestError
from superretry.retry import Retry

logger: logging.Logger = logging.getLogger(__name__)


def is_transient_http_error(error: Exception) -> bool:
    """Return True if ``error`` is worth retrying.

    Transient errors are timeouts, transport errors (connection refused,
    reset, DNS failure, ...), and error responses whose status code is in
    ``RETRY_STATUS_CODES``.

    Args:
        error: The error raised by an attempt.

    Returns:
        True if the error is transient.

    Example:
        ```pycon
        >>> import httpx
        >>> from superretry.exceptions import HttpRequestError
        >>> from superretry.http import is_transient_http_error
        >>> is_transient_http_error(httpx.ConnectTimeout("timed out"))
        True
        >>> is_transient_http_error(
        ...     HttpRequestError(method="GET", url="/", message="not found", status_code=404)
        ... )
        False

        ```
    """
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code in RETRY_STATUS_CODES
    if isinstance(error, HttpRequestError):
        if error.status_code is not None:
            return error.status_code in RETRY_STATUS_CODES
        return isinstance(error.__cause__, httpx.TransportError)
    return isinstance(error, httpx.TransportError)


async def _send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: Any,
) -> Any:
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as exc:
        msg = f"{method} request to {url} timed out"
        raise HttpRequestError(method=method, url=url, message=msg, cause=exc) from exc
    except httpx.RequestError as exc:
        msg = f"{method} request to {url} failed: {exc}"
        raise HttpRequestError(method=method, url=url, message=msg, cause=exc) from exc

    if response.status_code >= 400:
        msg = f"{method} request to {url} failed with status {response.status_code}"
        raise HttpRequestError(
            method=method,
            url=url,
            message=msg,
            status_code=response.status_code,
            response=response,
        )
    return response.json()


async def request_json(
    method: str,
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    retry: Retry | None = None,
    timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
    **kwargs: Any,
) -> Any:
    """Send an HTTP request with automatic retry and decode the JSON body.

    Args:
        method: The HTTP method (e.g., "GET", "POST").
        url: The URL to request.
        client: Optional ``httpx.AsyncClient``. If None, a client is
            created for this call and closed afterwards.
        retry: The ``Retry`` driving the request. Defaults to exponential
            backoff with ``is_transient_http_error`` as predicate.
        timeout: Timeout for a client created by this function.
        **kwargs: Additional keyword arguments passed to
            ``httpx.AsyncClient.request``.

    Returns:
        The decoded JSON body of the successful response.

    Raises:
        HttpRequestError: If the last attempt failed with a transport
            error or an error status code.
    """
    method = method.upper()
    if retry is None:
        retry = Retry(retry_if=is_transient_http_error)

    if client is not None:
        return await retry.execute(lambda: _send(client, method, url, **kwargs))

    logger.debug(f"Opening a temporary client for {method} {url}")
    async with httpx.AsyncClient(timeout=timeout) as owned_client:
        return await retry.execute(lambda: _send(owned_client, method, url, **kwargs))


async def get_json(url: str, **kwargs: Any) -> Any:
    """Send a GET request with automatic retry and decode the JSON body.

    See ``request_json`` for the accepted keyword arguments.
    """
    return await request_json("GET", url, **kwargs)
