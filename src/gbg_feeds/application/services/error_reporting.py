"""Turns poll failures into short, loggable descriptions."""

import asyncio

import aiohttp

from gbg_feeds.domain.errors import (
    AuthError,
    HttpStatusError,
    MalformedResponseError,
    SinkError,
    ThrottledError,
)
from gbg_feeds.domain.models.error_details import ErrorDetails


def describe_error(error: Exception) -> ErrorDetails:
    """Extract HTTP status code and error reason from exception."""
    status_code = error.status if isinstance(error, HttpStatusError) else None

    if status_code == 429:
        reason = "Rate limit exceeded"
    elif status_code == 502:
        reason = "Bad gateway (server error)"
    elif status_code == 503:
        reason = "Service unavailable"
    elif status_code == 504:
        reason = "Gateway timeout"
    elif status_code is not None:
        reason = f"HTTP {status_code}"
    elif isinstance(error, ThrottledError):
        reason = "Throttled"
    elif isinstance(error, AuthError):
        reason = "Authentication failed"
    elif isinstance(error, MalformedResponseError):
        reason = "Malformed response"
    elif isinstance(error, SinkError):
        reason = "Sink unavailable"
    elif isinstance(error, asyncio.TimeoutError):
        reason = "Timeout"
    elif isinstance(error, aiohttp.ClientError):
        reason = "Connection error"
    else:
        reason = "Unknown error"

    return ErrorDetails(status_code=status_code, reason=reason)
