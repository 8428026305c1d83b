"""Errors raised while fetching, normalizing and publishing feed data."""


class FeedError(Exception):
    """Base class for failures of a single poll."""


class ThrottledError(FeedError):
    """The request was denied by the token bucket and never sent."""


class AuthError(FeedError):
    """The access token could not be obtained."""


class HttpStatusError(FeedError):
    """The upstream API answered with an unexpected HTTP status."""

    def __init__(self, status: int, url: str, body: str = "") -> None:
        self.status = status
        self.url = url
        self.body = body
        message = f"Got response ({status}) from {url}"
        if body:
            message = f"{message}: {body[:200]}"
        super().__init__(message)


class MalformedResponseError(FeedError):
    """The response had an unexpected content type or shape."""


class SinkError(FeedError):
    """The key-value store could not be read."""


class SinkWriteError(SinkError):
    """A normalized record could not be written to the key-value store."""


class NotModified(Exception):  # noqa: N818 - signal, not a failure
    """The upstream data has not changed since the last fetch.

    Not a FeedError: callers branch on it and keep what they
    already published.
    """
