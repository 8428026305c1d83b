"""Infrastructure contracts (protocols) used across layers."""

from gbg_feeds.domain.contracts.access_token_provider import AccessTokenProvider
from gbg_feeds.domain.contracts.http_transport import HttpTransport
from gbg_feeds.domain.contracts.image_store import ImageStoreProtocol
from gbg_feeds.domain.contracts.key_value_store import KeyValueStoreProtocol, ValueCallback
from gbg_feeds.domain.contracts.scheduler import SchedulerProtocol
from gbg_feeds.domain.contracts.throttle import Throttle, ThrottledClient

__all__ = [
    "AccessTokenProvider",
    "HttpTransport",
    "ImageStoreProtocol",
    "KeyValueStoreProtocol",
    "SchedulerProtocol",
    "Throttle",
    "ThrottledClient",
    "ValueCallback",
]
