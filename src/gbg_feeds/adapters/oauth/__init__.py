"""OAuth2 adapters."""

from gbg_feeds.adapters.oauth.access_token_cache import AccessTokenCache

__all__ = ["AccessTokenCache"]
