"""Access token domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AccessToken:
    """An OAuth2 bearer token and the clock reading it expires at."""

    token: str
    expires_at: float

    def is_valid(self, now: float) -> bool:
        """Whether the token can still be used at ``now``."""
        return bool(self.token) and now < self.expires_at
