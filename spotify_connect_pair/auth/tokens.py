"""
Access token returned by the Session Service token provider.
"""

import time
from dataclasses import dataclass, field


@dataclass
class AccessToken:
    """Short-lived bearer token for a set of scopes."""

    access_token: str = ""
    token_type: str = "Bearer"
    expires_in: int = 0  # Seconds, relative to issued_at
    scopes: list[str] = field(default_factory=list)
    issued_at: float = field(default_factory=time.time)

    def is_expired(self, buffer_s: int = 60) -> bool:
        """Check if token is expired or will expire within buffer."""
        if not self.access_token or not self.expires_in:
            return True
        return time.time() + buffer_s >= self.issued_at + self.expires_in

    def has_scope(self, scope: str) -> bool:
        """Check if token was issued for a scope."""
        return scope in self.scopes
