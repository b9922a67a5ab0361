"""
Client-held login session.
"""
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class SessionExpiredError(Exception):
    """The stored access token is past its expiry."""


@dataclass
class ClientSession:
    """
    Access token plus the profile returned at login.

    expires_at is epoch seconds, as issued by the identity store. A session
    without expires_at is treated as valid until logout.
    """
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    profile: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_login(cls, body: Dict[str, Any]) -> 'ClientSession':
        """Build from a /login response body."""
        session = body.get('session') or {}
        expires_at = session.get('expires_at')
        if expires_at is None and session.get('expires_in') is not None:
            expires_at = int(time.time()) + int(session['expires_in'])

        return cls(
            access_token=session['access_token'],
            refresh_token=session.get('refresh_token'),
            expires_at=expires_at,
            profile=body.get('profile') or body.get('user') or {}
        )

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.expires_at is None:
            return False
        now = time.time() if now is None else now
        return now >= self.expires_at

    @property
    def is_admin(self) -> bool:
        return self.profile.get('role') == 'admin'

    def bearer_token(self, now: Optional[float] = None) -> str:
        """
        Token for an Authorization header.

        Raises:
            SessionExpiredError: If the session has expired
        """
        if self.is_expired(now):
            raise SessionExpiredError('Session expired, please log in again')
        return self.access_token
