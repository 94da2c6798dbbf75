from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(frozen=True)
class Identity:
    username: str
    name: str = ""
    nickname: str = ""
    email: str = ""
    external_id: str = ""


@dataclass(frozen=True)
class TokenState:
    """One issued (session token, renewal token) pair and their expiries.

    Always replaced as a whole so a reader never pairs a new token with an
    old expiry.
    """

    authenticated_on: datetime
    session_token: str
    session_expires_on: datetime
    renewal_token: str | None = None
    renewal_expires_on: datetime | None = None

    @property
    def has_renewal_token(self) -> bool:
        return bool(self.renewal_token)

    def session_fresh_at(self, now: datetime, buffer: timedelta) -> bool:
        return now < self.session_expires_on - buffer

    def renewal_expired_at(self, now: datetime) -> bool:
        return self.renewal_expires_on is None or self.renewal_expires_on <= now


@dataclass
class Credential:
    identity: Identity
    api_url: str
    streamer_url: str
    tokens: TokenState
    debug: bool = False
    _refresh_lock: threading.Lock = field(default_factory=threading.Lock, compare=False, repr=False)

    @property
    def username(self) -> str:
        return self.identity.username

    @property
    def session_token(self) -> str:
        return self.tokens.session_token

    @property
    def renewal_token(self) -> str | None:
        return self.tokens.renewal_token

    @property
    def refresh_lock(self) -> threading.Lock:
        return self._refresh_lock

    def replace_tokens(self, tokens: TokenState) -> None:
        """Swap in a freshly issued token pair; callers must hold ``refresh_lock``."""
        self.tokens = tokens
