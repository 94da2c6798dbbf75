from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta

from dotenv import load_dotenv

USER_AGENT = "tasty-client/1.0.0 (+https://developer.tastytrade.com)"


@dataclass(frozen=True)
class Endpoints:
    api_url: str
    streamer_url: str


PRODUCTION = Endpoints(api_url="https://api.tastyworks.com", streamer_url="wss://streamer.tastyworks.com")
SANDBOX = Endpoints(api_url="https://api.cert.tastyworks.com", streamer_url="wss://streamer.cert.tastyworks.com")


@dataclass(frozen=True)
class Config:
    sandbox: bool = False
    debug: bool = False
    timeout: float = 30.0
    max_retries: int = 0
    retry_backoff: float = 0.5
    session_db_path: str = "data/sessions.db"
    log_level: str = "INFO"

    user_agent: str = USER_AGENT
    production: Endpoints = PRODUCTION
    sandbox_endpoints: Endpoints = SANDBOX

    session_ttl: timedelta = timedelta(hours=24)
    renewal_ttl: timedelta = timedelta(days=28)
    expiry_buffer: timedelta = timedelta(minutes=5)

    def endpoints(self, sandbox: bool | None = None) -> Endpoints:
        use_sandbox = self.sandbox if sandbox is None else sandbox
        return self.sandbox_endpoints if use_sandbox else self.production

    def endpoints_for(self, api_url: str) -> Endpoints:
        """Map a persisted api url back to its endpoint pair; unknown urls fall back to production."""
        if api_url == self.sandbox_endpoints.api_url:
            return self.sandbox_endpoints
        return self.production


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_config() -> Config:
    load_dotenv()

    return Config(
        sandbox=_env_flag("TASTY_SANDBOX"),
        debug=_env_flag("TASTY_DEBUG"),
        timeout=float(os.getenv("TASTY_TIMEOUT", "30")),
        max_retries=int(os.getenv("TASTY_MAX_RETRIES", "0")),
        retry_backoff=float(os.getenv("TASTY_RETRY_BACKOFF", "0.5")),
        session_db_path=os.getenv("TASTY_SESSION_DB", "data/sessions.db"),
        log_level=os.getenv("TASTY_LOG_LEVEL", "INFO").upper(),
    )
