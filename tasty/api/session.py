from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from ..config import Config
from ..errors import ApiError, AuthError, RenewalTokenExpired, SessionExpired
from . import jsonpath
from .credential import Credential, Identity, TokenState
from .transport import HttpResponse, HttpTransport, Transport, auth_headers

SESSIONS_PATH = "/sessions"

Clock = Callable[[], datetime]
TransportFactory = Callable[[str, bool], Transport]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SessionManager:
    """Owns the login / renewal / logout protocol for credentials.

    ``ensure_valid`` is the gate every outbound call passes through: it
    returns a session token that is good for at least ``config.expiry_buffer``
    and exchanges the single-use renewal token under the credential's lock
    when it is not.
    """

    def __init__(
        self,
        config: Config,
        *,
        transport_factory: Optional[TransportFactory] = None,
        clock: Clock = utc_now,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._transport_factory = transport_factory or self._default_transport

    def _default_transport(self, base_url: str, debug: bool) -> Transport:
        return HttpTransport(
            base_url,
            user_agent=self.config.user_agent,
            timeout=self.config.timeout,
            debug=debug,
            max_retries=self.config.max_retries,
            retry_backoff=self.config.retry_backoff,
            logger=self._logger,
        )

    def open_transport(self, credential: Credential) -> Transport:
        return self._transport_factory(credential.api_url, credential.debug)

    def login(
        self,
        username: str,
        password: str,
        *,
        remember_me: bool = False,
        sandbox: bool | None = None,
        debug: bool | None = None,
    ) -> Credential:
        endpoints = self.config.endpoints(sandbox)
        debug = self.config.debug if debug is None else debug
        transport = self._transport_factory(endpoints.api_url, debug)
        try:
            response = transport.request(
                "POST",
                SESSIONS_PATH,
                json_body={"login": username, "password": password, "remember-me": remember_me},
            )
        finally:
            transport.close()
        if response.status_code >= 400:
            self._logger.error("login_failed", extra={"username": username, "status": response.status_code})
            raise AuthError(response.status_code, response.body, "login")

        document = response.json()
        identity = Identity(
            username=username,
            name=jsonpath.get_str(document, "data.user.name"),
            nickname=jsonpath.get_str(document, "data.user.nickname"),
            email=jsonpath.get_str(document, "data.user.email"),
            external_id=jsonpath.get_str(document, "data.user.external-id"),
        )
        tokens = self._issue_tokens(response, document, with_renewal=remember_me)

        self._logger.info(
            "login",
            extra={"username": username, "api_url": endpoints.api_url, "remember_me": tokens.has_renewal_token},
        )
        return Credential(
            identity=identity,
            api_url=endpoints.api_url,
            streamer_url=endpoints.streamer_url,
            tokens=tokens,
            debug=debug,
        )

    def ensure_valid(self, credential: Credential) -> str:
        """Return a usable session token, refreshing the credential first if it is about to expire."""
        buffer = self.config.expiry_buffer
        tokens = credential.tokens
        if tokens.session_fresh_at(self._clock(), buffer):
            return tokens.session_token

        with credential.refresh_lock:
            # Another caller may have refreshed while this one waited on the lock.
            tokens = credential.tokens
            now = self._clock()
            if tokens.session_fresh_at(now, buffer):
                return tokens.session_token

            self._logger.info(
                "session_refresh",
                extra={
                    "username": credential.username,
                    "session_expires_on": tokens.session_expires_on,
                    "renewal_expires_on": tokens.renewal_expires_on,
                },
            )
            if not tokens.has_renewal_token:
                raise SessionExpired()
            if tokens.renewal_expired_at(now):
                raise RenewalTokenExpired()

            fresh = self._exchange_renewal_token(credential, tokens)
            credential.replace_tokens(fresh)
            self._logger.info(
                "session_refreshed",
                extra={"username": credential.username, "session_expires_on": fresh.session_expires_on},
            )
            return fresh.session_token

    def logout(self, credential: Credential) -> None:
        token = self.ensure_valid(credential)
        transport = self.open_transport(credential)
        try:
            response = transport.request("DELETE", SESSIONS_PATH, headers=auth_headers(token))
        finally:
            transport.close()
        if not 200 <= response.status_code < 300:
            raise ApiError(response.status_code, response.body, "logout")
        self._logger.info("logout", extra={"username": credential.username})

    def _exchange_renewal_token(self, credential: Credential, tokens: TokenState) -> TokenState:
        transport = self.open_transport(credential)
        try:
            response = transport.request(
                "POST",
                SESSIONS_PATH,
                json_body={
                    "login": credential.username,
                    "remember-token": tokens.renewal_token,
                    "remember-me": True,
                },
            )
        finally:
            transport.close()
        if response.status_code >= 400:
            self._logger.error(
                "session_refresh_failed",
                extra={"username": credential.username, "status": response.status_code},
            )
            raise AuthError(response.status_code, response.body, "renew session")
        return self._issue_tokens(response, response.json(), with_renewal=True)

    def _issue_tokens(self, response: HttpResponse, document: Dict[str, Any] | Any, *, with_renewal: bool) -> TokenState:
        # Whole seconds so the persisted epoch-seconds form round-trips exactly.
        issued = response.received_at.replace(microsecond=0)
        renewal_token = jsonpath.get_str(document, "data.remember-token") if with_renewal else ""
        return TokenState(
            authenticated_on=issued,
            session_token=jsonpath.get_str(document, "data.session-token"),
            session_expires_on=issued + self.config.session_ttl,
            renewal_token=renewal_token or None,
            renewal_expires_on=issued + self.config.renewal_ttl if renewal_token else None,
        )
