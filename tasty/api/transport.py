from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence, Tuple

import requests

from ..errors import DecodeError, TransportError
from ..logging import redact
from .jsonpath import parse_document

Params = Sequence[Tuple[str, str]]

RETRYABLE_METHODS = frozenset({"GET", "HEAD", "DELETE"})


@dataclass(frozen=True)
class HttpResponse:
    status_code: int
    body: bytes
    received_at: datetime
    reason: str = ""

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return parse_document(self.body)


class Transport(Protocol):
    base_url: str

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Params] = None,
        json_body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse: ...

    def close(self) -> None: ...


class HttpTransport:
    """Thin wrapper over ``requests.Session`` bound to one API base url.

    5xx responses to GET, HEAD and DELETE are retried up to ``max_retries``
    times with exponential backoff. POST is sent exactly once, as are 4xx
    responses and connection failures.
    """

    def __init__(
        self,
        base_url: str,
        *,
        user_agent: str,
        timeout: float = 30.0,
        debug: bool = False,
        max_retries: int = 0,
        retry_backoff: float = 0.5,
        session: requests.Session | None = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.debug = debug
        self.max_retries = max(0, max_retries)
        self.retry_backoff = retry_backoff
        self._logger = logger or logging.getLogger(__name__)
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
                "User-Agent": user_agent,
            }
        )

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Params] = None,
        json_body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> HttpResponse:
        url = f"{self.base_url}{path}"
        attempt = 0
        while True:
            self._trace(
                "http_request",
                method=method,
                url=url,
                params=list(params or []),
                body=redact(json_body),
                headers=redact(dict(headers or {})),
            )
            try:
                raw = self._session.request(
                    method,
                    url,
                    params=list(params) if params else None,
                    json=json_body,
                    headers=dict(headers) if headers else None,
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                self._logger.error("http_transport_error", extra={"method": method, "url": url, "error": str(exc)})
                raise TransportError(f"{method} {url}: {exc}") from exc

            response = HttpResponse(
                status_code=raw.status_code,
                body=raw.content,
                received_at=datetime.now(timezone.utc),
                reason=raw.reason or "",
            )
            self._trace("http_response", method=method, url=url, status=response.status_code, body=_loggable(response))

            if response.status_code < 500 or attempt >= self.max_retries or not self._retryable(method):
                return response

            delay = self.retry_backoff * (2**attempt)
            attempt += 1
            self._logger.warning(
                "http_retry",
                extra={"method": method, "url": url, "status": response.status_code, "attempt": attempt, "delay": delay},
            )
            time.sleep(delay)

    def close(self) -> None:
        self._session.close()

    @staticmethod
    def _retryable(method: str) -> bool:
        return method.upper() in RETRYABLE_METHODS

    def _trace(self, event: str, **fields: Any) -> None:
        level = logging.INFO if self.debug else logging.DEBUG
        if self._logger.isEnabledFor(level):
            self._logger.log(level, event, extra=fields)


def auth_headers(token: str | None) -> Dict[str, str]:
    return {"Authorization": token} if token else {}


def _loggable(response: HttpResponse) -> Any:
    try:
        return redact(response.json())
    except DecodeError:
        return response.text
