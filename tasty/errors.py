"""Exception hierarchy shared by the session manager, dispatcher and decoders."""

from __future__ import annotations


class TastyError(Exception):
    """Base class for every error raised by the client."""


class TransportError(TastyError):
    """The HTTP request never produced a response (DNS, connect, TLS, timeout)."""


class ApiError(TastyError):
    """The API answered with an HTTP status >= 400.

    The body is kept verbatim; the API has no structured error schema for
    transport-level failures.
    """

    def __init__(self, status: int, body: bytes | str, operation: str | None = None) -> None:
        self.status = status
        self.body = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
        self.operation = operation
        label = f" ({operation})" if operation else ""
        super().__init__(f"{status}{label}: {self.body}")


class AuthError(ApiError):
    """Login or renewal-token exchange was rejected."""


class ReauthRequired(TastyError):
    """The credential can no longer be refreshed; the caller must log in again."""


class SessionExpired(ReauthRequired):
    def __init__(self, message: str = "session token is expired") -> None:
        super().__init__(message)


class RenewalTokenExpired(ReauthRequired):
    def __init__(self, message: str = "remember-me token is expired") -> None:
        super().__init__(message)


class DecodeError(TastyError):
    """A response document could not be interpreted."""
