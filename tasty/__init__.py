"""Typed client for the tastytrade Open API."""

from .api import Credential, SessionManager, SessionStore, TastyClient
from .config import Config, load_config
from .domain import OrderRequest, OrdersFilter, PositionFilter, TransactionFilter
from .errors import (
    ApiError,
    AuthError,
    DecodeError,
    ReauthRequired,
    RenewalTokenExpired,
    SessionExpired,
    TastyError,
    TransportError,
)

__all__ = [
    "ApiError",
    "AuthError",
    "Config",
    "Credential",
    "DecodeError",
    "OrderRequest",
    "OrdersFilter",
    "PositionFilter",
    "ReauthRequired",
    "RenewalTokenExpired",
    "SessionExpired",
    "SessionManager",
    "SessionStore",
    "TastyClient",
    "TastyError",
    "TransactionFilter",
    "TransportError",
    "load_config",
]
