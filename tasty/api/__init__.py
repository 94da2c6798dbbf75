"""tastytrade API adapter package."""

from .client import TastyClient
from .credential import Credential, Identity, TokenState
from .session import SessionManager
from .session_store import SessionStore, deserialize_credential, serialize_credential
from .transport import HttpResponse, HttpTransport

__all__ = [
    "Credential",
    "HttpResponse",
    "HttpTransport",
    "Identity",
    "SessionManager",
    "SessionStore",
    "TastyClient",
    "TokenState",
    "deserialize_credential",
    "serialize_credential",
]
