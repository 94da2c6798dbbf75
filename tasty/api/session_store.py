from __future__ import annotations

import json
import sqlite3
import zlib
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..config import Config
from ..errors import DecodeError
from .credential import Credential, Identity, TokenState

ZSTD_MAGIC = b"\x28\xb5\x2f\xfd"


def _epoch(value: datetime | None) -> int:
    if value is None:
        return 0
    return int(value.timestamp())


def _from_epoch(value: Any) -> datetime:
    return datetime.fromtimestamp(int(value or 0), tz=timezone.utc)


def serialize_credential(credential: Credential) -> bytes:
    """Encode a credential as zlib-compressed JSON; the refresh lock is not part of the record."""
    tokens = credential.tokens
    identity = credential.identity
    record = {
        "authenticated-on": _epoch(tokens.authenticated_on),
        "url": credential.api_url,
        "token": tokens.session_token,
        "expires": _epoch(tokens.session_expires_on),
        "remember-token": tokens.renewal_token or "",
        "remember-expires": _epoch(tokens.renewal_expires_on),
        "name": identity.name,
        "nickname": identity.nickname,
        "email": identity.email,
        "external-id": identity.external_id,
        "username": identity.username,
        "debug": credential.debug,
    }
    return zlib.compress(json.dumps(record, separators=(",", ":")).encode("utf-8"))


def deserialize_credential(data: bytes, config: Config | None = None) -> Credential:
    config = config or Config()
    if data[:4] == ZSTD_MAGIC:
        raise DecodeError("credential record is zstd-framed; only zlib records written by this client are readable")
    try:
        record: Dict[str, Any] = json.loads(zlib.decompress(data).decode("utf-8"))
    except (zlib.error, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"persisted credential is unreadable: {exc}") from exc

    endpoints = config.endpoints_for(record.get("url", ""))
    renewal_token = record.get("remember-token") or None
    tokens = TokenState(
        authenticated_on=_from_epoch(record.get("authenticated-on")),
        session_token=record.get("token", ""),
        session_expires_on=_from_epoch(record.get("expires")),
        renewal_token=renewal_token,
        renewal_expires_on=_from_epoch(record.get("remember-expires")) if renewal_token else None,
    )
    identity = Identity(
        username=record.get("username", ""),
        name=record.get("name", ""),
        nickname=record.get("nickname", ""),
        email=record.get("email", ""),
        external_id=record.get("external-id", ""),
    )
    return Credential(
        identity=identity,
        api_url=endpoints.api_url,
        streamer_url=endpoints.streamer_url,
        tokens=tokens,
        debug=bool(record.get("debug", False)),
    )


@dataclass(frozen=True)
class SessionStore:
    """Sqlite-backed store of serialized credentials, one row per username."""

    db_path: Path
    config: Config

    def __init__(self, db_path: str, config: Config | None = None) -> None:
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        object.__setattr__(self, "db_path", path)
        object.__setattr__(self, "config", config or Config())
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS sessions (
                    username TEXT PRIMARY KEY,
                    api_url TEXT NOT NULL,
                    session_expires_on INTEGER NOT NULL,
                    renewal_expires_on INTEGER,
                    saved_at TEXT NOT NULL,
                    blob BLOB NOT NULL
                )
                """
            )

    def save(self, credential: Credential) -> None:
        tokens = credential.tokens
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO sessions (username, api_url, session_expires_on, renewal_expires_on, saved_at, blob)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(username) DO UPDATE SET
                    api_url=excluded.api_url,
                    session_expires_on=excluded.session_expires_on,
                    renewal_expires_on=excluded.renewal_expires_on,
                    saved_at=excluded.saved_at,
                    blob=excluded.blob
                """,
                (
                    credential.username,
                    credential.api_url,
                    _epoch(tokens.session_expires_on),
                    _epoch(tokens.renewal_expires_on) if tokens.renewal_expires_on else None,
                    datetime.now(timezone.utc).isoformat(),
                    serialize_credential(credential),
                ),
            )

    def load(self, username: str) -> Optional[Credential]:
        with self._connect() as conn:
            row = conn.execute("SELECT blob FROM sessions WHERE username = ?", (username,)).fetchone()

        if not row:
            return None
        return deserialize_credential(row[0], self.config)

    def delete(self, username: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM sessions WHERE username = ?", (username,))

    def usernames(self) -> List[str]:
        with self._connect() as conn:
            rows = conn.execute("SELECT username FROM sessions ORDER BY username").fetchall()
        return [row[0] for row in rows]
