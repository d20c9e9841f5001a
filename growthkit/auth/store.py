"""Durable storage for the cached bearer token.

A store holds at most one token. ``load()`` only ever returns a token that
is still valid: expired or unreadable entries are removed and reported as
absent. Backend failures never reach the caller; they degrade to "no
persisted token", which forces a fresh acquisition.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import MutableMapping
from datetime import datetime
from pathlib import Path
from typing import Callable, Protocol

from .constants import TOKEN_DIR, TOKEN_FILE, TOKEN_STORAGE_KEY
from .token import Token, utcnow

logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    def load(self) -> Token | None: ...

    def save(self, token: Token) -> None: ...

    def clear(self) -> None: ...


class NullTokenStore:
    """A store that persists nothing."""

    def load(self) -> Token | None:
        return None

    def save(self, token: Token) -> None:
        pass

    def clear(self) -> None:
        pass


class MappingTokenStore:
    """Token store backed by any string key/value mapping.

    The token lives under a single key as ``{"token": ..., "expiresAt": ...}``
    JSON, the same shape a browser storage bridge would hold.
    """

    def __init__(
        self,
        storage: MutableMapping[str, str] | None = None,
        *,
        key: str = TOKEN_STORAGE_KEY,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._storage: MutableMapping[str, str] = {} if storage is None else storage
        self._key = key
        self._clock = clock

    def load(self) -> Token | None:
        try:
            raw = self._storage.get(self._key)
        except Exception:
            logger.debug("Token storage unavailable; ignoring persisted token", exc_info=True)
            return None
        if raw is None:
            return None

        try:
            token = Token.from_dict(json.loads(raw))
        except (TypeError, ValueError):
            logger.debug("Discarding unparsable persisted token")
            self.clear()
            return None

        if token.is_expired(self._clock()):
            logger.debug("Discarding expired persisted token")
            self.clear()
            return None
        return token

    def save(self, token: Token) -> None:
        try:
            self._storage[self._key] = json.dumps(token.to_dict())
        except Exception:
            logger.debug("Token storage unavailable; token kept in memory only", exc_info=True)

    def clear(self) -> None:
        try:
            self._storage.pop(self._key, None)
        except Exception:
            logger.debug("Token storage unavailable; nothing cleared", exc_info=True)


def get_token_path() -> Path:
    return Path.home() / TOKEN_DIR / TOKEN_FILE


class FileTokenStore:
    """Token store persisted in ``~/.growthkit/token.json``.

    - Directory: 0700 (owner read/write/execute only)
    - File: 0600 (owner read/write only)
    - Atomic: writes to temp file in same dir, then os.replace()
    """

    def __init__(self, path: str | Path | None = None, *, clock: Callable[[], datetime] = utcnow) -> None:
        self._path = Path(path) if path else get_token_path()
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Token | None:
        try:
            if not self._path.exists():
                return None
            data = json.loads(self._path.read_text())
        except OSError:
            logger.debug("Cannot read %s; ignoring persisted token", self._path, exc_info=True)
            return None
        except json.JSONDecodeError:
            logger.debug("Discarding corrupt token file %s", self._path)
            self.clear()
            return None

        try:
            token = Token.from_dict(data)
        except ValueError:
            logger.debug("Discarding malformed token file %s", self._path)
            self.clear()
            return None

        if token.is_expired(self._clock()):
            logger.debug("Discarding expired token file %s", self._path)
            self.clear()
            return None
        return token

    def save(self, token: Token) -> None:
        content = json.dumps(token.to_dict(), indent=2)
        try:
            token_dir = self._path.parent
            token_dir.mkdir(parents=True, exist_ok=True)
            os.chmod(token_dir, 0o700)

            # Atomic write: temp file in same directory, then rename
            fd, tmp_path = tempfile.mkstemp(dir=token_dir, prefix=".token_", suffix=".tmp")
            try:
                with os.fdopen(fd, "w") as f:
                    f.write(content)
                os.chmod(tmp_path, 0o600)
                os.replace(tmp_path, self._path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError:
            logger.debug("Cannot write %s; token kept in memory only", self._path, exc_info=True)

    def clear(self) -> None:
        try:
            if self._path.exists():
                self._path.unlink()
        except OSError:
            logger.debug("Cannot remove %s", self._path, exc_info=True)
