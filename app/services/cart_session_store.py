# app/services/cart_session_store.py
import logging
import threading
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass

from app.models.cart import CartLedger

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    ledger: CartLedger
    last_seen: float


class CartSessionStore:
    """
    Session id -> CartLedger registry used at the request boundary.

    - A ledger idle for longer than `ttl_seconds` is cleared and dropped;
      the next request with that session id starts from an empty cart.
    - `ttl_seconds=None` disables expiry.

    The registry is shared by every request and is locked. A ledger itself
    belongs to one session and is not.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    @staticmethod
    def new_session_id() -> str:
        return uuid.uuid4().hex

    def _is_expired(self, entry: _Entry, now: float) -> bool:
        return self.ttl_seconds is not None and now - entry.last_seen > self.ttl_seconds

    def _drop(self, session_id: str) -> None:
        entry = self._entries.pop(session_id)
        entry.ledger.clear()
        logger.debug("Cart session %s expired", session_id)

    def get_or_create(self, session_id: str) -> CartLedger:
        with self._lock:
            now = self._clock()
            entry = self._entries.get(session_id)
            if entry is not None and self._is_expired(entry, now):
                self._drop(session_id)
                entry = None
            if entry is None:
                entry = _Entry(ledger=CartLedger(), last_seen=now)
                self._entries[session_id] = entry
            entry.last_seen = now
            return entry.ledger

    def get(self, session_id: str) -> CartLedger | None:
        """Return the live ledger for a session without creating one."""
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            now = self._clock()
            if self._is_expired(entry, now):
                self._drop(session_id)
                return None
            entry.last_seen = now
            return entry.ledger

    def discard(self, session_id: str) -> None:
        with self._lock:
            entry = self._entries.pop(session_id, None)
            if entry is not None:
                entry.ledger.clear()

    def purge_expired(self) -> int:
        """Drop every expired session and return how many were dropped."""
        with self._lock:
            now = self._clock()
            expired = [
                session_id
                for session_id, entry in self._entries.items()
                if self._is_expired(entry, now)
            ]
            for session_id in expired:
                self._drop(session_id)
            return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
