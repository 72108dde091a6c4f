from __future__ import annotations

import logging
import threading
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, Optional, Protocol
from uuid import uuid4

from wsl_exec.errors import InvalidConfirmationError

logger = logging.getLogger("wsl_exec.confirmations")


@dataclass(frozen=True)
class PendingConfirmation:
    """
    A dangerous command parked until a second, explicit approval.

    Plain data only, so a store can keep it in memory or serialize it
    to an external cache.
    """

    token: str
    command: str
    working_dir: Optional[str] = None
    timeout_ms: Optional[int] = None
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "PendingConfirmation":
        return PendingConfirmation(
            token=str(data["token"]),
            command=str(data["command"]),
            working_dir=data.get("working_dir"),
            timeout_ms=data.get("timeout_ms"),
            created_at=float(data.get("created_at") or time.time()),
        )


class ConfirmationStore(Protocol):
    """
    Owner of suspended dangerous commands.

    Implementations must guarantee that a token is consumed at most once,
    even when two callers race on the same token.
    """

    def register(self, command: str, working_dir: Optional[str], timeout_ms: Optional[int]) -> str:
        ...

    def consume(self, token: str) -> PendingConfirmation:
        """
        Remove and return the entry for `token`.
        Raises InvalidConfirmationError if it is unknown or already consumed.
        """
        ...

    def pending_count(self) -> int:
        ...


class InMemoryConfirmationStore:
    """
    Dict-backed store for a single server process.

    Entries never expire unless `ttl_s` is given; in that case stale entries
    are purged whenever the store is touched.
    """

    def __init__(self, *, ttl_s: Optional[float] = None, clock: Callable[[], float] = time.time):
        self._pending: Dict[str, PendingConfirmation] = {}
        self._lock = threading.Lock()
        self._ttl_s = ttl_s
        self._clock = clock

    def _new_token(self) -> str:
        while True:
            token = uuid4().hex[:12]
            if token not in self._pending:
                return token

    def _purge_expired(self) -> None:
        if not self._ttl_s:
            return
        cutoff = self._clock() - self._ttl_s
        expired = [t for t, p in self._pending.items() if p.created_at < cutoff]
        for token in expired:
            del self._pending[token]
        if expired:
            logger.info("expired %d pending confirmation(s)", len(expired))

    def register(self, command: str, working_dir: Optional[str], timeout_ms: Optional[int]) -> str:
        with self._lock:
            self._purge_expired()
            token = self._new_token()
            self._pending[token] = PendingConfirmation(
                token=token,
                command=command,
                working_dir=working_dir,
                timeout_ms=timeout_ms,
                created_at=self._clock(),
            )
            return token

    def consume(self, token: str) -> PendingConfirmation:
        with self._lock:
            self._purge_expired()
            pending = self._pending.pop(str(token or ""), None)
        if pending is None:
            raise InvalidConfirmationError(token)
        return pending

    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)
