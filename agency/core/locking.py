"""Serialization of writes to a customer aggregate.

Two layers:

- an in-process lock per customer id, so concurrent requests handled by the
  same worker never interleave their read-check-write cycles;
- the customer's ``version`` column (SQLAlchemy ``version_id_col``), which
  turns a write based on a stale read from another process into a
  ``StaleDataError``. :func:`retry_on_conflict` rolls back and re-runs the
  whole operation when that happens.
"""

import logging
import threading
from contextlib import contextmanager
from functools import wraps

from sqlalchemy.orm.exc import StaleDataError

from agency.core.config import settings
from agency.errors import ConcurrentModificationError

logger = logging.getLogger(__name__)


class AggregateLockRegistry:
    """Per-key reentrant locks, dropped once nobody holds or waits on them."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.RLock] = {}
        self._holders: dict[int, int] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: int):
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.RLock()
                self._locks[key] = lock
            self._holders[key] = self._holders.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._holders[key] -= 1
                if not self._holders[key]:
                    del self._holders[key]
                    del self._locks[key]


customer_locks = AggregateLockRegistry()


def retry_on_conflict(func):
    """Re-run a service function whose commit hit a stale customer version.

    The wrapped function must take the session as its first argument, read
    everything it needs inside the call and only fire collaborator side
    effects after its commit succeeded.
    """

    @wraps(func)
    def wrapper(db, *args, **kwargs):
        attempts = settings.conflict_retry_attempts
        for attempt in range(1, attempts + 1):
            try:
                return func(db, *args, **kwargs)
            except StaleDataError:
                db.rollback()
                logger.warning(
                    "Concurrent update in %s (attempt %d/%d)",
                    func.__name__,
                    attempt,
                    attempts,
                )
        raise ConcurrentModificationError(
            "The customer record was modified concurrently, please retry"
        )

    return wrapper
