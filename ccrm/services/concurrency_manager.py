"""
Concurrency management and thread safety components.
"""

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, List, Optional

import structlog

from ..core.exceptions import CCRMException

logger = structlog.get_logger(__name__)


class ConcurrencyError(CCRMException):
    """Raised when a resource lock cannot be acquired in time."""
    pass


@dataclass
class LockInfo:
    """Information about a held lock."""
    resource_id: str
    holder_id: int
    acquired_at: float
    depth: int = 1


class ConcurrencyManager:
    """Hands out one re-entrant lock per resource id.

    Used to serialize read-validate-write sequences on a single student
    while leaving unrelated students free to proceed in parallel.
    A resource's lock is discarded once nobody holds or waits for it.
    """

    def __init__(self, default_timeout: Optional[float] = None):
        self._default_timeout = default_timeout
        self._locks: Dict[str, threading.RLock] = {}
        self._waiters: Dict[str, int] = {}
        self._lock_holders: Dict[str, LockInfo] = {}
        self._lock = threading.RLock()

    def _checkout(self, resource_id: str) -> threading.RLock:
        with self._lock:
            resource_lock = self._locks.get(resource_id)
            if resource_lock is None:
                resource_lock = self._locks[resource_id] = threading.RLock()
            self._waiters[resource_id] = self._waiters.get(resource_id, 0) + 1
            return resource_lock

    def _discard_if_idle(self, resource_id: str) -> None:
        # Caller holds self._lock.
        if resource_id not in self._lock_holders and not self._waiters.get(resource_id):
            self._locks.pop(resource_id, None)
            self._waiters.pop(resource_id, None)

    def acquire_lock(self, resource_id: str, timeout: Optional[float] = None) -> LockInfo:
        """Block until the resource lock is held by the calling thread."""
        timeout = self._default_timeout if timeout is None else timeout
        resource_lock = self._checkout(resource_id)
        try:
            acquired = resource_lock.acquire(timeout=timeout) if timeout is not None else resource_lock.acquire()
        except BaseException:
            with self._lock:
                self._waiters[resource_id] -= 1
                self._discard_if_idle(resource_id)
            raise

        with self._lock:
            self._waiters[resource_id] -= 1
            if not acquired:
                self._discard_if_idle(resource_id)
            else:
                info = self._lock_holders.get(resource_id)
                if info is None:
                    info = LockInfo(resource_id=resource_id, holder_id=threading.get_ident(), acquired_at=time.time())
                    self._lock_holders[resource_id] = info
                else:
                    info.depth += 1
                return info

        logger.warning("lock_timeout", resource_id=resource_id, timeout=timeout)
        raise ConcurrencyError(
            f"Timed out waiting for lock on {resource_id}",
            error_code="LOCK_TIMEOUT",
            details={'resource_id': resource_id, 'timeout': timeout}
        )

    def release_lock(self, resource_id: str) -> None:
        """Release one level of the resource lock held by the calling thread."""
        with self._lock:
            resource_lock = self._locks.get(resource_id)
            if resource_lock is None:
                raise ConcurrencyError(
                    f"No lock held on {resource_id}",
                    error_code="LOCK_NOT_HELD",
                    details={'resource_id': resource_id}
                )
            info = self._lock_holders.get(resource_id)
            if info is not None:
                info.depth -= 1
                if info.depth == 0:
                    del self._lock_holders[resource_id]
            resource_lock.release()
            self._discard_if_idle(resource_id)

    @contextmanager
    def lock(self, resource_id: str, timeout: Optional[float] = None):
        """Context manager for acquiring and releasing a resource lock."""
        info = self.acquire_lock(resource_id, timeout)
        try:
            yield info
        finally:
            self.release_lock(resource_id)

    def get_lock_info(self) -> List[LockInfo]:
        """Get information about all currently held locks."""
        with self._lock:
            return list(self._lock_holders.values())

    def is_locked(self, resource_id: str) -> bool:
        with self._lock:
            return resource_id in self._lock_holders

    def tracked_resources(self) -> int:
        """Number of resource locks currently kept alive."""
        with self._lock:
            return len(self._locks)
