"""Exclusive access to a store shared between threads."""
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from .store import KeyValueStore
from ..errors import LockPoisonedError, LockReleasedError, LockTimeoutError, StoreError
from ..utils.config import Config

logger = logging.getLogger(__name__)

_UNSET = object()


class StoreGuard:
    """
    Handle to the store, valid only while its lock is held.

    Obtained from StoreContext.lock(). All reads and writes, including
    save_to_file and load_from_file, should go through the guard for as long
    as other threads may be mutating the store.
    """

    def __init__(self, context: 'StoreContext'):
        self._context = context
        self._active = True

    @property
    def store(self) -> KeyValueStore:
        if not self._active:
            raise LockReleasedError()
        return self._context._store

    def replace(self, store: KeyValueStore):
        """Swap in a different store, e.g. one returned by load_from_file."""
        if not self._active:
            raise LockReleasedError()
        if not isinstance(store, KeyValueStore):
            raise TypeError(f'Expected KeyValueStore, got {type(store).__name__}')
        self._context._store = store

    def _release(self):
        self._active = False


class StoreContext:
    """
    Owns one KeyValueStore and the mutex that guards it.

    Usage:
        with context.lock() as guard:
            guard.store.set('age', Number(26))

    Only one guard is active at a time; acquisition blocks until the
    current holder leaves its block, or up to `timeout` seconds if given.

    If an exception other than a StoreError escapes a lock block the store
    may be half-updated, so the context is marked poisoned and further
    lock() calls raise LockPoisonedError until recover() is called.
    """

    def __init__(self, store: Optional[KeyValueStore] = None):
        self._store = store if store is not None else KeyValueStore()
        self._lock = threading.Lock()
        self._poison: Optional[BaseException] = None

    @property
    def poisoned(self) -> bool:
        return self._poison is not None

    def _acquire(self, timeout: Optional[float]):
        if timeout is None:
            self._lock.acquire()
        elif not self._lock.acquire(timeout=timeout):
            raise LockTimeoutError(timeout)

    @contextmanager
    def lock(self, timeout=_UNSET) -> Iterator[StoreGuard]:
        """Acquire exclusive access and yield a StoreGuard."""
        if timeout is _UNSET:
            timeout = Config.LOCK_TIMEOUT
        self._acquire(timeout)

        guard = StoreGuard(self)
        try:
            if self._poison is not None:
                raise LockPoisonedError(self._poison)
            try:
                yield guard
            except StoreError:
                # Store operations fail without partial effects
                raise
            except BaseException as e:
                self._poison = e
                logger.error(f'Store lock poisoned by {type(e).__name__}: {e}')
                raise
        finally:
            guard._release()
            self._lock.release()

    def recover(self, reset: bool = False, timeout=_UNSET):
        """
        Clear a poisoned state so the store can be used again.

        With reset=True the store is replaced by an empty one; otherwise the
        store is kept as the failed holder left it.
        """
        if timeout is _UNSET:
            timeout = Config.LOCK_TIMEOUT
        self._acquire(timeout)
        try:
            if self._poison is not None:
                logger.warning(f'Recovering poisoned store (reset={reset})')
            self._poison = None
            if reset:
                self._store = KeyValueStore()
        finally:
            self._lock.release()


_shared_context: Optional[StoreContext] = None
_shared_context_lock = threading.Lock()


def shared_context() -> StoreContext:
    """Return the process-wide StoreContext, creating it on first use."""
    global _shared_context
    if _shared_context is None:
        with _shared_context_lock:
            if _shared_context is None:
                _shared_context = StoreContext()
                logger.debug('Created shared store context')
    return _shared_context


def shared_store(timeout=_UNSET):
    """Shortcut for shared_context().lock(timeout)."""
    return shared_context().lock(timeout)
