"""Exceptions raised by snapkv."""
from pathlib import Path
from typing import Dict, Optional, Union

ExtraInfo = Dict[str, Union[str, int, float, bool, None]]


class StoreError(Exception):
    """Base exception for all store operations."""

    def __init__(self, message: Optional[str] = None, extra_info: Optional[ExtraInfo] = None):
        self.extra_info = extra_info or {}
        parts = []
        if message:
            parts.append(message)
        if self.extra_info:
            info = ';'.join(f'{k}: {v}' for k, v in self.extra_info.items())
            parts.append(f'({info})' if message else info)
        super().__init__(': '.join(parts))


class InvalidKeyError(StoreError, ValueError):
    """Raised when a key is not a non-empty string."""

    def __init__(self, key):
        super().__init__('Keys must be non-empty strings', extra_info={'key': repr(key)})
        self.key = key


class SnapshotError(StoreError):
    """Raised when a snapshot cannot be saved or loaded."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message, extra_info={'path': str(path)} if path is not None else None)
        self.path = Path(path) if path is not None else None


class SnapshotIOError(SnapshotError):
    """Raised when a snapshot file is missing, unreadable or unwritable."""


class SnapshotParseError(SnapshotError):
    """Raised when a snapshot file has malformed content."""


class SnapshotEncodeError(SnapshotError):
    """Raised when a value cannot be serialized into a snapshot."""


class LockError(StoreError):
    """Raised when exclusive access to a shared store cannot be obtained."""


class LockTimeoutError(LockError):
    """Raised when the shared lock is not acquired within the timeout."""

    def __init__(self, timeout: float):
        super().__init__('Timed out waiting for the store lock', extra_info={'timeout': timeout})
        self.timeout = timeout


class LockPoisonedError(LockError):
    """Raised when a previous lock holder failed while holding the lock."""

    def __init__(self, cause: Optional[BaseException] = None):
        super().__init__(
            'Store lock is poisoned by a failed holder; call recover() to regain access',
            extra_info={'cause': type(cause).__name__ if cause is not None else None},
        )
        self.cause = cause


class LockReleasedError(LockError):
    """Raised when a guard is used after its lock has been released."""

    def __init__(self):
        super().__init__('Store guard used outside of its lock block')
