"""snapkv - In-process Key/Value store with JSON and CSV snapshots."""
__version__ = '1.0.0'

from .core.fileformat import FileFormat
from .core.shared import StoreContext, StoreGuard, shared_context, shared_store
from .core.store import KeyValueStore, Store, get_store
from .core.value import Array, Boolean, Null, Number, Object, String, Value
from .errors import (
    InvalidKeyError,
    LockError,
    LockPoisonedError,
    LockReleasedError,
    LockTimeoutError,
    SnapshotEncodeError,
    SnapshotError,
    SnapshotIOError,
    SnapshotParseError,
    StoreError,
)

__all__ = [
    'KeyValueStore', 'Store', 'get_store', 'FileFormat',
    'StoreContext', 'StoreGuard', 'shared_context', 'shared_store',
    'Value', 'String', 'Number', 'Boolean', 'Null', 'Array', 'Object',
    'StoreError', 'InvalidKeyError', 'SnapshotError', 'SnapshotIOError',
    'SnapshotParseError', 'SnapshotEncodeError', 'LockError', 'LockTimeoutError',
    'LockPoisonedError', 'LockReleasedError',
]
