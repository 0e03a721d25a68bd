"""Main KeyValueStore implementation."""
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .fileformat import FileFormat, snapshot_path
from .snapshot import Snapshot
from .value import Value, as_value
from ..errors import InvalidKeyError, SnapshotError, SnapshotIOError, SnapshotParseError
from ..utils.config import Config

logger = logging.getLogger(__name__)


class Store(ABC):
    """Interface for a string-keyed store of Values with snapshot persistence."""

    @abstractmethod
    def set(self, key: str, value: Union[Value, Any]) -> None:
        """Insert or fully replace the value for key."""

    @abstractmethod
    def get(self, key: str) -> Optional[Value]:
        """Return the value for key, or None if absent."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key if present. Removing an absent key does nothing."""

    @abstractmethod
    def save_to_file(self, base_name: Union[str, Path], fmt: FileFormat) -> Path:
        """Write a full snapshot to base_name.<ext> and return its path."""

    @classmethod
    @abstractmethod
    def load_from_file(cls, base_name: Union[str, Path], fmt: FileFormat) -> 'Store':
        """Read base_name.<ext> into a brand-new store."""


class KeyValueStore(Store):
    """
    In-memory key/value store backed by a single dict.

    The store performs no locking of its own. Share it between threads
    through snapkv.core.shared.StoreContext, which hands out exclusive
    access one holder at a time.
    """

    def __init__(self):
        self._data: Dict[str, Value] = {}

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Union[Value, Any]]) -> 'KeyValueStore':
        """Create a store holding exactly the entries of mapping."""
        store = cls()
        for key, value in mapping.items():
            store.set(key, value)
        return store

    @staticmethod
    def _check_key(key: str):
        if not isinstance(key, str) or not key:
            raise InvalidKeyError(key)

    def set(self, key: str, value: Union[Value, Any]) -> None:
        """Store value under key, replacing any previous value (no merge)."""
        self._check_key(key)
        self._data[key] = as_value(value)

    def get(self, key: str) -> Optional[Value]:
        """
        Return the value for key, or None if absent.

        Values are immutable, so the returned object is independent of the
        store: later writes to the store never change it and the caller
        cannot change what the store holds.
        """
        return self._data.get(key)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        """Return all keys in sorted order."""
        return sorted(self._data)

    def items(self) -> List[Tuple[str, Value]]:
        """Return (key, value) pairs sorted by key."""
        return sorted(self._data.items())

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __eq__(self, other):
        if not isinstance(other, KeyValueStore):
            return NotImplemented
        return self._data == other._data

    __hash__ = None

    def __repr__(self) -> str:
        return f'{type(self).__name__}({len(self._data)} entries)'

    def save_to_file(self, base_name: Union[str, Path], fmt: FileFormat) -> Path:
        """
        Write the whole store to base_name.<ext>, replacing any existing file.

        The snapshot is written to a temporary sibling file first and then
        renamed over the target, so readers see either the old file or the
        complete new one.

        Raises:
            SnapshotEncodeError: a value cannot be represented in the format
            SnapshotIOError: the file cannot be created or written
        """
        fmt = FileFormat.from_name(fmt)
        path = snapshot_path(base_name, fmt)

        # Encode before touching the filesystem so encode failures leave no file behind
        try:
            text = Snapshot.encode(self._data, fmt, path)
        except SnapshotError:
            logger.error(f'Failed to encode {len(self._data)} entries for {path}')
            raise

        # Unique temp name so concurrent savers never share a temp file
        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                'w',
                encoding=Config.ENCODING,
                newline='',
                dir=path.parent,
                prefix=f'.{path.name}.',
                suffix=Config.TEMP_SUFFIX,
                delete=False,
            ) as f:
                temp_path = Path(f.name)
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, path)
        except OSError as e:
            if temp_path is not None:
                self._discard(temp_path)
            logger.error(f'Failed to write snapshot {path}: {e}')
            raise SnapshotIOError(f'Cannot write snapshot: {e.strerror or e}', path) from e

        logger.info(f'Saved {len(self._data)} entries to {path}')
        return path

    @classmethod
    def load_from_file(cls, base_name: Union[str, Path], fmt: FileFormat) -> 'KeyValueStore':
        """
        Read base_name.<ext> and return a new store holding exactly its entries.

        Loading never merges into an existing store. Loading a CSV snapshot
        yields String values only.

        Raises:
            SnapshotIOError: the file is missing or unreadable
            SnapshotParseError: the content is malformed
        """
        fmt = FileFormat.from_name(fmt)
        path = snapshot_path(base_name, fmt)

        try:
            with open(path, 'r', encoding=Config.ENCODING, newline='') as f:
                text = f.read()
        except FileNotFoundError as e:
            logger.error(f'Snapshot {path} does not exist')
            raise SnapshotIOError('Snapshot file not found', path) from e
        except UnicodeDecodeError as e:
            logger.error(f'Snapshot {path} is not valid {Config.ENCODING}')
            raise SnapshotParseError(f'Snapshot is not valid {Config.ENCODING} text: {e}', path) from e
        except OSError as e:
            logger.error(f'Failed to read snapshot {path}: {e}')
            raise SnapshotIOError(f'Cannot read snapshot: {e.strerror or e}', path) from e

        try:
            entries = Snapshot.decode(text, fmt, path)
        except SnapshotError:
            logger.error(f'Failed to parse snapshot {path}')
            raise

        try:
            store = cls.from_mapping(entries)
        except InvalidKeyError as e:
            logger.error(f'Snapshot {path} contains an empty key')
            raise SnapshotParseError('Snapshot contains an empty key', path) from e
        logger.info(f'Loaded {len(store)} entries from {path}')
        return store

    @staticmethod
    def _discard(path: Path):
        """Remove a leftover temporary file, ignoring a missing one."""
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f'Could not remove temporary file {path}: {e}')


def get_store() -> KeyValueStore:
    """Return a fresh, empty store."""
    return KeyValueStore()
