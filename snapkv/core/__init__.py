"""Core storage components."""
from .store import KeyValueStore, Store
from .snapshot import Snapshot
from .fileformat import FileFormat
from .shared import StoreContext

__all__ = ['KeyValueStore', 'Store', 'Snapshot', 'FileFormat', 'StoreContext']
