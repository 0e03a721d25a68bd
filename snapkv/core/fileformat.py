"""Snapshot file formats."""
from enum import Enum
from pathlib import Path
from typing import Union


class FileFormat(Enum):
    """Supported snapshot formats. JSON is lossless, CSV keeps only text."""

    JSON = 'json'
    CSV = 'csv'

    @property
    def extension(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.extension

    @classmethod
    def from_name(cls, name: Union[str, 'FileFormat']) -> 'FileFormat':
        """Resolve a case-insensitive format name such as 'json' or 'CSV'."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            choices = ', '.join(fmt.extension for fmt in cls)
            raise ValueError(f"Unknown file format '{name}' (expected one of: {choices})") from None


def snapshot_path(base_name: Union[str, Path], fmt: FileFormat) -> Path:
    """Return the path of the snapshot for base_name, e.g. 'store' -> 'store.json'."""
    return Path(f'{base_name}.{fmt.extension}')
