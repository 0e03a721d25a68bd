"""Snapshot encoding and decoding for whole-store files."""
import csv
import io
import json
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

from .fileformat import FileFormat
from .value import String, Value, reject_constant
from ..errors import SnapshotEncodeError, SnapshotParseError
from ..utils.config import Config

logger = logging.getLogger(__name__)


class Snapshot:
    """
    Converts between a key -> Value mapping and snapshot file text.

    JSON snapshots are a single object whose keys are store keys and whose
    values are the JSON encoding of each Value; they round-trip exactly.

    CSV snapshots have a 'Key,Value' header and one row per entry. The value
    cell holds Value.render(): raw text for strings, JSON text for arrays
    and objects, and 'true'/'false'/'null'/digits for scalars. Reading a CSV
    snapshot turns every cell back into a String, so type information for
    non-string values is lost. This is the documented behavior of the format.
    """

    @staticmethod
    def encode(entries: Mapping[str, Value], fmt: FileFormat, path: Optional[Path] = None) -> str:
        if fmt is FileFormat.JSON:
            return Snapshot.encode_json(entries, path)
        return Snapshot.encode_csv(entries, path)

    @staticmethod
    def decode(text: str, fmt: FileFormat, path: Optional[Path] = None) -> Dict[str, Value]:
        if fmt is FileFormat.JSON:
            return Snapshot.decode_json(text, path)
        return Snapshot.decode_csv(text, path)

    @staticmethod
    def encode_json(entries: Mapping[str, Value], path: Optional[Path] = None) -> str:
        """Encode entries as one JSON object. NaN and infinite numbers are rejected."""
        try:
            document = {key: value.to_python() for key, value in entries.items()}
            text = json.dumps(
                document,
                indent=Config.JSON_INDENT,
                sort_keys=True,
                ensure_ascii=False,
                allow_nan=False,
            )
        except (TypeError, ValueError, RecursionError) as e:
            raise SnapshotEncodeError(f'Cannot encode snapshot as JSON: {e}', path) from e
        return text + '\n'

    @staticmethod
    def decode_json(text: str, path: Optional[Path] = None) -> Dict[str, Value]:
        """Decode a JSON snapshot. NaN and Infinity tokens are rejected as invalid JSON."""
        try:
            document = json.loads(text, parse_constant=reject_constant)
        except ValueError as e:
            raise SnapshotParseError(f'Invalid JSON snapshot: {e}', path) from e
        except RecursionError as e:
            raise SnapshotParseError('JSON snapshot is nested too deeply', path) from e

        if not isinstance(document, dict):
            raise SnapshotParseError(
                f'JSON snapshot must be an object at the top level, got {type(document).__name__}',
                path,
            )

        try:
            return {key: Value.from_python(item) for key, item in document.items()}
        except RecursionError as e:
            raise SnapshotParseError('JSON snapshot is nested too deeply', path) from e

    @staticmethod
    def encode_csv(entries: Mapping[str, Value], path: Optional[Path] = None) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator='\n')
        writer.writerow(Config.CSV_HEADER)
        for key in sorted(entries):
            try:
                cell = entries[key].render()
            except (TypeError, ValueError, RecursionError) as e:
                raise SnapshotEncodeError(f'Cannot encode value for key {key!r} as CSV: {e}', path) from e
            writer.writerow((key, cell))
        return buffer.getvalue()

    @staticmethod
    def decode_csv(text: str, path: Optional[Path] = None) -> Dict[str, Value]:
        """
        Decode a CSV snapshot. Every value comes back as a String.

        The first row is the header and is always skipped. Rows with fewer
        than two columns or an empty key are skipped with a warning; columns
        past the second are ignored.
        """
        entries: Dict[str, Value] = {}
        reader = csv.reader(io.StringIO(text, newline=''))
        header_seen = False
        try:
            for row in reader:
                if not header_seen:
                    header_seen = True
                    if tuple(row) != Config.CSV_HEADER:
                        logger.warning(f'Unexpected CSV header {row!r} in {path or "<text>"}')
                    continue
                if len(row) < 2:
                    if row:
                        logger.warning(f'Skipping CSV row {reader.line_num} with {len(row)} column(s)')
                    continue
                if not row[0]:
                    logger.warning(f'Skipping CSV row {reader.line_num} with an empty key')
                    continue
                entries[row[0]] = String(row[1])
        except csv.Error as e:
            raise SnapshotParseError(f'Malformed CSV snapshot at line {reader.line_num}: {e}', path) from e
        return entries
