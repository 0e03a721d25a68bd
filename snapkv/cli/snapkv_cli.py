"""Command line interface over a single snapshot file."""
import argparse
import logging
import sys

from snapkv.core.fileformat import FileFormat
from snapkv.core.shared import shared_context
from snapkv.core.store import KeyValueStore
from snapkv.core.value import String, Value
from snapkv.errors import SnapshotIOError, StoreError
from snapkv.utils.config import Config
from snapkv.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_value(text: str) -> Value:
    """Parse text as JSON when possible, otherwise keep it as a string."""
    try:
        return Value.from_json(text)
    except ValueError:
        return String(text)


def load_into(guard, base, fmt, create=False) -> bool:
    """
    Replace the guarded store with the snapshot at base.<fmt>.

    Returns False if the snapshot does not exist, leaving an empty store
    in place when create is set.
    """
    try:
        guard.replace(KeyValueStore.load_from_file(base, fmt))
    except SnapshotIOError as e:
        if not isinstance(e.__cause__, FileNotFoundError):
            raise
        if not create:
            return False
        logger.info(f'No snapshot at {e.path}, starting empty')
        guard.replace(KeyValueStore())
    return True


def handle_set(guard, args):
    """Handle SET command."""
    load_into(guard, args.file, args.format, create=True)
    guard.store.set(args.key, parse_value(args.value))
    guard.store.save_to_file(args.file, args.format)
    print("OK")
    return 0


def handle_get(guard, args):
    """Handle GET command."""
    value = guard.store.get(args.key) if load_into(guard, args.file, args.format) else None
    print("NOT_FOUND" if value is None else value.render())
    return 0


def handle_remove(guard, args):
    """Handle REMOVE command."""
    if not load_into(guard, args.file, args.format) or args.key not in guard.store:
        print("NOT_FOUND")
        return 0
    guard.store.remove(args.key)
    guard.store.save_to_file(args.file, args.format)
    print("OK")
    return 0


def handle_keys(guard, args):
    """Handle KEYS command."""
    if not load_into(guard, args.file, args.format):
        print("NOT_FOUND")
        return 0
    for key in guard.store.keys():
        print(key)
    return 0


def handle_export(guard, args):
    """Handle EXPORT command. Exporting to CSV drops type information."""
    if not load_into(guard, args.file, args.format):
        print("NOT_FOUND")
        return 1
    path = guard.store.save_to_file(args.target, args.to)
    print(path)
    return 0


def build_parser() -> argparse.ArgumentParser:
    formats = [fmt.extension for fmt in FileFormat]
    parser = argparse.ArgumentParser(prog='snapkv', description='snapkv snapshot store')
    parser.add_argument('--file', default=Config.DEFAULT_BASENAME,
                        help=f'Snapshot base name without extension (default: {Config.DEFAULT_BASENAME})')
    parser.add_argument('--format', type=FileFormat.from_name, choices=list(FileFormat),
                        default=FileFormat.from_name(Config.DEFAULT_FORMAT),
                        help=f'Snapshot format: {", ".join(formats)} (default: {Config.DEFAULT_FORMAT})')
    parser.add_argument('--log-level', default=Config.LOG_LEVEL, help=f'Log level (default: {Config.LOG_LEVEL})')

    commands = parser.add_subparsers(dest='command', required=True)

    set_cmd = commands.add_parser('set', help='Store a value (JSON text, or a raw string)')
    set_cmd.add_argument('key')
    set_cmd.add_argument('value')
    set_cmd.set_defaults(handler=handle_set)

    get_cmd = commands.add_parser('get', help='Print the value for a key')
    get_cmd.add_argument('key')
    get_cmd.set_defaults(handler=handle_get)

    remove_cmd = commands.add_parser('remove', help='Delete a key')
    remove_cmd.add_argument('key')
    remove_cmd.set_defaults(handler=handle_remove)

    keys_cmd = commands.add_parser('keys', help='List all keys')
    keys_cmd.set_defaults(handler=handle_keys)

    export_cmd = commands.add_parser('export', help='Write the snapshot under another name or format')
    export_cmd.add_argument('target', help='Base name of the exported snapshot')
    export_cmd.add_argument('--to', type=FileFormat.from_name, choices=list(FileFormat), required=True,
                            help=f'Target format: {", ".join(formats)}')
    export_cmd.set_defaults(handler=handle_export)

    return parser


def main(argv=None):
    """Main entry point for the snapkv CLI."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        with shared_context().lock() as guard:
            return args.handler(guard, args)
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
