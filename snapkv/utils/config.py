"""Configuration management."""
import os


class Config:
    """Configuration management."""

    # Snapshot settings
    DEFAULT_BASENAME = 'store'  # Snapshot base name used by the CLI
    DEFAULT_FORMAT = 'json'  # 'json' or 'csv'
    ENCODING = 'utf-8'
    TEMP_SUFFIX = '.tmp'  # Suffix of the unique sibling file written before rename

    # JSON settings
    JSON_INDENT = 2  # Indent for whole-store documents; values stay compact

    # CSV settings
    CSV_HEADER = ('Key', 'Value')

    # Locking settings
    LOCK_TIMEOUT = None  # Seconds to wait for the shared lock; None blocks forever

    # Logging settings
    LOG_LEVEL = os.getenv('SNAPKV_LOG_LEVEL', 'WARNING').upper()
    LOG_FORMAT = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'
    LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
