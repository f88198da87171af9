"""
Statement import configuration.

Limits used by the statement parsers and the import service. Values can be
overridden through environment variables without code changes.
"""
import os
from dataclasses import dataclass


@dataclass
class ImportConfig:
    """Configuration for statement upload, parsing and error reporting."""

    max_file_bytes: int = 5 * 1024 * 1024  # Statements are a few thousand rows at most
    max_error_messages: int = 50  # Number of row errors surfaced to the user
    header_scan_limit: int = 20  # Preamble lines searched for a header row

    def __post_init__(self):
        if self.max_file_bytes <= 0:
            raise ValueError(f"max_file_bytes must be positive, got {self.max_file_bytes}")
        if self.max_error_messages < 0:
            raise ValueError(f"max_error_messages must not be negative, got {self.max_error_messages}")
        if self.header_scan_limit <= 0:
            raise ValueError(f"header_scan_limit must be positive, got {self.header_scan_limit}")

    @classmethod
    def from_environment(cls) -> 'ImportConfig':
        """
        Create configuration from environment variables with fallback to defaults.

        Environment variables:
        - IMPORT_MAX_FILE_BYTES
        - IMPORT_MAX_ERROR_MESSAGES
        - IMPORT_HEADER_SCAN_LIMIT
        """
        return cls(
            max_file_bytes=int(os.getenv('IMPORT_MAX_FILE_BYTES', 5 * 1024 * 1024)),
            max_error_messages=int(os.getenv('IMPORT_MAX_ERROR_MESSAGES', 50)),
            header_scan_limit=int(os.getenv('IMPORT_HEADER_SCAN_LIMIT', 20)),
        )


DEFAULT_CONFIG = ImportConfig.from_environment()
