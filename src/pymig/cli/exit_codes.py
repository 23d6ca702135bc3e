"""Centralized exit codes for all CLI commands.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Validation errors (config, versions)
    20-29: Migration source errors
    40-49: Operation errors
    60-69: Check states
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for pymig CLI commands."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1
    INTERRUPTED = 2

    # Validation errors (10-19)
    CONFIG_ERROR = 10
    INVALID_VERSION = 11

    # Migration source errors (20-29)
    INVALID_SOURCE = 20
    INVALID_MIGRATION = 21
    DUPLICATE_MIGRATION = 22

    # Operation errors (40-49)
    MIGRATION_FAILED = 40
    ADAPTER_ERROR = 41

    # Check states (60-69)
    PENDING_MIGRATIONS = 60
