"""
Utility helpers for mfdeps.

This package provides reusable utilities used across mfdeps, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers
- Async HTTP client utilities
- Version string helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from mfdeps.utils.filesystem import (
    backup_path_for,
    create_backup_copy,
    format_json,
    restore_backup,
    safe_read_file,
    safe_write_file,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from mfdeps.utils.logger import (
    disable_logging,
    get_logger,
    setup_logging,
    verbosity_to_level,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from mfdeps.utils.console import (
    colorize_update_type,
    confirm,
    print_error,
    print_info,
    print_json,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from mfdeps.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from mfdeps.utils.version_utils import clean_version, get_update_type, is_range

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "confirm",
    "print_error",
    "print_info",
    "print_json",
    "print_table",
    "print_success",
    "print_warning",
    "reconfigure_console",
    "colorize_update_type",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "verbosity_to_level",
    # Filesystem
    "safe_read_file",
    "safe_write_file",
    "backup_path_for",
    "create_backup_copy",
    "format_json",
    "restore_backup",
    # HTTP
    "HTTPClient",
    # Version utilities
    "clean_version",
    "get_update_type",
    "is_range",
]
