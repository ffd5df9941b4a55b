"""Utility modules for treeops.

This module exports commonly used utility functions.
"""

from treeops.utils.formatting import (
    console,
    create_table,
    err_console,
    format_entry_type,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_table",
    "err_console",
    "format_entry_type",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
