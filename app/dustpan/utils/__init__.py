"""Utility modules for dustpan.

This module exports commonly used utility functions.
"""

from dustpan.utils.formatting import (
    console,
    err_console,
    format_relative_time,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
    styled_size,
)

__all__ = [
    "console",
    "err_console",
    "format_relative_time",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "styled_size",
]
