"""CLI commands for dustpan.

This package contains all subcommand implementations.
"""

from dustpan.cli.commands import config, dupes, history, junk, large, size

__all__ = ["config", "dupes", "history", "junk", "large", "size"]
