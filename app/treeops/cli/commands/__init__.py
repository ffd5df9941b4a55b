"""CLI commands for treeops.

This package contains all subcommand implementations.
"""

from treeops.cli.commands import config, tree

__all__ = ["config", "tree"]
