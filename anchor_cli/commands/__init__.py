"""CLI subcommand implementations."""

from anchor_cli.commands import hashing, storage

__all__ = ["hashing", "storage"]
