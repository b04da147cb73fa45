"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m anchor_cli serve [--host HOST] [--port PORT]
    python -m anchor_cli anchor <stage> --payload FILE
    python -m anchor_cli hash [--algo solidity|general] [--json] TEXT
    python -m anchor_cli merkle LEAF... [--prove INDEX] [--json]
    python -m anchor_cli verify-commit --payload FILE --nonce N --reveal-hash H --commit-hash H
    python -m anchor_cli fetch <cid>
    python -m anchor_cli config --show

Environment Variables:
    IPFS_URL                    IPFS HTTP API base URL
    IPFS_PROJECT_ID             Hosted IPFS project id (basic auth user)
    IPFS_PROJECT_SECRET         Hosted IPFS project secret
    ANCHOR_STORAGE_BACKEND      Storage backend: ipfs or memory
    ANCHOR_STORAGE_TIMEOUT      Storage request timeout in seconds
    ANCHOR_LOG_LEVEL            Log level (default: INFO)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from anchor_cli import __version__
from anchor_cli.commands import hashing, storage
from core.config.runtime import load_runtime_config
from core.schemas.stages import StageKind


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def setup_logging(level: str = "INFO") -> None:
    """Configure logging for the CLI."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="anchor",
        description="Provenance Anchor CLI - anchor stage records, recompute digests, and inspect stored content.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./anchor.json, ./anchor.yaml or ~/.config/anchor/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print tracebacks on error",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- serve ---
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind host (default: from config)")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (default: from config)")
    serve_parser.set_defaults(func=storage.serve_cmd)

    # --- anchor ---
    anchor_parser = subparsers.add_parser(
        "anchor",
        help="Anchor one stage record and print its receipt",
    )
    anchor_parser.add_argument(
        "stage",
        choices=[kind.value for kind in StageKind],
        help="Stage type",
    )
    anchor_parser.add_argument("--payload", "-p", required=True, help="JSON file with the stage payload")
    anchor_parser.set_defaults(func=storage.anchor_cmd)

    # --- hash ---
    hash_parser = subparsers.add_parser("hash", help="Digest a string")
    hash_parser.add_argument("text", help='Input text ("-" reads stdin)')
    hash_parser.add_argument(
        "--algo",
        choices=["solidity", "general"],
        default="solidity",
        help="solidity = keccak256, general = sha256 (default: solidity)",
    )
    hash_parser.add_argument("--json", action="store_true", help="Output JSON")
    hash_parser.set_defaults(func=hashing.hash_cmd)

    # --- merkle ---
    merkle_parser = subparsers.add_parser("merkle", help="Compute a merkle root over ordered leaves")
    merkle_parser.add_argument("leaves", nargs="*", help="Leaves, in order")
    merkle_parser.add_argument("--prove", type=int, default=None, metavar="INDEX",
                               help="Print an inclusion proof for the leaf at INDEX")
    merkle_parser.add_argument("--json", action="store_true", help="Output JSON")
    merkle_parser.set_defaults(func=hashing.merkle_cmd)

    # --- verify-commit ---
    verify_parser = subparsers.add_parser(
        "verify-commit",
        help="Verify an AI score payload against its commit-reveal pair",
    )
    verify_parser.add_argument("--payload", "-p", required=True, help="JSON file with the AI score payload")
    verify_parser.add_argument("--nonce", required=True)
    verify_parser.add_argument("--reveal-hash", required=True)
    verify_parser.add_argument("--commit-hash", required=True)
    verify_parser.add_argument("--json", action="store_true", help="Output JSON")
    verify_parser.set_defaults(func=hashing.verify_commit_cmd)

    # --- fetch ---
    fetch_parser = subparsers.add_parser("fetch", help="Print the JSON stored under a content address")
    fetch_parser.add_argument("cid", help="Content address")
    fetch_parser.set_defaults(func=storage.fetch_cmd)

    # --- config ---
    config_parser = subparsers.add_parser("config", help="Show configuration")
    config_parser.add_argument("--show", action="store_true", help="Show current configuration (secrets masked)")
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.show:
        print(json.dumps(args.runtime_config.to_dict(), indent=2, default=str))
        return EXIT_SUCCESS

    print("Usage: anchor config --show")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_runtime_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    setup_logging(level=args.log_level or config.server.log_level)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
