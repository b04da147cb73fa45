"""
CLI Hashing Commands

Offline helpers for recomputing anchored digests:
- hash:          solidity (keccak256) or general (sha256) digest of a string
- merkle:        merkle root (and optionally an inclusion proof) over leaves
- verify-commit: check an AI score payload against a commit-reveal pair

Usage:
    anchor hash --algo solidity "BATCH1-Basmati Rice"
    anchor merkle leaf1 leaf2 leaf3 --prove 2
    anchor verify-commit --payload score.json --nonce N --reveal-hash 0x.. --commit-hash 0x..
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from dataclasses import asdict
from pathlib import Path

from pydantic import ValidationError

from core.crypto.commit_reveal import CommitRevealPair, verify
from core.crypto.hashing import general_hash, solidity_hash
from core.merkle import build_merkle_proof, build_merkle_root
from core.schemas.stages import AiScoreRequest


EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def hash_cmd(args: Namespace) -> int:
    """Print the digest of TEXT (or stdin when TEXT is "-")."""
    text = sys.stdin.read() if args.text == "-" else args.text
    digest = solidity_hash(text) if args.algo == "solidity" else general_hash(text)

    if args.json:
        print(json.dumps({"algorithm": digest.algorithm, "digest": str(digest)}))
    else:
        print(digest)
    return EXIT_SUCCESS


def merkle_cmd(args: Namespace) -> int:
    leaves = list(args.leaves)
    root = build_merkle_root(leaves)

    if args.prove is None:
        print(json.dumps({"root": root, "leaf_count": len(leaves)}) if args.json else root)
        return EXIT_SUCCESS

    try:
        proof = build_merkle_proof(leaves, args.prove)
    except (IndexError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    print(json.dumps(asdict(proof), indent=2))
    return EXIT_SUCCESS


def verify_commit_cmd(args: Namespace) -> int:
    """Exit 0 when the pair matches the payload, 2 when it does not."""
    try:
        payload = AiScoreRequest.model_validate_json(Path(args.payload).read_text())
    except (OSError, ValidationError) as e:
        print(f"Error: cannot load payload: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    pair = CommitRevealPair(
        nonce=args.nonce,
        reveal_hash=args.reveal_hash,
        commit_hash=args.commit_hash,
    )
    valid = verify(pair, payload)

    if args.json:
        print(json.dumps({"valid": valid, "batch_id": payload.batch_id}))
    else:
        print("VALID" if valid else "INVALID")
    return EXIT_SUCCESS if valid else EXIT_VERIFICATION_FAILED
