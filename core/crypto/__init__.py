"""
Core cryptographic utilities.

Hashing (solidity-compatible and general-purpose digests), hash-input
formatting, and the commit-reveal codec.
"""
from .hashing import (
    SOLIDITY_ALGORITHM,
    GENERAL_ALGORITHM,
    Digest,
    sha256,
    keccak256,
    solidity_hash,
    general_hash,
    hash_canonical,
    to_hex,
    from_hex,
    is_digest,
)
from .commit_reveal import CommitRevealPair, commit, generate_nonce, verify

__all__ = [
    "SOLIDITY_ALGORITHM",
    "GENERAL_ALGORITHM",
    "Digest",
    "sha256",
    "keccak256",
    "solidity_hash",
    "general_hash",
    "hash_canonical",
    "to_hex",
    "from_hex",
    "is_digest",
    "CommitRevealPair",
    "commit",
    "generate_nonce",
    "verify",
]
