"""
Module 02 - Hashing Utilities
Two hash families used to fingerprint supply-chain records.

This module provides:
- solidity_hash: Keccak-256, identical to Solidity's keccak256 primitive
- general_hash: SHA-256 for internal chaining (merkle nodes, commit-reveal)
- Digest: 0x-prefixed hex string tagged with its algorithm family
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Always hash raw bytes exactly as given; str input is UTF-8 encoded
- No auto-stripping of whitespace
- All operations are deterministic and free of secret material
"""
from __future__ import annotations

import hashlib
from typing import Any, Union

from eth_hash.auto import keccak as _keccak

from core.schemas.canonical import dumps_canonical


SOLIDITY_ALGORITHM = "keccak256"
GENERAL_ALGORITHM = "sha256"

HashInput = Union[bytes, str]


class Digest(str):
    """
    A 0x-prefixed, lowercase hex digest tagged by algorithm family.

    Behaves as a plain string everywhere (JSON, concatenation, comparison),
    so digests can be fed back into further hashing exactly as they are
    rendered to callers.
    """

    algorithm: str

    def __new__(cls, value: str, algorithm: str) -> "Digest":
        obj = super().__new__(cls, value)
        obj.algorithm = algorithm
        return obj

    def __repr__(self) -> str:
        return f"Digest({str(self)!r}, algorithm={self.algorithm!r})"

    def __reduce__(self):
        return (Digest, (str(self), self.algorithm))


def _as_bytes(data: HashInput) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 of raw bytes (pre-standard SHA-3 padding, as on EVM).

    Note: this is NOT hashlib.sha3_256, which uses the FIPS-202 padding.

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return _keccak(data)


def solidity_hash(data: HashInput) -> Digest:
    """
    Chain-verifiable digest: keccak256 rendered as 0x-prefixed hex.

    Args:
        data: Raw bytes, or a string that is UTF-8 encoded first

    Returns:
        Digest tagged "keccak256"
    """
    return Digest(to_hex(keccak256(_as_bytes(data))), SOLIDITY_ALGORITHM)


def general_hash(data: HashInput) -> Digest:
    """
    General-purpose digest: sha256 rendered as 0x-prefixed hex.

    Args:
        data: Raw bytes, or a string that is UTF-8 encoded first

    Returns:
        Digest tagged "sha256"
    """
    return Digest(to_hex(sha256(_as_bytes(data))), GENERAL_ALGORITHM)


def hash_canonical(obj: Any) -> Digest:
    """
    Hash an object using canonical JSON serialization.

    Rule: general_hash(dumps_canonical(obj).encode("utf-8"))

    Raises:
        SerializationException: If object cannot be canonically serialized
    """
    return general_hash(dumps_canonical(obj))


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def is_digest(value: str) -> bool:
    """Check that a string has the 0x + 64 lowercase hex shape of a Digest."""
    if len(value) != 66 or not value.startswith("0x"):
        return False
    return all(c in "0123456789abcdef" for c in value[2:])


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
]
