"""
Commit-Reveal Codec

Two-phase fingerprint for scored payloads:

    reveal_hash = general_hash(dumps_canonical(payload))
    commit_hash = general_hash(reveal_hash + nonce)

The commit hash can be published before the payload is disclosed; once
payload and nonce are revealed anyone can recompute both hashes.

The nonce is 128 bits from the operating system CSPRNG (secrets module).
If the entropy source is unavailable the error propagates: there is no
fallback to a weaker generator.
"""
from __future__ import annotations

import hmac
import secrets
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.crypto.hashing import general_hash, hash_canonical


NONCE_BYTES = 16


class CommitRevealPair(BaseModel):
    """Nonce plus the two hashes derived from a payload."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    nonce: str = Field(..., min_length=1, description="One-time secret (hex)")
    reveal_hash: str = Field(..., description="general_hash of the canonical payload")
    commit_hash: str = Field(..., description="general_hash of reveal_hash + nonce")


def generate_nonce() -> str:
    """Fresh 128-bit nonce, hex encoded."""
    return secrets.token_hex(NONCE_BYTES)


def compute_reveal_hash(payload: Any) -> str:
    return hash_canonical(payload)


def compute_commit_hash(reveal_hash: str, nonce: str) -> str:
    return general_hash(f"{reveal_hash}{nonce}")


def commit(payload: Any) -> CommitRevealPair:
    """
    Commit to a payload.

    Args:
        payload: Pydantic model, dict or other canonically serializable value

    Returns:
        CommitRevealPair with a fresh nonce

    Raises:
        SerializationException: If the payload cannot be canonicalized
    """
    nonce = generate_nonce()
    reveal_hash = compute_reveal_hash(payload)
    return CommitRevealPair(
        nonce=nonce,
        reveal_hash=reveal_hash,
        commit_hash=compute_commit_hash(reveal_hash, nonce),
    )


def verify(pair: CommitRevealPair, payload: Any) -> bool:
    """
    Check a commit-reveal pair against a revealed payload.

    Both the reveal hash and the commit hash are recomputed; the pair is
    valid only if both match exactly.
    """
    reveal_hash = compute_reveal_hash(payload)
    commit_hash = compute_commit_hash(pair.reveal_hash, pair.nonce)
    return _same(reveal_hash, pair.reveal_hash) and _same(commit_hash, pair.commit_hash)


def _same(left: str, right: str) -> bool:
    return hmac.compare_digest(left.encode("utf-8"), right.encode("utf-8"))


__all__ = [
    "NONCE_BYTES",
    "CommitRevealPair",
    "generate_nonce",
    "compute_reveal_hash",
    "compute_commit_hash",
    "commit",
    "verify",
]
