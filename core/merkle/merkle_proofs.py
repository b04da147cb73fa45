"""
Module 02 - Merkle Proofs Convenience Wrappers
Thin class-based wrappers around the functions in merkle_tree.py.

- MerkleProver: roots and proofs from ordered leaves
- MerkleVerifier: proof verification from a MerkleProof or raw components
"""
from __future__ import annotations

from typing import Sequence

from core.merkle.merkle_tree import (
    MerkleProof,
    build_merkle_proof,
    build_merkle_root,
    verify_merkle_proof,
)


class MerkleProver:
    """
    Example:
        >>> leaves = [general_hash("a"), general_hash("b"), general_hash("c")]
        >>> proof = MerkleProver.prove(leaves, index=1)
        >>> proof.leaf == leaves[1]
        True
    """

    @staticmethod
    def prove(leaves: Sequence[str], index: int) -> MerkleProof:
        return build_merkle_proof(leaves, index)

    @staticmethod
    def compute_root(leaves: Sequence[str]) -> str:
        return build_merkle_root(leaves)


class MerkleVerifier:

    @staticmethod
    def verify(proof: MerkleProof) -> bool:
        return verify_merkle_proof(proof)

    @staticmethod
    def verify_leaf_in_root(
        leaf: str,
        index: int,
        siblings: list[str],
        root: str,
    ) -> bool:
        """Verify a leaf is included in a root using raw proof components."""
        proof = MerkleProof(leaf=leaf, index=index, siblings=siblings, root=root)
        return verify_merkle_proof(proof)


__all__ = [
    "MerkleProver",
    "MerkleVerifier",
]
