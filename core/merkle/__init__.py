"""
Module 02 - Merkle Aggregation
Deterministic merkle root construction + proof generation/verification
over digest strings.

Aggregation Rules:
1. Parent hashing: general_hash(left + right) on digest strings
2. Padding: Pair an odd trailing node with itself at every level
3. Empty tree: general_hash(b"empty")
4. Single leaf: root = leaf

Usage:
    from core.merkle import build_merkle_root, build_merkle_proof, verify_merkle_proof

    root = build_merkle_root(["0xaa...", "0xbb...", "0xcc..."])
    proof = build_merkle_proof(leaves, index=2)
    assert verify_merkle_proof(proof)
"""
from .merkle_tree import (
    EMPTY_TREE_SENTINEL,
    EMPTY_TREE_ROOT,
    MerkleProof,
    merkle_parent,
    build_merkle_root,
    build_merkle_proof,
    verify_merkle_proof,
    compute_tree_depth,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    "MerkleProof",
    "EMPTY_TREE_SENTINEL",
    "EMPTY_TREE_ROOT",
    "merkle_parent",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
    "MerkleProver",
    "MerkleVerifier",
]
