"""
Module 02 - Merkle Tree Implementation
Deterministic merkle aggregation over digest strings, with inclusion proofs.

Aggregation Rules (Hard Contracts):
1. Nodes are digest STRINGS (e.g. "0x3f..."), not raw bytes
2. Parent hashing: parent = general_hash(left + right), string concatenation
3. Padding rule: an odd trailing node is paired with itself at every level
4. Empty leaves: build_merkle_root([]) returns general_hash(b"empty")
5. Single leaf: root = leaf, verbatim (no hashing, even for non-digest leaves)

Determinism Notes:
- Leaf ordering is caller-supplied and significant
- This module never sorts leaves
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from core.crypto.hashing import general_hash


EMPTY_TREE_SENTINEL = b"empty"

# Empty tree sentinel: general_hash of a fixed constant
EMPTY_TREE_ROOT: str = general_hash(EMPTY_TREE_SENTINEL)


@dataclass(frozen=True)
class MerkleProof:
    """
    An inclusion proof for a single leaf.

    Attributes:
        leaf: The leaf value being proven
        index: 0-based index of the leaf in the original leaf list
        siblings: Sibling nodes from bottom to top of the tree
        root: The root this proof is against
    """
    leaf: str
    index: int
    siblings: list[str] = field(default_factory=list)
    root: str = ""

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def merkle_parent(left: str, right: str) -> str:
    """Parent of two nodes: general_hash(left + right)."""
    return general_hash(left + right)


def _next_level(level: list[str]) -> list[str]:
    if len(level) % 2 == 1:
        level = level + [level[-1]]
    return [merkle_parent(level[i], level[i + 1]) for i in range(0, len(level), 2)]


def build_merkle_root(leaves: Sequence[str]) -> str:
    """
    Build a merkle root from an ordered sequence of leaves.

    Example:
        [a, b, c] -> [a, b, c, c] -> [H(a+b), H(c+c)] -> H(H(a+b) + H(c+c))

    Args:
        leaves: Ordered leaf strings. Order matters and is preserved.

    Returns:
        Root digest string (or the single leaf itself)
    """
    if len(leaves) == 0:
        return EMPTY_TREE_ROOT

    if len(leaves) == 1:
        return leaves[0]

    current_level: list[str] = list(leaves)
    while len(current_level) > 1:
        current_level = _next_level(current_level)

    return current_level[0]


def build_merkle_proof(leaves: Sequence[str], index: int) -> MerkleProof:
    """
    Generate an inclusion proof for the leaf at the given index.

    Raises:
        IndexError: If index is out of range
        ValueError: If leaves is empty
    """
    if len(leaves) == 0:
        raise ValueError("Cannot generate proof for empty leaf list")

    if index < 0 or index >= len(leaves):
        raise IndexError(
            f"Leaf index {index} out of range for {len(leaves)} leaves"
        )

    if len(leaves) == 1:
        return MerkleProof(leaf=leaves[0], index=0, siblings=[], root=leaves[0])

    siblings: list[str] = []
    current_level: list[str] = list(leaves)
    current_index = index

    while len(current_level) > 1:
        if len(current_level) % 2 == 1:
            current_level.append(current_level[-1])

        # XOR with 1 flips to the sibling position
        siblings.append(current_level[current_index ^ 1])

        current_level = _next_level(current_level)
        current_index //= 2

    return MerkleProof(
        leaf=leaves[index],
        index=index,
        siblings=siblings,
        root=current_level[0],
    )


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Recompute the root from the leaf and siblings and compare it to the
    root claimed in the proof.
    """
    current = proof.leaf
    current_index = proof.index

    for sibling in proof.siblings:
        if current_index % 2 == 0:
            current = merkle_parent(current, sibling)
        else:
            current = merkle_parent(sibling, current)
        current_index //= 2

    return current == proof.root


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of levels from leaves to root (inclusive); 0 for an empty tree.
    """
    if num_leaves == 0:
        return 0

    depth = 1
    n = num_leaves
    while n > 1:
        n = (n + 1) // 2
        depth += 1
    return depth


__all__ = [
    "EMPTY_TREE_SENTINEL",
    "EMPTY_TREE_ROOT",
    "MerkleProof",
    "merkle_parent",
    "build_merkle_root",
    "build_merkle_proof",
    "verify_merkle_proof",
    "compute_tree_depth",
]
