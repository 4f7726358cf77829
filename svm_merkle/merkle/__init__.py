"""
Merkle Tree and Proofs
Append-then-seal Merkle tree construction + detached proof recomputation.

This module provides:
- MerkleTree: add leaves, merklize(), read the root, extract proofs
- MerkleProof: recompute a root from a leaf without the tree
- verify_merkle_proof / verify_merkle_proof_hash: compare against a trusted root
- compute_tree_depth: proof length for a leaf count

Usage:
    from svm_merkle.crypto import HashingAlgorithm
    from svm_merkle.merkle import MerkleTree, verify_merkle_proof

    tree = MerkleTree(HashingAlgorithm.SHA256D, 32)
    tree.add_leaves([b"a", b"b", b"c"])
    tree.merklize()

    root = tree.get_merkle_root()
    proof = tree.merkle_proof_index(2)

    assert verify_merkle_proof(proof, b"c", root)
"""
from .merkle_proofs import (
    MerkleProof,
    verify_merkle_proof,
    verify_merkle_proof_hash,
    compute_tree_depth,
)

from .merkle_tree import (
    MerkleTree,
    build_level,
)


__all__ = [
    "MerkleTree",
    "MerkleProof",
    "build_level",
    "verify_merkle_proof",
    "verify_merkle_proof_hash",
    "compute_tree_depth",
]
