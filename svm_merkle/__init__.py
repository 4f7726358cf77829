"""
svm_merkle - Merkle trees and compact inclusion proofs.

Builds Merkle trees over arbitrary leaf data with a pluggable hashing
algorithm (SHA-256, Keccak-256, and their double-hash variants) and a
configurable digest size, and produces detached proofs that recompute
the root without the tree.
"""
import logging

from svm_merkle.crypto import HashBackend, HashingAlgorithm, keccak256, sha256
from svm_merkle.merkle import (
    MerkleProof,
    MerkleTree,
    compute_tree_depth,
    verify_merkle_proof,
    verify_merkle_proof_hash,
)
from svm_merkle.schemas.errors import (
    AlreadySealedError,
    EmptyTreeError,
    IndexOutOfRangeError,
    InvalidConfigurationError,
    LeafNotFoundError,
    MalformedProofInputError,
    MerkleException,
    NotSealedError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "sha256",
    "keccak256",
    "HashingAlgorithm",
    "HashBackend",
    "MerkleTree",
    "MerkleProof",
    "compute_tree_depth",
    "verify_merkle_proof",
    "verify_merkle_proof_hash",
    "MerkleException",
    "InvalidConfigurationError",
    "EmptyTreeError",
    "NotSealedError",
    "AlreadySealedError",
    "IndexOutOfRangeError",
    "LeafNotFoundError",
    "MalformedProofInputError",
]
