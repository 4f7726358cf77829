"""
Core cryptographic utilities.

Primitive digests plus the algorithm-aware HashBackend used by
Merkle trees and proofs.
"""
from .hashing import (
    sha256,
    keccak256,
    canonical_bytes,
    to_hex,
    from_hex,
)

from .backend import (
    HashingAlgorithm,
    HashBackend,
    validate_hash_size,
)

__all__ = [
    "sha256",
    "keccak256",
    "canonical_bytes",
    "to_hex",
    "from_hex",
    "HashingAlgorithm",
    "HashBackend",
    "validate_hash_size",
]
