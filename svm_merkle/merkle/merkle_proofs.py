"""
Merkle Proofs
Detached inclusion proofs that recompute a root without the tree.

This module provides:
- MerkleProof: immutable sibling path (algorithm, hash size, index, siblings)
- verify_merkle_proof / verify_merkle_proof_hash: caller-side root checks
- compute_tree_depth: proof length for a given leaf count

Path Rules (Hard Contracts):
1. Siblings are ordered bottom level first, root-ward last
2. Bit ``(index >> level) & 1`` gives the side of the current node:
   0 means current is left (parent = pair(current, sibling)),
   1 means current is right (parent = pair(sibling, current))
3. Wire form of the siblings is a flat concatenation of hash_size digests
"""
from __future__ import annotations

import hmac
import logging
from typing import Sequence

from svm_merkle.crypto.backend import HashBackend, HashingAlgorithm
from svm_merkle.schemas.canonical import dumps_canonical
from svm_merkle.schemas.errors import MalformedProofInputError
from svm_merkle.schemas.proof import MAX_PROOF_INDEX, MerkleProofModel


logger = logging.getLogger(__name__)


class MerkleProof:
    """
    A Merkle inclusion proof for a single leaf.

    The proof holds no reference to the tree it came from. It only
    recomputes a root; comparing that root against a trusted one is the
    caller's job (see verify_merkle_proof).

    Example:
        >>> proof = MerkleProof(HashingAlgorithm.SHA256, 32, 0, b"")
        >>> proof.merklize(b"a") == sha256(b"a")
        True
    """

    __slots__ = ("_backend", "_index", "_hashes")

    def __init__(
        self,
        algorithm: HashingAlgorithm | int | str,
        hash_size: int,
        index: int,
        siblings: bytes | Sequence[bytes] = b"",
    ) -> None:
        self._backend = HashBackend(algorithm, hash_size)

        if isinstance(index, bool) or not isinstance(index, int):
            raise MalformedProofInputError(
                f"Proof index must be an integer, got {type(index).__name__}"
            )
        if not 0 <= index <= MAX_PROOF_INDEX:
            raise MalformedProofInputError(
                f"Proof index {index} outside 0..{MAX_PROOF_INDEX}",
                details={"index": index},
            )
        self._index = index

        if isinstance(siblings, (bytes, bytearray, memoryview)):
            hashes = bytes(siblings)
        else:
            hashes = b"".join(
                self._backend.check_digest(s, f"siblings[{i}]")
                for i, s in enumerate(siblings)
            )
        if len(hashes) % self._backend.hash_size != 0:
            raise MalformedProofInputError(
                f"Sibling bytes length {len(hashes)} is not a multiple of hash size {self._backend.hash_size}",
                expected=self._backend.hash_size,
                actual=len(hashes),
            )
        self._hashes = hashes

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def algorithm(self) -> HashingAlgorithm:
        return self._backend.algorithm

    @property
    def hash_size(self) -> int:
        return self._backend.hash_size

    @property
    def index(self) -> int:
        return self._index

    @property
    def depth(self) -> int:
        """Number of sibling digests (tree depth at extraction time)."""
        return len(self._hashes) // self.hash_size

    @property
    def siblings(self) -> list[bytes]:
        """Sibling digests, bottom-up."""
        size = self.hash_size
        return [self._hashes[i : i + size] for i in range(0, len(self._hashes), size)]

    def get_pairing_hashes(self) -> bytes:
        """Raw flat sibling bytes, exactly as stored."""
        return self._hashes

    # -------------------------------------------------------------------------
    # Recomputation
    # -------------------------------------------------------------------------

    def merklize(self, leaf: bytes) -> bytes:
        """
        Recompute the root from raw leaf bytes.

        The leaf is hashed with the proof's backend, then folded with
        each sibling in order.
        """
        return self._fold(self._backend.hash(bytes(leaf)))

    def merklize_hash(self, leaf_hash: bytes) -> bytes:
        """
        Recompute the root from an already-hashed leaf.

        Raises:
            MalformedProofInputError: If leaf_hash is not hash_size bytes.
        """
        return self._fold(self._backend.check_digest(leaf_hash, "leaf hash"))

    def _fold(self, current: bytes) -> bytes:
        index = self._index
        for sibling in self.siblings:
            if index & 1 == 0:
                current = self._backend.pair_hash(current, sibling)
            else:
                current = self._backend.pair_hash(sibling, current)
            index >>= 1
        return current

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_model(self) -> MerkleProofModel:
        """Convert to the JSON-friendly pydantic model."""
        return MerkleProofModel(
            algorithm=self.algorithm.label,
            hash_size=self.hash_size,
            index=self._index,
            siblings=["0x" + s.hex() for s in self.siblings],
        )

    @classmethod
    def from_model(cls, model: MerkleProofModel) -> "MerkleProof":
        return cls(model.algorithm, model.hash_size, model.index, model.sibling_bytes())

    def to_json(self) -> str:
        """Canonical JSON form of the proof."""
        return dumps_canonical(self.to_model())

    @classmethod
    def from_json(cls, data: str | bytes) -> "MerkleProof":
        """
        Parse a proof from JSON.

        Raises:
            pydantic.ValidationError: If the document is not a valid proof.
        """
        return cls.from_model(MerkleProofModel.model_validate_json(data))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MerkleProof):
            return NotImplemented
        return (
            self._backend == other._backend
            and self._index == other._index
            and self._hashes == other._hashes
        )

    def __hash__(self) -> int:
        return hash((self._backend, self._index, self._hashes))

    def __repr__(self) -> str:
        return (
            f"MerkleProof(algorithm={self.algorithm.name}, hash_size={self.hash_size}, "
            f"index={self._index}, depth={self.depth})"
        )


def verify_merkle_proof(proof: MerkleProof, leaf: bytes, root: bytes) -> bool:
    """
    Check that raw leaf bytes are included under a trusted root.

    Returns False (never raises) when the recomputed root differs or the
    inputs are malformed.
    """
    try:
        computed = proof.merklize(leaf)
    except MalformedProofInputError as e:
        logger.debug(f"Proof recomputation failed: {e}")
        return False
    return hmac.compare_digest(computed, bytes(root))


def verify_merkle_proof_hash(proof: MerkleProof, leaf_hash: bytes, root: bytes) -> bool:
    """Like verify_merkle_proof, for an already-hashed leaf."""
    try:
        computed = proof.merklize_hash(leaf_hash)
    except MalformedProofInputError as e:
        logger.debug(f"Proof recomputation failed: {e}")
        return False
    return hmac.compare_digest(computed, bytes(root))


def compute_tree_depth(num_leaves: int) -> int:
    """
    Number of sibling digests in a proof for a tree of num_leaves leaves.

    This is ceil(log2(num_leaves)): 0 for one leaf, 1 for two, 2 for
    three or four, and so on. An empty tree has no proofs; 0 is returned.
    """
    if num_leaves <= 1:
        return 0
    return (num_leaves - 1).bit_length()


__all__ = [
    "MerkleProof",
    "verify_merkle_proof",
    "verify_merkle_proof_hash",
    "compute_tree_depth",
]
