"""
Merkle Tree Implementation
Append-then-seal Merkle tree construction and proof extraction.

This module provides:
- MerkleTree: ordered leaf digests, sealed by merklize() into a level pyramid
- Proof extraction by leaf index or by leaf digest

Canonical Commitment Rules (Hard Contracts):
1. Leaf digest: backend.hash(leaf_bytes); raw leaf bytes are not kept
2. Parent digest: backend.pair_hash(left, right)
3. Padding rule: an unpaired last node at any level is paired with itself
4. Single leaf: root = leaf digest
5. Empty tree: merklize() raises EmptyTreeError; there is no empty root

Lifecycle:
    open --add_*--> open --merklize()--> sealed
Root and proofs are only available once sealed; leaves can only be
added while open. Calling merklize() again on a sealed tree re-derives
the same levels.

Determinism Notes:
- Insertion order is the leaf index; the tree never sorts leaves
- Proof-by-hash picks the lowest index when leaf digests repeat
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional

from svm_merkle.crypto.backend import HashBackend, HashingAlgorithm
from svm_merkle.crypto.hashing import canonical_bytes
from svm_merkle.merkle.merkle_proofs import MerkleProof, compute_tree_depth
from svm_merkle.schemas.errors import (
    AlreadySealedError,
    EmptyTreeError,
    IndexOutOfRangeError,
    LeafNotFoundError,
    NotSealedError,
)

if TYPE_CHECKING:
    from svm_merkle.config.runtime import MerkleConfig


logger = logging.getLogger(__name__)


def build_level(backend: HashBackend, nodes: list[bytes]) -> list[bytes]:
    """
    Compute the parent level of ``nodes``.

    Pairs (0,1), (2,3), ...; an odd trailing node is paired with itself.

    Example: [a, b, c] -> [pair(a, b), pair(c, c)]
    """
    parents: list[bytes] = []
    for i in range(0, len(nodes), 2):
        left = nodes[i]
        right = nodes[i + 1] if i + 1 < len(nodes) else left
        parents.append(backend.pair_hash(left, right))
    return parents


class MerkleTree:
    """
    Append-only Merkle tree over arbitrary leaf data.

    Not safe for concurrent mutation; once sealed it is read-only and can
    be shared between readers.

    Example:
        >>> tree = MerkleTree(HashingAlgorithm.SHA256, 32)
        >>> for leaf in (b"a", b"b", b"c", b"d"):
        ...     tree.add_leaf(leaf)
        >>> tree.merklize()
        >>> proof = tree.merkle_proof_index(2)
        >>> proof.merklize(b"c") == tree.get_merkle_root()
        True
    """

    def __init__(self, algorithm: HashingAlgorithm | int | str, hash_size: int) -> None:
        self._backend = HashBackend(algorithm, hash_size)
        self._leaves: list[bytes] = []
        self._levels: list[list[bytes]] = []
        self._root: Optional[bytes] = None

    @classmethod
    def from_config(cls, config: Optional["MerkleConfig"] = None) -> "MerkleTree":
        """Create an empty tree using a MerkleConfig (default config if None)."""
        if config is None:
            from svm_merkle.config.runtime import get_default_config
            config = get_default_config()
        return cls(config.algorithm, config.hash_size)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def algorithm(self) -> HashingAlgorithm:
        return self._backend.algorithm

    @property
    def hash_size(self) -> int:
        return self._backend.hash_size

    @property
    def backend(self) -> HashBackend:
        return self._backend

    @property
    def leaf_count(self) -> int:
        return len(self._leaves)

    @property
    def is_sealed(self) -> bool:
        return self._root is not None

    @property
    def depth(self) -> int:
        """Number of levels above the leaves; also the proof length."""
        return compute_tree_depth(len(self._leaves))

    @property
    def levels(self) -> list[list[bytes]]:
        """Copy of the level pyramid, leaves first, root last."""
        self._require_sealed()
        return [list(level) for level in self._levels]

    def __len__(self) -> int:
        return len(self._leaves)

    def __repr__(self) -> str:
        state = "sealed" if self.is_sealed else "open"
        return (
            f"MerkleTree(algorithm={self.algorithm.name}, hash_size={self.hash_size}, "
            f"leaves={len(self._leaves)}, {state})"
        )

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def add_leaf(self, leaf: bytes) -> None:
        """Hash raw leaf bytes and append the digest."""
        self._require_open()
        self._leaves.append(self._backend.hash(bytes(leaf)))

    def add_leaves(self, leaves: Iterable[bytes]) -> None:
        """Hash and append several raw leaves in order."""
        self._require_open()
        self._leaves.extend([self._backend.hash(bytes(leaf)) for leaf in leaves])

    def add_object(self, obj: Any) -> None:
        """Append a leaf for an object, using its canonical JSON as leaf bytes."""
        self.add_leaf(canonical_bytes(obj))

    def add_hash(self, leaf_hash: bytes) -> None:
        """
        Append a pre-hashed leaf digest.

        Raises:
            MalformedProofInputError: If the digest is not hash_size bytes.
        """
        self._require_open()
        self._leaves.append(self._backend.check_digest(leaf_hash, "leaf hash"))

    def add_hashes(self, leaf_hashes: Iterable[bytes]) -> None:
        """Append several pre-hashed digests; nothing is appended if any is malformed."""
        self._require_open()
        checked = [
            self._backend.check_digest(h, f"leaf hash [{i}]")
            for i, h in enumerate(leaf_hashes)
        ]
        self._leaves.extend(checked)

    def merklize(self) -> None:
        """
        Seal the tree and build the level pyramid bottom-up.

        Raises:
            EmptyTreeError: If no leaves were added.
        """
        if not self._leaves:
            raise EmptyTreeError()

        levels: list[list[bytes]] = [list(self._leaves)]
        while len(levels[-1]) > 1:
            levels.append(build_level(self._backend, levels[-1]))

        self._levels = levels
        self._root = levels[-1][0]
        logger.debug(
            f"Merklized {len(self._leaves)} leaves with {self.algorithm.name}/{self.hash_size} "
            f"(depth {len(levels) - 1})"
        )

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------

    def get_merkle_root(self) -> bytes:
        """
        Root digest of the sealed tree.

        Raises:
            NotSealedError: If merklize() has not been called.
        """
        self._require_sealed()
        return self._root

    def get_leaf_hash(self, index: int) -> bytes:
        """Leaf digest at index; available whether or not the tree is sealed."""
        self._require_in_range(index)
        return self._leaves[index]

    def index_of(self, leaf_hash: bytes) -> int:
        """
        Lowest index whose leaf digest equals leaf_hash.

        Raises:
            LeafNotFoundError: If no leaf matches.
        """
        leaf_hash = bytes(leaf_hash)
        try:
            return self._leaves.index(leaf_hash)
        except ValueError:
            raise LeafNotFoundError(leaf_hash) from None

    def merkle_proof_index(self, index: int) -> MerkleProof:
        """
        Build an inclusion proof for the leaf at index.

        At each level the sibling is the other half of the pair; an
        unpaired last node is its own sibling.

        Raises:
            NotSealedError: If the tree is not sealed.
            IndexOutOfRangeError: If index >= leaf_count or negative.
        """
        self._require_sealed()
        self._require_in_range(index)

        siblings: list[bytes] = []
        position = index
        for level in self._levels[:-1]:
            sibling_position = position ^ 1
            if sibling_position >= len(level):
                sibling_position = position
            siblings.append(level[sibling_position])
            position >>= 1

        logger.debug(f"Extracted proof for leaf {index} ({len(siblings)} siblings)")
        return MerkleProof(self.algorithm, self.hash_size, index, b"".join(siblings))

    def merkle_proof_hash(self, leaf_hash: bytes) -> MerkleProof:
        """
        Build an inclusion proof for the first leaf with the given digest.

        Raises:
            NotSealedError: If the tree is not sealed.
            LeafNotFoundError: If no leaf has that digest.
        """
        self._require_sealed()
        return self.merkle_proof_index(self.index_of(leaf_hash))

    # -------------------------------------------------------------------------
    # State checks
    # -------------------------------------------------------------------------

    def _require_open(self) -> None:
        if self.is_sealed:
            raise AlreadySealedError()

    def _require_sealed(self) -> None:
        if not self.is_sealed:
            raise NotSealedError()

    def _require_in_range(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise IndexOutOfRangeError(index, len(self._leaves))
        if not 0 <= index < len(self._leaves):
            raise IndexOutOfRangeError(index, len(self._leaves))


__all__ = [
    "MerkleTree",
    "build_level",
]
