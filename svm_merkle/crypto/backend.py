"""
Crypto - Hash Backend
Algorithm selection and the leaf/pair hashing rules shared by trees and proofs.

Hashing Rules (Hard Contracts):
1. Leaf hash: primitive(data), or primitive(primitive(data)) for the
   double ("d") variants, truncated to hash_size bytes
2. Pair hash: leaf hash of (left + right), left first, no separator
3. hash_size must be between 1 and the primitive's digest size (32)
"""
from __future__ import annotations

from enum import IntEnum
from typing import Callable

from svm_merkle.crypto.hashing import keccak256, sha256
from svm_merkle.schemas.errors import InvalidConfigurationError, MalformedProofInputError


class HashingAlgorithm(IntEnum):
    """
    Supported hashing algorithms.

    The integer values are the wire tags used by existing deployments.
    """
    SHA256 = 0
    SHA256D = 1
    KECCAK = 2
    KECCAKD = 3

    @property
    def is_double(self) -> bool:
        """True if the primitive is applied twice per hash."""
        return self in (HashingAlgorithm.SHA256D, HashingAlgorithm.KECCAKD)

    @property
    def digest_size(self) -> int:
        """Natural output length of the primitive in bytes."""
        return 32

    @property
    def primitive(self) -> Callable[[bytes], bytes]:
        if self in (HashingAlgorithm.SHA256, HashingAlgorithm.SHA256D):
            return sha256
        return keccak256

    @property
    def label(self) -> str:
        """Lower-case name used in serialized proofs and config files."""
        return self.name.lower()

    @classmethod
    def parse(cls, value: "HashingAlgorithm | int | str") -> "HashingAlgorithm":
        """
        Resolve an algorithm from an enum member, wire tag, or name.

        Names are case-insensitive ("sha256d", "Keccak").

        Raises:
            InvalidConfigurationError: For unknown tags or names.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise InvalidConfigurationError(
                f"Invalid hashing algorithm: {value!r}",
                details={"algorithm": repr(value)},
            )
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise InvalidConfigurationError(
                    f"Unknown hashing algorithm tag: {value}",
                    details={"algorithm": value},
                ) from None
        if isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is None:
                raise InvalidConfigurationError(
                    f"Unknown hashing algorithm name: {value!r}",
                    details={"algorithm": value},
                )
            return member
        raise InvalidConfigurationError(
            f"Invalid hashing algorithm: {value!r}",
            details={"algorithm": repr(value)},
        )


class HashBackend:
    """
    A hashing algorithm bound to a digest size.

    Example:
        >>> backend = HashBackend(HashingAlgorithm.SHA256, 32)
        >>> backend.hash(b"a") == sha256(b"a")
        True
        >>> backend.pair_hash(backend.hash(b"a"), backend.hash(b"b")) == sha256(sha256(b"a") + sha256(b"b"))
        True
    """

    __slots__ = ("_algorithm", "_hash_size")

    def __init__(self, algorithm: HashingAlgorithm | int | str, hash_size: int) -> None:
        self._algorithm = HashingAlgorithm.parse(algorithm)
        self._hash_size = validate_hash_size(self._algorithm, hash_size)

    @property
    def algorithm(self) -> HashingAlgorithm:
        return self._algorithm

    @property
    def hash_size(self) -> int:
        return self._hash_size

    def hash(self, data: bytes) -> bytes:
        """Digest of arbitrary bytes, truncated to hash_size."""
        primitive = self._algorithm.primitive
        digest = primitive(data)
        if self._algorithm.is_double:
            digest = primitive(digest)
        return digest[: self._hash_size]

    def pair_hash(self, left: bytes, right: bytes) -> bytes:
        """
        Combine two digests into their parent.

        Order is load-bearing: hash(left + right).

        Raises:
            MalformedProofInputError: If either digest is not hash_size bytes.
        """
        self.check_digest(left, "left")
        self.check_digest(right, "right")
        return self.hash(bytes(left) + bytes(right))

    def check_digest(self, digest: bytes, name: str = "digest") -> bytes:
        """Return digest as bytes, or raise if it is not exactly hash_size long."""
        if not isinstance(digest, (bytes, bytearray, memoryview)):
            raise MalformedProofInputError(
                f"{name} must be bytes, got {type(digest).__name__}"
            )
        digest = bytes(digest)
        if len(digest) != self._hash_size:
            raise MalformedProofInputError(
                f"{name} is {len(digest)} bytes, expected {self._hash_size}",
                expected=self._hash_size,
                actual=len(digest),
            )
        return digest

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashBackend):
            return NotImplemented
        return (self._algorithm, self._hash_size) == (other._algorithm, other._hash_size)

    def __hash__(self) -> int:
        return hash((self._algorithm, self._hash_size))

    def __repr__(self) -> str:
        return f"HashBackend(algorithm={self._algorithm.name}, hash_size={self._hash_size})"


def validate_hash_size(algorithm: HashingAlgorithm, hash_size: int) -> int:
    """
    Check that hash_size can be produced by the algorithm.

    Digests shorter than the primitive output are truncated; longer ones
    cannot be produced.

    Raises:
        InvalidConfigurationError: If hash_size is not an int in 1..digest_size.
    """
    if isinstance(hash_size, bool) or not isinstance(hash_size, int):
        raise InvalidConfigurationError(
            f"hash_size must be an integer, got {type(hash_size).__name__}",
            details={"hash_size": repr(hash_size)},
        )
    if not 1 <= hash_size <= algorithm.digest_size:
        raise InvalidConfigurationError(
            f"hash_size {hash_size} not supported by {algorithm.name} "
            f"(must be 1..{algorithm.digest_size})",
            details={"hash_size": hash_size, "algorithm": algorithm.label},
        )
    return hash_size


__all__ = [
    "HashingAlgorithm",
    "HashBackend",
    "validate_hash_size",
]
