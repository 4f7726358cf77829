"""
Schemas & Errors
File: proof.py

Purpose: Serialized form of a Merkle inclusion proof.

The model carries the same information as the flat wire encoding
(algorithm, hash size, index, concatenated siblings) but with hex digests
so it can travel as JSON.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

AlgorithmName = Literal["sha256", "sha256d", "keccak", "keccakd"]

MAX_PROOF_INDEX: int = 2**32 - 1

# Proof documents written by this version
SCHEMA_VERSION: str = "v1"
SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({SCHEMA_VERSION})

_HEX_DIGEST = re.compile(r"0x(?:[0-9a-fA-F]{2})*")


class UnsupportedSchemaVersionError(ValueError):
    """A proof document declares a schema version this library cannot read."""

    def __init__(self, version: str) -> None:
        self.version = version
        super().__init__(
            f"Unsupported proof schema version {version!r}, "
            f"expected one of {sorted(SUPPORTED_SCHEMA_VERSIONS)}"
        )


class MerkleProofModel(BaseModel):
    """
    JSON-friendly Merkle inclusion proof.

    Siblings are listed bottom level first, root-ward last, each as a
    0x-prefixed hex string of exactly ``hash_size`` bytes.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: str = Field(default=SCHEMA_VERSION)
    algorithm: AlgorithmName = Field(..., description="Hashing algorithm name")
    hash_size: int = Field(..., ge=1, le=32, description="Digest length in bytes")
    index: int = Field(..., ge=0, le=MAX_PROOF_INDEX, description="Leaf index / path bits")
    siblings: list[str] = Field(default_factory=list, description="Hex sibling digests, bottom-up")

    @field_validator("schema_version")
    @classmethod
    def _check_schema_version(cls, v: str) -> str:
        if v not in SUPPORTED_SCHEMA_VERSIONS:
            raise UnsupportedSchemaVersionError(v)
        return v

    @field_validator("algorithm", mode="before")
    @classmethod
    def _lower_algorithm(cls, v):
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator("siblings")
    @classmethod
    def _check_hex(cls, v: list[str]) -> list[str]:
        # fullmatch: no whitespace, no odd digit, nothing bytes.fromhex would skip
        for i, s in enumerate(v):
            if not _HEX_DIGEST.fullmatch(s):
                raise ValueError(f"siblings[{i}] is not a 0x-prefixed hex digest: {s!r}")
        return v

    @model_validator(mode="after")
    def _check_sibling_sizes(self) -> "MerkleProofModel":
        for i, s in enumerate(self.siblings):
            size = len(bytes.fromhex(s[2:]))
            if size != self.hash_size:
                raise ValueError(
                    f"siblings[{i}] is {size} bytes, expected {self.hash_size}"
                )
        return self

    @property
    def depth(self) -> int:
        """Number of sibling digests in the path."""
        return len(self.siblings)

    def sibling_bytes(self) -> bytes:
        """Flat concatenation of the sibling digests."""
        return b"".join(bytes.fromhex(s[2:]) for s in self.siblings)
