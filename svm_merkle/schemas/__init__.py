"""
Schemas & Errors
File: __init__.py

Purpose: Export the error taxonomy, canonical serialization helpers,
and the serialized proof model.
"""

from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonicalize_value,
    dumps_canonical,
)

from .errors import (
    AlreadySealedError,
    CanonicalizationException,
    EmptyTreeError,
    ErrorCodes,
    IndexOutOfRangeError,
    InvalidConfigurationError,
    LeafNotFoundError,
    MalformedProofInputError,
    MerkleErrorModel,
    MerkleException,
    NotSealedError,
)

from .proof import (
    MAX_PROOF_INDEX,
    SCHEMA_VERSION,
    SUPPORTED_SCHEMA_VERSIONS,
    AlgorithmName,
    MerkleProofModel,
    UnsupportedSchemaVersionError,
)

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonicalize_value",
    "dumps_canonical",
    # Errors
    "ErrorCodes",
    "MerkleErrorModel",
    "MerkleException",
    "InvalidConfigurationError",
    "EmptyTreeError",
    "NotSealedError",
    "AlreadySealedError",
    "IndexOutOfRangeError",
    "LeafNotFoundError",
    "MalformedProofInputError",
    "CanonicalizationException",
    # Proof model
    "MAX_PROOF_INDEX",
    "SCHEMA_VERSION",
    "SUPPORTED_SCHEMA_VERSIONS",
    "AlgorithmName",
    "MerkleProofModel",
    "UnsupportedSchemaVersionError",
]
