"""
Schemas & Errors
File: errors.py

Purpose: Error taxonomy for Merkle tree construction and proof handling.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

Every error here is a local, synchronous caller mistake (bad configuration,
bad input, or a call made in the wrong tree state). None are retryable.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Configuration
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"

    # Tree state
    EMPTY_TREE = "EMPTY_TREE"
    NOT_SEALED = "NOT_SEALED"
    ALREADY_SEALED = "ALREADY_SEALED"

    # Lookups
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"

    # Proof input
    MALFORMED_PROOF_INPUT = "MALFORMED_PROOF_INPUT"

    # Serialization
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleErrorModel(BaseModel):
    """
    Error model for passing Merkle failures around without exceptions.

    Useful when a caller wants to serialize a failure (e.g. into a
    verification report) instead of letting it propagate.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.MALFORMED_PROOF_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerkleException":
        """Convert this error model to the matching exception type."""
        exc_type = _EXCEPTIONS_BY_CODE.get(self.code, MerkleException)
        exc = exc_type.__new__(exc_type)
        MerkleException.__init__(
            exc,
            message=self.message,
            code=self.code,
            details=self.details,
            retryable=self.retryable,
        )
        return exc


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class MerkleException(Exception):
    """
    Base exception for all Merkle errors.

    Carries structured error information and can be converted to/from
    MerkleErrorModel.
    """

    def __init__(
        self,
        message: str,
        code: str = "MERKLE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleErrorModel:
        """Convert this exception to a MerkleErrorModel."""
        return MerkleErrorModel(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidConfigurationError(MerkleException, ValueError):
    """Raised when a hash size or algorithm selection cannot be honored."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_CONFIGURATION,
            details=details,
        )


class EmptyTreeError(MerkleException):
    """Raised when merklizing a tree that has no leaves."""

    def __init__(self, message: str = "Merkle tree is empty") -> None:
        super().__init__(message=message, code=ErrorCodes.EMPTY_TREE)


class NotSealedError(MerkleException):
    """Raised when the root or a proof is requested before merklize()."""

    def __init__(self, message: str = "Merkle tree not merklized") -> None:
        super().__init__(message=message, code=ErrorCodes.NOT_SEALED)


class AlreadySealedError(MerkleException):
    """Raised when leaves are added to a tree after merklize()."""

    def __init__(self, message: str = "Merkle tree is sealed; no more leaves can be added") -> None:
        super().__init__(message=message, code=ErrorCodes.ALREADY_SEALED)


class IndexOutOfRangeError(MerkleException, IndexError):
    """Raised when a leaf index falls outside the tree."""

    def __init__(self, index: Any, leaf_count: int) -> None:
        super().__init__(
            message=f"Leaf index {index} out of range for {leaf_count} leaves",
            code=ErrorCodes.INDEX_OUT_OF_RANGE,
            details={"index": index, "leaf_count": leaf_count},
        )


class LeafNotFoundError(MerkleException, LookupError):
    """Raised when proof-by-hash finds no leaf with the given digest."""

    def __init__(self, digest: bytes) -> None:
        super().__init__(
            message=f"Leaf not found: 0x{digest.hex()}",
            code=ErrorCodes.LEAF_NOT_FOUND,
            details={"digest": "0x" + digest.hex()},
        )


class MalformedProofInputError(MerkleException, ValueError):
    """Raised when digests or sibling bytes have the wrong length or shape."""

    def __init__(
        self,
        message: str,
        expected: int | None = None,
        actual: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if expected is not None:
            full_details["expected"] = expected
        if actual is not None:
            full_details["actual"] = actual
        super().__init__(
            message=message,
            code=ErrorCodes.MALFORMED_PROOF_INPUT,
            details=full_details,
        )


class CanonicalizationException(MerkleException):
    """Exception raised when canonical serialization fails."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


_EXCEPTIONS_BY_CODE: dict[str, type[MerkleException]] = {
    ErrorCodes.INVALID_CONFIGURATION: InvalidConfigurationError,
    ErrorCodes.EMPTY_TREE: EmptyTreeError,
    ErrorCodes.NOT_SEALED: NotSealedError,
    ErrorCodes.ALREADY_SEALED: AlreadySealedError,
    ErrorCodes.INDEX_OUT_OF_RANGE: IndexOutOfRangeError,
    ErrorCodes.LEAF_NOT_FOUND: LeafNotFoundError,
    ErrorCodes.MALFORMED_PROOF_INPUT: MalformedProofInputError,
    ErrorCodes.CANONICALIZATION_ERROR: CanonicalizationException,
}
