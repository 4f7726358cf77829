"""
Crypto - Hashing Utilities
Primitive digests and hex helpers.

This module provides:
- SHA-256 and Keccak-256 for raw bytes (single pass, untruncated)
- Canonical leaf bytes for objects (via dumps_canonical)
- Hex encoding/decoding with 0x prefix

Keccak-256 here is the legacy Keccak used by Ethereum and Solana, not the
NIST SHA3-256 variant; the padding differs so the outputs differ.
"""
from __future__ import annotations

import hashlib
import string
from typing import Any

from eth_utils import keccak

from svm_merkle.schemas.canonical import dumps_canonical


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash of raw bytes.

    Example:
        >>> keccak256(b"").hex()
        'c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470'
    """
    return keccak(primitive=bytes(data))


def canonical_bytes(obj: Any) -> bytes:
    """UTF-8 encoded canonical JSON of an object; the leaf bytes for object leaves."""
    return dumps_canonical(obj).encode("utf-8")


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    bad = set(hex_content) - set(string.hexdigits)
    if bad:
        raise ValueError(f"Invalid hex characters in string: {sorted(bad)}")
    return bytes.fromhex(hex_content)


__all__ = [
    "sha256",
    "keccak256",
    "canonical_bytes",
    "to_hex",
    "from_hex",
]
