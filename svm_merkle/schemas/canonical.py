"""
Schemas & Canonicalization
File: canonical.py

Purpose: One byte-exact JSON rendering per value. Object leaves are
hashed from it and proof documents are written with it, so two processes
that add the same object produce the same leaf digest.
"""

import json
import math
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def _reject(path: str, message: str, **details: Any) -> CanonicalizationException:
    return CanonicalizationException(message=message, details={"path": path, **details})


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Reduce a value to plain JSON types with a single rendering.

    - dict keys become strings and None-valued entries are dropped
    - tuples become lists
    - bytes become lowercase hex (no 0x prefix)
    - enums become their value, pydantic models their JSON dump

    Raises:
        CanonicalizationException: For NaN/Infinity or a type with no
            JSON rendering. ``details["path"]`` locates the bad value.
    """
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    elif isinstance(value, Enum):
        value = value.value

    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        if math.isfinite(value):
            return value
        raise _reject(path, f"Non-finite float value encountered: {value}", value=str(value))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, dict):
        out = {}
        for key, item in value.items():
            if item is None:
                continue
            key = str(key)
            out[key] = canonicalize_value(item, f"{path}.{key}" if path else key)
        return out
    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, f"{path}[{i}]") for i, item in enumerate(value)]

    kind = type(value).__name__
    raise _reject(path, f"Cannot canonicalize value of type {kind}", type=kind)


def dumps_canonical(obj: Any) -> str:
    """
    Render an object as canonical JSON: sorted keys, no whitespace,
    non-ASCII kept as-is.

    Example:
        >>> dumps_canonical({"b": 2, "a": 1})
        '{"a":1,"b":2}'
    """
    return json.dumps(
        canonicalize_value(obj),
        sort_keys=True,
        separators=CANONICAL_JSON_SEPARATORS,
        ensure_ascii=False,
    )
