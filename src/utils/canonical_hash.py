"""
Canonical JSON hashing for deterministic input fingerprinting.

The canonical form is:
- Sorted keys (alphabetical)
- No extra whitespace (compact JSON)
- SHA-256 hash algorithm
- UTF-8 encoding

Two analysis requests with the same fingerprint produce the same analysis.
"""

import hashlib
import json
from typing import Any, Dict, Union


def canonical_json_string(obj: Any) -> str:
    """
    Convert an object to its canonical JSON string.

    Example:
        >>> canonical_json_string({"b": 2, "a": 1})
        '{"a":1,"b":2}'
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"))


def canonical_json_hash(obj: Union[Dict[str, Any], str, bytes]) -> str:
    """
    Compute SHA-256 hash of the canonical JSON representation.

    Args:
        obj: Dictionary to hash, or pre-serialized JSON string/bytes

    Returns:
        Lowercase hex SHA-256 hash (64 characters)

    Test vectors:
        {"a": 1, "b": 2}  → '43258cff783fe7036d8a43033f830adfc60ec037382473548ac742b888292777'
        {"b": 2, "a": 1}  → same hash (keys are sorted)
    """
    if isinstance(obj, bytes):
        canonical_bytes = obj
    elif isinstance(obj, str):
        canonical_bytes = obj.encode("utf-8")
    else:
        canonical_bytes = canonical_json_string(obj).encode("utf-8")

    return hashlib.sha256(canonical_bytes).hexdigest()


def input_fingerprint(obj: Dict[str, Any]) -> str:
    """Short fingerprint (first 16 hex characters) of an analysis input."""
    return canonical_json_hash(obj)[:16]
