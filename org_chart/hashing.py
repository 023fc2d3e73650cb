"""
Org Chart Kernel — Canonical Hashing

Deterministic canonical serialization + SHA-256 hashing of a forest list.

Rules:
  - Buckets in emitted (catalog) order
  - Roots and children in placement order; order is part of the structure
  - UTF-8 JSON, no whitespace, fixed key order
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, List

from .domain_types import BucketForest

FOREST_FORMAT_VERSION = 1


def canonical_serialize(forests: List[BucketForest]) -> bytes:
    """Canonical serialization of a forest list to UTF-8 JSON bytes."""
    obj = _build_canonical_dict(forests)
    return json.dumps(
        obj, ensure_ascii=True, separators=(",", ":"), sort_keys=False,
    ).encode("utf-8")


def canonical_hash(forests: List[BucketForest]) -> str:
    """SHA-256 of canonical serialization. Lowercase hex string."""
    return hashlib.sha256(canonical_serialize(forests)).hexdigest()


def _build_canonical_dict(forests: List[BucketForest]) -> Dict[str, Any]:
    return {
        "format_version": FOREST_FORMAT_VERSION,
        "buckets": [forest.to_dict() for forest in forests],
    }
