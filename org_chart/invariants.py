"""
Org Chart Kernel — Forest Invariant Checks

Hard-fail validation of a computed forest against its input records.
Every check raises ForestInvariantError on failure.

The builder never produces a violating forest; these checks guard
refactors and let adapters verify what they hand to renderers.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .buckets import bucket_sort_key, is_valid_bucket
from .domain_types import BucketForest, BucketMemberships, PersonRecord
from .graph import build_directory
from .memberships import resolve_memberships


class ForestInvariantError(Exception):
    """Raised when a computed forest violates a structural invariant."""

    def __init__(self, rule: str, detail: str) -> None:
        self.rule = rule
        self.detail = detail
        super().__init__(f"[INVARIANT:{rule}] {detail}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def validate_forests(
    records: Iterable[PersonRecord],
    forests: List[BucketForest],
    memberships: Optional[Dict[str, BucketMemberships]] = None,
) -> None:
    """
    Run all forest checks. Raises ForestInvariantError on the first failure.
    """
    directory = build_directory(records)
    if memberships is None:
        memberships = resolve_memberships(directory.values())

    _check_bucket_catalog(forests)
    _check_no_empty_buckets(forests)
    _check_known_ids(forests, directory)
    _check_unique_nodes(forests)
    _check_primary_placement(forests, memberships)
    _check_secondary_placement(forests, memberships)


# ---------------------------------------------------------------------------
# Individual checks (private)
# ---------------------------------------------------------------------------

def _check_bucket_catalog(forests: List[BucketForest]) -> None:
    """Buckets are catalog members, each emitted once, in catalog order."""
    names = [f.bucket for f in forests]
    for name in names:
        if not is_valid_bucket(name):
            raise ForestInvariantError(
                "bucket_catalog", f"Bucket {name!r} is not in the catalog"
            )
    if len(names) != len(set(names)):
        raise ForestInvariantError("bucket_catalog", "Bucket emitted twice")
    if names != sorted(names, key=bucket_sort_key):
        raise ForestInvariantError(
            "bucket_catalog", f"Buckets out of catalog order: {names}"
        )


def _check_no_empty_buckets(forests: List[BucketForest]) -> None:
    for forest in forests:
        if not forest.roots:
            raise ForestInvariantError(
                "empty_bucket", f"Bucket {forest.bucket!r} has no roots"
            )


def _check_known_ids(forests: List[BucketForest], directory: Dict) -> None:
    for forest in forests:
        for node in forest.iter_nodes():
            if node.id not in directory:
                raise ForestInvariantError(
                    "unknown_record",
                    f"Node {node.id!r} in {forest.bucket!r} has no input record",
                )


def _check_unique_nodes(forests: List[BucketForest]) -> None:
    """A record is represented by at most one node per bucket."""
    for forest in forests:
        seen: set[str] = set()
        for node in forest.iter_nodes():
            if node.id in seen:
                raise ForestInvariantError(
                    "duplicate_node",
                    f"Record {node.id!r} appears twice in {forest.bucket!r}",
                )
            seen.add(node.id)


def _bucket_ids(forests: List[BucketForest]) -> Dict[str, set]:
    return {f.bucket: {n.id for n in f.iter_nodes()} for f in forests}


def _check_primary_placement(
    forests: List[BucketForest],
    memberships: Dict[str, BucketMemberships],
) -> None:
    ids_by_bucket = _bucket_ids(forests)
    for rid, resolved in memberships.items():
        if rid not in ids_by_bucket.get(resolved.primary, set()):
            raise ForestInvariantError(
                "primary_placement",
                f"Record {rid!r} missing from its primary bucket "
                f"{resolved.primary!r}",
            )


def _check_secondary_placement(
    forests: List[BucketForest],
    memberships: Dict[str, BucketMemberships],
) -> None:
    ids_by_bucket = _bucket_ids(forests)
    for rid, resolved in memberships.items():
        for bucket in resolved.secondary:
            if rid not in ids_by_bucket.get(bucket, set()):
                raise ForestInvariantError(
                    "secondary_placement",
                    f"Record {rid!r} missing from secondary bucket {bucket!r}",
                )
