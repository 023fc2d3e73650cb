"""
Org Chart Kernel — Diagnostics

Data-quality summary of a directory snapshot. Never raises: every issue
reported here is something the builder already tolerates.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from .buckets import BUCKET_ORDER, OTHER
from .classifier import is_consultant_title
from .domain_types import BucketMemberships, PersonRecord
from .graph import (
    build_directory,
    detect_manager_cycles,
    find_dangling_managers,
    find_self_managed,
)
from .memberships import resolve_memberships


def compute_diagnostics(
    records: Iterable[PersonRecord],
    memberships: Optional[Dict[str, BucketMemberships]] = None,
) -> dict:
    """
    Return a diagnostic dict summarising the snapshot.

    bucket_counts lists primary memberships per bucket in catalog order,
    zero counts included.
    """
    directory = build_directory(records)
    if memberships is None:
        memberships = resolve_memberships(directory.values())

    bucket_counts = {bucket: 0 for bucket in BUCKET_ORDER}
    secondary_count = 0
    for resolved in memberships.values():
        bucket_counts[resolved.primary] = bucket_counts.get(resolved.primary, 0) + 1
        secondary_count += len(resolved.secondary)

    dangling = find_dangling_managers(directory)
    self_managed = find_self_managed(directory)
    cycles = detect_manager_cycles(directory)
    unassigned_consultants = sorted(
        rid
        for rid, record in directory.items()
        if memberships[rid].primary == OTHER and is_consultant_title(record.title_text)
    )
    untitled = sorted(rid for rid, r in directory.items() if not r.title_text.strip())

    warnings: list[str] = []
    if dangling:
        warnings.append(
            f"{len(dangling)} record(s) reference a manager outside the "
            f"snapshot: {', '.join(dangling)}"
        )
    if self_managed:
        warnings.append(
            f"{len(self_managed)} record(s) list themselves as manager: "
            f"{', '.join(self_managed)}"
        )
    for cycle in cycles:
        warnings.append(f"Manager cycle: {' -> '.join(cycle + [cycle[0]])}")
    if unassigned_consultants:
        warnings.append(
            f"{len(unassigned_consultants)} consultant(s) without a team "
            f"number: {', '.join(unassigned_consultants)}"
        )
    if untitled:
        warnings.append(f"{len(untitled)} record(s) without a job title")

    return {
        "record_count": len(directory),
        "bucket_counts": bucket_counts,
        "secondary_membership_count": secondary_count,
        "dangling_manager_refs": dangling,
        "self_managed": self_managed,
        "manager_cycles": cycles,
        "unassigned_consultants": unassigned_consultants,
        "untitled_records": untitled,
        "warnings": warnings,
    }
