"""
Org Chart Kernel — Secondary Membership Resolver

Decides whether a dual-role record additionally belongs to a second bucket.
Closed rule set:

  IT Managers + "consultant team N" label   -> Consultant Team N
  IT Managers + "facilities" label          -> Facilities
  C Suite CTO + network engineering label   -> Network Engineers
  C Suite COO + ITM label                   -> IT Managers

Secondary memberships are a strict addition: never the primary bucket.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from .buckets import (
    BUCKET_ORDER,
    C_SUITE,
    FACILITIES,
    IT_MANAGERS,
    NETWORK_ENGINEERS,
    is_consultant_team,
)
from .classifier import (
    classify,
    explicit_consultant_teams,
    is_coo,
    is_cto,
    mentions_facilities,
    mentions_itm,
    mentions_network_engineering,
)
from .domain_types import (
    PRIMARY,
    SECONDARY,
    BucketMemberships,
    Membership,
    PersonRecord,
)


def has_secondary_membership(
    record: PersonRecord,
    primary_bucket: str,
    candidate_bucket: str,
) -> bool:
    """True if ``record`` also belongs to ``candidate_bucket``."""
    if candidate_bucket == primary_bucket:
        return False

    title = record.title_text
    team = record.team_text

    if primary_bucket == IT_MANAGERS:
        if is_consultant_team(candidate_bucket):
            return candidate_bucket in explicit_consultant_teams(record.team_labels)
        if candidate_bucket == FACILITIES:
            return mentions_facilities(team)
        return False

    if primary_bucket == C_SUITE:
        if candidate_bucket == NETWORK_ENGINEERS:
            return is_cto(title) and mentions_network_engineering(team)
        if candidate_bucket == IT_MANAGERS:
            return is_coo(title) and mentions_itm(team)
        return False

    return False


def secondary_buckets(record: PersonRecord, primary_bucket: str) -> Tuple[str, ...]:
    """All secondary buckets of ``record``, in catalog order."""
    return tuple(
        bucket
        for bucket in BUCKET_ORDER
        if has_secondary_membership(record, primary_bucket, bucket)
    )


def resolve_record(record: PersonRecord) -> BucketMemberships:
    primary = classify(record.job_title, record.team_labels)
    return BucketMemberships(
        primary=primary,
        secondary=secondary_buckets(record, primary),
    )


def resolve_memberships(
    records: Iterable[PersonRecord],
) -> Dict[str, BucketMemberships]:
    """Map record id -> memberships, preserving input order."""
    return {record.id: resolve_record(record) for record in records}


def memberships_of(
    record: PersonRecord,
    resolved: Optional[BucketMemberships] = None,
) -> List[Membership]:
    """Flat membership list: the primary first, then secondaries."""
    resolved = resolved or resolve_record(record)
    result = [Membership(record.id, resolved.primary, PRIMARY)]
    result.extend(
        Membership(record.id, bucket, SECONDARY) for bucket in resolved.secondary
    )
    return result
