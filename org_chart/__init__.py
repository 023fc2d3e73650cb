"""
Org Chart Kernel v1.0
Deterministic, in-memory classification of a personnel directory into
organizational buckets, with one reporting forest per bucket.
"""

from .domain_types import (
    PRIMARY,
    SECONDARY,
    BucketForest,
    BucketMemberships,
    Membership,
    OrgNode,
    PersonRecord,
    split_team_labels,
)
from .buckets import (
    BUCKET_ORDER,
    CONSULTANT_TEAM_COUNT,
    CONSULTANT_TEAMS,
    C_SUITE,
    FACILITIES,
    GRC_ENGINEERS,
    IT_MANAGERS,
    NETWORK_ENGINEERS,
    OTHER,
    SOFTWARE_ENGINEERS,
    SYSTEM_ENGINEERS,
    consultant_team,
    consultant_team_number,
    is_consultant_team,
    is_valid_bucket,
)
from .classifier import CLASSIFICATION_RULES, classify, classify_with_rule, explain
from .memberships import (
    has_secondary_membership,
    memberships_of,
    resolve_memberships,
    secondary_buckets,
)
from .forest import ForestBuilder, build_forests
from .invariants import ForestInvariantError, validate_forests
from .diagnostics import compute_diagnostics
from .hashing import canonical_hash, canonical_serialize
from .filtering import filter_forests
from .snapshot import (
    DirectoryDecodeError,
    SnapshotError,
    decode_directory,
    records_from_dicts,
)

__all__ = [
    "PRIMARY",
    "SECONDARY",
    "BucketForest",
    "BucketMemberships",
    "Membership",
    "OrgNode",
    "PersonRecord",
    "split_team_labels",
    "BUCKET_ORDER",
    "CONSULTANT_TEAM_COUNT",
    "CONSULTANT_TEAMS",
    "C_SUITE",
    "FACILITIES",
    "GRC_ENGINEERS",
    "IT_MANAGERS",
    "NETWORK_ENGINEERS",
    "OTHER",
    "SOFTWARE_ENGINEERS",
    "SYSTEM_ENGINEERS",
    "consultant_team",
    "consultant_team_number",
    "is_consultant_team",
    "is_valid_bucket",
    "CLASSIFICATION_RULES",
    "classify",
    "classify_with_rule",
    "explain",
    "has_secondary_membership",
    "memberships_of",
    "resolve_memberships",
    "secondary_buckets",
    "ForestBuilder",
    "build_forests",
    "ForestInvariantError",
    "validate_forests",
    "compute_diagnostics",
    "canonical_hash",
    "canonical_serialize",
    "filter_forests",
    "DirectoryDecodeError",
    "SnapshotError",
    "decode_directory",
    "records_from_dicts",
]
