"""
Org Chart Kernel — Bucket Catalog

The fixed, ordered list of valid buckets.
Order drives presentation only; no algorithm depends on it.
"""

from __future__ import annotations

import re
from typing import Optional, Tuple

# --- Numbered consultant teams ---
CONSULTANT_TEAM_COUNT: int = 7
CONSULTANT_TEAM_PREFIX: str = "Consultant Team "

# --- Functional buckets ---
IT_MANAGERS: str = "IT Managers"
C_SUITE: str = "C Suite"
SYSTEM_ENGINEERS: str = "System Engineers"
NETWORK_ENGINEERS: str = "Network Engineers"
SOFTWARE_ENGINEERS: str = "Software Engineers"
GRC_ENGINEERS: str = "GRC Engineers"
FACILITIES: str = "Facilities"
OTHER: str = "Other"

CONSULTANT_TEAMS: Tuple[str, ...] = tuple(
    f"{CONSULTANT_TEAM_PREFIX}{n}" for n in range(1, CONSULTANT_TEAM_COUNT + 1)
)

BUCKET_ORDER: Tuple[str, ...] = CONSULTANT_TEAMS + (
    IT_MANAGERS,
    C_SUITE,
    SYSTEM_ENGINEERS,
    NETWORK_ENGINEERS,
    SOFTWARE_ENGINEERS,
    GRC_ENGINEERS,
    FACILITIES,
    OTHER,
)

_POSITION = {bucket: idx for idx, bucket in enumerate(BUCKET_ORDER)}
_TEAM_PATTERN = re.compile(r"^Consultant Team (\d+)$")


def is_valid_bucket(bucket: str) -> bool:
    return bucket in _POSITION


def bucket_sort_key(bucket: str) -> int:
    """Catalog position. Unknown buckets sort last."""
    return _POSITION.get(bucket, len(BUCKET_ORDER))


def consultant_team(number: int) -> str:
    """Bucket name for consultant team ``number``. Hard fail outside the catalog."""
    if not 1 <= number <= CONSULTANT_TEAM_COUNT:
        raise ValueError(
            f"Consultant team {number} is not in the catalog "
            f"(1..{CONSULTANT_TEAM_COUNT})"
        )
    return f"{CONSULTANT_TEAM_PREFIX}{number}"


def is_catalog_team_number(number: int) -> bool:
    return 1 <= number <= CONSULTANT_TEAM_COUNT


def consultant_team_number(bucket: str) -> Optional[int]:
    """Team number of a numbered consultant bucket, else None."""
    match = _TEAM_PATTERN.match(bucket)
    if match is None or bucket not in _POSITION:
        return None
    return int(match.group(1))


def is_consultant_team(bucket: str) -> bool:
    return consultant_team_number(bucket) is not None
