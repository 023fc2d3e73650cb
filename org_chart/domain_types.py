"""
Org Chart Kernel — Core Domain Types v1.0

Pure data. No classification or placement logic.
Records are frozen; team labels are split once, at construction.

────────────────────────────────────────────────
DOMAIN GLOSSARY
────────────────────────────────────────────────

Bucket:
    A named organizational grouping in the fixed catalog.

Primary membership:
    The single bucket a record is classified into.

Secondary membership:
    An additional bucket a dual-role record also belongs to.

Forest:
    The ordered collection of rooted trees for one bucket.

────────────────────────────────────────────────
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union


PRIMARY = "primary"
SECONDARY = "secondary"

UNKNOWN_DISPLAY_NAME = "Unknown"


def split_team_labels(team: Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    """
    Split a raw team field into discrete, trimmed, non-empty labels.

    Accepts a comma-separated string or an iterable of strings (each of
    which may itself contain commas).
    """
    if team is None:
        return ()
    if isinstance(team, str):
        parts: Iterable[str] = [team]
    else:
        parts = team
    labels: List[str] = []
    for part in parts:
        if part is None:
            continue
        for label in str(part).split(","):
            label = label.strip()
            if label:
                labels.append(label)
    return tuple(labels)


@dataclass(frozen=True)
class PersonRecord:
    """One directory entry. Immutable input to the kernel."""

    id: str
    display_name: str = UNKNOWN_DISPLAY_NAME
    job_title: Optional[str] = None
    team_labels: Tuple[str, ...] = ()
    manager_id: Optional[str] = None

    @classmethod
    def create(
        cls,
        record_id: str,
        display_name: Optional[str] = None,
        job_title: Optional[str] = None,
        team: Union[str, Iterable[str], None] = None,
        manager_id: Optional[str] = None,
    ) -> "PersonRecord":
        """Build a record from raw directory fields."""
        return cls(
            id=record_id,
            display_name=display_name or UNKNOWN_DISPLAY_NAME,
            job_title=job_title,
            team_labels=split_team_labels(team),
            manager_id=manager_id or None,
        )

    @property
    def title_text(self) -> str:
        """Lower-cased job title ("" when absent)."""
        return (self.job_title or "").lower()

    @property
    def team_text(self) -> str:
        """Lower-cased team labels joined by a single space."""
        return " ".join(self.team_labels).lower()


@dataclass(frozen=True)
class Membership:
    """A (record, bucket) relation tagged primary or secondary."""

    record_id: str
    bucket: str
    kind: str = PRIMARY  # primary | secondary


@dataclass(frozen=True)
class BucketMemberships:
    """All bucket memberships held by one record."""

    primary: str
    secondary: Tuple[str, ...] = ()

    def includes(self, bucket: str) -> bool:
        return bucket == self.primary or bucket in self.secondary

    def buckets(self) -> Tuple[str, ...]:
        return (self.primary,) + self.secondary


@dataclass(frozen=True)
class OrgNode:
    """
    A record's display attributes inside one bucket's tree.

    Never shared across buckets. Built once all placement in a bucket is
    final, so children are fixed at construction.
    """

    id: str
    display_name: str
    job_title: Optional[str] = None
    team_labels: Tuple[str, ...] = ()
    manager_display_name: Optional[str] = None
    children: Tuple["OrgNode", ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the wire shape handed to renderers."""
        root = _node_fields(self)
        stack: List[Tuple[OrgNode, List[Dict[str, Any]]]] = [(self, root["children"])]
        while stack:
            node, out = stack.pop()
            for child in node.children:
                data = _node_fields(child)
                out.append(data)
                stack.append((child, data["children"]))
        return root


def _node_fields(node: OrgNode) -> Dict[str, Any]:
    return {
        "id": node.id,
        "displayName": node.display_name,
        "jobTitle": node.job_title,
        "teamLabels": list(node.team_labels),
        "managerDisplayName": node.manager_display_name,
        "children": [],
    }


@dataclass(frozen=True)
class BucketForest:
    """The ordered root nodes of one populated bucket."""

    bucket: str
    roots: Tuple[OrgNode, ...] = ()

    def iter_nodes(self) -> Iterator[OrgNode]:
        """Depth-first, pre-order walk over every node in the forest."""
        stack: List[OrgNode] = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bucketName": self.bucket,
            "roots": [root.to_dict() for root in self.roots],
        }
