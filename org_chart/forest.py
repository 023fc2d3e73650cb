"""
Org Chart Kernel — Forest Builder v1.0

Builds one forest per populated bucket from a directory snapshot.

Two passes over the records, both in input order:
  1. Privileged placement: dual-role records go into their secondary
     buckets first, so subordinates walking their chain in pass 2 find
     them already pooled.
  2. Primary placement: every record goes into its primary bucket.

Placement of record R into bucket B:
  a. Facilities override: R's direct manager, if an IT Manager with a
     Facilities label, becomes the parent. No further walk.
  b. Ancestor walk: the nearest manager-chain ancestor holding any
     membership in B becomes the parent.
  c. Consultant-team fallback: a non-manager consultant hangs under the
     first IT Manager with a secondary membership in B.
  d. Facilities fallback: a non-manager hangs under the first IT Manager
     carrying a Facilities label.
  e. Otherwise R is a root of B.

Each bucket's pool is an arena of id -> parent id. An attachment that would
make a record its own ancestor inside B is refused, so every bucket stays a
forest whatever the manager graph looks like. Nodes are materialized only
after both passes, so an OrgNode is never mutated once built.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from .buckets import BUCKET_ORDER, FACILITIES, is_consultant_team
from .classifier import is_consultant_title, is_it_manager_title, mentions_facilities
from .domain_types import BucketForest, BucketMemberships, OrgNode, PersonRecord
from .graph import build_directory, iter_ancestors, manager_of
from .memberships import resolve_memberships

logger = logging.getLogger(__name__)


class BucketPool:
    """
    Per-bucket node arena, keyed by record id.

    Tracks creation order, parent links and children in attach order.
    """

    def __init__(self, bucket: str) -> None:
        self.bucket = bucket
        self._order: List[str] = []
        self._parent: Dict[str, Optional[str]] = {}
        self._children: Dict[str, List[str]] = {}
        self._roots: List[str] = []
        self._placed: Set[str] = set()

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._parent

    def __len__(self) -> int:
        return len(self._order)

    def obtain(self, record_id: str) -> None:
        """Create the entry for ``record_id`` unless it already exists."""
        if record_id not in self._parent:
            self._parent[record_id] = None
            self._children[record_id] = []
            self._order.append(record_id)

    def is_placed(self, record_id: str) -> bool:
        return record_id in self._placed

    def mark_placed(self, record_id: str) -> None:
        self._placed.add(record_id)

    def parent_of(self, record_id: str) -> Optional[str]:
        return self._parent.get(record_id)

    def children_of(self, record_id: str) -> List[str]:
        return list(self._children.get(record_id, []))

    def can_attach(self, child_id: str, parent_id: str) -> bool:
        """False if ``parent_id`` is ``child_id`` or one of its descendants."""
        node: Optional[str] = parent_id
        while node is not None:
            if node == child_id:
                return False
            node = self._parent.get(node)
        return True

    def attach(self, child_id: str, parent_id: str) -> None:
        self.obtain(child_id)
        self.obtain(parent_id)
        self._parent[child_id] = parent_id
        self._children[parent_id].append(child_id)

    def add_root(self, record_id: str) -> None:
        self.obtain(record_id)
        self._roots.append(record_id)

    def root_ids(self) -> List[str]:
        """
        Placed roots in placement order, then any entry created only as a
        parent and never placed itself.
        """
        roots = list(self._roots)
        seen = set(roots)
        for rid in self._order:
            if rid not in seen and self._parent[rid] is None:
                roots.append(rid)
        return roots


class ForestBuilder:
    """
    One-shot builder over a single directory snapshot.

    All state is local to the instance; build() may be called repeatedly
    and always returns the same structure.
    """

    def __init__(self, records: Iterable[PersonRecord]) -> None:
        self._directory: Dict[str, PersonRecord] = build_directory(records)
        self._records: List[PersonRecord] = list(self._directory.values())
        self._memberships: Dict[str, BucketMemberships] = resolve_memberships(
            self._records
        )
        self._pools: Dict[str, BucketPool] = {}

    # -- Accessors ----------------------------------------------------------

    @property
    def memberships(self) -> Dict[str, BucketMemberships]:
        return dict(self._memberships)

    @property
    def directory(self) -> Dict[str, PersonRecord]:
        return dict(self._directory)

    # -- Public API ---------------------------------------------------------

    def build(self) -> List[BucketForest]:
        """Run both placement passes and assemble forests in catalog order."""
        self._pools = {}

        # Pass 1: dual-role records into their secondary buckets
        for record in self._records:
            for bucket in self._memberships[record.id].secondary:
                self.place(record, bucket)

        # Pass 2: everyone into their primary bucket
        for record in self._records:
            self.place(record, self._memberships[record.id].primary)

        forests = [
            BucketForest(bucket=bucket, roots=self._materialize(self._pools[bucket]))
            for bucket in BUCKET_ORDER
            if bucket in self._pools and len(self._pools[bucket]) > 0
        ]
        logger.debug(
            "Built %d forest(s) from %d record(s)",
            len(forests), len(self._records),
        )
        return forests

    def place(self, record: PersonRecord, bucket: str) -> None:
        """Place ``record`` into ``bucket``. Idempotent per (bucket, record)."""
        pool = self._pools.get(bucket)
        if pool is None:
            pool = self._pools[bucket] = BucketPool(bucket)
        pool.obtain(record.id)
        if pool.is_placed(record.id):
            return
        pool.mark_placed(record.id)

        parent_id = self._find_parent(record, bucket, pool)
        if parent_id is None:
            logger.debug("%s: %s placed as root", bucket, record.id)
            pool.add_root(record.id)
        else:
            logger.debug("%s: %s placed under %s", bucket, record.id, parent_id)
            pool.attach(record.id, parent_id)

    # -- Placement rules ----------------------------------------------------

    def _find_parent(
        self, record: PersonRecord, bucket: str, pool: BucketPool,
    ) -> Optional[str]:
        if bucket == FACILITIES:
            manager = manager_of(record, self._directory)
            if (
                manager is not None
                and _manages_facilities(manager)
                and pool.can_attach(record.id, manager.id)
            ):
                return manager.id

        for ancestor in iter_ancestors(record, self._directory):
            if not self._memberships[ancestor.id].includes(bucket):
                continue
            if pool.can_attach(record.id, ancestor.id):
                return ancestor.id
            logger.debug(
                "%s: refusing %s -> %s (would close a cycle)",
                bucket, record.id, ancestor.id,
            )

        title = record.title_text
        if is_consultant_team(bucket) and is_consultant_title(title):
            for other in self._records:
                if (
                    other.id != record.id
                    and bucket in self._memberships[other.id].secondary
                    and is_it_manager_title(other.title_text)
                    and pool.can_attach(record.id, other.id)
                ):
                    return other.id

        if bucket == FACILITIES and "manager" not in title:
            for other in self._records:
                if (
                    other.id != record.id
                    and _manages_facilities(other)
                    and pool.can_attach(record.id, other.id)
                ):
                    return other.id

        return None

    # -- Materialization ----------------------------------------------------

    def _materialize(self, pool: BucketPool) -> Tuple[OrgNode, ...]:
        """Build immutable nodes bottom-up with an explicit stack."""
        roots = pool.root_ids()
        built: Dict[str, OrgNode] = {}
        stack: List[Tuple[str, bool]] = [(rid, False) for rid in reversed(roots)]

        while stack:
            rid, expanded = stack.pop()
            if expanded:
                children = tuple(built[cid] for cid in pool.children_of(rid))
                built[rid] = self._make_node(rid, children)
                continue
            stack.append((rid, True))
            for cid in reversed(pool.children_of(rid)):
                stack.append((cid, False))

        return tuple(built[rid] for rid in roots)

    def _make_node(self, record_id: str, children: Tuple[OrgNode, ...]) -> OrgNode:
        record = self._directory[record_id]
        manager = manager_of(record, self._directory)
        return OrgNode(
            id=record.id,
            display_name=record.display_name,
            job_title=record.job_title,
            team_labels=record.team_labels,
            manager_display_name=manager.display_name if manager else None,
            children=children,
        )


def _manages_facilities(record: PersonRecord) -> bool:
    return is_it_manager_title(record.title_text) and mentions_facilities(record.team_text)


def build_forests(records: Iterable[PersonRecord]) -> List[BucketForest]:
    """Classify every record and build the per-bucket forests."""
    return ForestBuilder(records).build()
