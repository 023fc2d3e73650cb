"""
Org Chart Kernel — Forest Filtering

Read-only views over a computed forest list: restrict to one bucket and/or
to nodes matching a free-text query. Input forests are never modified;
pruned trees are rebuilt.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from .domain_types import BucketForest, OrgNode


def node_matches(node: OrgNode, query: str) -> bool:
    """Case-insensitive substring match on name, title or any team label."""
    q = query.lower()
    if q in node.display_name.lower():
        return True
    if node.job_title and q in node.job_title.lower():
        return True
    return any(q in label.lower() for label in node.team_labels)


def prune(node: OrgNode, query: str) -> Optional[OrgNode]:
    """
    Keep ``node`` with its whole subtree if it matches; otherwise keep it
    only as the ancestor of matching descendants. None if nothing matches.
    """
    kept: Dict[int, Optional[OrgNode]] = {}
    stack: List[Tuple[OrgNode, bool]] = [(node, False)]
    while stack:
        current, expanded = stack.pop()
        if node_matches(current, query):
            kept[id(current)] = current
            continue
        if not expanded:
            stack.append((current, True))
            stack.extend((child, False) for child in current.children)
            continue
        children = tuple(
            kept[id(child)]
            for child in current.children
            if kept.get(id(child)) is not None
        )
        kept[id(current)] = (
            OrgNode(
                id=current.id,
                display_name=current.display_name,
                job_title=current.job_title,
                team_labels=current.team_labels,
                manager_display_name=current.manager_display_name,
                children=children,
            )
            if children
            else None
        )
    return kept[id(node)]


def filter_forests(
    forests: List[BucketForest],
    query: str = "",
    bucket: Optional[str] = None,
) -> List[BucketForest]:
    """
    Restrict ``forests`` to ``bucket`` (if given) and to nodes matching
    ``query`` (if non-blank). Buckets left without roots are dropped.
    """
    selected = [f for f in forests if bucket is None or f.bucket == bucket]
    query = query.strip()
    if not query:
        return selected

    result: List[BucketForest] = []
    for forest in selected:
        roots = tuple(
            kept for kept in (prune(root, query) for root in forest.roots)
            if kept is not None
        )
        if roots:
            result.append(BucketForest(bucket=forest.bucket, roots=roots))
    return result
