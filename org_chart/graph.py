"""
Org Chart Kernel — Manager Graph Utilities

Pure dict-based helpers over manager references. No external dependencies.

manager_id is a lookup key, never an ownership link: every traversal goes
through an id -> record directory built once per invocation. Dangling ids
end a chain; cyclic chains are cut by a visited-id set.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Optional, Set

from .domain_types import PersonRecord


# ---------------------------------------------------------------------------
# Directory
# ---------------------------------------------------------------------------

def build_directory(records: Iterable[PersonRecord]) -> Dict[str, PersonRecord]:
    """id -> record, in input order. The first record wins on a repeated id."""
    directory: Dict[str, PersonRecord] = {}
    for record in records:
        directory.setdefault(record.id, record)
    return directory


def manager_of(
    record: PersonRecord,
    directory: Dict[str, PersonRecord],
) -> Optional[PersonRecord]:
    """Direct manager, or None when absent, dangling or self-referencing."""
    if not record.manager_id or record.manager_id == record.id:
        return None
    return directory.get(record.manager_id)


# ---------------------------------------------------------------------------
# Ancestor walk
# ---------------------------------------------------------------------------

def iter_ancestors(
    record: PersonRecord,
    directory: Dict[str, PersonRecord],
) -> Iterator[PersonRecord]:
    """
    Yield the manager chain of ``record``, nearest first.

    Stops at a missing manager id or at the first repeated id, so a
    cyclic chain yields each member at most once and never ``record``.
    """
    visited: Set[str] = {record.id}
    current = manager_of(record, directory)
    while current is not None and current.id not in visited:
        visited.add(current.id)
        yield current
        current = manager_of(current, directory)


def find_dangling_managers(directory: Dict[str, PersonRecord]) -> List[str]:
    """Record ids whose manager_id points outside the snapshot."""
    return sorted(
        rid
        for rid, record in directory.items()
        if record.manager_id and record.manager_id not in directory
    )


def find_self_managed(directory: Dict[str, PersonRecord]) -> List[str]:
    return sorted(rid for rid, r in directory.items() if r.manager_id == rid)


# ---------------------------------------------------------------------------
# Cycle detection
# ---------------------------------------------------------------------------

def detect_manager_cycles(directory: Dict[str, PersonRecord]) -> List[List[str]]:
    """
    Detect cycles of two or more records in the manager graph.

    Each record has at most one outgoing edge, so every walk is a path that
    either ends or closes on itself. Uses explicit colour tracking; starts
    are visited in sorted id order for deterministic output.
    """
    WHITE, GREY, BLACK = 0, 1, 2
    colour: Dict[str, int] = {rid: WHITE for rid in directory}
    cycles: List[List[str]] = []

    for start in sorted(directory):
        if colour[start] != WHITE:
            continue
        path: List[str] = []
        node: Optional[str] = start
        while node is not None and colour.get(node) == WHITE:
            colour[node] = GREY
            path.append(node)
            nxt = directory[node].manager_id
            node = nxt if nxt in directory and nxt != node else None
        if node is not None and colour.get(node) == GREY:
            cycles.append(path[path.index(node):])
        for rid in path:
            colour[rid] = BLACK

    return cycles
