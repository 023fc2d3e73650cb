"""
Forest Builder — Scenario Tests

Covers:
  - Dual-role managers placed before their subordinates (two passes)
  - Per-bucket node independence
  - Facilities direct-manager override and fallback
  - Consultant-team fallback under a team's IT Manager
  - Dangling, self-referencing and cyclic manager references
  - Structural invariants and determinism on a generated directory

Run:  python -m org_chart.test_forest
"""

from __future__ import annotations

import os
import random
import sys
from typing import Dict, Optional

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from org_chart.buckets import (
    C_SUITE,
    FACILITIES,
    IT_MANAGERS,
    NETWORK_ENGINEERS,
    OTHER,
    SOFTWARE_ENGINEERS,
    SYSTEM_ENGINEERS,
    consultant_team,
)
from org_chart.domain_types import BucketForest, OrgNode, PersonRecord
from org_chart.forest import ForestBuilder, build_forests
from org_chart.hashing import canonical_hash
from org_chart.invariants import validate_forests


_pass = 0
_fail = 0


def _test(name, fn):
    global _pass, _fail
    try:
        fn()
        print(f"  [PASS] {name}")
        _pass += 1
    except Exception as exc:
        print(f"  [FAIL] {name}: {exc}")
        _fail += 1


def _rec(rid, name, title, team=None, manager=None) -> PersonRecord:
    return PersonRecord.create(rid, name, title, team, manager)


def _by_bucket(forests) -> Dict[str, BucketForest]:
    return {f.bucket: f for f in forests}


def _parents(forest: BucketForest) -> Dict[str, Optional[str]]:
    """child id -> parent id (None for roots)."""
    result: Dict[str, Optional[str]] = {root.id: None for root in forest.roots}
    for node in forest.iter_nodes():
        for child in node.children:
            result[child.id] = node.id
    return result


def _node(forest: BucketForest, rid: str) -> OrgNode:
    for node in forest.iter_nodes():
        if node.id == rid:
            return node
    raise AssertionError(f"{rid!r} not in {forest.bucket!r}")


def _bob():
    return _rec("bob", "Bob", "IT Manager", ["Consultant Team 3", "Facilities"])


# ---------------------------------------------------------------------------
# Reference scenarios
# ---------------------------------------------------------------------------

def test_dual_role_it_manager():
    records = [_bob(), _rec("alice", "Alice", "IT Consultant", ["Consultant Team 3"], "bob")]
    forests = build_forests(records)
    validate_forests(records, forests)

    assert [f.bucket for f in forests] == [consultant_team(3), IT_MANAGERS, FACILITIES]
    buckets = _by_bucket(forests)

    team = buckets[consultant_team(3)]
    assert [r.id for r in team.roots] == ["bob"]
    assert [c.id for c in team.roots[0].children] == ["alice"]
    assert team.roots[0].children[0].manager_display_name == "Bob"

    assert [r.id for r in buckets[IT_MANAGERS].roots] == ["bob"]
    assert buckets[IT_MANAGERS].roots[0].children == ()
    assert [r.id for r in buckets[FACILITIES].roots] == ["bob"]


def test_nodes_not_shared_across_buckets():
    records = [_bob(), _rec("alice", "Alice", "IT Consultant", ["Consultant Team 3"], "bob")]
    buckets = _by_bucket(build_forests(records))
    team_bob = buckets[consultant_team(3)].roots[0]
    itm_bob = buckets[IT_MANAGERS].roots[0]
    fac_bob = buckets[FACILITIES].roots[0]
    assert team_bob is not itm_bob and itm_bob is not fac_bob
    assert len(team_bob.children) == 1 and len(itm_bob.children) == 0


def test_cto_in_two_forests():
    records = [_rec("carol", "Carol", "Chief Technology Officer", ["Network Engineering"])]
    forests = build_forests(records)
    validate_forests(records, forests)
    assert [f.bucket for f in forests] == [C_SUITE, NETWORK_ENGINEERS]
    for forest in forests:
        assert [r.id for r in forest.roots] == ["carol"]


def test_lone_systems_engineer():
    forests = build_forests([_rec("dave", "Dave", "Systems Engineer")])
    assert len(forests) == 1
    assert forests[0].bucket == SYSTEM_ENGINEERS
    assert forests[0].roots[0].id == "dave"
    assert forests[0].roots[0].manager_display_name is None


def test_consultant_without_team_number():
    records = [_bob(), _rec("eve", "Eve", "IT Consultant", [""], "bob")]
    forests = build_forests(records)
    validate_forests(records, forests)
    buckets = _by_bucket(forests)
    assert [r.id for r in buckets[OTHER].roots] == ["eve"]
    team_ids = {n.id for n in buckets[consultant_team(3)].iter_nodes()}
    assert team_ids == {"bob"}
    assert consultant_team(1) not in buckets


def test_cycle_across_buckets():
    records = [
        _rec("frank", "Frank", "Network Engineer", None, "grace"),
        _rec("grace", "Grace", "Software Engineer", None, "frank"),
    ]
    forests = build_forests(records)
    validate_forests(records, forests)
    buckets = _by_bucket(forests)
    assert [r.id for r in buckets[NETWORK_ENGINEERS].roots] == ["frank"]
    assert [r.id for r in buckets[SOFTWARE_ENGINEERS].roots] == ["grace"]
    assert buckets[NETWORK_ENGINEERS].roots[0].manager_display_name == "Grace"


# ---------------------------------------------------------------------------
# Pass ordering
# ---------------------------------------------------------------------------

def test_subordinate_listed_before_manager():
    records = [_rec("alice", "Alice", "IT Consultant", ["Consultant Team 3"], "bob"), _bob()]
    buckets = _by_bucket(build_forests(records))
    team = buckets[consultant_team(3)]
    assert _parents(team) == {"bob": None, "alice": "bob"}


def test_walk_skips_non_members():
    records = [
        _rec("ceo", "Cee", "CEO"),
        _rec("bob", "Bob", "IT Manager", ["Consultant Team 3"], "ceo"),
        _rec("lead", "Lee", "Project Lead", None, "bob"),
        _rec("alice", "Alice", "IT Consultant", ["Consultant Team 3"], "lead"),
    ]
    forests = build_forests(records)
    validate_forests(records, forests)
    team = _by_bucket(forests)[consultant_team(3)]
    assert _parents(team) == {"bob": None, "alice": "bob"}
    assert _node(team, "alice").manager_display_name == "Lee"


def test_coo_heads_it_managers():
    records = [
        _rec("olivia", "Olivia", "COO", ["ITM"]),
        _rec("ian", "Ian", "IT Manager", None, "olivia"),
        _rec("isla", "Isla", "IT Manager", None, "olivia"),
    ]
    forests = build_forests(records)
    validate_forests(records, forests)
    buckets = _by_bucket(forests)
    assert _parents(buckets[IT_MANAGERS]) == {"olivia": None, "ian": "olivia", "isla": "olivia"}
    assert [c.id for c in buckets[IT_MANAGERS].roots[0].children] == ["ian", "isla"]
    assert buckets[C_SUITE].roots[0].children == ()


def test_cto_heads_network_engineers():
    records = [
        _rec("nate", "Nate", "Network Engineer", None, "carl"),
        _rec("carl", "Carl", "CTO", ["Network Engineering"], "ceo"),
        _rec("ceo", "Cee", "CEO"),
    ]
    buckets = _by_bucket(build_forests(records))
    assert _parents(buckets[NETWORK_ENGINEERS]) == {"carl": None, "nate": "carl"}
    assert _parents(buckets[C_SUITE]) == {"ceo": None, "carl": "ceo"}


# ---------------------------------------------------------------------------
# Facilities
# ---------------------------------------------------------------------------

def test_facilities_direct_manager_override():
    records = [
        _rec("hank", "Hank", "IT Manager", ["Facilities"]),
        _rec("ivan", "Ivan", "IT Manager", ["Facilities"], "hank"),
        _rec("fay", "Fay", "Facilities Coordinator", ["Facilities"], "ivan"),
    ]
    forests = build_forests(records)
    validate_forests(records, forests)
    facilities = _by_bucket(forests)[FACILITIES]
    parents = _parents(facilities)
    assert parents["fay"] == "ivan"
    assert parents["ivan"] == "hank"
    assert parents["hank"] is None


def test_facilities_walks_past_non_member_manager():
    records = [
        _rec("ivan", "Ivan", "IT Manager", ["Facilities"]),
        _rec("sam", "Sam", "Systems Engineer", None, "ivan"),
        _rec("fay", "Fay", "Facilities Coordinator", ["Facilities"], "sam"),
    ]
    facilities = _by_bucket(build_forests(records))[FACILITIES]
    assert _parents(facilities) == {"ivan": None, "fay": "ivan"}


def test_facilities_fallback():
    records = [
        _rec("fred", "Fred", "Custodian", ["Facilities"]),
        _rec("ivan", "Ivan", "IT Manager", ["Facilities"]),
    ]
    forests = build_forests(records)
    validate_forests(records, forests)
    facilities = _by_bucket(forests)[FACILITIES]
    assert _parents(facilities) == {"ivan": None, "fred": "ivan"}


def test_facilities_fallback_skips_managers():
    records = [
        _rec("ivan", "Ivan", "IT Manager", ["Facilities"]),
        _rec("max", "Max", "Facilities Manager"),
    ]
    facilities = _by_bucket(build_forests(records))[FACILITIES]
    assert [r.id for r in facilities.roots] == ["ivan", "max"]


# ---------------------------------------------------------------------------
# Consultant-team fallback
# ---------------------------------------------------------------------------

def test_consultant_fallback_to_team_it_manager():
    records = [
        _rec("cal", "Cal", "IT Consultant", ["Consultant Team 2"]),
        _rec("mia", "Mia", "IT Manager", ["Consultant Team 2"]),
        _rec("pat", "Pat", "Project Coordinator", ["Consultant Team 2"]),
    ]
    forests = build_forests(records)
    validate_forests(records, forests)
    team = _by_bucket(forests)[consultant_team(2)]
    parents = _parents(team)
    assert parents["cal"] == "mia"
    assert parents["mia"] is None
    assert parents["pat"] is None


def test_consultant_fallback_ignores_other_teams():
    records = [
        _rec("mia", "Mia", "IT Manager", ["Consultant Team 2"]),
        _rec("cal", "Cal", "IT Consultant", ["Consultant Team 5"]),
    ]
    team = _by_bucket(build_forests(records))[consultant_team(5)]
    assert [r.id for r in team.roots] == ["cal"]


# ---------------------------------------------------------------------------
# Malformed manager references
# ---------------------------------------------------------------------------

def test_dangling_manager():
    records = [_rec("gus", "Gus", "Network Engineer", None, "ghost")]
    forests = build_forests(records)
    validate_forests(records, forests)
    root = forests[0].roots[0]
    assert root.id == "gus" and root.manager_display_name is None


def test_self_manager():
    records = [_rec("sol", "Sol", "Network Engineer", None, "sol")]
    forests = build_forests(records)
    validate_forests(records, forests)
    assert [r.id for r in forests[0].roots] == ["sol"]


def test_cycle_within_one_bucket():
    records = [
        _rec("frank", "Frank", "Systems Engineer", None, "grace"),
        _rec("grace", "Grace", "Systems Engineer", None, "frank"),
    ]
    forests = build_forests(records)
    validate_forests(records, forests)
    assert _parents(forests[0]) == {"grace": None, "frank": "grace"}


def test_three_cycle_within_one_bucket():
    records = [
        _rec("a", "A", "Systems Engineer", None, "b"),
        _rec("b", "B", "Systems Engineer", None, "c"),
        _rec("c", "C", "Systems Engineer", None, "a"),
    ]
    forests = build_forests(records)
    validate_forests(records, forests)
    assert _parents(forests[0]) == {"c": None, "b": "c", "a": "b"}


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

_TITLES = [
    "IT Manager", "IT Consultant", "Consultant", "CEO", "CTO", "COO",
    "Director", "Systems Engineer", "Network Engineer", "Software Engineer",
    "GRC Engineer", "GRC Manager", "Operations Manager", "Facilities Coordinator",
    "Custodian", "Receptionist", None,
]
_TEAMS = [
    "", "Consultant Team 1", "Consultant Team 2", "Consultant Team 3",
    "Consultant Team 7", "Facilities", "ITM", "Network Engineering",
    "Software Engineering", "Consultants", "Consultant Team 2, Facilities",
]


def _generated_directory(seed: int, size: int):
    rng = random.Random(seed)
    ids = [f"p{i:03d}" for i in range(size)]
    records = []
    for rid in ids:
        manager = rng.choice(ids + [None, None, "ghost"])
        records.append(_rec(rid, rid.upper(), rng.choice(_TITLES), rng.choice(_TEAMS), manager))
    return records


def test_generated_directory_invariants():
    for seed in (1, 7, 42):
        records = _generated_directory(seed, 120)
        builder = ForestBuilder(records)
        forests = builder.build()
        validate_forests(records, forests, builder.memberships)
        total_nodes = sum(len(list(f.iter_nodes())) for f in forests)
        expected = sum(len(m.buckets()) for m in builder.memberships.values())
        assert total_nodes >= expected


def test_determinism():
    records = _generated_directory(11, 80)
    first = build_forests(records)
    second = build_forests(list(records))
    assert first == second
    assert canonical_hash(first) == canonical_hash(second)

    builder = ForestBuilder(records)
    assert builder.build() == builder.build()


def test_empty_directory():
    assert build_forests([]) == []


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def main():
    tests = [
        ("Scenario: dual-role IT Manager", test_dual_role_it_manager),
        ("Scenario: nodes not shared", test_nodes_not_shared_across_buckets),
        ("Scenario: CTO in two forests", test_cto_in_two_forests),
        ("Scenario: lone systems engineer", test_lone_systems_engineer),
        ("Scenario: consultant without team", test_consultant_without_team_number),
        ("Scenario: cycle across buckets", test_cycle_across_buckets),
        ("Passes: subordinate before manager", test_subordinate_listed_before_manager),
        ("Walk: skips non-members", test_walk_skips_non_members),
        ("Walk: COO heads IT Managers", test_coo_heads_it_managers),
        ("Walk: CTO heads Network Engineers", test_cto_heads_network_engineers),
        ("Facilities: direct manager override", test_facilities_direct_manager_override),
        ("Facilities: walk past non-member", test_facilities_walks_past_non_member_manager),
        ("Facilities: fallback", test_facilities_fallback),
        ("Facilities: fallback skips managers", test_facilities_fallback_skips_managers),
        ("Consultant: fallback to IT Manager", test_consultant_fallback_to_team_it_manager),
        ("Consultant: fallback other team", test_consultant_fallback_ignores_other_teams),
        ("Malformed: dangling manager", test_dangling_manager),
        ("Malformed: self manager", test_self_manager),
        ("Malformed: 2-cycle in one bucket", test_cycle_within_one_bucket),
        ("Malformed: 3-cycle in one bucket", test_three_cycle_within_one_bucket),
        ("Property: generated invariants", test_generated_directory_invariants),
        ("Property: determinism", test_determinism),
        ("Edge: empty directory", test_empty_directory),
    ]

    print(f"\nRunning {len(tests)} tests...\n")
    for name, fn in tests:
        _test(name, fn)

    print(f"\n{'='*60}")
    print(f"  {_pass} passed, {_fail} failed out of {_pass + _fail}")
    print(f"{'='*60}")

    if _fail > 0:
        sys.exit(1)


if __name__ == "__main__":
    main()
