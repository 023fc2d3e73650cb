"""
Org Chart Kernel — Bucket Classifier v1.0

Maps one record's (job title, team labels) to exactly one primary bucket.

Rules are an ordered table of (name, resolver) pairs. Each resolver looks
at the lower-cased title and team text and returns a bucket or None; the
first non-None answer wins. All matching is case-insensitive.

Precedence:
  1. Manager-of-function titles
  2. Executives (word-boundary C-level patterns)
  3. Individual-contributor engineers
  4. Numbered consultant teams
  5. Facilities
  6. Other
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .buckets import (
    C_SUITE,
    FACILITIES,
    GRC_ENGINEERS,
    IT_MANAGERS,
    NETWORK_ENGINEERS,
    OTHER,
    SOFTWARE_ENGINEERS,
    SYSTEM_ENGINEERS,
    consultant_team,
    is_catalog_team_number,
)
from .domain_types import split_team_labels


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

C_LEVEL_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\bceo\b"),
    re.compile(r"\bcto\b"),
    re.compile(r"\bcoo\b"),
    re.compile(r"\bcfo\b"),
    re.compile(r"\bcpo\b"),
    re.compile(r"\bchief\s+(executive|technology|operating|financial|product|officer)\b"),
    re.compile(r"\bchief\b.*\bofficer\b"),
    re.compile(r"\bc-suite\b"),
    re.compile(r"\bc suite\b"),
    re.compile(r"\bdirector\b"),
)

CTO_PATTERN = re.compile(r"\bcto\b|\bchief\s+technology\s+officer\b")
COO_PATTERN = re.compile(r"\bcoo\b|\bchief\s+operating\s+officer\b")

CONSULTANT_TEAM_PATTERN = re.compile(r"consultant\s*team\s*(\d+)")
TITLE_TEAM_PATTERN = re.compile(r"consultant\s*(?:team\s*)?(\d+)")
BARE_TEAM_PATTERN = re.compile(r"team\s*(\d+)")
ANY_NUMBER_PATTERN = re.compile(r"(\d+)")


# ---------------------------------------------------------------------------
# Shared text predicates
# ---------------------------------------------------------------------------

def is_c_level(title: str) -> bool:
    return any(pattern.search(title) for pattern in C_LEVEL_PATTERNS)


def is_cto(title: str) -> bool:
    return CTO_PATTERN.search(title) is not None


def is_coo(title: str) -> bool:
    return COO_PATTERN.search(title) is not None


def is_it_manager_title(title: str) -> bool:
    return "it manager" in title


def is_consultant_title(title: str) -> bool:
    """Non-manager consultant titles ("IT Consultant", "Consultant II", ...)."""
    return "consultant" in title and "manager" not in title


def mentions_itm(team: str) -> bool:
    return "itm" in team or "it manager" in team


def mentions_facilities(team: str) -> bool:
    return "facilities" in team


def mentions_network_engineering(team: str) -> bool:
    return "network engineering" in team or "network engineer" in team


def explicit_consultant_teams(labels: Sequence[str]) -> Tuple[str, ...]:
    """
    Buckets named by explicit "consultant team N" labels, in label order,
    then any found only in the joined label text. Only catalog team
    numbers count.
    """
    candidates = [label.lower() for label in labels]
    candidates.append(" ".join(candidates))
    found: List[str] = []
    for text in candidates:
        for match in CONSULTANT_TEAM_PATTERN.finditer(text):
            bucket = _team_bucket(match.group(1))
            if bucket is not None and bucket not in found:
                found.append(bucket)
    return tuple(found)


def explicit_consultant_team(labels: Sequence[str]) -> Optional[str]:
    """First explicit "consultant team N" bucket, if any."""
    teams = explicit_consultant_teams(labels)
    return teams[0] if teams else None


def _team_bucket(digits: str) -> Optional[str]:
    number = int(digits)
    if not is_catalog_team_number(number):
        return None
    return consultant_team(number)


def _first_team(pattern: re.Pattern, text: str) -> Optional[str]:
    for match in pattern.finditer(text):
        bucket = _team_bucket(match.group(1))
        if bucket is not None:
            return bucket
    return None


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _Context:
    title: str
    team: str
    labels: Tuple[str, ...]


Resolver = Callable[[_Context], Optional[str]]


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    resolve: Resolver


def _when(predicate: Callable[[_Context], bool], bucket: str) -> Resolver:
    return lambda ctx: bucket if predicate(ctx) else None


def _software_manager(ctx: _Context) -> bool:
    if "manager" not in ctx.title:
        return False
    if "software engineer" in ctx.title:
        return True
    # A label alone never pulls an IT Manager out of IT Managers.
    return "software engineering" in ctx.team and not is_it_manager_title(ctx.title)


def _individual(predicate: Callable[[_Context], bool]) -> Callable[[_Context], bool]:
    return lambda ctx: "manager" not in ctx.title and predicate(ctx)


def _consultant_team(ctx: _Context) -> Optional[str]:
    bucket = explicit_consultant_team(ctx.labels)
    if bucket is None:
        bucket = _first_team(CONSULTANT_TEAM_PATTERN, ctx.title)
    if bucket is not None:
        return bucket
    if not is_consultant_title(ctx.title):
        return None

    bucket = _first_team(TITLE_TEAM_PATTERN, ctx.title)
    if bucket is not None:
        return bucket
    if "consultant" not in ctx.team:
        return None
    bucket = _first_team(BARE_TEAM_PATTERN, ctx.team)
    if bucket is not None:
        return bucket
    # Heuristic of last resort: any number in a consultant team string.
    return _first_team(ANY_NUMBER_PATTERN, ctx.team)


CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    # 1. Managers of a function
    ClassificationRule("se_manager", _when(
        lambda c: "se manager" in c.title or "systems engineering manager" in c.title,
        SYSTEM_ENGINEERS,
    )),
    ClassificationRule("grc_manager", _when(lambda c: "grc manager" in c.title, GRC_ENGINEERS)),
    ClassificationRule("software_manager", _when(_software_manager, SOFTWARE_ENGINEERS)),
    ClassificationRule("it_manager", _when(lambda c: is_it_manager_title(c.title), IT_MANAGERS)),
    ClassificationRule("operations_manager_itm", _when(
        lambda c: "operations manager" in c.title and mentions_itm(c.team),
        IT_MANAGERS,
    )),
    # 2. Executives
    ClassificationRule("c_level", _when(lambda c: is_c_level(c.title), C_SUITE)),
    # 3. Individual-contributor engineers
    ClassificationRule("system_engineer", _when(_individual(
        lambda c: "system engineer" in c.title or "systems engineer" in c.title,
    ), SYSTEM_ENGINEERS)),
    ClassificationRule("network_engineer", _when(_individual(
        lambda c: "network engineer" in c.title,
    ), NETWORK_ENGINEERS)),
    ClassificationRule("software_engineer", _when(_individual(
        lambda c: "software engineer" in c.title or "software engineering" in c.team,
    ), SOFTWARE_ENGINEERS)),
    ClassificationRule("grc_engineer", _when(_individual(
        lambda c: "grc" in c.title and "engineer" in c.title,
    ), GRC_ENGINEERS)),
    # 4. Numbered consultant teams
    ClassificationRule("consultant_team", _consultant_team),
    # 5. Facilities
    ClassificationRule("facilities", _when(
        lambda c: mentions_facilities(c.team) or "facilities" in c.title,
        FACILITIES,
    )),
)

FALLBACK_RULE = "fallback"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

TeamInput = Union[str, Iterable[str], None]


def classify_with_rule(
    job_title: Optional[str],
    team_labels: TeamInput = None,
) -> Tuple[str, str]:
    """Return (bucket, rule name). Never raises."""
    labels = split_team_labels(team_labels)
    ctx = _Context(
        title=(job_title or "").lower(),
        team=" ".join(labels).lower(),
        labels=labels,
    )
    for rule in CLASSIFICATION_RULES:
        bucket = rule.resolve(ctx)
        if bucket is not None:
            return bucket, rule.name
    return OTHER, FALLBACK_RULE


def classify(job_title: Optional[str], team_labels: TeamInput = None) -> str:
    """Primary bucket for a (job title, team labels) pair."""
    return classify_with_rule(job_title, team_labels)[0]


def explain(job_title: Optional[str], team_labels: TeamInput = None) -> str:
    """Name of the rule that decides the primary bucket."""
    return classify_with_rule(job_title, team_labels)[1]
