"""
Org Chart Kernel — Directory Snapshot Decoder

Turns a JSON directory payload (a list of person objects) into
PersonRecord values. This is the one place raw input is validated;
past this point the kernel never raises on data quality.

Accepted keys per person (camelCase or snake_case):
  id (required), name / displayName / display_name, jobTitle / job_title,
  team / teams / teamLabels / team_labels (comma string or list),
  managerId / manager_id.

Rules:
  - Ids are coerced to str and must be non-empty and unique.
  - Team strings are split into labels once, here.
  - No defaults beyond "Unknown" for a missing name.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional

from .domain_types import PersonRecord


# ══════════════════════════════════════════════════════════════
# Exception Hierarchy
# ══════════════════════════════════════════════════════════════

class SnapshotError(Exception):
    """Base exception for all snapshot operations."""


class DirectoryDecodeError(SnapshotError):
    """Raised when a directory payload cannot be turned into records."""


# ══════════════════════════════════════════════════════════════
# Decoder
# ══════════════════════════════════════════════════════════════

_NAME_KEYS = ("displayName", "display_name", "name")
_TITLE_KEYS = ("jobTitle", "job_title", "title")
_TEAM_KEYS = ("teamLabels", "team_labels", "teams", "team")
_MANAGER_KEYS = ("managerId", "manager_id")


def _first(entry: Dict[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        if entry.get(key) is not None:
            return entry[key]
    return None


def _optional_str(value: Any, field_name: str, index: int) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list, tuple)):
        raise DirectoryDecodeError(
            f"Entry {index}: {field_name} must be a string, got {type(value).__name__}"
        )
    return str(value)


def record_from_dict(entry: Any, index: int = 0) -> PersonRecord:
    """Decode one person object. Hard fail on structural problems."""
    if not isinstance(entry, dict):
        raise DirectoryDecodeError(
            f"Entry {index}: expected an object, got {type(entry).__name__}"
        )
    raw_id = entry.get("id")
    if raw_id is None or str(raw_id).strip() == "":
        raise DirectoryDecodeError(f"Entry {index}: missing 'id'")

    team = _first(entry, _TEAM_KEYS)
    if team is not None and not isinstance(team, (str, list, tuple)):
        raise DirectoryDecodeError(
            f"Entry {index}: team must be a string or a list of strings"
        )
    if isinstance(team, (list, tuple)):
        team = [_optional_str(t, "team label", index) for t in team]

    manager_id = _optional_str(_first(entry, _MANAGER_KEYS), "managerId", index)

    return PersonRecord.create(
        record_id=str(raw_id),
        display_name=_optional_str(_first(entry, _NAME_KEYS), "name", index),
        job_title=_optional_str(_first(entry, _TITLE_KEYS), "jobTitle", index),
        team=team,
        manager_id=manager_id,
    )


def records_from_dicts(entries: Any) -> List[PersonRecord]:
    """Decode a list of person objects, enforcing unique ids."""
    if not isinstance(entries, list):
        raise DirectoryDecodeError(
            f"Directory must be a list of objects, got {type(entries).__name__}"
        )
    records: List[PersonRecord] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        record = record_from_dict(entry, index)
        if record.id in seen:
            raise DirectoryDecodeError(
                f"Entry {index}: duplicate id {record.id!r}"
            )
        seen.add(record.id)
        records.append(record)
    return records


def decode_directory(data: str) -> List[PersonRecord]:
    """
    Decode a JSON directory string.

    Accepts either a bare list or an object with a "users" / "records" list.
    """
    try:
        obj = json.loads(data)
    except (json.JSONDecodeError, TypeError) as exc:
        raise DirectoryDecodeError(f"Invalid JSON: {exc}") from exc

    if isinstance(obj, dict):
        for key in ("records", "users"):
            if key in obj:
                return records_from_dicts(obj[key])
        raise DirectoryDecodeError(
            "Directory object must contain a 'records' or 'users' list"
        )
    return records_from_dicts(obj)
