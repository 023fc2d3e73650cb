# file: backend/main.py
"""
FastAPI Backend — Org Chart Kernel API v1.

Stateless: every request classifies and builds from the posted snapshot.
No in-memory state between requests.

Endpoints:
  GET  /health     — liveness
  GET  /buckets    — bucket catalog in display order
  POST /classify   — primary bucket, secondaries and deciding rule
  POST /org-chart  — per-bucket forests + hash + diagnostics
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, List, Optional, Union

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(__file__), ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

# Add project root to path for kernel imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from org_chart.buckets import BUCKET_ORDER, is_valid_bucket
from org_chart.classifier import classify_with_rule
from org_chart.diagnostics import compute_diagnostics
from org_chart.domain_types import PersonRecord
from org_chart.filtering import filter_forests
from org_chart.forest import ForestBuilder
from org_chart.hashing import canonical_hash
from org_chart.invariants import ForestInvariantError, validate_forests
from org_chart.memberships import secondary_buckets
from org_chart.snapshot import DirectoryDecodeError, records_from_dicts

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
VALIDATE_FORESTS = os.environ.get("ORG_CHART_VALIDATE", "1").lower() not in (
    "0", "false", "no", "off",
)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="OrgChart API",
    version="1.0.0",
    description="Deterministic Org Chart Kernel — bucket classification and reporting forests",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        FRONTEND_URL,
        "http://localhost:3000",
        "http://localhost:3001",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------


class ClassifyRequest(BaseModel):
    job_title: Optional[str] = None
    team: Union[str, List[str], None] = None


class OrgChartRequest(BaseModel):
    records: List[Dict[str, Any]]
    query: str = ""
    bucket: Optional[str] = None


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def _decode_records(entries: List[Dict[str, Any]]) -> List[PersonRecord]:
    try:
        return records_from_dicts(entries)
    except DirectoryDecodeError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


def _build_org_chart(
    records: List[PersonRecord],
    query: str = "",
    bucket: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Classify → build forests → (validate) → filter → serialize.

    The hash covers the filtered forests actually returned.
    """
    builder = ForestBuilder(records)
    forests = builder.build()

    if VALIDATE_FORESTS:
        try:
            validate_forests(records, forests, builder.memberships)
        except ForestInvariantError as exc:
            logger.error("Forest invariant violated: %s", exc)
            raise HTTPException(status_code=500, detail=f"Forest invariant violated: {exc}")

    shown = filter_forests(forests, query=query, bucket=bucket)
    logger.info(
        "Built %d bucket(s) from %d record(s), returning %d",
        len(forests), len(records), len(shown),
    )
    return {
        "buckets": [forest.to_dict() for forest in shown],
        "hash": canonical_hash(shown),
        "diagnostics": compute_diagnostics(records, builder.memberships),
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
def health():
    return {"status": "ok", "version": "1.0.0"}


@app.get("/buckets")
def list_buckets():
    return {"buckets": list(BUCKET_ORDER)}


@app.post("/classify")
def classify_record(req: ClassifyRequest):
    """
    Classify one (job title, team) pair without building any forest.
    """
    primary, rule = classify_with_rule(req.job_title, req.team)
    record = PersonRecord.create("classify", job_title=req.job_title, team=req.team)
    return {
        "primary": primary,
        "secondary": list(secondary_buckets(record, primary)),
        "rule": rule,
    }


@app.post("/org-chart")
def org_chart(req: OrgChartRequest):
    """
    Build the per-bucket forests for a directory snapshot.

    Optional ``bucket`` restricts the response to one catalog bucket;
    optional ``query`` keeps matching nodes with their ancestors.
    """
    if req.bucket is not None and not is_valid_bucket(req.bucket):
        raise HTTPException(status_code=400, detail=f"Unknown bucket: {req.bucket!r}")
    records = _decode_records(req.records)
    return _build_org_chart(records, query=req.query, bucket=req.bucket)
