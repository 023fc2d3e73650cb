# file: main_vercel.py
"""
Vercel entry point for the Org Chart API.

Vercel's Python runtime looks for a module-level ``app``; the real
application lives in backend/main.py.
"""
import os
import sys

# Repo root holds both org_chart/ and backend/
_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, _ROOT)

from backend.main import app  # noqa: E402

__all__ = ["app"]
