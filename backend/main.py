"""
main.py — Convenience entry point for the upcoming events block.

The FastAPI application is defined in upcoming_events/api/main.py.
This file re-exports `app` so uvicorn can be invoked from backend/ as:

    uvicorn main:app --reload --port 8000
"""

from upcoming_events.api.main import app  # noqa: F401  (re-export)
