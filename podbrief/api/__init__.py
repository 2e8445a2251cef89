"""HTTP API (FastAPI). Run with `python -m podbrief.api`."""

from .app import app

__all__ = ["app"]
