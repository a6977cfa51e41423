"""Section-level revision engine for document review."""

from __future__ import annotations

from .bootstrap import RevisionSession, create_session

__all__ = ["RevisionSession", "create_session"]
