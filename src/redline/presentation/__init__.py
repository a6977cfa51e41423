"""Presentation layer view models."""

from __future__ import annotations

from .panel_view_model import PanelViewModel, RevisionGroup, StatusFilter

__all__ = ["PanelViewModel", "RevisionGroup", "StatusFilter"]
