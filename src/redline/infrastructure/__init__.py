"""Infrastructure adapters for the remote revision API."""

from __future__ import annotations

from .api_client import ApiClient, ApiResponse, ClientSettings
from .revision_adapter import RevisionAdapter

__all__ = ["ApiClient", "ApiResponse", "ClientSettings", "RevisionAdapter"]
