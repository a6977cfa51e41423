"""Session bootstrap module.

Creates and wires the components of one revision session. Each call builds
its own event bus, store and controller, so two sessions never share state.

The bootstrap process:
1. Creates the event bus and revision store
2. Creates the HTTP client and revision adapter
3. Creates the controller with mode flags from settings
4. Creates the section editor and panel view model

Usage:
    from redline.bootstrap import create_session

    session = create_session(settings, document=document)
    await session.controller.load_revisions()
    ...
    await session.aclose()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import httpx

from .application.revision_ops import ModeProvider, Notifier, RevisionController, StaticModeProvider
from .domain.revision_store import RevisionStore
from .domain.section_editing import SectionEditor
from .events import EventBus
from .infrastructure.api_client import ApiClient, ClientSettings
from .infrastructure.revision_adapter import RevisionAdapter
from .models.document_models import Document
from .presentation.panel_view_model import PanelViewModel
from .services.settings import Settings, redact_secret
from .utils import logging as logging_utils

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RevisionSession:
    """The wired components of one session."""

    settings: Settings
    event_bus: EventBus
    store: RevisionStore
    api: ApiClient
    adapter: RevisionAdapter
    controller: RevisionController
    editor: SectionEditor
    panel: PanelViewModel

    async def aclose(self) -> None:
        """Release the HTTP client and detach event subscribers."""

        await self.api.aclose()
        self.event_bus.clear()


def configure_logging(settings: Settings, *, force: bool = False, console: bool = True) -> Path:
    """Configure logging from ``settings.debug_logging`` and ``settings.log_dir``."""

    level = logging.DEBUG if settings.debug_logging else logging.INFO
    log_path = logging_utils.setup_logging(level, log_dir=settings.log_dir, console=console, force=force)
    _LOGGER.debug("Logging configured (level=%s, path=%s)", logging.getLevelName(level), log_path)
    return log_path


def client_settings_from(settings: Settings) -> ClientSettings:
    return ClientSettings(
        base_url=settings.base_url,
        api_token=settings.api_token,
        request_timeout=settings.request_timeout,
        max_retries=settings.max_retries,
        retry_min_seconds=settings.retry_min_seconds,
        retry_max_seconds=settings.retry_max_seconds,
        default_headers=dict(settings.default_headers) or None,
    )


def create_session(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    notifier: Notifier | None = None,
    mode: ModeProvider | None = None,
    document: Document | None = None,
    only_ai: bool = False,
) -> RevisionSession:
    """Create and wire all components of a revision session.

    Logging is configured through :func:`configure_logging` when
    ``settings.debug_logging`` or ``settings.log_dir`` is set; otherwise the
    host application's logging setup is left alone.

    Args:
        settings: Session settings; defaults are used when omitted.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
        notifier: Receives operation outcomes; logs them when omitted.
        mode: Mode flags; derived from ``settings`` when omitted.
        document: Optional document loaded into the store before returning.
        only_ai: Restrict the panel to AI-generated revisions.

    Returns:
        The wired :class:`RevisionSession`.
    """

    settings = settings or Settings()
    if settings.debug_logging or settings.log_dir:
        configure_logging(settings)
    _LOGGER.debug(
        "Creating revision session (base_url=%s, token=%s, demo=%s)",
        settings.base_url,
        redact_secret(settings.api_token) or "<none>",
        settings.demo_mode,
    )

    event_bus = EventBus()
    store = RevisionStore(event_bus)

    api = ApiClient(client_settings_from(settings), transport=transport)
    adapter = RevisionAdapter(api)

    mode = mode or StaticModeProvider(
        is_demo_mode=settings.demo_mode,
        using_mock_data=settings.use_mock_data,
    )
    controller = RevisionController(
        store,
        adapter,
        mode=mode,
        notifier=notifier,
        document_id=settings.document_id,
    )

    editor = SectionEditor(store)
    panel = PanelViewModel(
        store,
        controller,
        only_ai=only_ai,
        scope_to_document=settings.scope_history_to_document,
    )

    if document is not None:
        store.set_current_document(document)

    _LOGGER.debug("Revision session created")
    return RevisionSession(
        settings=settings,
        event_bus=event_bus,
        store=store,
        api=api,
        adapter=adapter,
        controller=controller,
        editor=editor,
        panel=panel,
    )


__all__ = ["RevisionSession", "client_settings_from", "configure_logging", "create_session"]
