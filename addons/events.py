"""Catalog change notifications."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from addons.package import Package

logger = logging.getLogger(__name__)

Listener = Callable[["Package"], None]


class CatalogEvent(str, Enum):
    """Events broadcast by the catalog, in emission order."""

    NEW_PACKAGE = "new_package"  # fresh install only
    THEMES_CHANGED = "themes_changed"
    PALETTES_CHANGED = "palettes_changed"
    CHANGED = "changed"


class EventBus:
    """Synchronous, ordered event delivery.

    Listeners run in registration order on the caller's thread. A listener
    that raises is logged and the remaining listeners still run.
    """

    def __init__(self) -> None:
        self._listeners: dict[CatalogEvent, list[Listener]] = {}

    def connect(self, event: CatalogEvent, listener: Listener) -> None:
        """Register a listener for an event."""
        self._listeners.setdefault(event, []).append(listener)

    def disconnect(self, event: CatalogEvent, listener: Listener) -> bool:
        """Remove a listener.

        Returns:
            True if the listener was registered.
        """
        listeners = self._listeners.get(event, [])
        if listener not in listeners:
            return False
        listeners.remove(listener)
        return True

    def emit(self, event: CatalogEvent, package: Package) -> None:
        """Deliver an event to every listener."""
        listeners = list(self._listeners.get(event, []))
        logger.debug("Emitting %s for '%s' (%d listeners)", event.value, package.name, len(listeners))
        for listener in listeners:
            try:
                listener(package)
            except Exception:
                logger.exception("Listener for %s raised on '%s'", event.value, package.name)
