"""Installed add-on packages.

A Package is the in-memory record of one add-on directory: its identity,
whether it is enabled, and the absolute paths of the themes and palettes it
contributes. Packages are created and owned by the Catalog.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Mapping

from addons.settings import EXTENSIONS_SECTION, SettingsStore

logger = logging.getLogger(__name__)

# The default theme add-on can never be disabled or uninstalled
DEFAULT_THEME_PACKAGE = "default-theme"


def _no_selected_theme() -> str | None:
    return None


class Package:
    """An installed add-on.

    Example:
        >>> pkg = Package(path, "my-themes", "My Themes", settings=store)
        >>> pkg.add_theme("dark", path / "themes" / "dark")
        >>> pkg.theme_path("dark")
    """

    def __init__(
        self,
        path: Path,
        name: str,
        display_name: str,
        settings: SettingsStore,
        enabled: bool = True,
        builtin: bool = False,
        selected_theme: Callable[[], str | None] | None = None,
    ):
        """Initialize a package record.

        Args:
            path: Root directory of the add-on.
            name: Unique add-on name.
            display_name: Human readable name.
            settings: Store where the enabled flag is persisted.
            enabled: Initial enabled state.
            builtin: True when the add-on ships with the host application.
            selected_theme: Returns the id of the theme currently in use.
        """
        self._path = Path(path)
        self._name = name
        self._display_name = display_name
        self._settings = settings
        self._enabled = enabled
        self._installed = True
        self._builtin = builtin
        self._selected_theme = selected_theme or _no_selected_theme

        self._themes: dict[str, Path] = {}
        self._palettes: dict[str, Path] = {}

    @property
    def path(self) -> Path:
        return self._path

    @property
    def name(self) -> str:
        return self._name

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def installed(self) -> bool:
        return self._installed

    @property
    def builtin(self) -> bool:
        return self._builtin

    @property
    def themes(self) -> Mapping[str, Path]:
        """Theme id -> absolute path (read-only view)."""
        return MappingProxyType(self._themes)

    @property
    def palettes(self) -> Mapping[str, Path]:
        """Palette id -> absolute path (read-only view)."""
        return MappingProxyType(self._palettes)

    def add_theme(self, theme_id: str, path: Path) -> None:
        self._themes[theme_id] = Path(path)

    def add_palette(self, palette_id: str, path: Path) -> None:
        self._palettes[palette_id] = Path(path)

    def is_current_theme(self) -> bool:
        """Check if one of this package's themes is the selected theme."""
        return self._selected_theme() in self._themes

    def is_default_theme(self) -> bool:
        return self._name == DEFAULT_THEME_PACKAGE

    def can_be_disabled(self) -> bool:
        return (
            self._enabled
            and not self.is_current_theme()
            and not self.is_default_theme()
        )

    def can_be_uninstalled(self) -> bool:
        return (
            self._installed
            and not self._builtin
            and not self.is_current_theme()
            and not self.is_default_theme()
        )

    def enable(self, state: bool) -> None:
        """Enable or disable the package and persist the choice.

        Args:
            state: True to enable, False to disable.
        """
        if self._enabled == state:
            return

        self._settings.set_bool(EXTENSIONS_SECTION, self._name, state)
        self._settings.flush()

        self._enabled = state
        logger.info("Add-on '%s' %s", self._name, "enabled" if state else "disabled")

    def uninstall(self) -> None:
        """Delete the package files from disk.

        Does nothing if the package is already uninstalled or is protected
        (see can_be_uninstalled). The flags only change once the whole
        directory tree has been removed.

        Raises:
            OSError: If a file or directory cannot be deleted. The tree may
                be partially removed.
        """
        if not self._installed:
            return

        if not self.can_be_uninstalled():
            logger.warning("Refusing to uninstall protected add-on '%s'", self._name)
            return

        logger.info("Uninstalling add-on '%s' from %s", self._name, self._path)
        if self._path.exists():
            shutil.rmtree(self._path)

        self._enabled = False
        self._installed = False

    def __repr__(self) -> str:
        return (
            f"Package(name={self._name!r}, path={str(self._path)!r}, "
            f"enabled={self._enabled!r}, builtin={self._builtin!r})"
        )
