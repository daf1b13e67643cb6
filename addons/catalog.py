"""Catalog of installed add-ons.

Discovers add-ons in every search directory, keeps them in discovery
order, answers theme/palette lookups, and drives install, enable and
uninstall operations while broadcasting change events.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterator

from addons.errors import InstallError, ManifestParseError
from addons.events import CatalogEvent, EventBus
from addons.installer import ArchiveInstaller
from addons.manifest import MANIFEST_FILENAME, AddonManifest, ContributionKind, parse_manifest
from addons.package import Package
from addons.paths import SearchPaths
from addons.settings import EXTENSIONS_SECTION, SettingsStore

logger = logging.getLogger(__name__)


class Catalog:
    """Owns every known add-on package.

    Packages are kept in insertion order: discovery order first, then
    install order. Names are unique; when two directories declare the same
    name, the first one discovered wins.

    Example:
        >>> catalog = Catalog(ResourceFinder(), IniSettingsStore(settings_file))
        >>> catalog.palette_path("retro")
        >>> pkg = catalog.install_compressed(Path("my-themes.zip"))
        >>> catalog.enable_package(pkg, False)
    """

    def __init__(
        self,
        search_paths: SearchPaths,
        settings: SettingsStore,
        *,
        selected_theme: Callable[[], str | None] | None = None,
        events: EventBus | None = None,
        discover: bool = True,
    ):
        """Initialize the catalog and scan for add-ons.

        Args:
            search_paths: Resolver for the user and built-in directories.
            settings: Store for per-add-on enabled flags.
            selected_theme: Returns the id of the theme currently in use.
            events: Event bus to publish changes on (a new one by default).
            discover: Scan the search directories immediately.
        """
        self.search_paths = search_paths
        self.settings = settings
        self.selected_theme = selected_theme
        self.events = events or EventBus()

        self.user_extensions_dir = Path(search_paths.user_extensions_dir()).resolve()
        logger.info("User extensions path '%s'", self.user_extensions_dir)

        self._packages: list[Package] = []
        if discover:
            self.discover()

    @property
    def packages(self) -> tuple[Package, ...]:
        return tuple(self._packages)

    def __iter__(self) -> Iterator[Package]:
        return iter(tuple(self._packages))

    def __len__(self) -> int:
        return len(self._packages)

    def __contains__(self, name: object) -> bool:
        return any(p.name == name for p in self._packages)

    def get(self, name: str) -> Package | None:
        """Get a package by name."""
        for package in self._packages:
            if package.name == name:
                return package
        return None

    def discover(self) -> list[str]:
        """Load add-ons from every search directory.

        A candidate that cannot be loaded is logged and skipped; the scan
        always runs to the end.

        Returns:
            Names of the packages loaded by this scan.
        """
        loaded: list[str] = []
        seen: set[Path] = set()

        for extensions_dir in self.search_paths.extension_dirs():
            extensions_dir = Path(extensions_dir)
            try:
                if not extensions_dir.is_dir():
                    continue
                resolved_dir = extensions_dir.resolve()
                candidates = sorted(extensions_dir.iterdir())
            except OSError as e:
                logger.warning("Cannot scan add-on directory %s: %s", extensions_dir, e)
                continue

            if resolved_dir in seen:
                continue
            seen.add(resolved_dir)
            builtin = resolved_dir != self.user_extensions_dir

            for candidate in candidates:
                manifest_path = candidate / MANIFEST_FILENAME

                try:
                    if not candidate.is_dir():
                        continue

                    logger.debug("Loading add-on '%s'...", manifest_path)
                    if not manifest_path.is_file():
                        logger.debug("File '%s' not found", manifest_path)
                        continue

                    package = self.load_package(candidate, manifest_path, builtin)
                except (ManifestParseError, OSError) as e:
                    logger.warning("Failed to load add-on %s: %s", candidate.name, e)
                    continue

                if package is not None:
                    loaded.append(package.name)

        return loaded

    def load_package(
        self, path: Path, manifest_path: Path, builtin: bool
    ) -> Package | None:
        """Parse a package.json and register the add-on it describes.

        Args:
            path: Add-on root directory.
            manifest_path: Path to its package.json.
            builtin: Whether the add-on ships with the host application.

        Returns:
            The registered package, or None if an add-on with the same
            name is already registered.

        Raises:
            ManifestParseError: If the manifest cannot be parsed.
        """
        manifest = parse_manifest(manifest_path)

        existing = self.get(manifest.name)
        if existing is not None:
            logger.warning(
                "Skipping add-on '%s' in %s: already loaded from %s",
                manifest.name, path, existing.path,
            )
            return None

        package = self._create_package(path, manifest, builtin)
        self._packages.append(package)
        logger.info("Add-on '%s' loaded", package.name)
        return package

    def _create_package(self, path: Path, manifest: AddonManifest, builtin: bool) -> Package:
        package = Package(
            path=path,
            name=manifest.name,
            display_name=manifest.display_name,
            settings=self.settings,
            # Add-ons are enabled by default
            enabled=self.settings.get_bool(EXTENSIONS_SECTION, manifest.name, True),
            builtin=builtin,
            selected_theme=self.selected_theme,
        )

        for kind, item_id, relative_path in manifest.contributions():
            # Contributed paths are always relative to the add-on root
            item_path = Path(path) / relative_path
            if kind == ContributionKind.THEME:
                package.add_theme(item_id, item_path)
            else:
                package.add_palette(item_id, item_path)
            logger.debug("New %s '%s' in '%s'", kind.value, item_id, item_path)

        return package

    def theme_path(self, theme_id: str) -> Path | None:
        """Path of a theme contributed by an enabled add-on."""
        for package in self._packages:
            if not package.enabled:
                continue
            path = package.themes.get(theme_id)
            if path is not None:
                return path
        return None

    def palette_path(self, palette_id: str) -> Path | None:
        """Path of a palette contributed by an enabled add-on."""
        for package in self._packages:
            if not package.enabled:
                continue
            path = package.palettes.get(palette_id)
            if path is not None:
                return path
        return None

    def palettes(self) -> dict[str, Path]:
        """Every palette of the enabled add-ons.

        On id collisions the add-on registered last wins.
        """
        palettes: dict[str, Path] = {}
        for package in self._packages:
            if package.enabled:
                palettes.update(package.palettes)
        return palettes

    def themes(self) -> dict[str, Path]:
        """Every theme of the enabled add-ons (last registered wins)."""
        themes: dict[str, Path] = {}
        for package in self._packages:
            if package.enabled:
                themes.update(package.themes)
        return themes

    def enable_package(self, package: Package, state: bool) -> None:
        package.enable(state)
        self._emit_changes(package)

    def uninstall_package(self, package: Package) -> None:
        """Uninstall an add-on and drop it from the catalog.

        Protected add-ons (see Package.can_be_uninstalled) are left alone.

        Raises:
            OSError: If the add-on files cannot be deleted.
        """
        package.uninstall()
        self._emit_changes(package)
        if not package.installed and package in self._packages:
            self._packages.remove(package)

    def install_compressed(self, archive_path: Path) -> Package:
        """Install an add-on from a zip archive into the user directory.

        Args:
            archive_path: Path to the .zip file.

        Returns:
            The newly registered package.

        Raises:
            ArchiveError: If the archive cannot be read or extracted.
            ManifestParseError: If package.json is invalid.
            MissingManifestError: If the archive has no package.json.
            InstallError: If the extracted add-on cannot be registered.
        """
        installer = ArchiveInstaller(self.user_extensions_dir)
        plan = installer.install(Path(archive_path))

        try:
            manifest = parse_manifest(plan.destination / MANIFEST_FILENAME)
        except ManifestParseError as e:
            raise InstallError(f"Error adding the new add-on from {archive_path}: {e}") from e
        package = self._create_package(plan.destination, manifest, builtin=False)

        # Reinstalling replaces the previous record, only once the new one is built
        previous = self.get(package.name)
        if previous is not None:
            logger.info("Replacing add-on '%s' loaded from %s", previous.name, previous.path)
            self._packages.remove(previous)
        self._packages.append(package)

        logger.info("Installed add-on '%s' in %s", package.name, package.path)
        self.events.emit(CatalogEvent.NEW_PACKAGE, package)
        self._emit_changes(package)
        return package

    def _emit_changes(self, package: Package) -> None:
        if package.themes:
            self.events.emit(CatalogEvent.THEMES_CHANGED, package)
        if package.palettes:
            self.events.emit(CatalogEvent.PALETTES_CHANGED, package)
        if package.themes or package.palettes:
            self.events.emit(CatalogEvent.CHANGED, package)
