"""Add-on catalog.

This package discovers, installs, enables/disables and uninstalls add-ons:
self-contained bundles (a directory or a zip archive) holding a
package.json manifest plus the theme and palette files it contributes.

Add-ons are looked up in the user extensions directory
(~/.addons/extensions/ by default) and in any built-in data directories.
"""

from addons.archive import ArchiveEntry, ArchiveReader, ArchiveWriter
from addons.catalog import Catalog
from addons.errors import (
    AddonError,
    ArchiveError,
    ArchiveOpenError,
    ArchiveReadError,
    ArchiveWriteError,
    InstallError,
    ManifestParseError,
    MissingManifestError,
)
from addons.events import CatalogEvent, EventBus
from addons.installer import ArchiveInstaller, InstallPlan
from addons.manifest import (
    MANIFEST_FILENAME,
    AddonManifest,
    Contribution,
    ContributionKind,
    parse_manifest,
    parse_manifest_bytes,
)
from addons.package import DEFAULT_THEME_PACKAGE, Package
from addons.paths import ResourceFinder, SearchPaths
from addons.settings import IniSettingsStore, MemorySettingsStore, SettingsStore

__all__ = [
    "AddonError",
    "AddonManifest",
    "ArchiveEntry",
    "ArchiveError",
    "ArchiveInstaller",
    "ArchiveOpenError",
    "ArchiveReadError",
    "ArchiveReader",
    "ArchiveWriteError",
    "ArchiveWriter",
    "Catalog",
    "CatalogEvent",
    "Contribution",
    "ContributionKind",
    "DEFAULT_THEME_PACKAGE",
    "EventBus",
    "IniSettingsStore",
    "InstallError",
    "InstallPlan",
    "MANIFEST_FILENAME",
    "ManifestParseError",
    "MemorySettingsStore",
    "MissingManifestError",
    "Package",
    "ResourceFinder",
    "SearchPaths",
    "SettingsStore",
    "parse_manifest",
    "parse_manifest_bytes",
]
