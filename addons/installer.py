"""Install add-ons from zip archives.

Installation reads the archive twice. The first pass only looks for
package.json to learn the add-on name (and therefore its destination) and
the folder that wraps the add-on inside the archive, if any. The second
pass reopens the archive and extracts every entry under that folder into
the destination directory.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path

from addons.archive import ArchiveReader, ArchiveWriter
from addons.errors import InstallError, MissingManifestError
from addons.manifest import MANIFEST_FILENAME, AddonManifest, parse_manifest_bytes

logger = logging.getLogger(__name__)


@dataclass
class InstallPlan:
    """Result of inspecting an archive.

    Attributes:
        manifest: The manifest found in the archive.
        common_path: Archive folder wrapping the add-on, with a trailing
            "/" ("" when package.json sits at the archive root).
        destination: Directory the add-on will be extracted to.
    """

    manifest: AddonManifest
    common_path: str
    destination: Path


class ArchiveInstaller:
    """Extract add-on archives into the user extensions directory.

    Example:
        >>> installer = ArchiveInstaller(Path("~/.addons/extensions").expanduser())
        >>> plan = installer.install(Path("my-themes.zip"))
        >>> plan.destination
        PosixPath('/home/me/.addons/extensions/my-themes')
    """

    def __init__(self, extensions_dir: Path):
        self.extensions_dir = Path(extensions_dir)

    def install(self, archive_path: Path) -> InstallPlan:
        """Inspect and extract an archive.

        Args:
            archive_path: Path to the .zip file.

        Returns:
            The plan that was carried out.

        Raises:
            ArchiveOpenError, ArchiveReadError, ArchiveWriteError: On archive
                or filesystem failures.
            ManifestParseError: If the archived package.json is invalid.
            MissingManifestError: If the archive has no package.json.
            InstallError: If the declared name is not a valid directory name.
        """
        plan = self.inspect(archive_path)
        self.extract(archive_path, plan)
        return plan

    def inspect(self, archive_path: Path) -> InstallPlan:
        """Find and parse package.json without writing anything."""
        archive_path = Path(archive_path)
        # Used only if the archive turns out to have no manifest
        fallback = self.extensions_dir / archive_path.stem

        with ArchiveReader(archive_path) as reader:
            for entry in reader:
                if entry.is_dir or entry.name != MANIFEST_FILENAME:
                    continue

                common_path = posixpath.dirname(entry.path)
                if common_path:
                    common_path += "/"

                data = reader.read_entry_data()
                manifest = parse_manifest_bytes(
                    data, source=f"{archive_path.name}:{entry.path}"
                )
                destination = self.extensions_dir / _checked_name(manifest.name)
                logger.debug(
                    "Found %s in %s (common path %r)",
                    entry.path, archive_path, common_path,
                )
                return InstallPlan(
                    manifest=manifest,
                    common_path=common_path,
                    destination=destination,
                )

        raise MissingManifestError(
            f"{archive_path} does not contain {MANIFEST_FILENAME} "
            f"(would have been installed in {fallback})"
        )

    def extract(self, archive_path: Path, plan: InstallPlan) -> int:
        """Extract the add-on entries of an archive.

        Entries outside plan.common_path are skipped, as is the common
        folder itself.

        Returns:
            Number of entries written.
        """
        common_path = plan.common_path

        with ArchiveReader(archive_path) as reader, ArchiveWriter(root=plan.destination) as writer:
            for entry in reader:
                fn = entry.path
                logger.debug("Original filename in archive <%s>", fn)

                if common_path:
                    if not fn.startswith(common_path):
                        continue
                    fn = fn[len(common_path):]
                    if not fn:
                        continue

                target = plan.destination / fn
                logger.debug("Uncompressing <%s> to <%s>", fn, target)
                writer.write_entry(entry.with_path(str(target)), reader)

            written = writer.written

        logger.info("Extracted %d entries from %s to %s", written, archive_path, plan.destination)
        return written


def _checked_name(name: str) -> str:
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise InstallError(f"Invalid add-on name for installation: {name!r}")
    return name
