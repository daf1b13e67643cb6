"""Error types raised by the add-on catalog.

Every error derives from AddonError so hosts can catch the whole family
with a single except clause.
"""


class AddonError(Exception):
    """Base class for add-on catalog errors."""

    pass


class ArchiveError(AddonError):
    """Raised when an add-on archive cannot be processed."""

    pass


class ArchiveOpenError(ArchiveError):
    """Raised when an archive cannot be opened or is not a zip container."""

    pass


class ArchiveReadError(ArchiveError):
    """Raised when entry data is corrupt or cannot be read."""

    pass


class ArchiveWriteError(ArchiveError):
    """Raised when an extracted entry cannot be written to disk."""

    pass


class ManifestParseError(AddonError):
    """Raised when package.json is unreadable, malformed or incomplete."""

    pass


class MissingManifestError(AddonError):
    """Raised when an archive does not contain a package.json entry."""

    pass


class InstallError(AddonError):
    """Raised when an extracted add-on could not be registered."""

    pass
