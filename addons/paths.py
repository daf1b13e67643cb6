"""Locations searched for add-ons.

Add-ons live in one directory per add-on under an "extensions" directory.
There is exactly one user-writable extensions directory (where archives
are installed) and any number of read-only data directories shipped with
the host application:

    ~/.addons/extensions/          user add-ons (installable/removable)
    └── my-themes/
        ├── package.json
        └── themes/...
    /usr/share/addons/extensions/  built-in add-ons
    └── default-theme/
        └── package.json
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

DEFAULT_USER_EXTENSIONS_DIR = Path.home() / ".addons" / "extensions"


@runtime_checkable
class SearchPaths(Protocol):
    """Resolves where add-ons are looked up and installed."""

    def user_extensions_dir(self) -> Path:
        """Return the user extensions directory, creating it if needed."""
        ...

    def extension_dirs(self) -> Iterable[Path]:
        """Yield every directory that may contain add-ons."""
        ...


class ResourceFinder:
    """Search paths backed by a fixed list of directories.

    The user directory is yielded first so user add-ons take precedence
    over built-in ones, followed by the data directories in order.
    """

    def __init__(
        self,
        user_dir: Path | str | None = None,
        data_dirs: Iterable[Path | str] | None = None,
    ):
        """Initialize the finder.

        Args:
            user_dir: User-writable extensions directory.
            data_dirs: Built-in extensions directories.
        """
        self.user_dir = Path(user_dir or DEFAULT_USER_EXTENSIONS_DIR).expanduser()
        self.data_dirs = [Path(d).expanduser() for d in (data_dirs or [])]

    def user_extensions_dir(self) -> Path:
        if not self.user_dir.is_dir():
            logger.info("Creating user extensions directory %s", self.user_dir)
        self.user_dir.mkdir(parents=True, exist_ok=True)
        return self.user_dir

    def extension_dirs(self) -> Iterable[Path]:
        yield self.user_dir
        yield from self.data_dirs
