"""Persistent settings used by the add-on catalog.

The catalog only needs a small slice of the host's settings: one boolean
per add-on under the "extensions" section. Hosts plug in their own store
by implementing SettingsStore; IniSettingsStore is the file-backed default.
"""

from __future__ import annotations

import configparser
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)

EXTENSIONS_SECTION = "extensions"


@runtime_checkable
class SettingsStore(Protocol):
    """Named key/value settings grouped in sections."""

    def get_bool(self, section: str, key: str, default: bool) -> bool: ...

    def set_bool(self, section: str, key: str, value: bool) -> None: ...

    def get_str(self, section: str, key: str, default: str = "") -> str: ...

    def flush(self) -> None: ...


class MemorySettingsStore:
    """In-memory settings, mostly for tests and embedding.

    Every set_bool() call is recorded in `writes` and every flush() bumps
    `flushes`, so callers can assert how often the store was touched.
    """

    def __init__(self, values: dict[tuple[str, str], object] | None = None) -> None:
        self.values: dict[tuple[str, str], object] = dict(values or {})
        self.writes: list[tuple[str, str, bool]] = []
        self.flushes = 0

    def get_bool(self, section: str, key: str, default: bool) -> bool:
        value = self.values.get((section, key), default)
        return bool(value)

    def set_bool(self, section: str, key: str, value: bool) -> None:
        self.values[(section, key)] = value
        self.writes.append((section, key, value))

    def get_str(self, section: str, key: str, default: str = "") -> str:
        value = self.values.get((section, key), default)
        return str(value)

    def flush(self) -> None:
        self.flushes += 1


class IniSettingsStore:
    """Settings kept in an INI file.

    Changes stay in memory until flush() writes the whole file back.

    Example:
        >>> store = IniSettingsStore(Path("~/.addons/settings.ini").expanduser())
        >>> store.set_bool("extensions", "my-themes", False)
        >>> store.flush()
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        # Keys are add-on names; keep their case
        self._parser = configparser.ConfigParser(interpolation=None)
        self._parser.optionxform = str  # type: ignore[assignment,method-assign]
        self._dirty = False

        if self.path.exists():
            try:
                self._parser.read(self.path, encoding="utf-8")
            except configparser.Error as e:
                logger.warning("Ignoring unreadable settings file %s: %s", self.path, e)

    def get_bool(self, section: str, key: str, default: bool) -> bool:
        try:
            return self._parser.getboolean(section, key, fallback=default)
        except ValueError:
            logger.warning("Invalid boolean for [%s] %s in %s", section, key, self.path)
            return default

    def set_bool(self, section: str, key: str, value: bool) -> None:
        if not self._parser.has_section(section):
            self._parser.add_section(section)
        self._parser.set(section, key, "true" if value else "false")
        self._dirty = True

    def get_str(self, section: str, key: str, default: str = "") -> str:
        return self._parser.get(section, key, fallback=default)

    def flush(self) -> None:
        """Write pending changes to disk."""
        if not self._dirty:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            self._parser.write(f)
        self._dirty = False
        logger.debug("Settings saved to %s", self.path)
