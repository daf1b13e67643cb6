import zipfile
from pathlib import Path
from typing import Callable

import pytest

from addons import MemorySettingsStore, ResourceFinder


@pytest.fixture()
def user_dir(tmp_path: Path) -> Path:
    return tmp_path / "user" / "extensions"


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    path = tmp_path / "share" / "extensions"
    path.mkdir(parents=True)
    return path


@pytest.fixture()
def settings() -> MemorySettingsStore:
    return MemorySettingsStore()


@pytest.fixture()
def finder(user_dir: Path, data_dir: Path) -> ResourceFinder:
    return ResourceFinder(user_dir, [data_dir])


@pytest.fixture()
def make_zip(tmp_path: Path) -> Callable[..., Path]:
    """Build a zip archive from {member name: data}; names ending in "/" are directories."""

    def _make_zip(name: str, members: dict[str, bytes | str]) -> Path:
        path = tmp_path / "archives" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for member, data in members.items():
                zf.writestr(member, data)
        return path

    return _make_zip
