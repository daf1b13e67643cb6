"""Add-on manifest schema.

Defines the structure of the package.json file found at the root of every
add-on:

    {
        "name": "my-themes",
        "displayName": "My Themes",
        "contributes": {
            "themes": [{"id": "dark", "path": "./themes/dark"}],
            "palettes": [{"id": "retro", "path": "./palettes/retro.gpl"}]
        }
    }

Unknown keys are ignored at every level so newer manifests keep loading.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any, Iterator

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from addons.errors import ManifestParseError

MANIFEST_FILENAME = "package.json"


class ContributionKind(str, Enum):
    """Kind of resource an add-on can contribute."""

    THEME = "theme"
    PALETTE = "palette"


class Contribution(BaseModel):
    """A single contributed resource."""

    id: StrictStr = Field(..., description="Resource identifier")
    path: StrictStr = Field(..., description="Path relative to the add-on root")

    @field_validator("path")
    @classmethod
    def relative_to_root(cls, v: str) -> str:
        """Drop leading separators so the path joins onto the add-on root."""
        return v.lstrip("/\\")


class Contributes(BaseModel):
    """Resources contributed by an add-on, in document order."""

    themes: list[Contribution] = Field(default_factory=list)
    palettes: list[Contribution] = Field(default_factory=list)

    @field_validator("themes", "palettes", mode="before")
    @classmethod
    def ignore_non_arrays(cls, v: Any) -> Any:
        """Treat anything that is not an array as no contributions."""
        return v if isinstance(v, list) else []


class AddonManifest(BaseModel):
    """Add-on manifest schema (package.json)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: StrictStr = Field(..., description="Unique add-on name")
    display_name: StrictStr = Field(..., alias="displayName", description="Human readable name")
    contributes: Contributes | None = Field(None, description="Contributed resources")

    @field_validator("contributes", mode="before")
    @classmethod
    def ignore_non_objects(cls, v: Any) -> Any:
        """Treat a contributes value that is not an object as absent."""
        return v if isinstance(v, dict) else None

    @property
    def themes(self) -> list[Contribution]:
        return self.contributes.themes if self.contributes else []

    @property
    def palettes(self) -> list[Contribution]:
        return self.contributes.palettes if self.contributes else []

    def contributions(self) -> Iterator[tuple[ContributionKind, str, str]]:
        """Yield (kind, id, relative path) for every contribution.

        Themes come first, then palettes, each in document order.
        """
        for item in self.themes:
            yield ContributionKind.THEME, item.id, item.path
        for item in self.palettes:
            yield ContributionKind.PALETTE, item.id, item.path

    def to_dict(self) -> dict[str, Any]:
        """Convert back to the package.json representation."""
        return self.model_dump(by_alias=True, exclude_none=True)


def parse_manifest_bytes(data: bytes | str, source: str = "<memory>") -> AddonManifest:
    """Parse a manifest from raw JSON.

    Args:
        data: Document contents.
        source: Where the data came from, used in error messages.

    Returns:
        Parsed AddonManifest.

    Raises:
        ManifestParseError: If the document is not a valid manifest.
    """
    try:
        document = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestParseError(f"Invalid JSON in {source}: {e}") from e

    if not isinstance(document, dict):
        raise ManifestParseError(f"Manifest must be a JSON object: {source}")

    try:
        return AddonManifest.model_validate(document)
    except ValidationError as e:
        raise ManifestParseError(f"Invalid manifest {source}: {e}") from e


def parse_manifest(path: Path) -> AddonManifest:
    """Load a manifest from a package.json file.

    Args:
        path: Path to package.json.

    Returns:
        Parsed AddonManifest.

    Raises:
        ManifestParseError: If the file is missing, unreadable or invalid.
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ManifestParseError(f"Cannot read manifest {path}: {e}") from e

    return parse_manifest_bytes(data, source=str(path))
