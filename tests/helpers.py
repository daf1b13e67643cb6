import json
from pathlib import Path


def write_addon(base: Path, dirname: str, manifest: dict, files: dict[str, bytes] | None = None) -> Path:
    """Create an add-on directory with a package.json and extra files."""
    root = base / dirname
    root.mkdir(parents=True, exist_ok=True)
    (root / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
    for name, data in (files or {}).items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return root


def manifest_for(name: str, themes: dict[str, str] | None = None, palettes: dict[str, str] | None = None) -> dict:
    """Build a package.json document."""
    contributes: dict = {}
    if themes:
        contributes["themes"] = [{"id": k, "path": v} for k, v in themes.items()]
    if palettes:
        contributes["palettes"] = [{"id": k, "path": v} for k, v in palettes.items()]
    manifest: dict = {"name": name, "displayName": name.replace("-", " ").title()}
    if contributes:
        manifest["contributes"] = contributes
    return manifest


def manifest_json(name: str, **kwargs) -> str:
    return json.dumps(manifest_for(name, **kwargs))


class Recorder:
    """Collects (event, package name) pairs from an EventBus."""

    def __init__(self, bus, events) -> None:
        self.calls: list[tuple[str, str]] = []
        for event in events:
            bus.connect(event, self._listener(event))

    def _listener(self, event):
        def listener(package) -> None:
            self.calls.append((event.value, package.name))

        return listener
