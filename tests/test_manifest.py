import json

import pytest

from addons.errors import ManifestParseError
from addons.manifest import ContributionKind, parse_manifest, parse_manifest_bytes


def test_parse_full_manifest(tmp_path):
    path = tmp_path / "package.json"
    path.write_text(
        json.dumps(
            {
                "name": "retro-pack",
                "displayName": "Retro Pack",
                "version": "1.2.0",
                "contributes": {
                    "themes": [{"id": "crt", "path": "./themes/crt"}],
                    "palettes": [
                        {"id": "c64", "path": "palettes/c64.gpl"},
                        {"id": "nes", "path": "palettes/nes.gpl", "label": "NES"},
                    ],
                    "scripts": [{"id": "ignored"}],
                },
            }
        )
    )

    manifest = parse_manifest(path)

    assert manifest.name == "retro-pack"
    assert manifest.display_name == "Retro Pack"
    assert list(manifest.contributions()) == [
        (ContributionKind.THEME, "crt", "./themes/crt"),
        (ContributionKind.PALETTE, "c64", "palettes/c64.gpl"),
        (ContributionKind.PALETTE, "nes", "palettes/nes.gpl"),
    ]


def test_contributes_is_optional():
    manifest = parse_manifest_bytes(b'{"name": "bare", "displayName": "Bare"}')

    assert manifest.contributes is None
    assert manifest.themes == []
    assert list(manifest.contributions()) == []


def test_non_array_contributions_are_ignored():
    manifest = parse_manifest_bytes(
        '{"name": "x", "displayName": "X", "contributes": {"themes": {"id": "a"}, "palettes": null}}'
    )

    assert manifest.themes == []
    assert manifest.palettes == []


def test_non_object_contributes_is_ignored():
    manifest = parse_manifest_bytes('{"name": "x", "displayName": "X", "contributes": [1, 2]}')

    assert manifest.contributes is None


@pytest.mark.parametrize(
    "document",
    [
        '{"displayName": "No Name"}',
        '{"name": "no-display-name"}',
        '{"name": 42, "displayName": "Numeric"}',
        '{"name": "x", "displayName": ["X"]}',
        '{"name": "x", "displayName": "X", "contributes": {"themes": [{"id": "a"}]}}',
        '{"name": "x", "displayName": "X", "contributes": {"palettes": [{"path": "p.gpl"}]}}',
    ],
)
def test_invalid_fields_are_rejected(document):
    with pytest.raises(ManifestParseError):
        parse_manifest_bytes(document)


def test_malformed_json_is_rejected():
    with pytest.raises(ManifestParseError, match="Invalid JSON"):
        parse_manifest_bytes(b'{"name": "x",', source="broken.json")


def test_top_level_must_be_an_object():
    with pytest.raises(ManifestParseError):
        parse_manifest_bytes(b'["name", "x"]')


def test_unreadable_file(tmp_path):
    with pytest.raises(ManifestParseError):
        parse_manifest(tmp_path / "missing" / "package.json")


def test_to_dict_uses_document_keys():
    manifest = parse_manifest_bytes(
        '{"name": "x", "displayName": "X", "contributes": {"themes": [{"id": "a", "path": "a"}]}}'
    )

    assert manifest.to_dict() == {
        "name": "x",
        "displayName": "X",
        "contributes": {"themes": [{"id": "a", "path": "a"}], "palettes": []},
    }


def test_contribution_paths_are_made_relative():
    manifest = parse_manifest_bytes(
        '{"name": "x", "displayName": "X", "contributes": {"themes": [{"id": "t", "path": "//abs/theme"}]}}'
    )

    assert list(manifest.contributions()) == [(ContributionKind.THEME, "t", "abs/theme")]
