import io
import os
import zipfile

import pytest

from addons.archive import ArchiveReader, ArchiveWriter
from addons.errors import ArchiveOpenError, ArchiveReadError, ArchiveWriteError


def test_reader_walks_entries_in_order(make_zip):
    archive = make_zip("a.zip", {"pkg/": "", "pkg/package.json": "{}", "pkg/themes/dark.ase": b"\x00\x01"})

    with ArchiveReader(archive) as reader:
        paths = [entry.path for entry in reader]
        assert reader.next_entry() is None

    assert paths == ["pkg/", "pkg/package.json", "pkg/themes/dark.ase"]


def test_entry_metadata(make_zip):
    archive = make_zip("a.zip", {"pkg/": "", "pkg/palette.gpl": b"GIMP Palette"})

    with ArchiveReader(archive) as reader:
        folder = reader.next_entry()
        palette = reader.next_entry()

    assert folder.is_dir and folder.name == ""
    assert not palette.is_dir
    assert palette.name == "palette.gpl"
    assert palette.size == len(b"GIMP Palette")
    assert palette.with_path("/tmp/x").path == "/tmp/x"
    assert palette.with_path("/tmp/x").size == palette.size


def test_copy_entry_data_streams_to_sink(make_zip):
    payload = os.urandom(200 * 1024)
    archive = make_zip("big.zip", {"big.bin": payload})

    with ArchiveReader(archive) as reader:
        reader.next_entry()
        sink = io.BytesIO()
        written = reader.copy_entry_data(sink)

    assert written == len(payload)
    assert sink.getvalue() == payload


def test_entry_data_is_consumed_once(make_zip):
    archive = make_zip("a.zip", {"a.txt": "hello"})

    with ArchiveReader(archive) as reader:
        reader.next_entry()
        assert reader.read_entry_data() == b"hello"
        assert reader.read_entry_data() == b""


def test_copy_without_current_entry_fails(make_zip):
    archive = make_zip("a.zip", {"a.txt": "hello"})

    with ArchiveReader(archive) as reader:
        with pytest.raises(ArchiveReadError):
            reader.read_entry_data()


def test_open_missing_file(tmp_path):
    with pytest.raises(ArchiveOpenError):
        ArchiveReader(tmp_path / "missing.zip")


def test_open_invalid_container(tmp_path):
    path = tmp_path / "not-a.zip"
    path.write_text("plain text, not a zip")

    with pytest.raises(ArchiveOpenError):
        ArchiveReader(path)


def test_corrupt_entry_data(tmp_path):
    path = tmp_path / "corrupt.zip"
    payload = b"palette data " * 64
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_STORED) as zf:
        zf.writestr("a.gpl", payload)

    raw = bytearray(path.read_bytes())
    offset = raw.index(payload) + 10
    raw[offset] ^= 0xFF
    path.write_bytes(bytes(raw))

    with ArchiveReader(path) as reader:
        reader.next_entry()
        with pytest.raises(ArchiveReadError):
            reader.read_entry_data()


def test_reader_closes_on_error(make_zip):
    archive = make_zip("a.zip", {"a.txt": "hello"})

    with pytest.raises(RuntimeError):
        with ArchiveReader(archive) as reader:
            reader.next_entry()
            raise RuntimeError("boom")

    with pytest.raises(ArchiveReadError):
        reader.next_entry()
    reader.close()


def test_writer_creates_files_and_directories(make_zip, tmp_path):
    archive = make_zip("a.zip", {"themes/": "", "themes/dark/theme.xml": "<theme/>"})
    dest = tmp_path / "out"

    with ArchiveReader(archive) as reader, ArchiveWriter(root=dest) as writer:
        for entry in reader:
            writer.write_entry(entry.with_path(str(dest / entry.path)), reader)

    assert writer.written == 2
    assert (dest / "themes").is_dir()
    assert (dest / "themes" / "dark" / "theme.xml").read_text() == "<theme/>"


def test_writer_restores_modification_time(tmp_path):
    path = tmp_path / "dated.zip"
    info = zipfile.ZipInfo("old.txt", date_time=(2001, 2, 3, 4, 5, 6))
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr(info, "old")
    dest = tmp_path / "out"

    with ArchiveReader(path) as reader, ArchiveWriter() as writer:
        entry = reader.next_entry()
        writer.write_entry(entry.with_path(str(dest / "old.txt")), reader)

    assert abs(os.path.getmtime(dest / "old.txt") - entry.timestamp) < 2


def test_writer_rejects_paths_outside_root(make_zip, tmp_path):
    archive = make_zip("a.zip", {"evil.txt": "x"})
    dest = tmp_path / "out"

    with ArchiveReader(archive) as reader, ArchiveWriter(root=dest) as writer:
        entry = reader.next_entry()
        with pytest.raises(ArchiveWriteError):
            writer.write_entry(entry.with_path(str(dest / ".." / "evil.txt")), reader)

    assert not (tmp_path / "evil.txt").exists()


def test_writer_reports_filesystem_errors(make_zip, tmp_path):
    archive = make_zip("a.zip", {"a.txt": "x"})
    dest = tmp_path / "out"
    (dest / "a.txt").mkdir(parents=True)

    with ArchiveReader(archive) as reader, ArchiveWriter(root=dest) as writer:
        entry = reader.next_entry()
        with pytest.raises(ArchiveWriteError):
            writer.write_entry(entry.with_path(str(dest / "a.txt")), reader)
