import hashlib
from pathlib import Path

import pytest

from torrentbuilder.common.config import BuildConfig
from torrentbuilder.common.errors import EncodingError
from torrentbuilder.torrent.assembler import assemble_metainfo
from torrentbuilder.torrent.enumerator import Target
from torrentbuilder.torrent.metadata import FileEntry, MultiFileInfo, SingleFileInfo

PIECES = hashlib.sha1(b"abc").digest()


@pytest.fixture
def config():
    return BuildConfig(announce="http://t/announce", created_by="tester", piece_length=64)


def test_single_file_variant(config):
    target = Target(Path("/data/movie.mkv"), "movie.mkv", False, 3)

    record = assemble_metainfo(
        target, [FileEntry(["movie.mkv"], 3)], PIECES, config, creation_date=42
    )

    assert isinstance(record.info, SingleFileInfo)
    assert record.to_dict() == {
        "announce": "http://t/announce",
        "createdby": "tester",
        "creationdate": 42,
        "info": {
            "name": "movie.mkv",
            "piece length": 64,
            "pieces": PIECES,
            "length": 3,
        },
    }


def test_multi_file_variant(config):
    target = Target(Path("/data/album"), "album", True, 0)
    entries = [FileEntry(["cd1", "01.flac"], 10), FileEntry(["cover.jpg"], 5)]

    record = assemble_metainfo(target, entries, PIECES, config, creation_date=42)

    assert isinstance(record.info, MultiFileInfo)
    info = record.to_dict()["info"]
    assert "length" not in info
    assert info["name"] == "album"
    assert info["files"] == [
        {"length": 10, "path": ["cd1", "01.flac"]},
        {"length": 5, "path": ["cover.jpg"]},
    ]
    assert record.total_length == 15


def test_creation_date_defaults_to_now(config, monkeypatch):
    monkeypatch.setattr("torrentbuilder.torrent.assembler.time.time", lambda: 1234.9)
    target = Target(Path("f"), "f", False, 0)

    record = assemble_metainfo(target, [FileEntry(["f"], 0)], PIECES, config)

    assert record.creation_date == 1234


@pytest.mark.parametrize("pieces", [b"", b"x" * 19, b"x" * 41])
def test_rejects_truncated_digests(config, pieces):
    target = Target(Path("f"), "f", False, 0)
    with pytest.raises(EncodingError):
        assemble_metainfo(target, [FileEntry(["f"], 0)], pieces, config)
