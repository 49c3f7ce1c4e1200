import hashlib
import os

import bencodepy
import pytest

from torrentbuilder.common.errors import EncodingError, TorrentIOError
from torrentbuilder.torrent.metadata import (
    FileEntry,
    MetainfoRecord,
    MultiFileInfo,
    SingleFileInfo,
)
from torrentbuilder.torrent.parser import parse_torrent_bytes, parse_torrent_file
from torrentbuilder.torrent.writer import encode_metainfo, torrent_filename, write_torrent

PIECES = hashlib.sha1(b"one").digest() + hashlib.sha1(b"two").digest()


def single_record(name="a.bin", length=0):
    info = SingleFileInfo(name, 33554432, PIECES, length)
    return MetainfoRecord("https://tracker/announce", "builder", 1700000000, info)


def multi_record():
    entries = [
        FileEntry(["x"], 40),
        FileEntry(["sub", "z.txt"], 3),
        FileEntry(["y"], 10),
    ]
    info = MultiFileInfo("dir", 32, PIECES, entries)
    return MetainfoRecord("https://tracker/announce", "builder", 1700000000, info)


def test_encoded_single_file_bytes():
    encoded = encode_metainfo(single_record(length=7))

    assert encoded == (
        b"d8:announce24:https://tracker/announce"
        b"9:createdby7:builder"
        b"12:creationdatei1700000000e"
        b"4:infod6:lengthi7e4:name5:a.bin12:piece lengthi33554432e"
        b"6:pieces40:" + PIECES + b"ee"
    )


def test_multi_file_round_trip():
    record = multi_record()

    parsed = parse_torrent_bytes(encode_metainfo(record))

    assert parsed.is_multi_file
    assert parsed.files == record.files
    assert [f.path for f in parsed.files] == [["x"], ["sub", "z.txt"], ["y"]]
    assert parsed.info.pieces == PIECES
    assert parsed.creation_date == 1700000000
    assert parsed.info_hash == record.info_hash


def test_single_file_round_trip():
    record = single_record(length=12)

    parsed = parse_torrent_bytes(encode_metainfo(record))

    assert not parsed.is_multi_file
    assert parsed.files == [FileEntry(["a.bin"], 12)]
    assert parsed.piece_hashes == [PIECES[:20], PIECES[20:]]


def test_info_hash_covers_info_dict_only():
    record = single_record()
    expected = hashlib.sha1(bencodepy.encode(record.to_dict()["info"])).digest()
    assert record.info_hash == expected


def test_encoder_failure_is_encoding_error():
    record = single_record()
    record.announce = object()
    with pytest.raises(EncodingError):
        encode_metainfo(record)


def test_write_torrent(tmp_path):
    record = multi_record()

    path = write_torrent(record, tmp_path)

    assert path == tmp_path / "dir.torrent"
    assert torrent_filename(record) == "dir.torrent"
    assert parse_torrent_file(path).files == record.files
    assert os.listdir(tmp_path) == ["dir.torrent"]


def test_encoding_failure_leaves_no_file(tmp_path):
    record = single_record()
    record.announce = object()
    with pytest.raises(EncodingError):
        write_torrent(record, tmp_path)
    assert os.listdir(tmp_path) == []


def test_unwritable_output_is_io_error(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_bytes(b"")
    with pytest.raises(TorrentIOError):
        write_torrent(single_record(), blocker)


@pytest.mark.parametrize(
    "data",
    [
        b"not bencode",
        b"d8:announce1:xe",
        b"d8:announce1:x4:infod4:name1:n12:piece lengthi32e6:pieces3:abc6:lengthi1eee",
    ],
)
def test_malformed_torrents(data):
    with pytest.raises(EncodingError):
        parse_torrent_bytes(data)


def test_missing_torrent_file(tmp_path):
    with pytest.raises(TorrentIOError):
        parse_torrent_file(tmp_path / "none.torrent")
