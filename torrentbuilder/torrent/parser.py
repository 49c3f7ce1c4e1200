import bencodepy
from pathlib import Path
from torrentbuilder.common.errors import EncodingError, TorrentIOError
from torrentbuilder.torrent.metadata import (
    SHA1_LENGTH,
    FileEntry,
    MetainfoRecord,
    MultiFileInfo,
    SingleFileInfo,
)
import logging

logger = logging.getLogger(__name__)


def _text(value: bytes) -> str:
    return value.decode("utf-8")


def parse_torrent_bytes(data: bytes) -> MetainfoRecord:
    try:
        metainfo = bencodepy.decode(data)
    except Exception as e:
        raise EncodingError(f"Invalid bencode data: {e}") from e

    try:
        info = metainfo[b"info"]
        name = _text(info[b"name"])
        piece_length = info[b"piece length"]
        pieces = info[b"pieces"]
        if len(pieces) % SHA1_LENGTH:
            raise ValueError(f"pieces length {len(pieces)} is not a multiple of 20")

        if b"files" in info:
            files = [
                FileEntry([_text(seg) for seg in file_dict[b"path"]], file_dict[b"length"])
                for file_dict in info[b"files"]
            ]
            parsed_info = MultiFileInfo(name, piece_length, pieces, files)
        else:
            parsed_info = SingleFileInfo(name, piece_length, pieces, info[b"length"])

        record = MetainfoRecord(
            announce=_text(metainfo[b"announce"]),
            created_by=_text(metainfo.get(b"createdby", b"")),
            creation_date=metainfo.get(b"creationdate", 0),
            info=parsed_info,
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise EncodingError(f"Malformed metainfo: {e!r}") from e

    return record


def parse_torrent_file(path: Path) -> MetainfoRecord:
    logger.info(f"Parsing torrent file: {path}")

    try:
        with Path(path).open("rb") as f:
            data = f.read()
    except OSError as e:
        raise TorrentIOError(f"Failed to read {path}: {e}", path) from e

    record = parse_torrent_bytes(data)
    if record.is_multi_file:
        logger.info(
            f"Parsed multi-file torrent: {record.name} "
            f"({len(record.files)} files, {record.total_length} bytes)"
        )
    else:
        logger.info(
            f"Parsed single-file torrent: {record.name} ({record.total_length} bytes)"
        )
    return record
