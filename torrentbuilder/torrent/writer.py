import os
import tempfile
import logging
from pathlib import Path

import bencodepy

from torrentbuilder.common.errors import EncodingError, TorrentIOError
from torrentbuilder.torrent.metadata import MetainfoRecord

logger = logging.getLogger(__name__)

TORRENT_SUFFIX = ".torrent"


def encode_metainfo(record: MetainfoRecord) -> bytes:
    try:
        return bencodepy.encode(record.to_dict())
    except Exception as e:
        raise EncodingError(f"Failed to bencode metainfo for {record.name}: {e}") from e


def torrent_filename(record: MetainfoRecord) -> str:
    return record.name + TORRENT_SUFFIX


def write_torrent(record: MetainfoRecord, output_dir: Path | None = None) -> Path:
    """Encode ``record`` and write it as ``<name>.torrent`` in ``output_dir``.

    The bytes go to a temporary file first and are moved into place only once
    fully written, so a failed run never leaves a truncated torrent behind.
    """
    encoded = encode_metainfo(record)
    output_dir = Path(output_dir) if output_dir is not None else Path.cwd()
    out_path = output_dir / torrent_filename(record)

    tmp_name = None
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{record.name}.", suffix=".part", dir=output_dir
        )
        with os.fdopen(fd, "wb") as f:
            f.write(encoded)
        os.replace(tmp_name, out_path)
    except OSError as e:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise TorrentIOError(f"Failed to write {out_path}: {e}", out_path) from e

    logger.info(f"Wrote {len(encoded)} bytes to {out_path}")
    return out_path
