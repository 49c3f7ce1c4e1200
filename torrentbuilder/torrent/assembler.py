import time
import logging

from torrentbuilder.common.config import BuildConfig
from torrentbuilder.common.errors import EncodingError
from torrentbuilder.torrent.enumerator import Target
from torrentbuilder.torrent.metadata import (
    SHA1_LENGTH,
    FileEntry,
    MetainfoRecord,
    MultiFileInfo,
    SingleFileInfo,
)

logger = logging.getLogger(__name__)


def assemble_metainfo(
    target: Target,
    entries: list[FileEntry],
    pieces: bytes,
    config: BuildConfig,
    creation_date: int | None = None,
) -> MetainfoRecord:
    """Combine enumeration and hashing output into a metainfo record.

    Must only be called once every piece has been hashed.
    """
    if not pieces or len(pieces) % SHA1_LENGTH:
        raise EncodingError(
            f"Piece digests must be a non-empty multiple of {SHA1_LENGTH} bytes, "
            f"got {len(pieces)}"
        )

    if creation_date is None:
        creation_date = int(time.time())

    if not target.is_dir and len(entries) == 1:
        info = SingleFileInfo(
            name=target.name,
            piece_length=config.piece_length,
            pieces=pieces,
            length=entries[0].length,
        )
    else:
        info = MultiFileInfo(
            name=target.name,
            piece_length=config.piece_length,
            pieces=pieces,
            files=entries,
        )

    record = MetainfoRecord(
        announce=config.announce,
        created_by=config.created_by,
        creation_date=creation_date,
        info=info,
    )
    kind = "multi" if record.is_multi_file else "single"
    logger.debug(f"Assembled {kind}-file metainfo for {target.name}")
    return record
