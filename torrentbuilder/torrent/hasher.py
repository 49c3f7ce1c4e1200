import asyncio
import hashlib
import logging
from pathlib import Path
from typing import Iterable

from torrentbuilder.common.config import DEFAULT_READ_SIZE
from torrentbuilder.common.errors import TorrentIOError
from torrentbuilder.torrent.metadata import FileEntry

logger = logging.getLogger(__name__)


class PieceHasher:
    """Running SHA-1 over the concatenation of every byte fed to it.

    A digest is emitted each time exactly ``piece_length`` bytes have been
    accumulated, so pieces straddle file boundaries freely. ``finish`` flushes
    the short final piece (or the empty-stream digest when nothing was fed).
    """

    __slots__ = (
        "piece_length",
        "read_size",
        "_sha1",
        "_filled",
        "_digests",
        "_total",
        "_finished",
    )

    def __init__(self, piece_length: int, read_size: int | None = None):
        if piece_length <= 0:
            raise ValueError(f"Piece length must be positive, got {piece_length}")
        if read_size is not None and read_size <= 0:
            raise ValueError(f"Read size must be positive, got {read_size}")
        self.piece_length = piece_length
        self.read_size = read_size or DEFAULT_READ_SIZE
        self._sha1 = hashlib.sha1()
        self._filled = 0  # bytes in the current piece, always < piece_length
        self._digests = bytearray()
        self._total = 0
        self._finished = False

    @property
    def total_length(self) -> int:
        return self._total

    @property
    def piece_count(self) -> int:
        return len(self._digests) // 20

    def _check_open(self):
        if self._finished:
            raise RuntimeError("PieceHasher already finished")

    def _consume(self, chunk) -> None:
        # chunk never crosses a piece boundary
        self._sha1.update(chunk)
        self._filled += len(chunk)
        self._total += len(chunk)
        if self._filled == self.piece_length:
            self._digests += self._sha1.digest()
            self._sha1 = hashlib.sha1()
            self._filled = 0

    def update(self, data: bytes) -> None:
        self._check_open()
        view = memoryview(data)
        while view:
            take = self.piece_length - self._filled
            self._consume(view[:take])
            view = view[take:]

    def feed_file(self, path: str | Path) -> int:
        """Hash a whole file, returning the number of bytes read from it."""
        self._check_open()
        read = 0
        try:
            with open(path, "rb") as f:
                while True:
                    chunk = f.read(min(self.read_size, self.piece_length - self._filled))
                    if not chunk:
                        break
                    self._consume(chunk)
                    read += len(chunk)
        except OSError as e:
            raise TorrentIOError(f"Failed to read {path}: {e}", Path(path)) from e
        return read

    def finish(self) -> bytes:
        self._check_open()
        self._finished = True
        if self._filled > 0 or self._total == 0:
            self._digests += self._sha1.digest()
        return bytes(self._digests)


def hash_files(
    paths: Iterable[str | Path],
    piece_length: int,
    read_size: int | None = None,
) -> bytes:
    hasher = PieceHasher(piece_length, read_size)
    for path in paths:
        hasher.feed_file(path)
    return hasher.finish()


async def hash_pieces(
    queue: asyncio.Queue,
    piece_length: int,
    read_size: int | None = None,
) -> bytes:
    """Consume ``FileEntry`` items until the ``None`` sentinel; return digests.

    Files are hashed strictly in arrival order, one at a time, with the
    blocking reads running in a worker thread.
    """
    hasher = PieceHasher(piece_length, read_size)
    while True:
        entry: FileEntry | None = await queue.get()
        try:
            if entry is None:
                break
            logger.debug(f"Hashing file: {entry.source}")
            read = await asyncio.to_thread(hasher.feed_file, entry.source)
            if read != entry.length:
                raise TorrentIOError(
                    f"{entry.source} changed while hashing: expected "
                    f"{entry.length} bytes, read {read}",
                    entry.source,
                )
        finally:
            queue.task_done()

    pieces = hasher.finish()
    logger.info(
        f"Hashed {hasher.total_length} bytes into {hasher.piece_count} piece(s)",
        extra={"total_length": hasher.total_length, "piece_count": hasher.piece_count},
    )
    return pieces
