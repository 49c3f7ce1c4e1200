from torrentbuilder.common.config import BuildConfig
from torrentbuilder.torrent.assembler import assemble_metainfo
from torrentbuilder.torrent.enumerator import inspect_target, iter_entries
from torrentbuilder.torrent.hasher import hash_pieces
from torrentbuilder.torrent.metadata import FileEntry, MetainfoRecord
from torrentbuilder.torrent.writer import write_torrent
from pathlib import Path
import asyncio
import time
import logging

logger = logging.getLogger(__name__)


async def _hand_off(
    queue: asyncio.Queue, item: FileEntry | None, hasher: asyncio.Task
):
    # a dead hasher never drains the queue, so race the put against it
    if hasher.done():
        hasher.result()
        raise RuntimeError("Hasher stopped before all files were queued")

    if not queue.full():
        queue.put_nowait(item)
        return

    put = asyncio.create_task(queue.put(item))
    done, _ = await asyncio.wait({put, hasher}, return_when=asyncio.FIRST_COMPLETED)
    if put in done:
        return
    put.cancel()
    await asyncio.wait({put})
    hasher.result()
    raise RuntimeError("Hasher stopped before all files were queued")


async def build_metainfo(
    path: str | Path,
    config: BuildConfig | None = None,
    creation_date: int | None = None,
) -> MetainfoRecord:
    """Walk ``path``, hash its contents and assemble the metainfo record.

    The walker feeds files to the hashing task through a queue as it finds
    them; assembly waits for the hasher to flush its final piece.
    """
    config = config or BuildConfig()
    target = inspect_target(path)
    logger.info(
        f"Building torrent for {target.root}",
        extra={"target": str(target.root), "piece_length": config.piece_length},
    )
    started = time.time()

    queue: asyncio.Queue = asyncio.Queue(maxsize=config.queue_size)
    hasher = asyncio.create_task(
        hash_pieces(queue, config.piece_length, config.read_size)
    )

    entries: list[FileEntry] = []
    walker = iter_entries(target)
    try:
        while True:
            entry = await asyncio.to_thread(next, walker, None)
            if entry is None:
                break
            entries.append(entry)
            await _hand_off(queue, entry, hasher)
        await _hand_off(queue, None, hasher)
        pieces = await hasher
    except BaseException:
        hasher.cancel()
        await asyncio.wait({hasher})
        if not hasher.cancelled():
            # the walker error wins, the hasher error only needs collecting
            hasher.exception()
        raise

    record = assemble_metainfo(target, entries, pieces, config, creation_date)
    logger.info(
        f"Built torrent for {record.name}: {len(entries)} file(s), "
        f"{record.total_length} bytes, {len(record.piece_hashes)} piece(s) "
        f"in {time.time() - started:.2f}s",
        extra={"file_count": len(entries), "total_length": record.total_length},
    )
    return record


def build_torrent(
    path: str | Path, config: BuildConfig | None = None
) -> Path:
    config = config or BuildConfig()
    record = asyncio.run(build_metainfo(path, config))
    return write_torrent(record, config.output_dir)
