import os
import stat
import logging
from pathlib import Path
from typing import Iterator

from torrentbuilder.common.errors import (
    NotFoundError,
    TorrentBuildError,
    TorrentIOError,
)
from torrentbuilder.torrent.metadata import FileEntry

logger = logging.getLogger(__name__)


class Target:
    __slots__ = ("root", "name", "is_dir", "size")

    def __init__(self, root: Path, name: str, is_dir: bool, size: int):
        self.root = root
        self.name = name
        self.is_dir = is_dir
        self.size = size  # only meaningful for single files

    def __repr__(self):
        kind = "dir" if self.is_dir else "file"
        return f"Target({str(self.root)!r}, name={self.name!r}, {kind})"


def inspect_target(path: str | Path) -> Target:
    root = Path(path)
    try:
        st = root.stat()
    except FileNotFoundError as e:
        raise NotFoundError(root) from e
    except OSError as e:
        raise TorrentIOError(f"Cannot stat {root}: {e}", root) from e

    name = root.name
    if name in ("", ".", ".."):
        name = root.resolve().name
    if not name:
        raise TorrentBuildError(f"Cannot derive a torrent name from {root}")

    if stat.S_ISDIR(st.st_mode):
        return Target(root, name, True, 0)
    if not stat.S_ISREG(st.st_mode):
        raise TorrentIOError(f"Not a regular file or directory: {root}", root)
    return Target(root, name, False, st.st_size)


def _scan_sorted(directory: Path) -> list[os.DirEntry]:
    try:
        with os.scandir(directory) as it:
            return sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        raise TorrentIOError(f"Cannot list directory {directory}: {e}", directory) from e


def _walk(directory: Path, root: Path) -> Iterator[FileEntry]:
    # lexical order at every level, directories descended in place
    for child in _scan_sorted(directory):
        child_path = Path(child.path)
        try:
            if child.is_dir(follow_symlinks=False):
                is_subdir = True
            else:
                is_subdir = False
                st = child_path.stat()
        except OSError as e:
            # broken symlink or entry removed while walking
            raise TorrentIOError(f"Cannot stat {child_path}: {e}", child_path) from e

        if is_subdir:
            yield from _walk(child_path, root)
            continue

        if stat.S_ISDIR(st.st_mode):
            raise TorrentIOError(
                f"Symlinked directories are not supported: {child_path}", child_path
            )
        if not stat.S_ISREG(st.st_mode):
            raise TorrentIOError(f"Not a regular file: {child_path}", child_path)

        segments = child_path.relative_to(root).parts
        yield FileEntry(list(segments), st.st_size, child_path)


def iter_entries(target: Target) -> Iterator[FileEntry]:
    """Yield the target's files in the order their bytes must be hashed."""
    if not target.is_dir:
        yield FileEntry([target.name], target.size, target.root)
        return
    yield from _walk(target.root, target.root)


def enumerate_target(path: str | Path) -> tuple[Target, list[FileEntry]]:
    target = inspect_target(path)
    entries = list(iter_entries(target))
    logger.info(
        f"Enumerated {len(entries)} file(s) under {target.root}",
        extra={"file_count": len(entries)},
    )
    return target, entries
