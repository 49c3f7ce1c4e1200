import hashlib
from pathlib import Path

import bencodepy

SHA1_LENGTH = 20


class FileEntry:
    __slots__ = ("_path", "_length", "_source")

    def __init__(self, path: list[str], length: int, source: Path | None = None):
        if length < 0:
            raise ValueError(f"File length must not be negative, got {length}")
        self._path = tuple(path)
        self._length = length
        self._source = source  # on-disk location, never serialized

    @property
    def path(self) -> list[str]:
        return list(self._path)

    @property
    def length(self) -> int:
        return self._length

    @property
    def source(self) -> Path | None:
        return self._source

    def to_dict(self) -> dict:
        return {"length": self._length, "path": list(self._path)}

    def __eq__(self, other):
        if not isinstance(other, FileEntry):
            return NotImplemented
        return self._path == other._path and self._length == other._length

    def __hash__(self):
        return hash((self._path, self._length))

    def __repr__(self):
        return f"FileEntry(path={list(self._path)!r}, length={self._length})"


class SingleFileInfo:
    __slots__ = ("name", "piece_length", "pieces", "length")

    def __init__(self, name: str, piece_length: int, pieces: bytes, length: int):
        self.name = name
        self.piece_length = piece_length
        self.pieces = pieces
        self.length = length

    @property
    def files(self) -> list[FileEntry]:
        return [FileEntry([self.name], self.length)]

    @property
    def total_length(self) -> int:
        return self.length

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "piece length": self.piece_length,
            "pieces": self.pieces,
            "length": self.length,
        }


class MultiFileInfo:
    __slots__ = ("name", "piece_length", "pieces", "_files")

    def __init__(
        self, name: str, piece_length: int, pieces: bytes, files: list[FileEntry]
    ):
        self.name = name
        self.piece_length = piece_length
        self.pieces = pieces
        self._files = tuple(files)

    @property
    def files(self) -> list[FileEntry]:
        return list(self._files)

    @property
    def total_length(self) -> int:
        return sum(entry.length for entry in self._files)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "piece length": self.piece_length,
            "pieces": self.pieces,
            "files": [entry.to_dict() for entry in self._files],
        }


class MetainfoRecord:
    """Complete torrent description, ready for bencoding.

    ``info`` is a ``SingleFileInfo`` when the target was a plain file and a
    ``MultiFileInfo`` when it was a directory.
    """

    __slots__ = ("announce", "created_by", "creation_date", "info")

    def __init__(
        self,
        announce: str,
        created_by: str,
        creation_date: int,
        info: SingleFileInfo | MultiFileInfo,
    ):
        self.announce = announce
        self.created_by = created_by
        self.creation_date = creation_date
        self.info = info

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def is_multi_file(self) -> bool:
        return isinstance(self.info, MultiFileInfo)

    @property
    def files(self) -> list[FileEntry]:
        return self.info.files

    @property
    def total_length(self) -> int:
        return self.info.total_length

    @property
    def piece_length(self) -> int:
        return self.info.piece_length

    @property
    def piece_hashes(self) -> list[bytes]:
        pieces = self.info.pieces
        return [
            pieces[i : i + SHA1_LENGTH] for i in range(0, len(pieces), SHA1_LENGTH)
        ]

    @property
    def info_hash(self) -> bytes:
        return hashlib.sha1(bencodepy.encode(self.info.to_dict())).digest()

    def to_dict(self) -> dict:
        return {
            "announce": self.announce,
            "createdby": self.created_by,
            "creationdate": self.creation_date,
            "info": self.info.to_dict(),
        }
