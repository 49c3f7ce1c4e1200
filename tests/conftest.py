import hashlib
from pathlib import Path

import pytest


def reference_pieces(data: bytes, piece_length: int) -> bytes:
    """Hash ``data`` in one pass with plain slicing."""
    if not data:
        return hashlib.sha1(b"").digest()
    return b"".join(
        hashlib.sha1(data[i : i + piece_length]).digest()
        for i in range(0, len(data), piece_length)
    )


@pytest.fixture
def make_tree(tmp_path):
    """Create files from a {relative/path: bytes} mapping, returns the root."""

    def _make(files: dict[str, bytes], root_name: str = "content") -> Path:
        root = tmp_path / root_name
        root.mkdir()
        for rel, data in files.items():
            path = root.joinpath(*rel.split("/"))
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        return root

    return _make
