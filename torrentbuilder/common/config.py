from pathlib import Path

DEFAULT_ANNOUNCE = "https://www.pttime.org/announce.php"
DEFAULT_CREATED_BY = "tdhTorrentBuilder v0.1"
DEFAULT_PIECE_LENGTH = 32 * 1024 * 1024  # 32MB pieces
DEFAULT_READ_SIZE = 4 * 1024 * 1024  # max bytes per read() call
DEFAULT_QUEUE_SIZE = 64  # pending paths between walker and hasher
BLOCK_SIZE = 16384  # 16KB standard block size


class BuildConfig:
    __slots__ = (
        "announce",
        "created_by",
        "piece_length",
        "read_size",
        "output_dir",
        "queue_size",
    )

    def __init__(
        self,
        announce: str = DEFAULT_ANNOUNCE,
        created_by: str = DEFAULT_CREATED_BY,
        piece_length: int = DEFAULT_PIECE_LENGTH,
        read_size: int = DEFAULT_READ_SIZE,
        output_dir: Path | None = None,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ):
        if piece_length <= 0:
            raise ValueError(f"Piece length must be positive, got {piece_length}")
        if read_size <= 0:
            raise ValueError(f"Read size must be positive, got {read_size}")
        if queue_size < 0:
            raise ValueError(f"Queue size must not be negative, got {queue_size}")

        self.announce = announce
        self.created_by = created_by
        self.piece_length = piece_length
        self.read_size = read_size
        self.output_dir = Path(output_dir) if output_dir is not None else Path.cwd()
        self.queue_size = queue_size

    @classmethod
    def from_args(cls, args) -> "BuildConfig":
        # piece lengths given by users must be whole blocks
        if args.piece_length <= 0 or args.piece_length % BLOCK_SIZE:
            raise ValueError(
                f"Piece length must be a positive multiple of {BLOCK_SIZE}, "
                f"got {args.piece_length}"
            )
        return cls(
            announce=args.announce,
            created_by=args.created_by,
            piece_length=args.piece_length,
            output_dir=args.output,
        )

    def __repr__(self):
        return (
            f"BuildConfig(announce={self.announce!r}, created_by={self.created_by!r}, "
            f"piece_length={self.piece_length}, output_dir={str(self.output_dir)!r})"
        )
