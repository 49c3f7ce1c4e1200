#!/usr/bin/env python3
"""
TorrentBuilder - BitTorrent metainfo generator using Python asyncio
Main entry point for the application.
"""

import asyncio
import argparse
import sys
from pathlib import Path
from torrentbuilder.common.config import (
    BuildConfig,
    DEFAULT_ANNOUNCE,
    DEFAULT_CREATED_BY,
    DEFAULT_PIECE_LENGTH,
)
from torrentbuilder.common.errors import TorrentBuildError
from torrentbuilder.common.logging import config_logging
from torrentbuilder.torrent.builder import build_metainfo
from torrentbuilder.torrent.metadata import MetainfoRecord
from torrentbuilder.torrent.parser import parse_torrent_file
from torrentbuilder.torrent.writer import write_torrent
import logging

logger = logging.getLogger(__name__)


def print_summary(record: MetainfoRecord, output: Path | None = None):
    print(f"\n{'='*60}")
    print(f"Torrent: {record.name}")
    print(f"Size: {record.total_length / (1024*1024):.2f} MB")
    print(f"Files: {len(record.files)}")
    print(f"Pieces: {len(record.piece_hashes)} x {record.piece_length / 1024:.0f} KB")
    print(f"Tracker: {record.announce}")
    print(f"Info hash: {record.info_hash.hex()}")
    if output is not None:
        print(f"Saved to: {output}")
    print(f"{'='*60}\n")


async def create_torrent(target: Path, config: BuildConfig) -> Path:
    """
    Hash a file or directory and write its .torrent file.

    Args:
        target: File or directory to describe
        config: Build settings (tracker, piece length, output directory)
    """
    record = await build_metainfo(target, config)
    output = write_torrent(record, config.output_dir)
    print_summary(record, output)
    return output


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the TorrentBuilder CLI."""
    parser = argparse.ArgumentParser(
        description="TorrentBuilder - create .torrent files for a file or directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s movie.mkv
  %(prog)s photos/ -o torrents/
  %(prog)s --show photos.torrent
        """,
    )

    parser.add_argument(
        "target",
        type=Path,
        help="File or directory to build a torrent for (or a .torrent with --show)",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=Path.cwd(),
        help="Directory the .torrent file is written to (default: current directory)",
    )

    parser.add_argument(
        "--announce",
        default=DEFAULT_ANNOUNCE,
        help=f"Tracker announce URL (default: {DEFAULT_ANNOUNCE})",
    )

    parser.add_argument(
        "--created-by",
        default=DEFAULT_CREATED_BY,
        help=f"Creator identifier (default: {DEFAULT_CREATED_BY})",
    )

    parser.add_argument(
        "--piece-length",
        type=int,
        default=DEFAULT_PIECE_LENGTH,
        help=f"Bytes per piece, a multiple of 16384 (default: {DEFAULT_PIECE_LENGTH})",
    )

    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the summary of an existing .torrent file instead of building one",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        default=Path("torrentbuilder.log.jsonl"),
        help="Path to log file (default: torrentbuilder.log.jsonl)",
    )

    args = parser.parse_args(argv)

    try:
        config = BuildConfig.from_args(args)
    except ValueError as e:
        parser.error(str(e))

    config_logging(args.log_file, verbose=args.verbose)

    try:
        if args.show:
            print_summary(parse_torrent_file(args.target))
        else:
            asyncio.run(create_torrent(args.target, config))
    except TorrentBuildError as e:
        logger.error(f"Torrent creation failed: {e}", exc_info=True)
        print(f"\n✗ Failed: {e}")
        return 1
    except KeyboardInterrupt:
        print("\n\n⚠ Interrupted by user")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
