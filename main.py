#!/usr/bin/env python3
"""
turbometa - inspect .torrent files
Prints what each torrent describes, or exactly why it was rejected.
"""

import argparse
import json
import sys
from pathlib import Path
from turbometa.torrent.parser import decode_file
from turbometa.torrent.errors import InvalidTorrentError, LoadError
from turbometa.torrent.metadata import TorrentMetadata
from turbometa.torrent.tree import DirNode, FileNode
from turbometa.common.logging import config_logging
import logging

logger = logging.getLogger(__name__)


def format_tree(node, indent: int = 0) -> list[str]:
    lines = []
    for name, child in node.entries.items():
        if isinstance(child, FileNode):
            lines.append(f"{'  ' * indent}{name} ({child.size} bytes)")
        else:
            lines.append(f"{'  ' * indent}{name}/")
            lines.extend(format_tree(child, indent + 1))
    return lines


def summary(metadata: TorrentMetadata) -> dict:
    return {
        "filename": metadata.filename,
        "info_hash": str(metadata.info_hash),
        "trackers": [[str(url) for url in tier] for tier in metadata.trackers],
        "nodes": [[str(host), port] for host, port in metadata.nodes],
        "httpseeds": [str(url) for url in metadata.httpseeds],
        "urllist": str(metadata.urllist) if metadata.urllist is not None else None,
        "private": metadata.private,
        "piece_length": metadata.piece_length,
        "pieces": len(metadata.pieces),
        "merkle_root": str(metadata.merkle_root) if metadata.merkle_root else None,
        "total_length": metadata.total_length,
        "files": [
            {"path": list(f.path), "length": f.length, "offset": f.offset}
            for f in metadata.files
        ],
    }


def print_torrent(metadata: TorrentMetadata):
    info = summary(metadata)
    print(f"trackers: {info['trackers']}")
    print(f"filename: {metadata.filename}")
    print(f"info hash: {info['info_hash']}")
    print(f"private: {metadata.private}")
    print(f"pieces: {len(metadata.pieces)} x {metadata.piece_length} bytes")
    if metadata.merkle_root is not None:
        print(f"merkle root: {metadata.merkle_root}")
    if metadata.nodes:
        print(f"nodes: {info['nodes']}")
    if metadata.httpseeds:
        print(f"http seeds: {info['httpseeds']}")
    if metadata.urllist is not None:
        print(f"url list: {metadata.urllist}")
    print(f"size: {metadata.total_length} bytes")
    if isinstance(metadata.contents, DirNode):
        print(f"{metadata.filename}/")
        for line in format_tree(metadata.contents, 1):
            print(line)


def describe_error(e: LoadError) -> str:
    if isinstance(e, InvalidTorrentError):
        return f"{e.kind.name}: {e.error}"
    return f"{type(e).__name__}: {e}"


def dump(paths: list[Path], as_json: bool = False) -> int:
    failures = 0
    for path in paths:
        try:
            metadata = decode_file(path)
        except LoadError as e:
            failures += 1
            logger.debug(f"Could not load {path}", exc_info=True)
            if as_json:
                print(json.dumps({"path": str(path), "error": describe_error(e)}))
            else:
                print(f"## {path}\n")
                print(f"Error: {describe_error(e)}\n\n")
            continue

        if as_json:
            print(json.dumps({"path": str(path), "torrent": summary(metadata)}))
        else:
            print(f"## {path}\n")
            print_torrent(metadata)
            print("\n")
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the turbometa dump tool."""
    parser = argparse.ArgumentParser(
        description="turbometa - decode and validate .torrent files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ubuntu.torrent
  %(prog)s *.torrent --json
  %(prog)s broken.torrent -v
        """,
    )

    parser.add_argument(
        "torrents", type=Path, nargs="+", help="Path(s) to .torrent files"
    )

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    parser.add_argument(
        "--json", action="store_true", help="Print one JSON object per torrent"
    )

    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write JSON logs to data/logs/<LOG_FILE>",
    )

    args = parser.parse_args(argv)

    config_logging(args.log_file, verbose=args.verbose)

    return dump(args.torrents, as_json=args.json)


if __name__ == "__main__":
    sys.exit(main())
