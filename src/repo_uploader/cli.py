from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from repo_uploader.models.archive import ArchiveReadResult, CorruptArchiveError, FormatError
from repo_uploader.services.archive_reader import detect_format, read_archive


def _format_size(size: int) -> str:
    for unit in ("B", "KB", "MB"):
        if size < 1024:
            return f"{size} {unit}"
        size //= 1024
    return f"{size} GB"


def display_read_result(path: Path, result: ArchiveReadResult) -> None:
    """Print the entries of an extracted archive."""
    print(f"\n📦 {path.name} ({result.archive_format.value})")
    print("-" * 60)
    for entry in result.entries:
        if entry.is_directory:
            print(f"  📁 {entry.path}")
            continue
        marker = "" if entry.content is not None else "  (content omitted)"
        print(f"  📄 {entry.path}  {_format_size(entry.size)}{marker}")
    print("-" * 60)
    print(f"Files: {result.file_count}  Directories: {result.directory_count}")
    for warning in result.warnings:
        print(f"⚠️  {warning}")


def run_inspect(archive: Path, inline_threshold: int | None) -> int:
    """Extract ``archive`` and print what a push would contain.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    if not archive.is_file():
        print(f"❌ Not a file: {archive}")
        return 1
    try:
        result = read_archive(archive.read_bytes(), detect_format(archive.name), inline_threshold)
    except (FormatError, CorruptArchiveError) as exc:
        print(f"❌ Error: {exc}")
        return 1

    display_read_result(archive, result)
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="repo-uploader")
    sub = parser.add_subparsers(dest="command", required=True)

    inspect = sub.add_parser("inspect", help="List the entries of an archive")
    inspect.add_argument("archive", type=Path)
    inspect.add_argument("--inline-threshold", type=int, default=None)

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--no-reload", action="store_true")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.command == "inspect":
        return run_inspect(args.archive, args.inline_threshold)

    from repo_uploader.api.main import main as serve

    serve(host=args.host, port=args.port, reload=not args.no_reload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
