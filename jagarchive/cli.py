from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from jagarchive.archive import JagArchive
from jagarchive.errors import JagError
from jagarchive.hashutil import hash_filename
from jagarchive.keys import describe_key, parse_entry_key


_UNITS = ["B", "kB", "MB", "GB"]


def _pretty_bytes(n: int) -> str:
    """Human-readable size using decimal units (1 kB = 1000 B)."""
    if n < 1000:
        return f"{n} B"
    size = float(n)
    for unit in _UNITS[1:]:
        size /= 1000
        if size < 1000 or unit == _UNITS[-1]:
            break
    return f"{size:.1f} {unit}"


def _load(archive: str) -> JagArchive:
    return JagArchive.from_bytes(Path(archive).read_bytes())


def _write_atomic(path: str, data: bytes) -> None:
    """Write ``data`` next to ``path`` and swap it in."""
    tmp = f"{path}.tmp"
    with open(tmp, "wb") as fh:
        fh.write(data)
        fh.flush()
        os.fsync(fh.fileno())
    os.replace(tmp, path)


def cmd_extract(archive: str, keys: List[str], *, outputs: Optional[List[str]] = None, quiet: bool = False) -> bool:
    """Extract entries to files.

    Args:
        archive: Path to a .jag or .mem archive.
        keys: Filenames or integer hashes inside the archive.
        outputs: Destination paths, one per key. Defaults to the keys themselves.
        quiet: Suppress per-entry output.
    """
    names = outputs if outputs else keys
    if len(names) != len(keys):
        raise ValueError(f"invalid number of output names: {len(keys)} (files) != {len(names)} (output)")
    jag = _load(archive)
    for key_text, out in zip(keys, names):
        key = parse_entry_key(key_text)
        data = jag.get_entry(key)
        Path(out).write_bytes(data)
        if not quiet:
            print(f"  extracting: {describe_key(key)} -> {out} ({len(data)} bytes)")
    return True


def cmd_add(archive: str, files: List[str], *, group: bool = False, quiet: bool = False) -> bool:
    """Add files to an archive, creating it if it does not exist.

    Entries are keyed by the basename of each file. With ``group`` the index
    block is compressed as a whole instead of compressing each entry.
    """
    jag = _load(archive) if Path(archive).exists() else JagArchive()
    for f in files:
        name = os.path.basename(f)
        name_hash = jag.put_entry(name, Path(f).read_bytes())
        if not quiet:
            print(f"      adding: {name} ({name_hash})")
    _write_atomic(archive, jag.to_archive(not group))
    return True


def cmd_delete(archive: str, keys: List[str], *, quiet: bool = False) -> bool:
    """Remove entries and rewrite the archive in its original compression mode."""
    jag = _load(archive)
    for key_text in keys:
        key = parse_entry_key(key_text)
        jag.remove_entry(key)
        if not quiet:
            print(f"    deleting: {describe_key(key)}")
    _write_atomic(archive, jag.to_archive(not jag.whole_block_compressed))
    return True


def cmd_list(archive: str) -> bool:
    """List hashes and payload sizes."""
    jag = _load(archive)
    print("hash\t\tsize")
    for name_hash, entry in jag.entries.items():
        print(f"{name_hash}\t{len(entry)} ({_pretty_bytes(len(entry))})")
    return True


def cmd_info(archive: str) -> bool:
    """Show archive information."""
    raw = Path(archive).read_bytes()
    jag = JagArchive.from_bytes(raw)
    total = sum(len(e) for e in jag.entries.values())
    print(f"Archive: {archive}")
    print(f"  Size: {len(raw)} ({_pretty_bytes(len(raw))})")
    print(f"  Compression: {'whole block' if jag.whole_block_compressed else 'per entry'}")
    print(f"  Entries: {len(jag)}")
    print(f"  Payload bytes: {total} ({_pretty_bytes(total)})")
    return True


def cmd_hash(name: str) -> int:
    value = hash_filename(name)
    print(value)
    return value


def main(argv: List[str] | None = None):
    ap = argparse.ArgumentParser(
        prog="jagarchive",
        description="Create, inspect and extract JAG cache archives (.jag/.mem)",
        epilog="Entries are addressed by filename or by their signed 32-bit hash.",
    )
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_extract = sub.add_parser("extract", aliases=["x"], help="Extract files from an archive")
    ap_extract.add_argument("archive", help="The .jag or .mem archive file")
    ap_extract.add_argument("files", nargs="+", help="Filenames or hashes within the archive")
    ap_extract.add_argument("-o", "--output", nargs="+", help="Filenames to write to (one per entry)")
    ap_extract.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_add = sub.add_parser("add", aliases=["a"], help="Add files to an archive")
    ap_add.add_argument("archive", help="The .jag or .mem archive file (created if missing)")
    ap_add.add_argument("files", nargs="+", help="Files to add; stored under their basename")
    ap_add.add_argument(
        "-g",
        "--group",
        action="store_true",
        help="Compress files in one block rather than individually",
    )
    ap_add.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_delete = sub.add_parser("delete", aliases=["d"], help="Remove files from an archive")
    ap_delete.add_argument("archive", help="The .jag or .mem archive file")
    ap_delete.add_argument("files", nargs="+", help="Filenames or hashes within the archive")
    ap_delete.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_list = sub.add_parser("list", aliases=["l"], help="List hashes and file sizes in an archive")
    ap_list.add_argument("archive", help="The .jag or .mem archive file")

    ap_info = sub.add_parser("info", help="Show archive information")
    ap_info.add_argument("archive", help="The .jag or .mem archive file")

    ap_hash = sub.add_parser("hash", aliases=["h"], help="Print the integer hash of a filename")
    ap_hash.add_argument("name", help="The string to hash")

    args = ap.parse_args(argv)
    try:
        if args.cmd in ("extract", "x"):
            cmd_extract(args.archive, args.files, outputs=args.output, quiet=args.quiet)
        elif args.cmd in ("add", "a"):
            cmd_add(args.archive, args.files, group=args.group, quiet=args.quiet)
        elif args.cmd in ("delete", "d"):
            cmd_delete(args.archive, args.files, quiet=args.quiet)
        elif args.cmd in ("list", "l"):
            cmd_list(args.archive)
        elif args.cmd == "info":
            cmd_info(args.archive)
        elif args.cmd in ("hash", "h"):
            cmd_hash(args.name)
        else:
            raise RuntimeError("Unknown command")
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except (JagError, ValueError, RuntimeError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
