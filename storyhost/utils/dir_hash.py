"""Directory hashing used to detect whether generated story files changed."""

from __future__ import annotations

import base64
import hashlib
from pathlib import Path


def hash_dir(directory: str | Path, prefix: str = "") -> str | None:
    """
    Compute a content hash over every file below `directory`.

    Files are listed with forward-slash relative paths (joined to `prefix`),
    sorted, and summarised one line per file as "<sha256 hex>  <name>". The
    result is the SHA-256 of that summary, base64-encoded with an "h1:" tag.

    Args:
        directory: Root directory to hash
        prefix: Optional path prefix applied to every listed name

    Returns:
        "h1:<base64>" string, or None if the directory does not exist
    """
    root = Path(directory)
    if not root.is_dir():
        return None

    names = sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())

    summary = hashlib.sha256()
    for name in names:
        if "\n" in name:
            raise ValueError(f"filenames with newlines are not supported: {name!r}")
        digest = hashlib.sha256((root / name).read_bytes()).hexdigest()
        listed = f"{prefix.rstrip('/')}/{name}" if prefix else name
        summary.update(f"{digest}  {listed}\n".encode())
    return "h1:" + base64.b64encode(summary.digest()).decode("ascii")
