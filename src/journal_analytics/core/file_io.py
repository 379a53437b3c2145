"""Safe JSONL file I/O used by file-backed stores.

Appends take an exclusive ``fcntl`` lock and ``fsync`` before releasing it,
so concurrent writers never interleave half-written records.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def safe_append_line(path: Path, line: str) -> None:
    """Append a single line to *path* under an exclusive lock.

    Parent directories are created on demand.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX)
        try:
            f.write(line + "\n")
            f.flush()
            os.fsync(f.fileno())
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)


def append_json(path: Path, record: dict[str, Any]) -> None:
    """Serialise *record* compactly and append it as one JSONL line."""
    safe_append_line(path, json.dumps(record, separators=(",", ":"), sort_keys=True))


def read_lines(path: Path) -> list[tuple[int, str]]:
    """Return ``(line_no, text)`` for every non-blank line of *path*.

    Read under a shared lock so an in-flight append is never seen half
    written.  A missing file reads as empty.
    """
    if not path.exists():
        return []
    with open(path, encoding="utf-8") as f:
        fcntl.flock(f.fileno(), fcntl.LOCK_SH)
        try:
            lines = f.readlines()
        finally:
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    return [
        (line_no, raw.strip())
        for line_no, raw in enumerate(lines, 1)
        if raw.strip()
    ]
