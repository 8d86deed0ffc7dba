"""
Local tree snapshots for the polling watcher
"""
import os
from pathlib import Path

from ..utils.file_utils import Signature, file_signature
from ..utils.ignore_patterns import is_ignored


def local_snapshot(root: Path, patterns: list) -> dict[Path, Signature]:
    """Returns {absolute_path: (mtime_ns, size)} for every regular file under root."""
    result: dict[Path, Signature] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        rel_base = base.relative_to(root).as_posix()
        prefix = "" if rel_base == "." else rel_base + "/"
        # prune ignored subtrees in place so os.walk never enters them
        dirnames[:] = sorted(d for d in dirnames if not is_ignored(prefix + d, patterns))
        for name in filenames:
            if is_ignored(prefix + name, patterns):
                continue
            p = base / name
            # vanished mid-walk, socket, fifo … → absent
            sig = file_signature(p)
            if sig is None:
                continue
            result[p] = sig
    return result
