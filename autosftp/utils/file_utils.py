"""
File signature helpers used for change detection
"""
import stat
from pathlib import Path
from typing import Optional

Signature = tuple[int, int]


def file_signature(path: Path) -> Optional[Signature]:
    """(mtime_ns, size) of a regular file, or None if it is gone or not a file."""
    try:
        st = path.stat()
    except OSError:
        return None
    if not stat.S_ISREG(st.st_mode):
        return None
    return st.st_mtime_ns, st.st_size


def signature_changed(new: Signature, old: Optional[Signature]) -> bool:
    """True if the file is different from what we last recorded."""
    if old is None:
        return True
    return new != old
