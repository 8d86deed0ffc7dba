"""
Ignore rules for the watcher (.autosftpignore in the watch root)
"""
import re
from pathlib import Path
from typing import Optional

from ..config import IGNORE_FILE


def _compile_pattern(raw: str) -> Optional["re.Pattern[str]"]:
    """Compile one glob line into a regex over root-relative POSIX paths."""
    p = raw.strip()
    if not p or p.startswith("#"):
        return None
    anchored = p.startswith("/")
    escaped = re.escape(p.lstrip("/"))
    escaped = escaped.replace(r"\*\*", "§DS§")
    escaped = escaped.replace(r"\*", "[^/]*")
    escaped = escaped.replace(r"\?", "[^/]")
    escaped = escaped.replace("§DS§", ".*")
    prefix = "^" if anchored else r"(^|.*/)"
    try:
        return re.compile(prefix + escaped + r"(/.*)?$")
    except re.error:
        return None


def load_ignore_patterns(root: Path) -> list:
    """Load ignore patterns from the root's ignore file, if there is one."""
    f = root / IGNORE_FILE
    if not f.is_file():
        return []
    patterns = []
    for line in f.read_text(encoding="utf-8", errors="replace").splitlines():
        c = _compile_pattern(line)
        if c:
            patterns.append(c)
    return patterns


def is_ignored(rel_path: str, patterns: list) -> bool:
    """Check a root-relative path against the built-in skips and the patterns."""
    norm = rel_path.replace("\\", "/")
    # .git contents and the ignore file itself are never mirrored
    if norm == IGNORE_FILE or norm == ".git" or norm.startswith(".git/"):
        return True
    return any(p.search(norm) for p in patterns)
