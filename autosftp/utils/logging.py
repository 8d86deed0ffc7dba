"""
Console output for autosftp

Progress goes to stdout with a wall-clock stamp; fatal messages go to stderr.
Banner and summary blocks are unstamped so they line up.
"""
import sys
from datetime import datetime

RULE_WIDTH = 64

_verbose = False


def set_verbose(verbose: bool):
    global _verbose
    _verbose = verbose


def is_verbose() -> bool:
    return _verbose


def _emit(msg: str, stream=None, marker: str = ""):
    ts = datetime.now().strftime("%H:%M:%S")
    print(f"[{ts}] {marker}{msg}", file=stream or sys.stdout, flush=True)


def log(msg: str):
    _emit(msg)


def vlog(msg: str):
    """Only shown with -v."""
    if _verbose:
        _emit(msg)


def warn(msg: str):
    """Recoverable problem: the watch keeps running."""
    _emit(msg, marker="⚠  ")


def error(msg: str):
    _emit(msg, stream=sys.stderr, marker="✗  ")


def block(title_lines, rows=(), char: str = "="):
    """
    Print an unstamped block framed by rules of *char*.

    *rows* are ``(label, value)`` pairs printed as an aligned table under the
    title lines.
    """
    rule = char * RULE_WIDTH
    print(rule)
    for line in title_lines:
        print(line)
    width = max((len(label) for label, _ in rows), default=0)
    for label, value in rows:
        print(f"  {label:<{width}} : {value}")
    print(rule, flush=True)
