"""Utilities (logging, paths, ignore patterns, file signatures)"""
from .logging import log, vlog, warn, error, set_verbose
from .paths import translate, remote_parent
from .ignore_patterns import load_ignore_patterns, is_ignored
from .file_utils import file_signature, signature_changed

__all__ = [
    "log", "vlog", "warn", "error", "set_verbose",
    "translate", "remote_parent",
    "load_ignore_patterns", "is_ignored",
    "file_signature", "signature_changed",
]
