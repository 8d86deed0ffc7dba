"""
Local → remote path translation
"""
import ntpath
import os
import posixpath
from pathlib import Path, PurePath, PureWindowsPath
from typing import Union

from ..errors import PathOutsideRootError

PathLike = Union[str, os.PathLike]


def _normalize(p: PathLike) -> PurePath:
    """Absolute, normalized path.  Pure paths keep their own flavour."""
    if not isinstance(p, PurePath):
        p = Path(os.path.abspath(p))
    mod = ntpath if isinstance(p, PureWindowsPath) else posixpath
    return type(p)(mod.normpath(str(p)))


def translate(local_root: PathLike, remote_root: str, local_path: PathLike) -> str:
    """
    Map *local_path* (somewhere below *local_root*) to its remote counterpart
    below *remote_root*.  The result always uses ``/`` whatever the local OS.

    >>> translate("/home/me/proj", "/srv/www", "/home/me/proj/a/b.txt")
    '/srv/www/a/b.txt'
    """
    root = _normalize(local_root)
    path = _normalize(local_path)
    try:
        rel = path.relative_to(root)
    except ValueError:
        raise PathOutsideRootError(f"{local_path} is not below {local_root}") from None

    base = str(remote_root).replace("\\", "/")
    return posixpath.normpath(posixpath.join(base, rel.as_posix()))


def remote_parent(remote_path: str) -> str:
    """Parent of a remote POSIX path ('/' is its own parent)."""
    return posixpath.dirname(remote_path.rstrip("/")) or "/"
