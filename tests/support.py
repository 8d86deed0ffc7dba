"""
Shared test doubles: an in-memory remote that behaves like RemoteSession.
"""
import posixpath

from autosftp.errors import LocalFileMissingError, RemoteIOError


class FakeSession:
    """Remote filesystem held in a set of dirs and a dict of files."""

    def __init__(self, dirs=("/",), remote_root="/srv"):
        self.dirs = set(dirs) | {"/"}
        self.files: dict[str, bytes] = {}
        self.modes: dict[str, int] = {}
        self.calls: list[tuple[str, str]] = []
        self.fail_mkdir: set[str] = set()
        self.remote_root = remote_root

    def _parent_exists(self, path):
        return (posixpath.dirname(path) or "/") in self.dirs

    def probe(self, path):
        self.calls.append(("probe", path))
        if path in self.files:
            raise RemoteIOError(f"probe {path}: not a directory")
        return path in self.dirs

    def mkdir(self, path):
        self.calls.append(("mkdir", path))
        if path in self.fail_mkdir:
            raise RemoteIOError(f"mkdir {path}: Permission denied")
        if path in self.dirs or not self._parent_exists(path):
            raise RemoteIOError(f"mkdir {path}: Failure")
        self.dirs.add(path)

    def put(self, local_file, remote_path, mode=None):
        self.calls.append(("put", remote_path))
        if not self._parent_exists(remote_path):
            raise RemoteIOError(f"put {remote_path}: No such file")
        try:
            with open(local_file, "rb") as f:
                data = f.read()
        except FileNotFoundError as exc:
            raise LocalFileMissingError(f"{local_file} no longer exists") from exc
        self.files[remote_path] = data
        self.modes[remote_path] = 0o644 if mode is None else mode

    def remove(self, remote_path):
        self.calls.append(("remove", remote_path))
        if remote_path not in self.files:
            return False
        del self.files[remote_path]
        return True

    def ops(self, name):
        return [path for op, path in self.calls if op == name]
