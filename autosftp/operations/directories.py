"""
Remote ancestor-directory reconciliation
"""
from ..errors import DirectoryReconcileError, RemoteIOError
from ..utils.logging import log, vlog
from ..utils.paths import remote_parent


class DirectoryReconciler:
    """
    Makes sure every ancestor of a remote file exists before it is written.

    Walks upward from the file's parent, probing each directory, until one
    exists (or the remote filesystem root is reached), then creates the
    missing ones root-to-leaf.  Nothing is cached between calls: every pass
    asks the server afresh.
    """

    def __init__(self, session):
        self.session = session

    def missing_chain(self, remote_file: str) -> list[str]:
        """Missing ancestors of *remote_file*, nearest first."""
        pending: list[str] = []
        current = remote_parent(remote_file)
        while current != "/" and not self.session.probe(current):
            pending.append(current)
            current = remote_parent(current)
        return pending

    def ensure_parents(self, remote_file: str) -> list[str]:
        """
        Create the missing ancestors of *remote_file*.
        Returns the directories created, outermost first.
        Raises DirectoryReconcileError if one cannot be created.
        """
        pending = self.missing_chain(remote_file)
        if not pending:
            vlog(f"  [dirs] parents of {remote_file} exist")
            return []

        created: list[str] = []
        for directory in reversed(pending):
            try:
                self.session.mkdir(directory)
            except RemoteIOError as exc:
                # created by someone else since we probed?
                if self._exists(directory):
                    vlog(f"  [mkdir] {directory} appeared concurrently")
                    continue
                raise DirectoryReconcileError(
                    f"cannot create {directory} for {remote_file}: {exc}"
                ) from exc
            created.append(directory)
            log(f"  [mkdir ✓] {directory}")
        return created

    def _exists(self, directory: str) -> bool:
        try:
            return self.session.probe(directory)
        except RemoteIOError:
            return False
