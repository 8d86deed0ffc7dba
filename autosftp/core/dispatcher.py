"""
Sync dispatcher: applies watch events to the remote, one at a time
"""
import traceback
from typing import Iterable, Optional

from ..errors import AutosftpError
from ..models import EventKind, SyncTarget, WatchEvent
from ..operations.delete import delete_remote
from ..operations.directories import DirectoryReconciler
from ..operations.transfer import upload_file
from ..utils.logging import is_verbose, log, vlog, warn
from ..utils.paths import translate


class SyncDispatcher:
    """
    Consumes events strictly in emission order on the calling thread, so the
    single RemoteSession never sees two operations at once.  A failing event
    is reported and dropped; it never stops the loop.
    """

    def __init__(self, session, target: SyncTarget,
                 reconciler: Optional[DirectoryReconciler] = None):
        self.session = session
        self.target = target
        self.reconciler = reconciler or DirectoryReconciler(session)
        self.uploaded = 0
        self.deleted = 0
        self.failed = 0

    def _rel(self, event: WatchEvent) -> str:
        try:
            return event.local_path.relative_to(self.target.local_root).as_posix()
        except ValueError:
            return str(event.local_path)

    def run(self, events: Iterable[WatchEvent]):
        """Drive the loop until the event source ends or the process is interrupted."""
        for event in events:
            self.dispatch(event)

    def dispatch(self, event: WatchEvent) -> bool:
        """Apply one event.  Returns False if it had to be abandoned."""
        rel = self._rel(event)
        try:
            if event.kind is EventKind.DELETED:
                self._on_deleted(event, rel)
            else:
                self._on_written(event, rel)
        except AutosftpError as exc:
            self.failed += 1
            warn(f"[{event.kind.value}] {rel}: {exc}")
            return False
        except Exception as exc:
            self.failed += 1
            warn(f"[{event.kind.value}] {rel}: unexpected {type(exc).__name__}: {exc}")
            if is_verbose():
                traceback.print_exc()
            return False
        return True

    def _remote_path(self, event: WatchEvent) -> str:
        return translate(self.target.local_root, self.target.remote_root, event.local_path)

    def _on_written(self, event: WatchEvent, rel: str):
        remote_path = self._remote_path(event)
        log(f"[{event.kind.value}] {rel}")
        upload_file(self.session, self.reconciler, event.local_path, remote_path)
        self.uploaded += 1
        log(f"  [upload ✓] {remote_path}")

    def _on_deleted(self, event: WatchEvent, rel: str):
        if event.local_path.exists():
            vlog(f"[deleted] {rel} is back locally, skipping remote delete")
            return
        remote_path = self._remote_path(event)
        log(f"[deleted] {rel}")
        if delete_remote(self.session, remote_path):
            log(f"  [delete ✓] {remote_path}")
        self.deleted += 1
