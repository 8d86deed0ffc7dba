"""
Watch engine - bootstrap and orchestration
"""
from typing import Optional

from ..models import SyncTarget
from ..utils.logging import block, log
from .credentials import CredentialSource
from .dispatcher import SyncDispatcher
from .session import RemoteSession
from .watcher import PollingWatcher


def run_watch(watch_root, host: str, username: Optional[str] = None,
              port: Optional[int] = None, remote_root: Optional[str] = None,
              identity_file: Optional[str] = None,
              credentials: Optional[CredentialSource] = None,
              poll_interval_ms: Optional[int] = None,
              connect_timeout: Optional[int] = None,
              session_factory=RemoteSession,
              watcher_factory=PollingWatcher) -> SyncDispatcher:
    """
    Mirror *watch_root* onto the remote until interrupted.

    The watch root is checked before any connection is attempted, and the
    session is closed on every way out, including a failed connect.
    Returns the dispatcher so callers can read its counters.
    """
    watcher = watcher_factory(watch_root, poll_interval_ms)
    session = session_factory(host=host, port=port, username=username,
                              identity_file=identity_file, credentials=credentials,
                              remote_root=remote_root, connect_timeout=connect_timeout)

    with session:
        target = SyncTarget(local_root=watcher.root, remote_root=session.remote_root)
        dispatcher = SyncDispatcher(session, target)

        print()
        block([f"  Watch  {target.local_root}",
               f"   →     {session.display_user}@{session.host}:{session.port}:{target.remote_root}",
               f"  polling every {watcher.poll_interval_ms} ms, Ctrl-C to stop"])
        print()

        try:
            dispatcher.run(watcher)
        except KeyboardInterrupt:
            print()
            log("Interrupted, shutting down …")

    block([" SUMMARY"], [("Uploaded", dispatcher.uploaded),
                         ("Deleted", dispatcher.deleted),
                         ("Failed", dispatcher.failed)], char="─")
    return dispatcher
