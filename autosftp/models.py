"""
Data model shared by the watcher, the dispatcher and the session
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class EventKind(Enum):
    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"


@dataclass(frozen=True)
class WatchEvent:
    """
    One change seen by the watcher.  Carries no content: uploads read the
    file fresh from disk when the event is dispatched.
    """
    kind: EventKind
    local_path: Path


@dataclass(frozen=True)
class SyncTarget:
    """The single local root → remote root mapping, fixed once connected."""
    local_root: Path
    remote_root: str


class SessionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AUTHENTICATED = "authenticated"
    READY = "ready"
