"""
Directory watchers: turn a local tree into a stream of WatchEvent
"""
import time
from pathlib import Path
from typing import Iterator, Optional

from .. import config as _cfg
from ..errors import ConfigurationError, WatchRootMissingError
from ..models import EventKind, WatchEvent
from ..operations.scanner import local_snapshot
from ..utils.file_utils import signature_changed
from ..utils.ignore_patterns import load_ignore_patterns
from ..utils.logging import vlog


class DirectoryWatcher:
    """
    A lazy, endless, single-use sequence of WatchEvent for one root.

    Subclasses provide ``_events()``; iterating a watcher a second time is an
    error, so every change is delivered to exactly one consumer.
    """

    def __init__(self, root):
        root = Path(root).expanduser().absolute()
        if not root.is_dir():
            raise WatchRootMissingError(f"Directory not found: {root}")
        self.root = root
        self._consumed = False

    def __iter__(self) -> Iterator[WatchEvent]:
        if self._consumed:
            raise RuntimeError(f"watcher for {self.root} has already been consumed")
        self._consumed = True
        return self._events()

    def _events(self) -> Iterator[WatchEvent]:
        raise NotImplementedError


class PollingWatcher(DirectoryWatcher):
    """
    Compares snapshots of the tree every *poll_interval_ms*.

    new path → CREATED, changed (mtime, size) → MODIFIED, gone → DELETED.
    The baseline is taken at construction, so files already present are
    not reported.
    """

    def __init__(self, root, poll_interval_ms: Optional[int] = None,
                 patterns: Optional[list] = None, sleep=time.sleep):
        super().__init__(root)
        if poll_interval_ms is None:
            poll_interval_ms = _cfg.POLL_INTERVAL_MS
        if poll_interval_ms <= 0:
            raise ConfigurationError(f"poll interval must be positive, got {poll_interval_ms} ms")
        self.poll_interval_ms = poll_interval_ms
        self.patterns = load_ignore_patterns(self.root) if patterns is None else patterns
        self._sleep = sleep
        self._snapshot = local_snapshot(self.root, self.patterns)
        vlog(f"[watch] baseline: {len(self._snapshot)} file(s) under {self.root}")

    def poll(self) -> list[WatchEvent]:
        """Take one snapshot, diff it against the previous one, return the events."""
        current = local_snapshot(self.root, self.patterns)
        previous = self._snapshot
        events: list[WatchEvent] = []
        for path in sorted(set(current) | set(previous)):
            if path not in previous:
                events.append(WatchEvent(EventKind.CREATED, path))
            elif path not in current:
                events.append(WatchEvent(EventKind.DELETED, path))
            elif signature_changed(current[path], previous[path]):
                events.append(WatchEvent(EventKind.MODIFIED, path))
        self._snapshot = current
        return events

    def _events(self) -> Iterator[WatchEvent]:
        interval = self.poll_interval_ms / 1000.0
        while True:
            self._sleep(interval)
            yield from self.poll()
