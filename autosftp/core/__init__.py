"""Core functionality"""
from .credentials import (CredentialSource, NoCredentials, PromptCredentials,
                          StaticCredentials, default_credentials)
from .session import RemoteSession
from .watcher import DirectoryWatcher, PollingWatcher
from .dispatcher import SyncDispatcher
from .sync_engine import run_watch

__all__ = [
    "CredentialSource", "NoCredentials", "PromptCredentials", "StaticCredentials",
    "default_credentials",
    "RemoteSession",
    "DirectoryWatcher", "PollingWatcher",
    "SyncDispatcher",
    "run_watch",
]
