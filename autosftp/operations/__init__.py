"""Operations (snapshot, reconcile, upload, delete)"""
from .scanner import local_snapshot
from .directories import DirectoryReconciler
from .transfer import upload_file
from .delete import delete_remote

__all__ = [
    "local_snapshot",
    "DirectoryReconciler",
    "upload_file",
    "delete_remote",
]
