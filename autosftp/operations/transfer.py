"""
Upload of one local file (Created / Modified events)
"""
from pathlib import Path

from .directories import DirectoryReconciler


def upload_file(session, reconciler: DirectoryReconciler,
                local_path: Path, remote_path: str) -> list[str]:
    """
    Reconcile ancestors, then overwrite *remote_path* with the current local
    content.  The upload is not attempted if reconciliation fails.
    Returns the directories that had to be created.
    """
    created = reconciler.ensure_parents(remote_path)
    session.put(local_path, remote_path)
    return created
