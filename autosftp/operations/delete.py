"""
Remote removal of one file (Deleted events)
"""
from ..utils.logging import vlog


def delete_remote(session, remote_path: str) -> bool:
    """
    Remove *remote_path*.  A path that was never there is not an error.
    Returns True if something was removed.
    """
    removed = session.remove(remote_path)
    if not removed:
        vlog(f"  [delete] {remote_path} did not exist on remote")
    return removed
