"""
Error taxonomy for autosftp.

Only configuration-time and connection-time errors are fatal; everything a
single watch event can raise is reported and the run loop moves on.
"""


class AutosftpError(Exception):
    """Base class for every error autosftp raises on purpose."""


# ── startup (fatal) ───────────────────────────────────────────────────────────

class ConfigurationError(AutosftpError):
    """Invalid address, port, config file or watch root."""


class InvalidAddressError(ConfigurationError):
    """The [user@]host[:port][:dir] argument could not be parsed."""


class WatchRootMissingError(ConfigurationError):
    """The local watch root does not exist or is not a directory."""


class ConnectivityError(AutosftpError):
    """Host unreachable, connection refused, or any non-auth transport failure."""


class AuthenticationError(AutosftpError):
    """Credentials rejected and no further credential is available."""


# ── per event (reported, loop continues) ─────────────────────────────────────

class RemoteIOError(AutosftpError):
    """probe/mkdir/put/remove failed on the remote side."""


class DirectoryReconcileError(RemoteIOError):
    """A missing ancestor directory could not be created."""


class LocalFileMissingError(AutosftpError):
    """The local source vanished between detection and upload."""


class PathOutsideRootError(AutosftpError):
    """A local path is not below the watch root."""
