"""
Remote session: one paramiko SSH transport plus one SFTP channel over it
"""
import getpass
import posixpath
from typing import Optional

import paramiko

from .. import config as _cfg
from ..errors import (AuthenticationError, ConnectivityError,
                      LocalFileMissingError, RemoteIOError)
from ..models import SessionState
from ..utils.logging import log, vlog, warn
from .credentials import CredentialSource, NoCredentials

# Anything paramiko raises once the channel is up
_REMOTE_ERRORS = (OSError, EOFError, paramiko.SSHException, paramiko.SFTPError)


class RemoteSession:
    """
    Wraps paramiko SSHClient + SFTPClient with an explicit lifecycle.

    Disconnected → Connecting → Authenticated → Ready, and back to
    Disconnected on close() or a fatal connect failure.  Every attempt gets a
    fresh SSHClient; a rejected one is closed and dropped.  A transport or
    SFTP channel that dies while Ready is re-opened before the next operation.
    """

    def __init__(self, host: str, port: Optional[int] = None,
                 username: Optional[str] = None,
                 identity_file: Optional[str] = None,
                 credentials: Optional[CredentialSource] = None,
                 remote_root: Optional[str] = None,
                 connect_timeout: Optional[int] = None,
                 attempts: Optional[int] = None,
                 client_factory=paramiko.SSHClient):
        self.host = host
        self.port = port or _cfg.SSH_PORT
        self.username = username
        self.identity_file = identity_file
        self.remote_root = remote_root
        self.state = SessionState.DISCONNECTED
        self._credentials = credentials or NoCredentials()
        self._timeout = connect_timeout or _cfg.CONNECT_TIMEOUT
        self._attempts = attempts or _cfg.CONNECT_ATTEMPTS
        self._client_factory = client_factory
        self._ssh: Optional[paramiko.SSHClient] = None
        self._sftp: Optional[paramiko.SFTPClient] = None
        self._secret: Optional[str] = None
        self._closed = False

    def __repr__(self):
        return f"<RemoteSession {self.display_user}@{self.host}:{self.port} {self.state.value}>"

    @property
    def display_user(self) -> str:
        if self.username:
            return self.username
        try:
            return getpass.getuser()
        except (KeyError, OSError):
            # no passwd entry and no USER/LOGNAME (minimal containers)
            return "?"

    # ── lifecycle ──────────────────────────────────────────────────────────

    def __enter__(self):
        try:
            self.connect()
        except BaseException:
            self.close()
            raise
        return self

    def __exit__(self, *exc_info):
        self.close()

    def connect(self):
        """Open transport + SFTP channel.  Raises ConnectivityError or AuthenticationError."""
        if self.state is SessionState.READY:
            return
        self._closed = False
        log(f"[ssh] connecting to {self.display_user}@{self.host}:{self.port} …")
        self._open(self._credentials.initial())
        log(f"[ssh] connected ✓  remote root: {self.remote_root}")

    def reconnect(self):
        """Drop the current transport and open a new one with the last good credential."""
        self._close_quietly()
        self._open(self._secret)
        log("[ssh] reconnected ✓")

    def close(self):
        """Release channel and transport.  Safe to call in any state, any number of times."""
        was_open = self._ssh is not None
        self._closed = True
        self._close_quietly()
        if was_open:
            log("[ssh] closed.")

    # ── connect internals ──────────────────────────────────────────────────

    def _connect_kwargs(self, secret: Optional[str]) -> dict:
        kw: dict = dict(hostname=self.host, port=self.port, username=self.username,
                        timeout=self._timeout, banner_timeout=self._timeout,
                        auth_timeout=self._timeout)
        if self.identity_file:
            kw["key_filename"] = self.identity_file
        if secret is not None:
            kw["password"] = secret
        return kw

    def _fail(self, exc_type, msg: str, cause: BaseException):
        self.state = SessionState.DISCONNECTED
        raise exc_type(msg) from cause

    def _open(self, secret: Optional[str]):
        self.state = SessionState.CONNECTING
        prompt = f"{self.display_user}@{self.host}'s password: "

        for attempt in range(1, self._attempts + 1):
            client = self._client_factory()
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
            try:
                client.connect(**self._connect_kwargs(secret))
            except paramiko.AuthenticationException as exc:
                client.close()
                warn(f"[ssh] authentication failed (attempt {attempt}/{self._attempts})")
                if self.identity_file:
                    self._fail(AuthenticationError,
                               f"{self.display_user}@{self.host}: identity file "
                               f"{self.identity_file} was rejected", exc)
                if attempt == self._attempts:
                    self._fail(AuthenticationError,
                               f"{self.display_user}@{self.host}: permission denied "
                               f"after {attempt} attempts", exc)
                secret = self._credentials.next_secret(prompt)
                if secret is None:
                    self._fail(AuthenticationError,
                               f"{self.display_user}@{self.host}: permission denied and no "
                               f"further credential available; run on a terminal or pass "
                               f"an identity file (-i)", exc)
                continue
            except OSError as exc:
                # NoValidConnectionsError, refused, unreachable, DNS, timeout
                client.close()
                self._fail(ConnectivityError,
                           f"ssh: connect to host {self.host} port {self.port}: {exc}", exc)
            except paramiko.SSHException as exc:
                client.close()
                self._fail(ConnectivityError, f"ssh: {self.host}: {exc}", exc)
            self._ssh = client
            break

        self.state = SessionState.AUTHENTICATED
        self._secret = secret
        try:
            transport = self._ssh.get_transport()
            transport.set_keepalive(_cfg.KEEPALIVE_INTERVAL)
            # SFTP is a subsystem channel: paramiko never requests a pty for it
            self._sftp = self._ssh.open_sftp()
            self.remote_root = self._resolve_root()
        except _REMOTE_ERRORS as exc:
            self._close_quietly()
            self._fail(ConnectivityError, f"sftp: {self.host}: {exc}", exc)
        self.state = SessionState.READY

    def _resolve_root(self) -> str:
        """Absolute remote root; relative or missing roots hang off the login directory."""
        if self.remote_root and self.remote_root.startswith("/"):
            return posixpath.normpath(self.remote_root)
        cwd = self._sftp.normalize(".")
        if not self.remote_root:
            return cwd
        return posixpath.normpath(posixpath.join(cwd, self.remote_root))

    def _close_quietly(self):
        if self._sftp is not None:
            try:
                self._sftp.close()
            except Exception as exc:
                vlog(f"[ssh] sftp close: {exc}")
        if self._ssh is not None:
            try:
                self._ssh.close()
            except Exception as exc:
                vlog(f"[ssh] transport close: {exc}")
        self._ssh = None
        self._sftp = None
        self.state = SessionState.DISCONNECTED

    def _channel_alive(self) -> bool:
        """Transport up *and* the SFTP subchannel still open."""
        if self._ssh is None or self._sftp is None:
            return False
        transport = self._ssh.get_transport()
        if transport is None or not transport.is_active():
            return False
        channel = self._sftp.get_channel()
        return channel is not None and not channel.closed

    def _ready(self) -> paramiko.SFTPClient:
        """Call before any remote operation."""
        if self._closed:
            raise RemoteIOError("session is closed")
        if self.state is SessionState.READY and self._channel_alive():
            return self._sftp
        warn("[ssh] connection lost, reconnecting …")
        try:
            self.reconnect()
        except (ConnectivityError, AuthenticationError) as exc:
            raise RemoteIOError(f"session lost: {exc}") from exc
        return self._sftp

    def _remote_error(self, op: str, path: str, exc: BaseException) -> RemoteIOError:
        """
        Wrap a failed sftp call.  EOF / SSH-level errors, or a channel that is
        gone, leave the session not Ready so the next call reconnects; plain
        SFTP status errors (permission, quota, failure) keep it Ready.
        """
        if isinstance(exc, (EOFError, paramiko.SSHException)) or not self._channel_alive():
            vlog(f"[ssh] channel gone after {op} {path}")
            self.state = SessionState.DISCONNECTED
        return RemoteIOError(f"{op} {path}: {exc}")

    # ── sftp ops ────────────────────────────────────────────────────────────

    def probe(self, path: str) -> bool:
        """True if *path* is an existing directory we can change into."""
        sftp = self._ready()
        try:
            sftp.chdir(path)
        except FileNotFoundError:
            return False
        except _REMOTE_ERRORS as exc:
            raise self._remote_error("probe", path, exc) from exc
        return True

    def mkdir(self, path: str):
        sftp = self._ready()
        try:
            sftp.mkdir(path)
        except _REMOTE_ERRORS as exc:
            raise self._remote_error("mkdir", path, exc) from exc

    def put(self, local_file, remote_path: str, mode: Optional[int] = None):
        """Upload, overwriting unconditionally, then set the fixed file mode."""
        sftp = self._ready()
        try:
            fl = open(local_file, "rb")
        except FileNotFoundError as exc:
            raise LocalFileMissingError(f"{local_file} no longer exists") from exc
        with fl:
            try:
                sftp.putfo(fl, remote_path)
                sftp.chmod(remote_path, _cfg.REMOTE_FILE_MODE if mode is None else mode)
            except _REMOTE_ERRORS as exc:
                raise self._remote_error("put", remote_path, exc) from exc

    def remove(self, remote_path: str) -> bool:
        """Remove a remote file.  Returns False if it did not exist."""
        sftp = self._ready()
        try:
            sftp.remove(remote_path)
        except FileNotFoundError:
            return False
        except _REMOTE_ERRORS as exc:
            raise self._remote_error("remove", remote_path, exc) from exc
        return True
