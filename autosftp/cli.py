#!/usr/bin/env python3
"""
autosftp  —  Mirror a local directory onto a remote one over SFTP
================================================================

Watches WATCH_ROOT and, on every change, uploads created/modified files and
removes deleted ones under the remote directory, creating missing remote
directories on the way.

  autosftp /path/to/watch [user@]host[:port][:remote-dir] [-P PORT] [-i KEY]

Run 'autosftp --help' for all options.
"""
import argparse
import os
import signal
import sys
from pathlib import Path

from . import config as _cfg
from .address import parse_address
from .core.credentials import default_credentials
from .core.sync_engine import run_watch
from .errors import AuthenticationError, ConfigurationError, ConnectivityError
from .utils.logging import error, log, set_verbose

EXIT_OK = 0
EXIT_CONNECT = 1
EXIT_CONFIG = 2
EXIT_INTERRUPTED = 130


def _on_sigterm(signum, frame):
    # same shutdown path as Ctrl-C, so the session gets closed
    raise KeyboardInterrupt


# ── watch ────────────────────────────────────────────────────────────────────

def cmd_watch(args) -> int:
    """Resolve configuration, then run the watch loop until interrupted."""
    try:
        cfg_path = Path(args.config).expanduser() if args.config else None
        _cfg.apply_defaults(_cfg.load_global_config(cfg_path))

        address = parse_address(args.address)
        if args.port is not None:
            port = _cfg.parse_port(args.port, "--port")
        else:
            port = address.port or _cfg.SSH_PORT

        identity = args.identity or _cfg.SSH_KEY_PATH
        if identity:
            identity = str(Path(identity).expanduser())
            if not Path(identity).is_file():
                raise ConfigurationError(f"identity file not found: {identity}")

        password = os.environ.get(_cfg.PASSWORD_ENV) or _cfg.SSH_PASSWORD

        poll_interval = _cfg.POLL_INTERVAL_MS
        if args.poll_interval is not None:
            poll_interval = _cfg.positive_int(args.poll_interval, "--poll-interval")
        connect_timeout = _cfg.CONNECT_TIMEOUT
        if args.connect_timeout is not None:
            connect_timeout = _cfg.positive_int(args.connect_timeout, "--connect-timeout")

        run_watch(
            args.watch_root,
            host=address.host,
            username=address.username,
            port=port,
            remote_root=address.default_directory,
            identity_file=identity,
            credentials=default_credentials(password),
            poll_interval_ms=poll_interval,
            connect_timeout=connect_timeout,
        )
    except ConfigurationError as exc:
        error(str(exc))
        return EXIT_CONFIG
    except (ConnectivityError, AuthenticationError) as exc:
        error(str(exc))
        return EXIT_CONNECT
    except KeyboardInterrupt:
        print()
        log("Interrupted before the watch started.")
        return EXIT_INTERRUPTED
    log("Bye~~~")
    return EXIT_OK


# ── main ──────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="autosftp",
        description="Mirror a local directory onto a remote directory over SFTP",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("watch_root", metavar="WATCH_ROOT",
                        help="Local directory to watch")
    parser.add_argument("address", metavar="[user@]host[:port][:remote-dir]",
                        help="Remote host and optional directory (default: login directory)")
    parser.add_argument("-P", "--port", metavar="PORT", default=None,
                        help=f"SSH port (default: {_cfg.SSH_PORT})")
    parser.add_argument("-i", dest="identity", metavar="IDENTITY_FILE", default=None,
                        help="Private key file for public-key authentication")
    parser.add_argument("--poll-interval", type=int, metavar="MS", default=None,
                        help=f"Milliseconds between scans (default: {_cfg.POLL_INTERVAL_MS})")
    parser.add_argument("--connect-timeout", type=int, metavar="S", default=None,
                        help=f"Seconds allowed for connect/auth (default: {_cfg.CONNECT_TIMEOUT})")
    parser.add_argument("--config", metavar="PATH", default=None,
                        help="Config file (default: $XDG_CONFIG_HOME/autosftp/config.yaml)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show extra output")
    return parser


def main(argv=None):
    """CLI entry point for autosftp"""
    parser = build_parser()
    args = parser.parse_args(argv)
    set_verbose(args.verbose)
    signal.signal(signal.SIGTERM, _on_sigterm)
    sys.exit(cmd_watch(args))


if __name__ == "__main__":
    main()
