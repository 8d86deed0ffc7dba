"""
Integration tests for the autosftp command line.

Tests:
  - --help and argument errors
  - configuration failures exit before any connection is attempted
  - connection refused exits non-zero with an ssh-style message
  - -P / address / config file / default port precedence (in-process)
"""
import os
import socket
import subprocess
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from autosftp import config as _cfg
from autosftp.cli import build_parser, cmd_watch


# ── Helpers ───────────────────────────────────────────────────────────────────

REPO_ROOT = Path(__file__).parent.parent


def run_autosftp(*args, cwd=None, env=None, timeout=60):
    """Run the autosftp CLI and return (returncode, stdout, stderr)."""
    result = subprocess.run(
        [sys.executable, "-m", "autosftp", *args],
        cwd=str(cwd or REPO_ROOT),
        capture_output=True,
        text=True,
        stdin=subprocess.DEVNULL,
        timeout=timeout,
        env={**os.environ, "PYTHONPATH": str(REPO_ROOT), **(env or {})},
    )
    return result.returncode, result.stdout, result.stderr


def _closed_port() -> int:
    """A local port nothing listens on (bound, then released)."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


# ── Tests: argument handling ──────────────────────────────────────────────────

class TestArguments(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)
        # keep the developer's own config file out of the way
        self.env = {"XDG_CONFIG_HOME": str(self.root / "xdg"), "AUTOSFTP_PASSWORD": ""}

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_help(self):
        rc, out, err = run_autosftp("--help", env=self.env)
        self.assertEqual(rc, 0, msg=f"stderr: {err}")
        self.assertIn("WATCH_ROOT", out)
        self.assertIn("--port", out)

    def test_missing_arguments(self):
        rc, out, err = run_autosftp(env=self.env)
        self.assertNotEqual(rc, 0)
        self.assertIn("required", err)

    def test_missing_watch_root(self):
        """A missing watch root fails before the (unresolvable) host is contacted."""
        rc, out, err = run_autosftp(str(self.root / "nope"), "bob@host.invalid:/inbox", env=self.env)
        self.assertEqual(rc, 2, msg=f"stderr: {err}")
        self.assertIn("Directory not found", err)
        self.assertNotIn("connecting", out)

    def test_non_numeric_port_is_rejected(self):
        rc, out, err = run_autosftp(str(self.root), "host.invalid", "-P", "ssh", env=self.env)
        self.assertEqual(rc, 2)
        self.assertIn("not a valid port", err)

    def test_bad_address(self):
        rc, out, err = run_autosftp(str(self.root), "@host.invalid", env=self.env)
        self.assertEqual(rc, 2)
        self.assertIn("user name", err)

    def test_missing_identity_file(self):
        rc, out, err = run_autosftp(str(self.root), "host.invalid",
                                    "-i", str(self.root / "no_key"), env=self.env)
        self.assertEqual(rc, 2)
        self.assertIn("identity file not found", err)

    def test_bad_config_file(self):
        cfg_dir = self.root / "xdg" / "autosftp"
        cfg_dir.mkdir(parents=True)
        (cfg_dir / "config.yaml").write_text("defaults:\n  port: twenty-two\n", encoding="utf-8")
        rc, out, err = run_autosftp(str(self.root), "host.invalid", env=self.env)
        self.assertEqual(rc, 2)
        self.assertIn("config port", err)

    def test_negative_poll_interval_is_rejected(self):
        rc, out, err = run_autosftp(str(self.root), "host.invalid", "--poll-interval", "-5", env=self.env)
        self.assertEqual(rc, 2, msg=f"stderr: {err}")
        self.assertIn("--poll-interval: must be positive", err)
        self.assertNotIn("connecting", out)

    def test_zero_connect_timeout_is_rejected(self):
        rc, out, err = run_autosftp(str(self.root), "host.invalid", "--connect-timeout", "0", env=self.env)
        self.assertEqual(rc, 2, msg=f"stderr: {err}")
        self.assertIn("--connect-timeout: must be positive", err)


# ── Tests: port precedence ────────────────────────────────────────────────────

class TestPortPrecedence(unittest.TestCase):
    """-P beats the address port, which beats the config file, which beats 22."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.root = Path(self.tmpdir.name)
        self.cfg_file = self.root / "config.yaml"
        self._saved = (_cfg.SSH_PORT, _cfg.SSH_KEY_PATH, _cfg.SSH_PASSWORD,
                       _cfg.POLL_INTERVAL_MS, _cfg.CONNECT_TIMEOUT)

    def tearDown(self):
        (_cfg.SSH_PORT, _cfg.SSH_KEY_PATH, _cfg.SSH_PASSWORD,
         _cfg.POLL_INTERVAL_MS, _cfg.CONNECT_TIMEOUT) = self._saved
        self.tmpdir.cleanup()

    def _port_for(self, *argv, config_port=None):
        if config_port is not None:
            self.cfg_file.write_text(f"defaults:\n  port: {config_port}\n", encoding="utf-8")
        args = build_parser().parse_args([str(self.root), *argv, "--config", str(self.cfg_file)])
        with mock.patch.dict(os.environ, {"AUTOSFTP_PASSWORD": ""}), \
                mock.patch("autosftp.cli.run_watch") as run_watch:
            rc = cmd_watch(args)
        self.assertEqual(rc, 0)
        run_watch.assert_called_once()
        return run_watch.call_args.kwargs["port"]

    def test_flag_beats_address_and_config(self):
        self.assertEqual(self._port_for("bob@host:2022:/srv", "-P", "2300", config_port=2200), 2300)

    def test_address_beats_config(self):
        self.assertEqual(self._port_for("bob@host:2022:/srv", config_port=2200), 2022)

    def test_config_beats_default(self):
        self.assertEqual(self._port_for("bob@host:/srv", config_port=2200), 2200)

    def test_default_port(self):
        self.assertEqual(self._port_for("bob@host:/srv"), 22)


# ── Tests: connectivity ───────────────────────────────────────────────────────

class TestConnectivity(unittest.TestCase):

    def test_connection_refused_exits_non_zero(self):
        with tempfile.TemporaryDirectory() as tmp:
            port = _closed_port()
            rc, out, err = run_autosftp(
                tmp, f"bob@127.0.0.1:{port}:/srv", "--connect-timeout", "5",
                env={"XDG_CONFIG_HOME": str(Path(tmp) / "xdg"), "AUTOSFTP_PASSWORD": ""},
            )
            self.assertEqual(rc, 1, msg=f"stdout: {out}\nstderr: {err}")
            self.assertIn(f"ssh: connect to host 127.0.0.1 port {port}", err)


if __name__ == "__main__":
    unittest.main()
