"""
Configuration constants for autosftp
"""
import os
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigurationError

# ══════════════════════════════════════════════════════════════════════════════
#  DEFAULTS  ── overridden by the global YAML config via apply_defaults()
# ══════════════════════════════════════════════════════════════════════════════

SSH_PORT = 22
# Path to a private key, or None to use ssh-agent / ~/.ssh/id_*
SSH_KEY_PATH: Optional[str] = None
SSH_PASSWORD: Optional[str] = None  # pre-supplied secret for headless runs

# Authentication attempts per connect, including re-prompts
CONNECT_ATTEMPTS = 3
# Seconds for TCP connect, SSH banner and auth each
CONNECT_TIMEOUT = 20
KEEPALIVE_INTERVAL = 30

# Watcher poll interval (milliseconds)
POLL_INTERVAL_MS = 5000

# owner rw, group/other r
REMOTE_FILE_MODE = 0o644

IGNORE_FILE = ".autosftpignore"

PASSWORD_ENV = "AUTOSFTP_PASSWORD"


# ══════════════════════════════════════════════════════════════════════════════
#  GLOBAL CONFIG FILE  ── $XDG_CONFIG_HOME/autosftp/config.yaml
# ══════════════════════════════════════════════════════════════════════════════

def get_global_config_dir() -> Path:
    """Return the global config directory for autosftp."""
    xdg = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg:
        return Path(xdg) / "autosftp"
    if os.name == "nt":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "autosftp"
    return Path.home() / ".config" / "autosftp"


def load_global_config(path: Optional[Path] = None) -> dict:
    """
    Load the global config file.  A missing file is an empty config; a file
    that is not a YAML mapping is a ConfigurationError.
    """
    cfg_path = path or get_global_config_dir() / "config.yaml"
    if not cfg_path.is_file():
        return {}
    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot read {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{cfg_path}: expected a mapping at top level")
    return data


def parse_port(value, source: str = "port") -> int:
    """Strict port parsing: anything but an integer in 1..65535 is rejected."""
    text = str(value).strip()
    if not text.isdigit():
        raise ConfigurationError(f"{source}: {value!r} is not a valid port number")
    port = int(text)
    if not 0 < port < 65536:
        raise ConfigurationError(f"{source}: {port} is out of range (1-65535)")
    return port


def positive_int(value, source: str) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{source}: {value!r} is not an integer") from None
    if n <= 0:
        raise ConfigurationError(f"{source}: must be positive, got {n}")
    return n


# ══════════════════════════════════════════════════════════════════════════════
#  APPLY DEFAULTS  ── mutates module-level variables
# ══════════════════════════════════════════════════════════════════════════════

def apply_defaults(data: dict):
    """
    Apply the ``defaults:`` mapping of a config dict to the module-level
    variables.  Supports keys: port, identity_file, password,
                               poll_interval_ms, connect_timeout.
    """
    global SSH_PORT, SSH_KEY_PATH, SSH_PASSWORD, POLL_INTERVAL_MS, CONNECT_TIMEOUT

    defaults = data.get("defaults", {}) or {}
    if not isinstance(defaults, dict):
        raise ConfigurationError("config: 'defaults' must be a mapping")

    if "port" in defaults:
        SSH_PORT = parse_port(defaults["port"], "config port")
    if "identity_file" in defaults:
        key = defaults["identity_file"]
        SSH_KEY_PATH = str(Path(key).expanduser()) if key else None
    if "password" in defaults:
        SSH_PASSWORD = str(defaults["password"]) if defaults["password"] else None
    if "poll_interval_ms" in defaults:
        POLL_INTERVAL_MS = positive_int(defaults["poll_interval_ms"], "config poll_interval_ms")
    if "connect_timeout" in defaults:
        CONNECT_TIMEOUT = positive_int(defaults["connect_timeout"], "config connect_timeout")
