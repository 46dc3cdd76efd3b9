"""
Core utility functions
"""
import posixpath
import paramiko
from pathlib import Path
from typing import Dict, Any, Iterator, List

from .constants import SSH_CONFIG_PATH, REMOTE_PATH_SEPARATOR
from .exceptions import ConfigError


# ============================================================
# SSH Config Management
# ============================================================

def load_ssh_config(hostname: str) -> Dict[str, Any]:
    """
    Load configuration for specified Host from ~/.ssh/config.

    Args:
        hostname: Host name in SSH configuration

    Returns:
        Dictionary containing host, user, port (None when not configured)

    Raises:
        ConfigError: If ~/.ssh/config doesn't exist
    """
    config_path = Path(SSH_CONFIG_PATH).expanduser()
    if not config_path.exists():
        raise ConfigError(f"{SSH_CONFIG_PATH} does not exist")

    ssh_config = paramiko.SSHConfig.from_path(str(config_path))
    entry = ssh_config.lookup(hostname)

    return {
        "host": entry.get("hostname", hostname),
        "user": entry.get("user", None),
        "port": int(entry["port"]) if "port" in entry else None,
    }


# ============================================================
# Path Resolution Utilities
# ============================================================

def resolve_local_path(path: str) -> Path:
    """Resolve local path, expand ~ and other symbols"""
    return Path(path).expanduser()


def split_remote_path(path: str) -> List[str]:
    """Split a remote path into its non-empty segments"""
    return [part for part in path.split(REMOTE_PATH_SEPARATOR) if part]


def iter_remote_prefixes(path: str) -> Iterator[str]:
    """
    Yield every directory prefix of a remote path, shallowest first.

    "/a/b/c" yields "/a", "/a/b", "/a/b/c". Relative paths stay relative:
    "a/b" yields "a", "a/b".
    """
    absolute = path.startswith(REMOTE_PATH_SEPARATOR)
    current = ""
    for segment in split_remote_path(path):
        if current or absolute:
            current = f"{current}{REMOTE_PATH_SEPARATOR}{segment}"
        else:
            current = segment
        yield current


def remote_parent(path: str) -> str:
    """Parent directory of a remote path ("" when there is none)"""
    return posixpath.dirname(path.rstrip(REMOTE_PATH_SEPARATOR))
