"""
Core infrastructure layer
"""
from .client import RemoteClient, ClientConfig, ConnectionState
from .constants import *
from .exceptions import *
from .logging import setup_logging, get_logger, get_stdout_console, get_stderr_console
from .interfaces import SSHClient, Session, PromptProvider
from .utils import (
    load_ssh_config,
    resolve_local_path,
    split_remote_path,
    iter_remote_prefixes,
    remote_parent,
)

__all__ = [
    "RemoteClient",
    "ClientConfig",
    "ConnectionState",
    "setup_logging",
    "get_logger",
    "get_stdout_console",
    "get_stderr_console",
    "SSHClient",
    "Session",
    "PromptProvider",
    "load_ssh_config",
    "resolve_local_path",
    "split_remote_path",
    "iter_remote_prefixes",
    "remote_parent",
]
