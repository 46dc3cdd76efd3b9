"""
rsession - remote session client over SSH

One authenticated SSH connection, short-lived channels per operation:
- Command execution with stdout / stderr / exit status capture
- Single-file upload and download over SFTP
- Idempotent remote directory provisioning (mkdir -p)
"""

__version__ = "0.1.0"

# Export core components
from .core import (
    RemoteClient,
    ClientConfig,
    ConnectionState,
    SSHClient,
    Session,
    setup_logging,
)
from .core.exceptions import (
    RemoteError,
    ConfigError,
    ConnectionError,
    AuthenticationError,
    TransportError,
    NotConnectedError,
    CommandExecutionError,
    TransferError,
)

# Export domain components
from .domain.session import (
    CommandResult,
    RemoteSession,
    ParamikoSSHClient,
    create_default_client,
)

__all__ = [
    # Version
    "__version__",
    # Client
    "RemoteClient",
    "ClientConfig",
    "ConnectionState",
    "SSHClient",
    "Session",
    "setup_logging",
    # Session
    "CommandResult",
    "RemoteSession",
    "ParamikoSSHClient",
    "create_default_client",
    # Errors
    "RemoteError",
    "ConfigError",
    "ConnectionError",
    "AuthenticationError",
    "TransportError",
    "NotConnectedError",
    "CommandExecutionError",
    "TransferError",
]
