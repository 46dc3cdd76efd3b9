"""
Session domain module
"""
from .models import CommandResult
from .executor import CommandExecutor
from .provisioner import DirectoryProvisioner
from .transfer import FileTransfer
from .session import RemoteSession, ParamikoSSHClient, create_default_client

__all__ = [
    "CommandResult",
    "CommandExecutor",
    "DirectoryProvisioner",
    "FileTransfer",
    "RemoteSession",
    "ParamikoSSHClient",
    "create_default_client",
]
