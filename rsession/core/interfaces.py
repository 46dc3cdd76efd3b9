"""
Core interfaces for dependency injection
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.session.models import CommandResult


class Session(ABC):
    """Operations bound to one connected SSH transport"""

    @abstractmethod
    def run_command(self, command: str) -> CommandResult:
        """Execute a command on the remote host"""
        pass

    @abstractmethod
    def upload_file(self, local_path: str, remote_path: str) -> None:
        """Upload a local file, creating the remote parent directory"""
        pass

    @abstractmethod
    def download_file(self, remote_path: str, local_path: str) -> None:
        """Download a remote file to a local path"""
        pass

    @abstractmethod
    def create_remote_directory(self, remote_path: str) -> None:
        """Ensure every directory along remote_path exists"""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close the underlying connection"""
        pass

    def __enter__(self) -> Session:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.disconnect()


class SSHClient(ABC):
    """SSH client interface"""

    @abstractmethod
    def connect(self, host: str, port: int, user: str, password: str) -> Session:
        """Connect and authenticate, returning a live session"""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the remote host"""
        pass


class PromptProvider(ABC):
    """User prompt interface"""

    @abstractmethod
    def prompt(self, message: str, default: Optional[str] = None, password: bool = False) -> str:
        """Prompt user for input"""
        pass
