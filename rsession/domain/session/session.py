"""
Remote session management
"""
from typing import Optional

from ...core.client import RemoteClient
from ...core.constants import DEFAULT_SSH_TIMEOUT, DEFAULT_HOST_KEY_POLICY
from ...core.exceptions import TransportError
from ...core.interfaces import SSHClient, Session
from ...core.logging import get_logger
from .executor import CommandExecutor
from .models import CommandResult
from .provisioner import DirectoryProvisioner
from .transfer import FileTransfer

logger = get_logger(__name__)


class RemoteSession(Session):
    """
    Command execution, file transfer and directory provisioning against one
    connected RemoteClient.

    Every call checks the connection first and raises NotConnectedError
    without touching the transport once the client is disconnected.
    """

    def __init__(self, client: RemoteClient):
        self.client = client
        self.provisioner = DirectoryProvisioner(client)
        self.executor = CommandExecutor(client)
        self.transfer = FileTransfer(client, self.provisioner)

    @property
    def is_connected(self) -> bool:
        return self.client.is_connected

    def run_command(self, command: str) -> CommandResult:
        with self.client.operation():
            return self.executor.run(command)

    def upload_file(self, local_path: str, remote_path: str) -> None:
        with self.client.operation():
            self.transfer.upload(local_path, remote_path)

    def download_file(self, remote_path: str, local_path: str) -> None:
        with self.client.operation():
            self.transfer.download(remote_path, local_path)

    def create_remote_directory(self, remote_path: str) -> None:
        with self.client.operation():
            self.provisioner.ensure(remote_path)

    def disconnect(self) -> None:
        self.client.disconnect()


class ParamikoSSHClient(SSHClient):
    """SSHClient backed by a paramiko transport"""

    def __init__(
        self,
        timeout: Optional[float] = DEFAULT_SSH_TIMEOUT,
        host_key_policy: str = DEFAULT_HOST_KEY_POLICY,
        known_hosts: Optional[str] = None,
    ):
        """
        Args:
            timeout: TCP connect, banner and auth timeout in seconds
            host_key_policy: "accept" (any identity), "warn" or "reject"
            known_hosts: Extra known_hosts file for the warn/reject policies
        """
        self.timeout = timeout
        self.host_key_policy = host_key_policy
        self.known_hosts = known_hosts
        self.connection: Optional[RemoteClient] = None

    def connect(self, host: str, port: int, user: str, password: str) -> RemoteSession:
        """
        Connect to the remote host.

        Raises:
            AuthenticationError: Credentials rejected
            TransportError: Network, handshake or host key failure, or this
                client already holds a live connection
        """
        if self.connection is not None and self.connection.is_connected:
            raise TransportError(f"Already connected to {self.connection.target}")
        if self.connection is not None:
            # Transport died; release the stale client before replacing it
            self.connection.disconnect()
            self.connection = None

        connection = RemoteClient(
            host=host,
            user=user,
            port=port,
            password=password,
            timeout=self.timeout,
            host_key_policy=self.host_key_policy,
            known_hosts=self.known_hosts,
        )
        connection.connect()
        self.connection = connection
        return RemoteSession(connection)

    def disconnect(self) -> None:
        if self.connection is not None:
            self.connection.disconnect()

    def __enter__(self) -> "ParamikoSSHClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.disconnect()


def create_default_client(
    timeout: Optional[float] = DEFAULT_SSH_TIMEOUT,
    host_key_policy: str = DEFAULT_HOST_KEY_POLICY,
    known_hosts: Optional[str] = None,
) -> SSHClient:
    """Create the default SSH client implementation"""
    return ParamikoSSHClient(
        timeout=timeout,
        host_key_policy=host_key_policy,
        known_hosts=known_hosts,
    )
