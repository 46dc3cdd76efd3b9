from __future__ import annotations
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional

import paramiko

from .constants import (
    DEFAULT_SSH_PORT,
    DEFAULT_SSH_TIMEOUT,
    DEFAULT_HOST_KEY_POLICY,
    HOST_KEY_POLICIES,
    HOST_KEY_POLICY_ACCEPT,
    HOST_KEY_POLICY_WARN,
)
from .exceptions import (
    AuthenticationError,
    ConfigError,
    NotConnectedError,
    TransportError,
)
from .logging import get_logger

logger = get_logger(__name__)


class ConnectionState(str, Enum):
    """Connection lifecycle state"""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass
class ClientConfig:
    host: str
    user: str
    port: int = DEFAULT_SSH_PORT
    password: Optional[str] = None
    timeout: Optional[float] = DEFAULT_SSH_TIMEOUT
    host_key_policy: str = DEFAULT_HOST_KEY_POLICY
    known_hosts: Optional[str] = None

    def __post_init__(self) -> None:
        if self.host_key_policy not in HOST_KEY_POLICIES:
            raise ConfigError(
                f"Unknown host key policy: {self.host_key_policy} "
                f"(expected one of {', '.join(HOST_KEY_POLICIES)})"
            )

    def __repr__(self) -> str:
        return (
            f"ClientConfig(host={self.host!r}, user={self.user!r}, port={self.port}, "
            f"host_key_policy={self.host_key_policy!r})"
        )


class RemoteClient:
    """
    One authenticated SSH transport to a remote host.

    - Owns the paramiko SSHClient; nothing else touches the transport
    - Password authentication only (no agent, no key discovery)
    - Hands out one channel per operation through open_exec_channel / open_sftp,
      closing it on every exit path
    - Serializes operations with a per-connection lock
    - Supports with-statement usage
    """
    def __init__(
        self,
        host: str,
        user: str,
        port: int = DEFAULT_SSH_PORT,
        password: Optional[str] = None,
        timeout: Optional[float] = DEFAULT_SSH_TIMEOUT,
        host_key_policy: str = DEFAULT_HOST_KEY_POLICY,
        known_hosts: Optional[str] = None,
    ) -> None:
        self.config = ClientConfig(
            host=host,
            user=user,
            port=port,
            password=password,
            timeout=timeout,
            host_key_policy=host_key_policy,
            known_hosts=known_hosts,
        )

        self.client: Optional[paramiko.SSHClient] = None
        self.state = ConnectionState.DISCONNECTED

        self._lock = threading.RLock()
        self._open_channels = 0

    @classmethod
    def from_config(cls, config: ClientConfig) -> RemoteClient:
        return cls(
            host=config.host,
            user=config.user,
            port=config.port,
            password=config.password,
            timeout=config.timeout,
            host_key_policy=config.host_key_policy,
            known_hosts=config.known_hosts,
        )

    @property
    def target(self) -> str:
        return f"{self.config.user}@{self.config.host}:{self.config.port}"

    # --------------------
    # Connection management
    # --------------------
    def connect(self) -> None:
        """Establish and authenticate the transport"""
        with self._lock:
            if self.client is not None and not self.is_connected:
                logger.warning(f"Transport to {self.target} was closed, reconnecting")
                self.disconnect()
            if self.state is not ConnectionState.DISCONNECTED:
                raise TransportError(f"Already connected to {self.target}")

            self.state = ConnectionState.CONNECTING
            client = paramiko.SSHClient()
            try:
                self._apply_host_key_policy(client)
                self._connect(client)
            except BaseException:
                client.close()
                self.state = ConnectionState.DISCONNECTED
                raise

            self.client = client
            self.state = ConnectionState.CONNECTED
            logger.info(f"Connected to {self.target}")

    def _connect(self, client: paramiko.SSHClient) -> None:
        cfg = self.config
        try:
            client.connect(
                hostname=cfg.host,
                port=cfg.port,
                username=cfg.user,
                password=cfg.password,
                timeout=cfg.timeout,
                banner_timeout=cfg.timeout,
                auth_timeout=cfg.timeout,
                allow_agent=False,
                look_for_keys=False,
            )
        # AuthenticationException is itself an SSHException
        except paramiko.AuthenticationException as e:
            logger.error(f"Authentication failed for {self.target}: {e}")
            raise AuthenticationError(f"Authentication failed for {self.target}: {e}") from e
        except (paramiko.SSHException, OSError, EOFError) as e:
            logger.error(f"Failed to connect to {self.target}: {e}")
            raise TransportError(f"Failed to connect to {self.target}: {e}") from e

    def _apply_host_key_policy(self, client: paramiko.SSHClient) -> None:
        """Install the configured missing-host-key policy"""
        policy = self.config.host_key_policy

        if policy == HOST_KEY_POLICY_ACCEPT:
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
            return

        client.load_system_host_keys()
        if self.config.known_hosts:
            known_hosts = Path(self.config.known_hosts).expanduser()
            try:
                client.load_host_keys(str(known_hosts))
            except OSError as e:
                raise ConfigError(f"Cannot read known hosts file {known_hosts}: {e}") from e

        if policy == HOST_KEY_POLICY_WARN:
            client.set_missing_host_key_policy(paramiko.WarningPolicy())
        else:
            client.set_missing_host_key_policy(paramiko.RejectPolicy())

    def disconnect(self) -> None:
        """Tear down the transport; no-op when already disconnected"""
        with self._lock:
            if self.client is None:
                return
            try:
                self.client.close()
            finally:
                self.client = None
                self.state = ConnectionState.DISCONNECTED
                logger.info(f"Disconnected from {self.target}")

    def close(self) -> None:
        self.disconnect()

    @property
    def is_connected(self) -> bool:
        """True while the transport is up and authenticated"""
        if self.state is not ConnectionState.CONNECTED or self.client is None:
            return False
        transport = self.client.get_transport()
        return transport is not None and transport.is_active()

    @property
    def open_channel_count(self) -> int:
        """Channels currently held open by in-flight operations"""
        return self._open_channels

    # --------------------
    # Operations and channels
    # --------------------
    @contextmanager
    def operation(self) -> Iterator[None]:
        """Serialize one session operation and require a live connection"""
        with self._lock:
            if not self.is_connected:
                raise NotConnectedError(f"Not connected to {self.target}")
            yield

    def _require_client(self) -> paramiko.SSHClient:
        if not self.is_connected:
            raise NotConnectedError(f"Not connected to {self.target}")
        return self.client

    @contextmanager
    def open_exec_channel(self) -> Iterator[paramiko.Channel]:
        """Open a session channel for one command, closed on exit"""
        transport = self._require_client().get_transport()
        channel = transport.open_session()
        self._open_channels += 1
        logger.debug(f"Opened exec channel {channel.get_id()} on {self.target}")
        try:
            yield channel
        finally:
            try:
                channel.close()
            finally:
                self._open_channels -= 1
                logger.debug(f"Closed exec channel {channel.get_id()} on {self.target}")

    @contextmanager
    def open_sftp(self) -> Iterator[paramiko.SFTPClient]:
        """Open an SFTP channel for one primitive operation, closed on exit"""
        sftp = self._require_client().open_sftp()
        self._open_channels += 1
        logger.debug(f"Opened sftp channel on {self.target}")
        try:
            yield sftp
        finally:
            try:
                sftp.close()
            finally:
                self._open_channels -= 1
                logger.debug(f"Closed sftp channel on {self.target}")

    # --------------------
    # Context manager
    # --------------------
    def __enter__(self) -> RemoteClient:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.disconnect()
