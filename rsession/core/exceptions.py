"""
Unified exception definitions
"""


class RemoteError(Exception):
    """Base exception class"""
    pass


class ConfigError(RemoteError):
    """Configuration error"""
    pass


class ConnectionError(RemoteError):
    """Connection error"""
    pass


class AuthenticationError(ConnectionError):
    """Credentials rejected by the remote host"""
    pass


class TransportError(ConnectionError):
    """Network, handshake or host key failure"""
    pass


class NotConnectedError(ConnectionError):
    """Operation attempted without a live connection"""
    pass


class CommandExecutionError(RemoteError):
    """Remote command could not be executed or drained"""
    pass


class TransferError(RemoteError):
    """Transfer error"""
    pass
