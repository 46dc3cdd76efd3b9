"""
In-memory stand-ins for the paramiko client, transport, channel and SFTP
surface used by rsession, plus fixtures wiring them in.
"""
import errno
import posixpath
import stat
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import paramiko
import pytest

from rsession.core.client import RemoteClient
from rsession.domain.session import RemoteSession

PASSWORD = "s3cret"


class FakeAttributes:
    def __init__(self, st_mode: int):
        self.st_mode = st_mode


class FakeRemoteHost:
    """Remote filesystem, command table and bookkeeping shared by all fakes"""

    def __init__(self):
        self.password = PASSWORD
        self.connect_error: Optional[Exception] = None
        self.transport_active = True

        self.dirs = {"/"}
        self.files: Dict[str, bytes] = {}
        self.stat_errors: Dict[str, Exception] = {}
        self.mkdir_errors: Dict[str, Exception] = {}
        self.mkdir_side_effects: Dict[str, str] = {}
        self.sftp_open_error: Optional[Exception] = None
        self.get_interruptions: Dict[str, BaseException] = {}

        self.commands: Dict[str, dict] = {}
        self.ops: List[Tuple[str, str]] = []
        self.connect_kwargs: List[dict] = []
        self.clients: List["FakeSSHClient"] = []
        self.channels: List["FakeChannel"] = []
        self.sftp_clients: List["FakeSFTPClient"] = []

    # --------------------
    # Setup helpers
    # --------------------
    def add_dirs(self, *paths: str) -> None:
        for path in paths:
            self.dirs.add(path)

    def add_command(
        self,
        command: str,
        stdout: bytes = b"",
        stderr: bytes = b"",
        exit_status: int = 0,
        chunk: int = 4,
        window: Optional[int] = None,
        error_after: Optional[int] = None,
    ) -> None:
        """Register a command producing interleaved stdout/stderr packets"""
        events = []
        out_chunks = [stdout[i:i + chunk] for i in range(0, len(stdout), chunk)]
        err_chunks = [stderr[i:i + chunk] for i in range(0, len(stderr), chunk)]
        while out_chunks or err_chunks:
            if out_chunks:
                events.append(("out", out_chunks.pop(0)))
            if err_chunks:
                events.append(("err", err_chunks.pop(0)))
        if error_after is not None:
            events.insert(error_after, ("error", paramiko.SSHException("Connection reset")))
        self.commands[command] = {
            "events": events,
            "exit_status": exit_status,
            "window": window,
        }

    # --------------------
    # Inspection helpers
    # --------------------
    @property
    def io_calls(self) -> int:
        return len(self.channels) + len(self.sftp_clients)

    @property
    def open_channels(self) -> int:
        return (
            sum(1 for c in self.channels if not c.closed)
            + sum(1 for s in self.sftp_clients if not s.closed)
        )

    def ops_of(self, kind: str) -> List[str]:
        return [path for op, path in self.ops if op == kind]


class FakeChannel:
    """
    Exec channel fed by a queue of output packets.

    With a window, the remote process blocks (stops producing) once that many
    unread bytes are pending on the stream it wants to write to.
    """

    _next_id = 0

    def __init__(self, host: FakeRemoteHost):
        self.host = host
        self.closed = False
        self.command: Optional[str] = None
        self._events: List[tuple] = []
        self._exit_status = -1
        self._window: Optional[int] = None
        self._out = bytearray()
        self._err = bytearray()
        FakeChannel._next_id += 1
        self._id = FakeChannel._next_id

    def get_id(self) -> int:
        return self._id

    def exec_command(self, command: str) -> None:
        self.command = command
        self.host.ops.append(("exec", command))
        entry = self.host.commands.get(command)
        if entry is None:
            # Unknown commands behave like "command not found"
            self.host.add_command(command, stderr=f"sh: {command}: not found\n".encode(), exit_status=127)
            entry = self.host.commands[command]
        self._events = list(entry["events"])
        self._exit_status = entry["exit_status"]
        self._window = entry["window"]

    def _pump(self) -> None:
        while self._events:
            kind, data = self._events[0]
            if kind == "error":
                self._events.pop(0)
                raise data
            buf = self._out if kind == "out" else self._err
            if self._window is not None and len(buf) >= self._window:
                break
            buf.extend(data)
            self._events.pop(0)

    def recv_ready(self) -> bool:
        self._pump()
        return bool(self._out)

    def recv(self, nbytes: int) -> bytes:
        self._pump()
        data = bytes(self._out[:nbytes])
        del self._out[:nbytes]
        return data

    def recv_stderr_ready(self) -> bool:
        self._pump()
        return bool(self._err)

    def recv_stderr(self, nbytes: int) -> bytes:
        self._pump()
        data = bytes(self._err[:nbytes])
        del self._err[:nbytes]
        return data

    def exit_status_ready(self) -> bool:
        self._pump()
        return not self._events

    def recv_exit_status(self) -> int:
        return self._exit_status

    def close(self) -> None:
        self.closed = True


class FakeSFTPClient:
    """SFTP client over the fake remote filesystem"""

    def __init__(self, host: FakeRemoteHost):
        self.host = host
        self.closed = False

    def stat(self, path: str) -> FakeAttributes:
        self.host.ops.append(("stat", path))
        if path in self.host.stat_errors:
            raise self.host.stat_errors[path]
        if path in self.host.dirs:
            return FakeAttributes(stat.S_IFDIR | 0o755)
        if path in self.host.files:
            return FakeAttributes(stat.S_IFREG | 0o644)
        raise FileNotFoundError(errno.ENOENT, "No such file")

    def mkdir(self, path: str, mode: int = 0o777) -> None:
        self.host.ops.append(("mkdir", path))
        if path in self.host.mkdir_side_effects:
            self.host.dirs.add(self.host.mkdir_side_effects[path])
        if path in self.host.mkdir_errors:
            raise self.host.mkdir_errors[path]
        parent = posixpath.dirname(path)
        if parent and parent not in self.host.dirs:
            raise FileNotFoundError(errno.ENOENT, "No such file")
        if path in self.host.dirs or path in self.host.files:
            raise OSError("Failure")
        self.host.dirs.add(path)

    def put(self, localpath: str, remotepath: str) -> None:
        self.host.ops.append(("put", remotepath))
        parent = posixpath.dirname(remotepath)
        if parent and parent not in self.host.dirs:
            raise FileNotFoundError(errno.ENOENT, "No such file")
        if remotepath in self.host.dirs:
            raise OSError("Failure")
        self.host.files[remotepath] = Path(localpath).read_bytes()

    def get(self, remotepath: str, localpath: str) -> None:
        self.host.ops.append(("get", remotepath))
        # paramiko opens the local file before touching the remote one
        with open(localpath, "wb") as fl:
            if remotepath not in self.host.files:
                raise FileNotFoundError(errno.ENOENT, "No such file")
            data = self.host.files[remotepath]
            interruption = self.host.get_interruptions.get(remotepath)
            if interruption is not None:
                fl.write(data[:len(data) // 2])
                raise interruption
            fl.write(data)

    def close(self) -> None:
        self.closed = True


class FakeTransport:
    def __init__(self, host: FakeRemoteHost):
        self.host = host
        self.active = True

    def is_active(self) -> bool:
        return self.active and self.host.transport_active

    def open_session(self) -> FakeChannel:
        if not self.host.transport_active:
            raise paramiko.SSHException("SSH session not active")
        channel = FakeChannel(self.host)
        self.host.channels.append(channel)
        return channel


class FakeSSHClient:
    """Replaces paramiko.SSHClient"""

    def __init__(self, host: FakeRemoteHost):
        self.host = host
        self.policy = None
        self.system_host_keys_loaded = False
        self.host_key_files: List[str] = []
        self.transport: Optional[FakeTransport] = None
        self.closed = False
        host.clients.append(self)

    def set_missing_host_key_policy(self, policy) -> None:
        self.policy = policy

    def load_system_host_keys(self) -> None:
        self.system_host_keys_loaded = True

    def load_host_keys(self, filename: str) -> None:
        if not Path(filename).exists():
            raise FileNotFoundError(errno.ENOENT, "No such file", filename)
        self.host_key_files.append(filename)

    def connect(self, **kwargs) -> None:
        self.host.connect_kwargs.append(kwargs)
        if self.host.connect_error is not None:
            raise self.host.connect_error
        if kwargs.get("password") != self.host.password:
            raise paramiko.AuthenticationException("Authentication failed.")
        self.transport = FakeTransport(self.host)

    def get_transport(self) -> Optional[FakeTransport]:
        return self.transport

    def open_sftp(self) -> FakeSFTPClient:
        if self.transport is None or not self.host.transport_active:
            raise paramiko.SSHException("SSH session not active")
        if self.host.sftp_open_error is not None:
            raise self.host.sftp_open_error
        sftp = FakeSFTPClient(self.host)
        self.host.sftp_clients.append(sftp)
        return sftp

    def close(self) -> None:
        self.closed = True
        self.transport = None


@pytest.fixture
def remote_host(monkeypatch) -> FakeRemoteHost:
    host = FakeRemoteHost()
    monkeypatch.setattr(paramiko, "SSHClient", lambda: FakeSSHClient(host))
    return host


@pytest.fixture
def connection(remote_host) -> RemoteClient:
    client = RemoteClient(host="test.example", user="tester", password=PASSWORD)
    client.connect()
    yield client
    client.disconnect()


@pytest.fixture
def session(connection) -> RemoteSession:
    return RemoteSession(connection)
