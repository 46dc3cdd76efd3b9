"""
Remote command execution over short-lived exec channels
"""
import time
from typing import Tuple

import paramiko

from ...core.client import RemoteClient
from ...core.constants import READ_CHUNK_SIZE, POLL_INTERVAL, OUTPUT_ENCODING
from ...core.exceptions import CommandExecutionError
from ...core.logging import get_logger
from .models import CommandResult

logger = get_logger(__name__)


class CommandExecutor:
    """Runs one command per exec channel and captures its output"""

    def __init__(
        self,
        client: RemoteClient,
        chunk_size: int = READ_CHUNK_SIZE,
        poll_interval: float = POLL_INTERVAL,
    ):
        """
        Initialize command executor.

        Args:
            client: Connected RemoteClient
            chunk_size: Maximum bytes read from a stream per poll
            poll_interval: Sleep between polls when neither stream had data
        """
        self.client = client
        self.chunk_size = chunk_size
        self.poll_interval = poll_interval

    def run(self, command: str) -> CommandResult:
        """
        Execute a command and wait for it to finish.

        Args:
            command: Command line passed verbatim to the remote shell

        Returns:
            CommandResult with exit status, stdout and stderr

        Raises:
            CommandExecutionError: If the channel fails before completion
        """
        logger.debug(f"[exec] {command}")
        try:
            with self.client.open_exec_channel() as channel:
                channel.exec_command(command)
                out, err = self._drain(channel)
                exit_status = channel.recv_exit_status()
                # paramiko reports -1 when the channel died without a status
                if exit_status == -1 and not self.client.is_connected:
                    raise EOFError("Transport closed while the command was running")
        except (paramiko.SSHException, OSError, EOFError) as e:
            logger.error(f"Command failed on {self.client.target}: {command}: {e}")
            raise CommandExecutionError(f"Failed to execute '{command}': {e}") from e

        result = CommandResult(
            exit_status=exit_status,
            stdout=out.decode(OUTPUT_ENCODING, errors="replace"),
            stderr=err.decode(OUTPUT_ENCODING, errors="replace"),
        )
        logger.debug(f"[exec] exit status {exit_status}: {command}")
        return result

    def _drain(self, channel: paramiko.Channel) -> Tuple[bytes, bytes]:
        """
        Read stdout and stderr until the command exits.

        Both buffers are polled in the same loop so a full stderr window can
        never stall the remote process while stdout is being read.
        """
        out_buf = bytearray()
        err_buf = bytearray()

        while True:
            has_output = False

            if channel.recv_ready():
                data = channel.recv(self.chunk_size)
                if data:
                    has_output = True
                    out_buf.extend(data)

            if channel.recv_stderr_ready():
                data = channel.recv_stderr(self.chunk_size)
                if data:
                    has_output = True
                    err_buf.extend(data)

            # Exit status arrives after the last data packet
            if (
                channel.exit_status_ready()
                and not channel.recv_ready()
                and not channel.recv_stderr_ready()
            ):
                break

            if channel.closed and not has_output:
                raise EOFError("Channel closed before the command reported an exit status")

            if not has_output:
                time.sleep(self.poll_interval)

        return bytes(out_buf), bytes(err_buf)
