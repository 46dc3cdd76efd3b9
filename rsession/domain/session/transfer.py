"""
Single-file upload and download over short-lived SFTP channels
"""
from pathlib import Path

import paramiko

from ...core.client import RemoteClient
from ...core.constants import PART_FILE_SUFFIX
from ...core.exceptions import TransferError
from ...core.logging import get_logger
from ...core.utils import resolve_local_path, remote_parent
from .provisioner import DirectoryProvisioner

logger = get_logger(__name__)


class FileTransfer:
    """Uploads and downloads one file per SFTP channel"""

    def __init__(self, client: RemoteClient, provisioner: DirectoryProvisioner):
        self.client = client
        self.provisioner = provisioner

    def upload(self, local_path: str, remote_path: str) -> None:
        """
        Upload local file to remote, creating the remote parent directory.

        Args:
            local_path: Local file path
            remote_path: Remote file path

        Raises:
            TransferError: If the local file is missing or the transfer fails
        """
        local = resolve_local_path(local_path)
        if not local.is_file():
            raise TransferError(f"Local file not found: {local}")

        parent = remote_parent(remote_path)
        if parent:
            self.provisioner.ensure(parent)

        try:
            with self.client.open_sftp() as sftp:
                sftp.put(local.as_posix(), remote_path)
        except (paramiko.SSHException, OSError, EOFError) as e:
            logger.error(f"Upload failed: {local} → {remote_path}: {e}")
            raise TransferError(f"Failed to upload {local} to {remote_path}: {e}") from e

        logger.debug(f"[push] {local} → {remote_path}")

    def download(self, remote_path: str, local_path: str) -> None:
        """
        Download remote file to local, replacing any existing file.

        Data lands in a sibling .part file first and is moved into place only
        after the transfer completed, so a failure never leaves a truncated
        destination behind. The local parent directory must already exist.

        Args:
            remote_path: Remote file path
            local_path: Local file path

        Raises:
            TransferError: If the remote file is missing or the transfer fails
        """
        local = resolve_local_path(local_path)
        part = local.with_name(local.name + PART_FILE_SUFFIX)

        completed = False
        try:
            with self.client.open_sftp() as sftp:
                sftp.get(remote_path, part.as_posix())
            part.replace(local)
            completed = True
        except (paramiko.SSHException, OSError, EOFError) as e:
            logger.error(f"Download failed: {remote_path} → {local}: {e}")
            raise TransferError(f"Failed to download {remote_path} to {local}: {e}") from e
        finally:
            if not completed:
                _discard(part)

        logger.debug(f"[pull] {remote_path} → {local}")


def _discard(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Could not remove partial download {path}: {e}")
