"""
Remote directory provisioning (mkdir -p over SFTP primitives)
"""
import stat
from typing import List

import paramiko

from ...core.client import RemoteClient
from ...core.exceptions import TransferError
from ...core.logging import get_logger
from ...core.utils import iter_remote_prefixes

logger = get_logger(__name__)


class DirectoryProvisioner:
    """
    Ensures every ancestor of a remote path exists.

    Each probe and each create runs on its own SFTP channel. Prefixes are
    handled shallowest first, so a level is only created once its parent is
    known to exist.
    """

    def __init__(self, client: RemoteClient):
        self.client = client

    def ensure(self, remote_path: str) -> List[str]:
        """
        Create missing directories along remote_path.

        Args:
            remote_path: Remote directory path

        Returns:
            Directories created by this call, in creation order

        Raises:
            TransferError: If a probe fails for a reason other than "not found",
                a path component is not a directory, or a create fails
        """
        created = []
        for prefix in iter_remote_prefixes(remote_path):
            if self._exists(prefix):
                continue
            if self._create(prefix):
                created.append(prefix)

        if created:
            logger.debug(f"[mkdir] created {', '.join(created)}")
        return created

    def _exists(self, path: str) -> bool:
        """Probe a single path; only "not found" counts as missing"""
        try:
            with self.client.open_sftp() as sftp:
                attrs = sftp.stat(path)
        except FileNotFoundError:
            return False
        except (paramiko.SSHException, OSError, EOFError) as e:
            raise TransferError(f"Cannot stat remote path {path}: {e}") from e

        if attrs.st_mode is not None and not stat.S_ISDIR(attrs.st_mode):
            raise TransferError(f"Remote path exists and is not a directory: {path}")
        return True

    def _create(self, path: str) -> bool:
        """Create a single directory level; False if it appeared concurrently"""
        try:
            with self.client.open_sftp() as sftp:
                sftp.mkdir(path)
        except (paramiko.SSHException, OSError, EOFError) as e:
            # Created by someone else between probe and create
            if self._exists(path):
                logger.debug(f"[mkdir] {path} appeared concurrently")
                return False
            raise TransferError(f"Cannot create remote directory {path}: {e}") from e
        return True
