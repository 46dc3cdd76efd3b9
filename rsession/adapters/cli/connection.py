"""
Connection parameter resolution and session opening for CLI commands
"""
import getpass
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from ...core.client import ClientConfig
from ...core.exceptions import ConfigError
from ...core.interfaces import PromptProvider, Session
from ...core.logging import get_logger
from ...core.utils import load_ssh_config
from ...domain.session import create_default_client
from ..config import ConfigLoader
from .host_parser import parse_host_string

logger = get_logger(__name__)


def resolve_connection_params(
    target: str,
    prompts: PromptProvider,
    user: Optional[str] = None,
    port: Optional[int] = None,
    config_path: Optional[Path] = None,
    timeout: Optional[float] = None,
    host_key_policy: Optional[str] = None,
    known_hosts: Optional[str] = None,
    loader: Optional[ConfigLoader] = None,
) -> ClientConfig:
    """
    Resolve connection parameters for a target.

    Priority: CLI options / target string > ~/.ssh/config alias > env > TOML > defaults.
    Missing user and password are prompted for.

    Args:
        target: host, user@host, user@host:port or an ~/.ssh/config alias
        prompts: Prompt provider for missing values

    Returns:
        Validated ClientConfig
    """
    host, target_user, target_port = parse_host_string(target, user, port)

    alias: Dict[str, Any] = {}
    try:
        alias = load_ssh_config(host)
    except ConfigError:
        pass
    if alias:
        logger.debug(f"Resolved {host} through ssh config: {alias}")

    loader = loader or ConfigLoader()
    params = loader.load(
        toml_path=config_path,
        cli_overrides=loader.merge_configs(
            alias,
            {
                "host": alias.get("host", host),
                "user": target_user,
                "port": target_port,
                "timeout": timeout,
                "host_key_policy": host_key_policy,
                "known_hosts": known_hosts,
            },
        ),
    )

    if not params.get("user"):
        params["user"] = prompts.prompt("SSH username", default=getpass.getuser())
    if params.get("password") is None:
        params["password"] = prompts.prompt(
            f"Password for {params['user']}@{params['host']}", password=True
        )

    return ClientConfig(
        host=params["host"],
        user=params["user"],
        port=int(params["port"]),
        password=params["password"],
        timeout=params.get("timeout"),
        host_key_policy=params["host_key_policy"],
        known_hosts=params.get("known_hosts"),
    )


@contextmanager
def open_session(config: ClientConfig) -> Iterator[Session]:
    """Connect, yield the session, always disconnect"""
    client = create_default_client(
        timeout=config.timeout,
        host_key_policy=config.host_key_policy,
        known_hosts=config.known_hosts,
    )
    session = client.connect(config.host, config.port, config.user, config.password)
    try:
        yield session
    finally:
        client.disconnect()
