"""
Session CLI commands: run, upload, download, mkdir
"""
import typer
from pathlib import Path
from typing import Callable, Optional, TypeVar

from ...core.constants import HOST_KEY_POLICIES
from ...core.exceptions import RemoteError
from ...core.interfaces import Session
from ...core.logging import get_logger, get_stdout_console, get_stderr_console
from .connection import resolve_connection_params, open_session
from .prompts import RichPromptProvider

logger = get_logger(__name__)
stdout_console = get_stdout_console()
stderr_console = get_stderr_console()

T = TypeVar("T")

# Shared connection options
UserOption = typer.Option(None, "--user", "-u", help="Username (overrides user@ in TARGET)")
PortOption = typer.Option(None, "--port", "-P", help="SSH port (default: 22)")
ConfigOption = typer.Option(None, "--config", "-c", help="TOML configuration file")
TimeoutOption = typer.Option(None, "--timeout", help="Connection timeout (seconds)")
HostKeyPolicyOption = typer.Option(
    None,
    "--host-key-policy",
    help=f"Unknown host key handling: {', '.join(HOST_KEY_POLICIES)} (default: accept)",
)
KnownHostsOption = typer.Option(None, "--known-hosts", help="Extra known_hosts file")
TargetArgument = typer.Argument(..., help="host, user@host, user@host:port or ssh config alias")


def _with_session(
    target: str,
    action: Callable[[Session], T],
    user: Optional[str],
    port: Optional[int],
    config: Optional[Path],
    timeout: Optional[float],
    host_key_policy: Optional[str],
    known_hosts: Optional[str],
) -> T:
    """Resolve parameters, connect, run one action, disconnect"""
    prompts = RichPromptProvider()
    try:
        client_config = resolve_connection_params(
            target,
            prompts,
            user=user,
            port=port,
            config_path=config,
            timeout=timeout,
            host_key_policy=host_key_policy,
            known_hosts=known_hosts,
        )
        with open_session(client_config) as session:
            return action(session)
    except RemoteError as e:
        logger.debug("Command failed", exc_info=True)
        prompts.error(str(e))
        raise typer.Exit(1)


def run_command(
    target: str = TargetArgument,
    command: str = typer.Argument(..., help="Command line to execute remotely"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    user: Optional[str] = UserOption,
    port: Optional[int] = PortOption,
    config: Optional[Path] = ConfigOption,
    timeout: Optional[float] = TimeoutOption,
    host_key_policy: Optional[str] = HostKeyPolicyOption,
    known_hosts: Optional[str] = KnownHostsOption,
) -> None:
    """
    Execute a command on the remote host.

    Remote stdout and stderr are forwarded; the exit code mirrors the remote
    exit status.

    Examples:
        rsession run deploy@host "uname -a"
        rsession run host:2222 "ls /tmp" --json
    """
    result = _with_session(
        target,
        lambda session: session.run_command(command),
        user, port, config, timeout, host_key_policy, known_hosts,
    )

    if as_json:
        stdout_console.print_json(data=result.to_dict())
    else:
        if result.stdout:
            stdout_console.print(result.stdout, end="", markup=False, highlight=False)
        if result.stderr:
            stderr_console.print(result.stderr, end="", markup=False, highlight=False)

    if result.exit_status != 0:
        raise typer.Exit(result.exit_status)


def upload(
    target: str = TargetArgument,
    local_path: str = typer.Argument(..., help="Local file"),
    remote_path: str = typer.Argument(..., help="Remote destination file"),
    user: Optional[str] = UserOption,
    port: Optional[int] = PortOption,
    config: Optional[Path] = ConfigOption,
    timeout: Optional[float] = TimeoutOption,
    host_key_policy: Optional[str] = HostKeyPolicyOption,
    known_hosts: Optional[str] = KnownHostsOption,
) -> None:
    """Upload a file, creating missing remote directories."""
    _with_session(
        target,
        lambda session: session.upload_file(local_path, remote_path),
        user, port, config, timeout, host_key_policy, known_hosts,
    )
    RichPromptProvider().success(f"{local_path} → {remote_path}")


def download(
    target: str = TargetArgument,
    remote_path: str = typer.Argument(..., help="Remote file"),
    local_path: str = typer.Argument(..., help="Local destination file"),
    user: Optional[str] = UserOption,
    port: Optional[int] = PortOption,
    config: Optional[Path] = ConfigOption,
    timeout: Optional[float] = TimeoutOption,
    host_key_policy: Optional[str] = HostKeyPolicyOption,
    known_hosts: Optional[str] = KnownHostsOption,
) -> None:
    """Download a file, replacing the local destination."""
    _with_session(
        target,
        lambda session: session.download_file(remote_path, local_path),
        user, port, config, timeout, host_key_policy, known_hosts,
    )
    RichPromptProvider().success(f"{remote_path} → {local_path}")


def mkdir(
    target: str = TargetArgument,
    remote_path: str = typer.Argument(..., help="Remote directory"),
    user: Optional[str] = UserOption,
    port: Optional[int] = PortOption,
    config: Optional[Path] = ConfigOption,
    timeout: Optional[float] = TimeoutOption,
    host_key_policy: Optional[str] = HostKeyPolicyOption,
    known_hosts: Optional[str] = KnownHostsOption,
) -> None:
    """Create a remote directory and all missing parents."""
    _with_session(
        target,
        lambda session: session.create_remote_directory(remote_path),
        user, port, config, timeout, host_key_policy, known_hosts,
    )
    RichPromptProvider().success(f"{remote_path}")


def register_session_commands(app: typer.Typer) -> None:
    """Register session commands on the main app"""
    app.command(name="run")(run_command)
    app.command(name="upload")(upload)
    app.command(name="download")(download)
    app.command(name="mkdir")(mkdir)
