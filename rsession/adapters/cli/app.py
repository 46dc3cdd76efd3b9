"""
Main CLI application
"""
import typer
from pathlib import Path
from typing import Optional

from ...core.logging import setup_logging
from .commands import register_session_commands

# Create main app
app = typer.Typer(
    name="rsession",
    add_completion=False,
    help="Run commands and transfer files over a single SSH session",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

register_session_commands(app)


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
):
    """
    rsession - remote command execution and file transfer over SSH

    Each command opens one connection, performs one operation and disconnects:
    - run: execute a command
    - upload / download: transfer a single file
    - mkdir: create a remote directory tree
    """
    setup_logging(level=log_level, log_file=log_file)


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
