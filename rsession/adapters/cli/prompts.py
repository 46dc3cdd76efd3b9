"""
Rich-based user prompts
"""
from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from ...core.interfaces import PromptProvider
from ...core.logging import get_stdout_console, get_stderr_console


class RichPromptProvider(PromptProvider):
    """Rich-based prompt provider"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or get_stdout_console()
        self.error_console = get_stderr_console()

    def prompt(self, message: str, default: Optional[str] = None, password: bool = False) -> str:
        """Prompt user for input"""
        if password:
            return Prompt.ask(message, password=True, console=self.console)
        return Prompt.ask(message, default=default, console=self.console)

    def success(self, message: str) -> None:
        """Display success message"""
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        """Display error message"""
        self.error_console.print(f"[red]✗[/red] {escape(message)}")
