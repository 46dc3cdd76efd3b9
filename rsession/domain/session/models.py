"""
Session domain models
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Union


@dataclass(frozen=True)
class CommandResult:
    """Command execution result"""
    exit_status: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_status == 0

    def __iter__(self) -> Iterator[Union[int, str]]:
        """Unpack as (exit_status, stdout, stderr)"""
        return iter((self.exit_status, self.stdout, self.stderr))

    def __str__(self) -> str:
        """String representation"""
        if self.ok:
            return self.stdout
        return f"Error (exit status {self.exit_status}): {self.stderr}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "exit_status": self.exit_status,
            "stdout": self.stdout,
            "stderr": self.stderr,
        }
