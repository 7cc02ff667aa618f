"""
Result Models

Dataclass models for step outcomes and command outputs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from dockship.models.deployment import DeploymentContext


class StepStatus(Enum):
    """Outcome severity of a pipeline step."""

    SUCCESS = "success"
    WARNING = "warning"
    FATAL = "fatal"


@dataclass
class StepResult:
    """Typed outcome of one pipeline step."""

    status: StepStatus
    message: str
    output: str = ""
    context: Optional["DeploymentContext"] = None

    @classmethod
    def ok(cls, message: str, output: str = "", context=None) -> "StepResult":
        return cls(StepStatus.SUCCESS, message, output, context)

    @classmethod
    def warn(cls, message: str, output: str = "") -> "StepResult":
        return cls(StepStatus.WARNING, message, output)

    @classmethod
    def fatal(cls, message: str, output: str = "") -> "StepResult":
        return cls(StepStatus.FATAL, message, output)

    @property
    def is_fatal(self) -> bool:
        """Check if the step must stop the pipeline."""
        return self.status is StepStatus.FATAL

    @property
    def is_warning(self) -> bool:
        """Check if the step finished with a warning."""
        return self.status is StepStatus.WARNING

    def __repr__(self) -> str:
        return f"StepResult(status={self.status.value}, message='{self.message}')"


@dataclass
class ExecutionResult:
    """Result of a local command execution (git, rsync, ...)."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    command: str = ""

    @property
    def is_success(self) -> bool:
        """Check if execution succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if execution failed."""
        return self.returncode != 0

    @property
    def output(self) -> str:
        """Get combined output (stdout + stderr)."""
        return f"{self.stdout}\n{self.stderr}".strip()

    def __repr__(self) -> str:
        return f"ExecutionResult(returncode={self.returncode}, command='{self.command[:50]}...')"


@dataclass
class SSHResult:
    """Result of an SSH command execution."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    host: str = ""
    command: str = ""
    duration_seconds: float = 0.0

    @property
    def is_success(self) -> bool:
        """Check if SSH command succeeded."""
        return self.returncode == 0

    @property
    def is_failure(self) -> bool:
        """Check if SSH command failed."""
        return self.returncode != 0

    @property
    def output(self) -> str:
        """Get combined output (stdout + stderr)."""
        return f"{self.stdout}\n{self.stderr}".strip()

    def __repr__(self) -> str:
        return f"SSHResult(host={self.host}, returncode={self.returncode}, duration={self.duration_seconds:.2f}s)"
