"""
Logging system for Dockship
Provides real-time logging to a per-run file with clean console output
"""

import re
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, TextIO

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.padding import Padding
from rich.spinner import Spinner
from rich.text import Text

from dockship.constants import LOG_DATETIME_FORMAT, LOG_FILE_TIMESTAMP_FORMAT
from dockship.models.results import ExecutionResult

ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class DeployLogger:
    """
    Manages logging for deployment operations
    - Appends timestamped records to <operation>_YYYYmmdd_HHMMSS.log
    - Shows clean progress UI in console (unless verbose)
    - Masks registered secrets before anything is written
    """

    def __init__(
        self,
        operation: str,
        log_dir: Optional[Path] = None,
        verbose: bool = False,
        console: Optional[Console] = None,
    ):
        """
        Initialize logger

        Args:
            operation: Operation name ('deploy' or 'cleanup'), used as file prefix
            log_dir: Directory for the log file (default: current directory)
            verbose: If True, show all output in console
            console: Rich console (new console if None)
        """
        self.operation = operation
        self.verbose = verbose
        self.console = console if console is not None else Console()
        self.log_file: Optional[TextIO] = None
        self.current_step = ""
        self.has_errors = False
        self._secrets: list[str] = []

        log_dir = Path(log_dir) if log_dir else Path.cwd()
        log_dir.mkdir(parents=True, exist_ok=True)

        started = datetime.now().strftime(LOG_FILE_TIMESTAMP_FORMAT)
        self.log_path = (log_dir / f"{operation}_{started}.log").resolve()

        # Line buffered so the file is readable while the run is in progress
        self.log_file = open(self.log_path, "a", buffering=1)

        self._write_log_header()

    def add_secret(self, secret: str) -> None:
        """Register a value that must never reach the console or log file."""
        if secret and secret not in self._secrets:
            self._secrets.append(secret)

    def redact(self, text: str) -> str:
        """Mask registered secrets in text."""
        for secret in self._secrets:
            text = text.replace(secret, "***")
        return text

    def _write_log_header(self):
        """Write log file header"""
        header = f"""
{"=" * 80}
Dockship Log
{"=" * 80}
Operation: {self.operation}
Started: {datetime.now().isoformat()}
{"=" * 80}

"""
        self.log_file.write(header)

    def _write(self, text: str) -> None:
        if self.log_file:
            self.log_file.write(text)

    def log(self, message: str, level: str = "INFO"):
        """
        Log a message to file and optionally console

        Args:
            message: Message to log
            level: Log level (INFO, WARNING, ERROR, DEBUG)
        """
        message = self.redact(message)
        timestamp = datetime.now().strftime(LOG_DATETIME_FORMAT)
        self._write(f"[{timestamp}] [{level}] {message}\n")

        if self.verbose:
            if level == "ERROR":
                self.console.print(message, style="red", markup=False)
            elif level == "WARNING":
                self.console.print(message, style="yellow", markup=False)
            elif level == "DEBUG":
                self.console.print(message, style="dim", markup=False)
            else:
                self.console.print(message, markup=False)

    def log_command(self, command: Iterable[str]):
        """Log a command being executed"""
        if not isinstance(command, str):
            command = " ".join(command)
        self.log(f"Executing: {command}", "DEBUG")

    def log_output(self, output: str, stream: str = "stdout"):
        """
        Log command output

        Always written to the log file; shown in console only if verbose.

        Args:
            output: Command output (single line or multiline)
            stream: Stream name (stdout, stderr)
        """
        if not output:
            return

        clean_output = self.redact(ANSI_ESCAPE.sub("", output))

        for line in clean_output.splitlines():
            self._write(f"  [{stream}] {line}\n")

        if self.verbose:
            self.console.print(clean_output, markup=False, highlight=False)

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Log an error with context

        Args:
            error: Error message
            context: Additional context (e.g., command that failed)
        """
        self.has_errors = True
        error = self.redact(error)
        context = self.redact(context) if context else context

        error_block = f"""
{"!" * 80}
ERROR OCCURRED
{"!" * 80}
{error}
"""
        if context:
            error_block += f"\nContext: {context}\n"

        error_block += f"{'!' * 80}\n\n"
        self._write(error_block)

        if not self.verbose:
            self.console.print()

        self.console.print(f"[bold red]✗ {escape(error)}[/bold red]")
        if context:
            self.console.print(f"  [color(208)]{escape(context)}[/color(208)]")

    def step(self, step_name: str):
        """
        Start a new step

        Args:
            step_name: Name of the step
        """
        if self.current_step and not self.verbose:
            self.console.print()

        self.current_step = step_name
        self.log(f"Step: {step_name}", "INFO")

        if not self.verbose:
            self.console.print(f"[color(214)]▶[/color(214)] [white]{escape(step_name)}[/white]")

    def success(self, message: str):
        """Log a success message"""
        self.log(message, "INFO")

        if not self.verbose:
            self.console.print(f"  [dim]✓ {escape(self.redact(message))}[/dim]")

    def warning(self, message: str):
        """Log a warning message"""
        self.log(message, "WARNING")

        if not self.verbose:
            self.console.print(f"  [yellow]⚠[/yellow] [dim]{escape(self.redact(message))}[/dim]")

    def close(self):
        """Close log file"""
        if self.log_file:
            footer = f"""
{"=" * 80}
Completed: {datetime.now().isoformat()}
Status: {"FAILED" if self.has_errors else "SUCCESS"}
{"=" * 80}
"""
            self.log_file.write(footer)
            self.log_file.close()
            self.log_file = None

    def __enter__(self):
        """Context manager entry"""
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        """Context manager exit"""
        if exc_type is not None and not issubclass(exc_type, (SystemExit, KeyboardInterrupt)):
            self.log_error(
                str(exc_val) if exc_val else "Operation failed",
                context=f"{exc_type.__name__}",
            )
        self.close()
        return False


def run_with_progress(
    logger: DeployLogger,
    command: list[str],
    description: str,
    cwd: Optional[Path] = None,
    timeout: Optional[int] = None,
) -> ExecutionResult:
    """
    Run a local command with a progress indicator

    Output is always written to the log file. In verbose mode it is echoed
    to the console instead of showing a spinner.

    Args:
        logger: DeployLogger instance
        command: Command argv
        description: Description for progress indicator
        cwd: Working directory
        timeout: Optional timeout in seconds

    Returns:
        ExecutionResult with captured output
    """
    logger.log_command(command)

    if logger.verbose:
        result = subprocess.run(
            command, cwd=cwd, capture_output=True, text=True, timeout=timeout
        )
        logger.log_output(result.stdout, "stdout")
        logger.log_output(result.stderr, "stderr")
    else:
        spinner = Spinner("dots", text=f"[cyan]{description}...[/cyan]")
        padded_spinner = Padding(spinner, (0, 0, 0, 2))

        with Live(padded_spinner, console=logger.console, refresh_per_second=10) as live:
            result = subprocess.run(
                command, cwd=cwd, capture_output=True, text=True, timeout=timeout
            )

            logger.log_output(result.stdout, "stdout")
            logger.log_output(result.stderr, "stderr")

            if result.returncode == 0:
                checkmark = Text("  ✓ ", style="dim")
                checkmark.append(description, style="dim")
                live.update(checkmark)
            else:
                x_mark = Text("  ✗ ", style="red")
                x_mark.append(description, style="dim")
                live.update(x_mark)

    return ExecutionResult(
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
        command=logger.redact(" ".join(command)),
    )
