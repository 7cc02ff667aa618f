"""
Base Command Class

Abstract base for all Dockship commands.
Provides common functionality and structure.
"""

import traceback
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from rich.console import Console

from dockship.exceptions import DockshipError
from dockship.logger import DeployLogger
from dockship.ui_components import show_header


class BaseCommand(ABC):
    """
    Abstract base command class.

    Provides:
    - Logger initialization
    - Header display
    - Error handling (any unhandled error ends the run as fatal)
    """

    def __init__(
        self,
        verbose: bool = False,
        workdir: Optional[Path] = None,
        console: Optional[Console] = None,
    ):
        self.verbose = verbose
        self.workdir = Path(workdir) if workdir else Path.cwd()
        self.console = console or Console()
        self.logger: Optional[DeployLogger] = None

    def init_logger(self, operation: str) -> DeployLogger:
        """
        Initialize the per-run logger.

        Args:
            operation: Operation name, used as the log file prefix

        Returns:
            DeployLogger instance
        """
        self.logger = DeployLogger(
            operation, log_dir=self.workdir, verbose=self.verbose, console=self.console
        )
        return self.logger

    def show_header(
        self,
        title: str,
        subtitle: Optional[str] = None,
        details: Optional[dict] = None,
    ) -> None:
        """Show command header (skip in verbose mode)."""
        if not self.verbose:
            show_header(
                title=title, subtitle=subtitle, details=details, console=self.console
            )

    def print_logs_location(self) -> None:
        if self.logger:
            self.console.print(f"\n[dim]Logs saved to:[/dim] {self.logger.log_path}\n")

    def handle_error(self, error: Exception, context: Optional[str] = None) -> None:
        """
        Handle error with consistent formatting.

        Args:
            error: Exception object
            context: Optional context message
        """
        if isinstance(error, DockshipError):
            message, context = error.message, context or error.context
        else:
            message = f"{type(error).__name__}: {error}"

        if self.logger:
            self.logger.log_error(message, context=context)
        else:
            self.console.print(f"✗ {message}", style="red", markup=False)
            if context:
                self.console.print(f"Context: {context}", style="dim", markup=False)

    @staticmethod
    def failure_location(error: BaseException) -> str:
        """File and line where an exception was raised."""
        frames = traceback.extract_tb(error.__traceback__)
        if not frames:
            return "unknown location"
        frame = frames[-1]
        return f"{Path(frame.filename).name} line {frame.lineno} in {frame.name}"

    @abstractmethod
    def execute(self, **kwargs) -> None:
        """
        Execute command logic.

        Must be implemented by subclasses.
        """
        pass

    def run(self, **kwargs) -> None:
        """
        Run command with error handling.

        Args:
            **kwargs: Command arguments
        """
        try:
            self.execute(**kwargs)
        except KeyboardInterrupt:
            self.console.print("\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            if self.logger:
                self.logger.log_error("Operation cancelled by user")
            self.print_logs_location()
            raise SystemExit(130)
        except SystemExit:
            raise
        except DockshipError as e:
            self.handle_error(e)
            self.print_logs_location()
            raise SystemExit(1)
        except Exception as e:
            self.handle_error(
                e,
                context=f"Failed at {self.failure_location(e)}",
            )
            self.print_logs_location()
            raise SystemExit(1)
        finally:
            if self.logger:
                self.logger.close()
