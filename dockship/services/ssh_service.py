"""SSH service for executing command batches and transferring files."""

import shlex
import subprocess
import time
from pathlib import Path
from typing import Optional, Sequence

from dockship.constants import RSYNC_EXCLUDES
from dockship.exceptions import SSHError
from dockship.logger import DeployLogger, run_with_progress
from dockship.models.results import ExecutionResult, SSHResult
from dockship.models.ssh import SSHConnection


class SSHService:
    """
    Service for SSH operations.

    Every call is a one-shot, non-interactive ``ssh`` invocation; nothing is
    kept open between calls.
    """

    def __init__(self, connection: SSHConnection, logger: Optional[DeployLogger] = None):
        """
        Initialize SSH service.

        Args:
            connection: Target host and credentials
            logger: Optional logger receiving commands and captured output
        """
        self.connection = connection
        self.logger = logger

    @property
    def host(self) -> str:
        return self.connection.host

    def execute_command(
        self,
        command: str,
        timeout: Optional[int] = None,
        label: Optional[str] = None,
    ) -> SSHResult:
        """
        Execute command on remote host via SSH.

        Args:
            command: Command line run by the remote login shell
            timeout: Command timeout in seconds (None waits indefinitely)
            label: Short name logged instead of the full command

        Returns:
            SSHResult with execution details

        Raises:
            SSHError: If ssh cannot be started or the command times out
        """
        ssh_cmd = self.connection.build_command(command)

        if self.logger:
            shown = label or command
            self.logger.log_command(f"ssh {self.connection.connection_string} {shown}")

        start_time = time.time()

        try:
            result = subprocess.run(
                ssh_cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
                stdin=subprocess.DEVNULL,
            )
        except subprocess.TimeoutExpired:
            raise SSHError(
                f"SSH command timed out after {timeout}s",
                context=f"Host: {self.host}, Command: {label or command}",
            )
        except OSError as e:
            raise SSHError(
                f"SSH command failed: {e}",
                context=f"Host: {self.host}, Command: {label or command}",
            )

        duration = time.time() - start_time

        if self.logger:
            self.logger.log_output(result.stdout, "stdout")
            self.logger.log_output(result.stderr, "stderr")
            self.logger.log(
                f"Exit status {result.returncode} after {duration:.1f}s", "DEBUG"
            )

        return SSHResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            host=self.host,
            command=label or command,
            duration_seconds=duration,
        )

    def run_script(
        self, script: str, label: str, timeout: Optional[int] = None
    ) -> SSHResult:
        """
        Run a multi-line bash script as a single remote batch.

        The script is passed as the argument of ``bash -c`` so remote
        commands that read stdin cannot swallow the rest of the batch.

        Args:
            script: Bash script text
            label: Operation name for logging
            timeout: Optional timeout in seconds

        Returns:
            SSHResult with execution details
        """
        if self.logger:
            self.logger.log_output(script, "script")
        return self.execute_command(
            f"bash -c {shlex.quote(script)}", timeout=timeout, label=label
        )

    def sync_directory(
        self,
        local_dir: Path,
        remote_dir: str,
        excludes: Sequence[str] = RSYNC_EXCLUDES,
    ) -> ExecutionResult:
        """
        Mirror a local directory to the remote host with rsync.

        Args:
            local_dir: Source directory (its contents are copied)
            remote_dir: Destination directory on the remote host
            excludes: Patterns passed to --exclude

        Returns:
            ExecutionResult of the rsync invocation
        """
        remote_shell = shlex.join(["ssh", *self.connection.ssh_options])
        rsync_cmd = ["rsync", "-avz", "-e", remote_shell]
        for pattern in excludes:
            rsync_cmd.extend(["--exclude", pattern])
        rsync_cmd.extend(
            [
                f"{str(local_dir).rstrip('/')}/",
                f"{self.connection.connection_string}:{remote_dir.rstrip('/')}/",
            ]
        )

        try:
            if self.logger:
                return run_with_progress(
                    self.logger, rsync_cmd, "Transferring project files"
                )
            result = subprocess.run(rsync_cmd, capture_output=True, text=True)
        except OSError as e:
            raise SSHError(f"rsync failed to start: {e}", context=f"Host: {self.host}")

        return ExecutionResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            command=" ".join(rsync_cmd),
        )
