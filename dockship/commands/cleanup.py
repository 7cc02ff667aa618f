"""
Cleanup Command

Tear down everything a deployment created on the remote host and locally.
Every removal is best-effort: missing resources never fail the run.
"""

import shutil
from pathlib import Path
from typing import Optional

from rich.console import Console

from dockship import remote
from dockship.base import BaseCommand
from dockship.exceptions import SSHError
from dockship.models.parameters import CleanupTarget
from dockship.models.ssh import SSHConfig, SSHConnection
from dockship.prompts import ParameterCollector
from dockship.services.ssh_service import SSHService


class CleanupCommand(BaseCommand):
    """Remove containers, images, files and nginx site of a deployment."""

    def __init__(
        self,
        verbose: bool = False,
        workdir: Optional[Path] = None,
        console: Optional[Console] = None,
        collector: Optional[ParameterCollector] = None,
        known: Optional[dict] = None,
    ):
        """
        Initialize cleanup command.

        Args:
            verbose: Whether to show verbose output
            workdir: Directory holding the local clone and the log file
            console: Rich console
            collector: Prompt implementation
            known: Already known values (server, ssh_user, ssh_key, app_name);
                only the missing ones are prompted for
        """
        super().__init__(verbose=verbose, workdir=workdir, console=console)
        self.collector = collector or ParameterCollector(console=self.console)
        self.known = known or {}

    def execute(self) -> None:
        """Execute cleanup command."""
        self.show_header(title="Cleanup Deployment", subtitle="Cleanup mode activated")

        logger = self.init_logger("cleanup")
        logger.step("Collecting cleanup parameters")
        target = self.collector.collect_cleanup_target(**self.known)
        logger.success(
            f"Cleaning up deployment: {target.app_name} on {target.server}"
        )

        logger.step("Removing remote resources")
        self._cleanup_remote(target)

        logger.step("Removing local repository clone")
        self._cleanup_local(target)

        logger.step("Cleanup completed")
        logger.success(f"{target.app_name} removed from {target.server}")
        self.print_logs_location()

    def _cleanup_remote(self, target: CleanupTarget) -> None:
        logger = self.logger
        connection = SSHConnection(
            host=target.server,
            config=SSHConfig(key_path=str(target.ssh_key), user=target.ssh_user),
        )
        ssh = SSHService(connection, logger)
        script = remote.CLEANUP.render(**remote.template_values(target))

        try:
            result = ssh.run_script(script, label=remote.CLEANUP.name)
        except SSHError as e:
            logger.warning(f"Remote cleanup did not run: {e.message}")
            return

        if result.is_failure:
            logger.warning(
                f"Remote cleanup exited with status {result.returncode}; "
                "some resources may remain"
            )
        else:
            logger.success("Containers, images, files and Nginx site removed")

    def _cleanup_local(self, target: CleanupTarget) -> None:
        logger = self.logger
        clone = self.workdir / target.app_name

        if clone.is_dir() and not clone.is_symlink():
            shutil.rmtree(clone, ignore_errors=True)
            if clone.exists():
                logger.warning(f"Could not fully remove {clone}")
            else:
                logger.success(f"Removed {clone}")
        else:
            logger.log(f"No local clone at {clone}")
