"""Git service for fetching the source repository."""

import shutil
from pathlib import Path

from dockship.exceptions import RepositoryError
from dockship.logger import DeployLogger, run_with_progress
from dockship.models.parameters import DeploymentParameters
from dockship.models.results import ExecutionResult


class GitService:
    """Clones the repository being deployed into the working directory."""

    def __init__(self, logger: DeployLogger):
        self.logger = logger

    def clone(self, params: DeploymentParameters, workdir: Path) -> Path:
        """
        Clone the requested branch, replacing any previous clone.

        An existing directory with the app's name is deleted first; this is
        an overwrite, not an update.

        Args:
            params: Deployment parameters (URL, token, branch)
            workdir: Directory the clone is created in

        Returns:
            Path to the cloned project

        Raises:
            RepositoryError: If git fails or is not installed
        """
        self.logger.add_secret(params.token)
        target = workdir / params.app_name

        if target.exists():
            self.logger.warning(f"Removing existing repository directory {target}")
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()

        self.logger.log(
            f"Cloning repository from {params.repo_url} (branch: {params.branch})"
        )

        command = ["git", "clone", "-b", params.branch, params.auth_url, params.app_name]
        try:
            result: ExecutionResult = run_with_progress(
                self.logger,
                command,
                f"Cloning {params.app_name} ({params.branch})",
                cwd=workdir,
            )
        except OSError as e:
            raise RepositoryError(f"Could not run git: {e}")

        if result.is_failure or not target.is_dir():
            raise RepositoryError(
                "Failed to clone repository. Check the URL and your access token.",
                context=self.logger.redact(result.stderr.strip()) or None,
            )

        return target
