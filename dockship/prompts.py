"""
Parameter Collector

Interactive prompts for deployment and cleanup parameters. Every required
value is validated as soon as it is entered, so a bad answer ends the run
before anything touches the network or the file system.
"""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.prompt import Prompt

from dockship.constants import DEFAULT_BRANCH, DEFAULT_SSH_KEY_PATH
from dockship.exceptions import ParameterError
from dockship.models.parameters import (
    CleanupTarget,
    DeploymentParameters,
    derive_app_name,
    parse_port,
    validate_app_name,
)


class ParameterCollector:
    """Prompts for the values a deployment or cleanup needs."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def _ask(self, question: str, default: Optional[str] = None, password: bool = False) -> str:
        answer = Prompt.ask(
            question,
            console=self.console,
            default=default,
            password=password,
            show_default=default is not None,
        )
        return (answer or "").strip()

    def _required(self, question: str, label: str, password: bool = False) -> str:
        answer = self._ask(question, password=password)
        if not answer:
            raise ParameterError(f"{label} cannot be empty")
        return answer

    def _key_path(self, question: str, default: Optional[str] = DEFAULT_SSH_KEY_PATH) -> Path:
        raw = self._ask(question, default=default) or default
        if not raw:
            raise ParameterError("SSH key path cannot be empty")

        key_path = Path(raw).expanduser()
        if not key_path.is_file():
            raise ParameterError(f"SSH key not found at {key_path}")
        return key_path

    def collect(self) -> DeploymentParameters:
        """
        Prompt for every deployment parameter, in order.

        Returns:
            Validated DeploymentParameters

        Raises:
            ParameterError: On the first empty or invalid answer
        """
        repo_url = self._required("Enter Git Repository URL", "Git repository URL")
        validate_app_name(derive_app_name(repo_url))

        token = self._required(
            "Enter Personal Access Token (PAT)", "Personal Access Token", password=True
        )
        branch = self._ask("Enter branch name", default=DEFAULT_BRANCH) or DEFAULT_BRANCH
        ssh_user = self._required("Enter remote server username", "SSH username")
        server = self._required("Enter remote server IP address", "Server IP")
        ssh_key = self._key_path("Enter SSH key path")
        app_port = parse_port(
            self._required("Enter application port (e.g., 3000)", "Application port")
        )

        return DeploymentParameters(
            repo_url=repo_url,
            token=token,
            branch=branch,
            ssh_user=ssh_user,
            server=server,
            ssh_key=ssh_key,
            app_port=app_port,
        )

    def collect_cleanup_target(
        self,
        server: Optional[str] = None,
        ssh_user: Optional[str] = None,
        ssh_key: Optional[Path] = None,
        app_name: Optional[str] = None,
    ) -> CleanupTarget:
        """
        Prompt only for the cleanup values that are not already known.

        Returns:
            Validated CleanupTarget
        """
        server = server or self._required("Enter remote server IP", "Server IP")
        ssh_user = ssh_user or self._required("Enter remote server username", "SSH username")
        if ssh_key is None:
            ssh_key = self._key_path("Enter SSH key path")
        else:
            ssh_key = Path(ssh_key).expanduser()
        app_name = app_name or self._required(
            "Enter repository/application name to cleanup", "Application name"
        )

        return CleanupTarget(
            server=server, ssh_user=ssh_user, ssh_key=ssh_key, app_name=app_name
        )
