"""
Deployment Models

Deployment type and the per-run context threaded through the pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from dockship.constants import CONTAINER_SETTLE_DELAY, SSH_CONNECT_TIMEOUT
from dockship.models.parameters import DeploymentParameters
from dockship.models.ssh import SSHConfig, SSHConnection


class DeploymentType(Enum):
    """Build/run model selected from the descriptor present in the project."""

    SINGLE_CONTAINER = "dockerfile"
    MULTI_CONTAINER = "compose"

    @property
    def label(self) -> str:
        """Human readable label."""
        if self is DeploymentType.SINGLE_CONTAINER:
            return "single-container (Dockerfile)"
        return "multi-container (docker-compose)"


@dataclass(frozen=True)
class DeploymentSettings:
    """Tunables that are not prompted for."""

    connect_timeout: int = SSH_CONNECT_TIMEOUT
    settle_delay: int = CONTAINER_SETTLE_DELAY


@dataclass(frozen=True)
class DeploymentContext:
    """Everything a pipeline step needs to know about the current run."""

    params: DeploymentParameters
    workdir: Path
    settings: DeploymentSettings = field(default_factory=DeploymentSettings)
    deployment_type: Optional[DeploymentType] = None

    @property
    def project_path(self) -> Path:
        """Local clone of the repository."""
        return self.workdir / self.params.app_name

    @property
    def connection(self) -> SSHConnection:
        """SSH connection to the target host."""
        config = SSHConfig(key_path=str(self.params.ssh_key), user=self.params.ssh_user)
        return SSHConnection(
            host=self.params.server,
            config=config,
            connect_timeout=self.settings.connect_timeout,
        )

    @property
    def is_compose(self) -> bool:
        """Check if the detected type is multi-container."""
        return self.deployment_type is DeploymentType.MULTI_CONTAINER
