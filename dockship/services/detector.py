"""Detection of the build descriptor in a cloned project."""

from pathlib import Path

import yaml

from dockship.constants import COMPOSE_FILE_NAMES, DOCKERFILE_NAME
from dockship.exceptions import DescriptorNotFoundError
from dockship.models.deployment import DeploymentType


def detect_deployment_type(project_path: Path) -> DeploymentType:
    """
    Select the deployment type from the descriptor present in project_path.

    A Dockerfile wins over a compose file when both exist.

    Raises:
        DescriptorNotFoundError: If neither descriptor is present
    """
    if (project_path / DOCKERFILE_NAME).is_file():
        return DeploymentType.SINGLE_CONTAINER

    for name in COMPOSE_FILE_NAMES:
        if (project_path / name).is_file():
            return DeploymentType.MULTI_CONTAINER

    raise DescriptorNotFoundError(
        str(project_path), [DOCKERFILE_NAME, *COMPOSE_FILE_NAMES]
    )


def compose_services(project_path: Path) -> list[str]:
    """
    Service names declared in the project's compose file.

    Returns an empty list when there is no compose file or it cannot be
    parsed; docker-compose on the remote host has the final word.
    """
    for name in COMPOSE_FILE_NAMES:
        compose_path = project_path / name
        if not compose_path.is_file():
            continue
        try:
            with open(compose_path, "r") as f:
                compose = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return []
        services = compose.get("services") if isinstance(compose, dict) else None
        return sorted(services) if isinstance(services, dict) else []
    return []
