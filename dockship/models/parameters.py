"""
Deployment Parameter Models

Immutable configuration collected once per run and threaded through
every pipeline step.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

from dockship.constants import REMOTE_DEPLOYMENTS_DIR
from dockship.exceptions import ParameterError

APP_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]*$")


def derive_app_name(repo_url: str) -> str:
    """
    Derive the application name from a repository URL.

    The name is the URL's final path segment with a trailing ``.git``
    removed, e.g. ``https://host/org/app.git`` -> ``app``.

    Args:
        repo_url: Repository URL (https, http or scp-like)

    Returns:
        Application name (may be empty if the URL has no path segment)
    """
    segment = repo_url.strip().rstrip("/")
    segment = segment.rsplit("/", 1)[-1]
    # scp-like URLs (git@host:org/app.git) without a slash after the colon
    segment = segment.rsplit(":", 1)[-1]
    if segment.endswith(".git"):
        segment = segment[: -len(".git")]
    return segment


def build_auth_url(repo_url: str, token: str) -> str:
    """
    Insert the access token as the HTTP basic-auth principal.

    ``https://host/org/app.git`` -> ``https://<token>@host/org/app.git``.
    URLs that are not http(s) are returned unchanged.
    """
    parts = urlsplit(repo_url)
    if parts.scheme not in ("http", "https"):
        return repo_url

    host = parts.netloc.rsplit("@", 1)[-1]
    return urlunsplit(
        (parts.scheme, f"{token}@{host}", parts.path, parts.query, parts.fragment)
    )


def remote_dir_for(app_name: str) -> str:
    """Remote project directory for an application."""
    return f"{REMOTE_DEPLOYMENTS_DIR}/{app_name}"


def image_tag_for(app_name: str) -> str:
    """Docker image reference (repository names must be lower case)."""
    return f"{app_name.lower()}:latest"


def parse_port(value: str) -> int:
    """Parse an application port, raising ParameterError when out of range."""
    try:
        port = int(str(value).strip())
    except ValueError:
        raise ParameterError(
            f"Application port must be a number, got '{value}'",
            context="Enter a port between 1 and 65535 (e.g., 3000)",
        )

    if not 1 <= port <= 65535:
        raise ParameterError(
            f"Application port {port} is out of range",
            context="Enter a port between 1 and 65535 (e.g., 3000)",
        )
    return port


def validate_app_name(app_name: str) -> str:
    """Ensure the app name can be used as a container, directory and site name."""
    if not app_name:
        raise ParameterError("Application name cannot be empty")
    if not APP_NAME_PATTERN.match(app_name):
        raise ParameterError(
            f"Invalid application name '{app_name}'",
            context="Use letters, digits, '.', '_' or '-' (must start with a letter or digit)",
        )
    return app_name


@dataclass(frozen=True)
class DeploymentParameters:
    """Parameters for one deployment run."""

    repo_url: str
    token: str
    branch: str
    ssh_user: str
    server: str
    ssh_key: Path
    app_port: int

    def __post_init__(self):
        required = {
            "Git repository URL": self.repo_url,
            "Personal Access Token": self.token,
            "Branch name": self.branch,
            "SSH username": self.ssh_user,
            "Server IP": self.server,
        }
        for label, value in required.items():
            if not value or not str(value).strip():
                raise ParameterError(f"{label} cannot be empty")

        if not self.ssh_key.is_file():
            raise ParameterError(f"SSH key not found at {self.ssh_key}")

        validate_app_name(self.app_name)
        parse_port(self.app_port)

    @property
    def app_name(self) -> str:
        """Application name derived from the repository URL."""
        return derive_app_name(self.repo_url)

    @property
    def auth_url(self) -> str:
        """Clone URL carrying the access token."""
        return build_auth_url(self.repo_url, self.token)

    @property
    def remote_dir(self) -> str:
        """Remote project directory."""
        return remote_dir_for(self.app_name)

    @property
    def image_tag(self) -> str:
        """Docker image reference (repository names must be lower case)."""
        return image_tag_for(self.app_name)

    def __repr__(self) -> str:
        return (
            f"DeploymentParameters(app={self.app_name}, branch={self.branch}, "
            f"target={self.ssh_user}@{self.server}, port={self.app_port})"
        )


@dataclass(frozen=True)
class CleanupTarget:
    """Connection details and application name for cleanup mode."""

    server: str
    ssh_user: str
    ssh_key: Path
    app_name: str

    def __post_init__(self):
        if not self.server or not self.server.strip():
            raise ParameterError("Server IP cannot be empty")
        if not self.ssh_user or not self.ssh_user.strip():
            raise ParameterError("SSH username cannot be empty")
        if not self.ssh_key.is_file():
            raise ParameterError(f"SSH key not found at {self.ssh_key}")
        validate_app_name(self.app_name)

    @property
    def remote_dir(self) -> str:
        """Remote project directory."""
        return remote_dir_for(self.app_name)

    @property
    def image_tag(self) -> str:
        """Docker image reference."""
        return image_tag_for(self.app_name)
