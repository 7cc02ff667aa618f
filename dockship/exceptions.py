"""
Dockship Exception Hierarchy

Clean exception hierarchy for consistent error handling across the tool.
"""

from typing import Optional


class DockshipError(Exception):
    """Base exception for all Dockship errors."""

    def __init__(self, message: str, context: Optional[str] = None):
        self.message = message
        self.context = context
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ParameterError(DockshipError):
    """Raised when a deployment parameter is missing or invalid."""

    pass


class RepositoryError(DockshipError):
    """Raised when the source repository cannot be fetched."""

    pass


class DeploymentError(DockshipError):
    """Raised when deployment operations fail."""

    pass


class SSHError(DockshipError):
    """Raised when an SSH or rsync invocation cannot be started or times out."""

    pass


class ProxyError(DeploymentError):
    """Raised when the reverse proxy cannot be configured."""

    pass


class DescriptorNotFoundError(DeploymentError):
    """Raised when a project has neither a Dockerfile nor a compose file."""

    def __init__(self, project_path: str, candidates: list[str]):
        self.project_path = project_path
        self.candidates = candidates
        message = "No Dockerfile or docker-compose file found"
        context = f"Looked for {', '.join(candidates)} in {project_path}"
        super().__init__(message, context)
