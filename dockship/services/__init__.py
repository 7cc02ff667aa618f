"""
Dockship Services Layer

Wrappers around the external tools a deployment drives.
"""

from .ssh_service import SSHService
from .git_service import GitService
from .detector import detect_deployment_type

__all__ = [
    "SSHService",
    "GitService",
    "detect_deployment_type",
]
