"""
Dockship Domain Models

Clean dataclass-based models for type-safe data handling.
"""

from .results import (
    StepStatus,
    StepResult,
    ExecutionResult,
    SSHResult,
)
from .parameters import (
    DeploymentParameters,
    derive_app_name,
    build_auth_url,
    CleanupTarget,
)
from .ssh import (
    SSHConfig,
    SSHConnection,
)
from .deployment import (
    DeploymentType,
    DeploymentSettings,
    DeploymentContext,
)

__all__ = [
    # Results
    "StepStatus",
    "StepResult",
    "ExecutionResult",
    "SSHResult",
    # Parameters
    "DeploymentParameters",
    "derive_app_name",
    "build_auth_url",
    "CleanupTarget",
    # SSH
    "SSHConfig",
    "SSHConnection",
    # Deployment
    "DeploymentType",
    "DeploymentSettings",
    "DeploymentContext",
]
