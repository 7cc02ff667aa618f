"""
SSH Configuration Models

Dataclass models for SSH operations.
"""

from dataclasses import dataclass
from pathlib import Path

from dockship.constants import SSH_CONNECT_TIMEOUT


@dataclass
class SSHConfig:
    """SSH credentials for the target host."""

    key_path: str
    user: str

    @property
    def key_path_expanded(self) -> Path:
        """Get expanded key path (resolves ~)."""
        return Path(self.key_path).expanduser()

    def __repr__(self) -> str:
        return f"SSHConfig(user={self.user}, key={self.key_path})"


@dataclass
class SSHConnection:
    """SSH connection details for a specific host."""

    host: str
    config: SSHConfig
    connect_timeout: int = SSH_CONNECT_TIMEOUT

    @property
    def connection_string(self) -> str:
        """Get SSH connection string (user@host)."""
        return f"{self.config.user}@{self.host}"

    @property
    def ssh_options(self) -> list[str]:
        """Options shared by ssh sessions and rsync's remote shell."""
        return [
            "-i",
            str(self.config.key_path_expanded),
            "-o",
            "StrictHostKeyChecking=no",
            "-o",
            f"ConnectTimeout={self.connect_timeout}",
        ]

    @property
    def ssh_command_prefix(self) -> list[str]:
        """Get SSH command prefix for subprocess."""
        return ["ssh", *self.ssh_options, self.connection_string]

    def build_command(self, remote_command: str) -> list[str]:
        """Build full SSH command with remote command."""
        return self.ssh_command_prefix + [remote_command]

    def __repr__(self) -> str:
        return f"SSHConnection(host={self.host}, user={self.config.user})"
