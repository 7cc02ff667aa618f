"""
Dockship - UI Components
Standardized header and deployment summary
"""

from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from dockship.constants import CLEANUP_FLAG, CLI_NAME
from dockship.models.deployment import DeploymentContext

BRAND = "dockship"


def show_header(
    title: str,
    subtitle: Optional[str] = None,
    details: Optional[dict] = None,
    console: Optional[Console] = None,
):
    """
    Display a standardized command header.

    Args:
        title: Main title (e.g., "Deploy Application")
        subtitle: Optional subtitle line
        details: Additional key-value pairs to display
        console: Rich Console instance (creates new if None)
    """
    if console is None:
        console = Console()

    prefix = f" [bold color(214)]{BRAND}[/bold color(214)] [dim]›[/dim]"
    console.print(f"{prefix} [bold white]{title}[/bold white]")

    if subtitle:
        console.print(f"{prefix} [dim]{subtitle}[/dim]")

    if details:
        for key, value in details.items():
            console.print(f"{prefix} {key}: [cyan]{escape(str(value))}[/cyan]")

    console.print()


def diagnostic_commands(context: DeploymentContext) -> list[tuple[str, str]]:
    """
    Ready-to-copy commands for inspecting a deployment.

    Returns:
        List of (description, command) pairs
    """
    params = context.params
    ssh = f"ssh -i {params.ssh_key} {params.ssh_user}@{params.server}"

    if context.is_compose:
        logs = f"{ssh} 'cd {params.remote_dir} && docker-compose logs'"
    else:
        logs = f"{ssh} 'docker logs {params.app_name}'"

    return [
        ("To check application status", f"{ssh} 'docker ps'"),
        ("To view application logs", logs),
        ("To cleanup this deployment", f"{CLI_NAME} {CLEANUP_FLAG}"),
    ]


def summary_lines(context: DeploymentContext, log_path: Path) -> list[tuple[str, str]]:
    """Key facts shown after a successful deployment."""
    params = context.params
    return [
        ("Application", params.app_name),
        ("Server", params.server),
        ("Access your application at", f"http://{params.server}"),
        ("Check logs at", str(log_path)),
    ]
