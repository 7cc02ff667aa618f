#!/usr/bin/env python3
"""Dockship CLI - Main entry point"""

import functools
import sys

from rich.console import Console

# Rich-Click: CLI help with colors
import rich_click as click

from dockship import __version__
from dockship.commands.cleanup import CleanupCommand
from dockship.commands.deploy import DeployCommand

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = False
click.rich_click.MAX_WIDTH = 100

# COMMANDS: Bold cyan
click.rich_click.STYLE_COMMAND = "bold cyan"

# OPTIONS: Bold magenta
click.rich_click.STYLE_OPTION = "bold magenta"
click.rich_click.STYLE_SWITCH = "bold green"

# HEADERS: Bold cyan
click.rich_click.STYLE_HEADER_TEXT = "bold cyan"
click.rich_click.STYLE_USAGE = "bold yellow"
click.rich_click.STYLE_USAGE_COMMAND = "bold cyan"

# PANEL BORDERS: Cyan
click.rich_click.STYLE_OPTIONS_PANEL_BORDER = "cyan"
click.rich_click.ALIGN_OPTIONS_PANEL = "left"

console = Console()


def handle_cli_errors(func):
    """Decorator to handle CLI errors gracefully."""
    from click.exceptions import ClickException

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ClickException as e:
            e.show()
            sys.exit(e.exit_code)
        except KeyboardInterrupt:
            console.print("\n\n[yellow]⚠️  Operation cancelled by user[/yellow]")
            sys.exit(130)

    return wrapper


@click.command("dockship")
@click.option(
    "--cleanup",
    is_flag=True,
    help="Tear down a previous deployment instead of deploying",
)
@click.option("--verbose", "-v", is_flag=True, help="Show all command output")
@click.version_option(version=__version__, prog_name="dockship")
def cli(cleanup: bool, verbose: bool) -> None:
    """
    Deploy a Dockerized application to a remote server behind Nginx.

    All deployment parameters are prompted for interactively: repository
    URL, access token, branch, SSH user, server, SSH key and app port.

    \b
    Examples:
      dockship              # Clone, build, run and publish on port 80
      dockship --cleanup    # Remove containers, files and Nginx site
      dockship -v           # Stream every command's output
    """
    if cleanup:
        CleanupCommand(verbose=verbose).run()
    else:
        DeployCommand(verbose=verbose).run()


@handle_cli_errors
def main():
    """Main entry point with error handling."""
    cli()


if __name__ == "__main__":
    main()
