"""
Deploy Command

Collect parameters, run the deployment pipeline and print a summary.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from dockship.base import BaseCommand
from dockship.models.deployment import DeploymentContext, DeploymentSettings
from dockship.pipeline import PipelineReport, build_deploy_pipeline
from dockship.prompts import ParameterCollector
from dockship.ui_components import diagnostic_commands, summary_lines


@dataclass
class DeployOptions:
    """Options for deploy command."""

    settings: DeploymentSettings = field(default_factory=DeploymentSettings)


class DeployCommand(BaseCommand):
    """
    Deploy a containerized application to a remote host.

    Features:
    - Interactive parameter collection
    - Ordered pipeline: clone, detect, provision, transfer, build, proxy, validate
    - Per-run log file with masked access token
    """

    def __init__(
        self,
        options: Optional[DeployOptions] = None,
        verbose: bool = False,
        workdir: Optional[Path] = None,
        console: Optional[Console] = None,
        collector: Optional[ParameterCollector] = None,
    ):
        super().__init__(verbose=verbose, workdir=workdir, console=console)
        self.options = options or DeployOptions()
        self.collector = collector or ParameterCollector(console=self.console)

    def execute(self) -> None:
        """Execute deploy command."""
        self.show_header(
            title="Deploy Application",
            subtitle="Clone, build and publish a Dockerized app behind Nginx",
        )

        logger = self.init_logger("deploy")
        logger.log("Starting deployment")
        logger.step("Collecting deployment parameters")

        params = self.collector.collect()
        logger.add_secret(params.token)
        logger.success(f"Repository name: {params.app_name}")
        logger.log(repr(params))

        context = DeploymentContext(
            params=params, workdir=self.workdir, settings=self.options.settings
        )

        report = build_deploy_pipeline(logger).run(context)

        if not report.succeeded:
            self.print_logs_location()
            raise SystemExit(1)

        self._print_summary(report)

    def _print_summary(self, report: PipelineReport) -> None:
        """Print deployment summary and log it."""
        logger = self.logger
        context = report.context

        logger.step("Deployment successful")
        for label, value in summary_lines(context, logger.log_path):
            logger.log(f"{label}: {value}")
            self.console.print(f"  [dim]{label}:[/dim] [cyan]{escape(value)}[/cyan]")

        if report.warnings:
            logger.log(f"Completed with {len(report.warnings)} warning(s)", "WARNING")
            self.console.print(
                f"\n  [yellow]⚠[/yellow] [dim]Completed with {len(report.warnings)} warning(s)[/dim]"
            )

        for description, command in diagnostic_commands(context):
            logger.log(f"{description}: {command}")
            self.console.print(f"\n  [dim]{description}:[/dim]")
            self.console.print(f"    {command}", style="cyan", markup=False)

        self.console.print()
