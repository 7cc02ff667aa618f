"""
Deployment Pipeline

The deployment is an ordered list of steps. Each step receives the current
DeploymentContext and returns a StepResult; the driver stops at the first
fatal result and keeps going on warnings.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Optional

from dockship import remote
from dockship.constants import NGINX_DEFAULT_SITE
from dockship.exceptions import DockshipError, ProxyError
from dockship.logger import DeployLogger
from dockship.models.deployment import DeploymentContext, DeploymentType
from dockship.models.results import SSHResult, StepResult, StepStatus
from dockship.remote import RemoteOperation, template_values
from dockship.services.detector import compose_services, detect_deployment_type
from dockship.services.git_service import GitService
from dockship.services.ssh_service import SSHService


def tail(output: str, lines: int = 5) -> str:
    """Last non-empty lines of command output, for error context."""
    kept = [line for line in output.strip().splitlines() if line.strip()]
    return "\n".join(kept[-lines:])


class PipelineStep(ABC):
    """One stage of the deployment."""

    title: str = ""

    @abstractmethod
    def run(self, context: DeploymentContext, logger: DeployLogger) -> StepResult:
        """Run the step and report its outcome."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.title!r})"


class RemoteStep(PipelineStep):
    """Base for steps that run a remote operation over SSH."""

    def ssh(self, context: DeploymentContext, logger: DeployLogger) -> SSHService:
        return SSHService(context.connection, logger)

    def run_operation(
        self,
        context: DeploymentContext,
        logger: DeployLogger,
        operation: RemoteOperation,
        **extra,
    ) -> SSHResult:
        values = template_values(
            context.params,
            settle_delay=context.settings.settle_delay,
            app_port=context.params.app_port,
        )
        values.update(extra)
        logger.log(
            f"Remote operation '{operation.name}' ({operation.idempotency.value})",
            "DEBUG",
        )
        script = operation.render(**values)
        return self.ssh(context, logger).run_script(script, label=operation.name)


class CloneRepositoryStep(PipelineStep):
    title = "Cloning repository"

    def run(self, context, logger):
        GitService(logger).clone(context.params, context.workdir)
        return StepResult.ok(f"Repository cloned to {context.project_path}")


class DetectDeploymentTypeStep(PipelineStep):
    title = "Verifying Docker configuration files"

    def run(self, context, logger):
        deployment_type = detect_deployment_type(context.project_path)
        message = f"Found {deployment_type.label}"
        if deployment_type is DeploymentType.MULTI_CONTAINER:
            services = compose_services(context.project_path)
            if services:
                message += f" with services: {', '.join(services)}"
        return StepResult.ok(
            message,
            context=replace(context, deployment_type=deployment_type),
        )


class ProbeConnectionStep(RemoteStep):
    title = "Testing SSH connection"

    def run(self, context, logger):
        result = self.run_operation(context, logger, remote.PROBE)
        if result.is_failure:
            return StepResult.fatal(
                f"Failed to connect to {context.connection.connection_string}",
                result.output,
            )
        return StepResult.ok("SSH connection successful", result.output)


class ProvisionStep(RemoteStep):
    title = "Preparing remote server environment"

    def run(self, context, logger):
        result = self.run_operation(context, logger, remote.PROVISION)
        if result.is_failure:
            return StepResult.fatal("Failed to prepare remote environment", result.output)
        return StepResult.ok("Remote environment prepared", result.output)


class DockerGroupStep(RemoteStep):
    title = "Adding user to docker group"

    def run(self, context, logger):
        result = self.run_operation(context, logger, remote.DOCKER_GROUP)
        if result.is_failure:
            return StepResult.warn(
                f"Could not add {context.params.ssh_user} to the docker group",
                result.output,
            )
        return StepResult.ok(f"{context.params.ssh_user} is in the docker group")


class TransferFilesStep(RemoteStep):
    title = "Transferring project files"

    def run(self, context, logger):
        result = self.run_operation(context, logger, remote.PREPARE_DIR)
        if result.is_failure:
            return StepResult.fatal(
                f"Failed to create {context.params.remote_dir}", result.output
            )

        sync = self.ssh(context, logger).sync_directory(
            context.project_path, context.params.remote_dir
        )
        if sync.is_failure:
            return StepResult.fatal("Failed to transfer files", sync.output)
        return StepResult.ok(f"Files transferred to {context.params.remote_dir}")


class DeployApplicationStep(RemoteStep):
    title = "Deploying Dockerized application"

    def run(self, context, logger):
        if context.is_compose:
            result = self.run_operation(context, logger, remote.DEPLOY_COMPOSE)
            if result.is_failure:
                return StepResult.warn(
                    "docker-compose did not complete cleanly; the stack may not be running",
                    result.output,
                )
            return StepResult.ok("Compose stack rebuilt and started", result.output)

        result = self.run_operation(context, logger, remote.DEPLOY_SINGLE)
        if result.is_failure:
            return StepResult.fatal(
                f"Failed to build or run container {context.params.app_name}",
                result.output,
            )
        return StepResult.ok(
            f"Container {context.params.app_name} running on port {context.params.app_port}",
            result.output,
        )


class ConfigureProxyStep(RemoteStep):
    title = "Configuring Nginx reverse proxy"

    def run(self, context, logger):
        app_name = context.params.app_name
        listing = self.run_operation(context, logger, remote.LIST_SITES)
        shadowed = [
            site
            for site in listing.stdout.split()
            if site not in (app_name, NGINX_DEFAULT_SITE)
        ]
        if shadowed:
            # Every site is a catch-all on port 80; the sites cannot coexist
            logger.warning(
                f"Sites already enabled on this host will conflict with {app_name}: "
                f"{', '.join(shadowed)}"
            )

        result = self.run_operation(context, logger, remote.CONFIGURE_PROXY)
        if result.is_failure:
            raise ProxyError("Failed to configure Nginx", context=tail(result.output))
        return StepResult.ok(
            f"Nginx forwards / to localhost:{context.params.app_port}", result.output
        )


class ServiceActiveStep(RemoteStep):
    """Fatal unless a systemd service is active."""

    def __init__(self, service: str, label: str):
        self.service = service
        self.label = label
        self.title = f"Checking {label} service"

    def run(self, context, logger):
        result = self.run_operation(
            context, logger, remote.SERVICE_ACTIVE, service=self.service
        )
        if result.is_failure:
            return StepResult.fatal(f"{self.label} service is not running", result.output)
        return StepResult.ok(f"{self.label} service is active")


class ContainerCheckStep(RemoteStep):
    title = "Checking containers"

    def run(self, context, logger):
        if context.is_compose:
            result = self.run_operation(context, logger, remote.COMPOSE_STATUS)
            if result.is_failure:
                return StepResult.warn("Some containers may not be running", result.output)
            return StepResult.ok("Compose services are up")

        result = self.run_operation(context, logger, remote.CONTAINER_STATUS)
        if result.is_failure:
            return StepResult.fatal(
                f"Container {context.params.app_name} is not running", result.output
            )
        return StepResult.ok(f"Container {context.params.app_name} is up")


class LivenessProbeStep(RemoteStep):
    title = "Testing application endpoint"

    def run(self, context, logger):
        result = self.run_operation(context, logger, remote.LIVENESS)
        if result.is_failure:
            return StepResult.warn("Could not verify application response", result.output)
        return StepResult.ok("Application responded over HTTP")


@dataclass
class PipelineReport:
    """Outcome of a pipeline run."""

    context: DeploymentContext
    results: list[tuple[PipelineStep, StepResult]] = field(default_factory=list)

    @property
    def failed(self) -> Optional[tuple[PipelineStep, StepResult]]:
        """The fatal step and its result, if any."""
        for step, result in self.results:
            if result.is_fatal:
                return step, result
        return None

    @property
    def succeeded(self) -> bool:
        return self.failed is None

    @property
    def warnings(self) -> list[StepResult]:
        return [result for _, result in self.results if result.is_warning]


class Pipeline:
    """Runs steps in order, short-circuiting on the first fatal result."""

    def __init__(self, steps: list[PipelineStep], logger: DeployLogger):
        self.steps = steps
        self.logger = logger

    def run(self, context: DeploymentContext) -> PipelineReport:
        report = PipelineReport(context=context)

        for number, step in enumerate(self.steps, start=1):
            self.logger.step(f"Step {number}/{len(self.steps)}: {step.title}")

            try:
                result = step.run(report.context, self.logger)
            except DockshipError as e:
                result = StepResult(StepStatus.FATAL, e.message, e.context or "")

            report.results.append((step, result))

            if result.context is not None:
                report.context = result.context

            if result.is_fatal:
                self.logger.log_error(result.message, context=tail(result.output) or None)
                break
            if result.is_warning:
                self.logger.warning(result.message)
            else:
                self.logger.success(result.message)

        return report


def build_deploy_pipeline(logger: DeployLogger) -> Pipeline:
    """The deployment sequence, from clone to liveness probe."""
    steps: list[PipelineStep] = [
        CloneRepositoryStep(),
        DetectDeploymentTypeStep(),
        ProbeConnectionStep(),
        ProvisionStep(),
        DockerGroupStep(),
        TransferFilesStep(),
        DeployApplicationStep(),
        ConfigureProxyStep(),
        ServiceActiveStep("docker", "Docker"),
        ContainerCheckStep(),
        ServiceActiveStep("nginx", "Nginx"),
        LivenessProbeStep(),
    ]
    return Pipeline(steps, logger)
