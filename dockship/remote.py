"""
Remote Operations

Named remote command batches. Each operation renders a bash script from
dockship/templates and is sent to the host as one SSH invocation.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path

from jinja2 import Template

from dockship.constants import (
    COMPOSE_FILE_NAMES,
    NGINX_DEFAULT_SITE,
    NGINX_SITES_AVAILABLE,
    NGINX_SITES_ENABLED,
    PROXY_PORT,
)

TEMPLATES_DIR = Path(__file__).parent / "templates"


class Idempotency(Enum):
    """What repeating an operation does to the remote host."""

    READ_ONLY = "read-only"
    SAFE = "safe to repeat"
    SAFE_IF_DONE = "skips work already done"
    DESTRUCTIVE_REPLACE = "replaces existing state"


@lru_cache(maxsize=None)
def load_template(name: str) -> Template:
    """
    Load a Jinja2 template from the templates directory.

    Args:
        name: Template file name

    Returns:
        Jinja2 Template instance
    """
    template_path = TEMPLATES_DIR / name
    if not template_path.exists():
        raise FileNotFoundError(f"Template not found: {template_path}")

    return Template(template_path.read_text())


@dataclass(frozen=True)
class RemoteOperation:
    """A named remote command batch."""

    name: str
    template: str
    idempotency: Idempotency
    description: str = ""

    def render(self, **values) -> str:
        """Render the script with the given template values."""
        return load_template(self.template).render(**values)


PROBE = RemoteOperation(
    "probe", "probe.sh.j2", Idempotency.READ_ONLY, "Check SSH connectivity"
)
PROVISION = RemoteOperation(
    "provision",
    "provision.sh.j2",
    Idempotency.SAFE_IF_DONE,
    "Install docker, docker-compose and nginx when missing; start and enable services",
)
DOCKER_GROUP = RemoteOperation(
    "docker-group",
    "docker_group.sh.j2",
    Idempotency.SAFE,
    "Add the remote user to the docker group",
)
PREPARE_DIR = RemoteOperation(
    "prepare-dir", "prepare_dir.sh.j2", Idempotency.SAFE, "Create the project directory"
)
DEPLOY_COMPOSE = RemoteOperation(
    "deploy-compose",
    "deploy_compose.sh.j2",
    Idempotency.DESTRUCTIVE_REPLACE,
    "Tear down and rebuild the docker-compose stack",
)
DEPLOY_SINGLE = RemoteOperation(
    "deploy-single",
    "deploy_single.sh.j2",
    Idempotency.DESTRUCTIVE_REPLACE,
    "Replace the container and image built from the Dockerfile",
)
LIST_SITES = RemoteOperation(
    "list-sites", "list_sites.sh.j2", Idempotency.READ_ONLY, "List enabled nginx sites"
)
CONFIGURE_PROXY = RemoteOperation(
    "configure-proxy",
    "configure_proxy.sh.j2",
    Idempotency.DESTRUCTIVE_REPLACE,
    "Write, enable, test and reload the nginx site",
)
SERVICE_ACTIVE = RemoteOperation(
    "service-active",
    "service_active.sh.j2",
    Idempotency.READ_ONLY,
    "Check that a systemd service is active",
)
COMPOSE_STATUS = RemoteOperation(
    "compose-status",
    "compose_status.sh.j2",
    Idempotency.READ_ONLY,
    "Check that the compose stack has running services",
)
CONTAINER_STATUS = RemoteOperation(
    "container-status",
    "container_status.sh.j2",
    Idempotency.READ_ONLY,
    "Check that the named container is running",
)
LIVENESS = RemoteOperation(
    "liveness",
    "liveness.sh.j2",
    Idempotency.READ_ONLY,
    "HTTP probe on the app port, then the proxy port",
)
CLEANUP = RemoteOperation(
    "cleanup",
    "cleanup.sh.j2",
    Idempotency.DESTRUCTIVE_REPLACE,
    "Remove containers, images, files and nginx site of an application",
)


def render_site_config(app_port: int, proxy_port: int = PROXY_PORT) -> str:
    """Render the nginx site forwarding every path to the app port."""
    return load_template("nginx_site.conf.j2").render(
        app_port=app_port, proxy_port=proxy_port
    )


def template_values(target, settle_delay: int = 0, app_port: int = 0) -> dict:
    """
    Build the values shared by every remote template.

    Args:
        target: DeploymentParameters or CleanupTarget
        settle_delay: Seconds to wait after starting containers
        app_port: Application port (0 when not known, as in cleanup)

    Returns:
        Dict of template values
    """
    values = {
        "app_name": target.app_name,
        "remote_dir": target.remote_dir,
        "image_tag": target.image_tag,
        "app_port": app_port,
        "proxy_port": PROXY_PORT,
        "settle_delay": settle_delay,
        "sites_available": NGINX_SITES_AVAILABLE,
        "sites_enabled": NGINX_SITES_ENABLED,
        "default_site": NGINX_DEFAULT_SITE,
        "compose_files": COMPOSE_FILE_NAMES,
    }
    if app_port:
        values["site_config"] = render_site_config(app_port)
    return values
