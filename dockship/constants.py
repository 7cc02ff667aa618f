"""
Dockship Constants

Centralized defaults for prompts, SSH sessions, remote layout and nginx.
"""

# Prompt Defaults
DEFAULT_BRANCH = "main"
DEFAULT_SSH_KEY_PATH = "~/.ssh/id_rsa"

# SSH Configuration
SSH_CONNECT_TIMEOUT = 10

# Remote Layout
REMOTE_DEPLOYMENTS_DIR = "~/deployments"

# Container Settle Delay (seconds to wait after start before reporting status)
CONTAINER_SETTLE_DELAY = 10

# Build Descriptors (checked in this order, first match wins)
DOCKERFILE_NAME = "Dockerfile"
COMPOSE_FILE_NAMES = ("docker-compose.yml", "docker-compose.yaml")

# Nginx Configuration
NGINX_SITES_AVAILABLE = "/etc/nginx/sites-available"
NGINX_SITES_ENABLED = "/etc/nginx/sites-enabled"
NGINX_DEFAULT_SITE = "default"
PROXY_PORT = 80

# Files excluded from the rsync mirror
RSYNC_EXCLUDES = (".git",)

# Log Configuration
LOG_FILE_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
LOG_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Entry point name shown in summaries
CLI_NAME = "dockship"
CLEANUP_FLAG = "--cleanup"
