"""Well-known names and defaults shared across kdev."""

DEFAULT_NAMESPACE = "dev"
DEFAULT_SERVICE_ACCOUNT = "dev-vscode"
DEFAULT_WORKDIR = "/workspaces"
DEFAULT_SHELL = "/bin/bash"
DEFAULT_STORAGE_CLASS = "standard"
DEFAULT_STORAGE_SIZE = "10Gi"

# Labels stamped on every devpod resource
MARKER_LABEL_KEY = "app"
MARKER_LABEL_VALUE = "kdev"
NAME_LABEL_KEY = "kdev/name"
DEVPOD_SELECTOR = f"{MARKER_LABEL_KEY}={MARKER_LABEL_VALUE}"

CONTAINER_NAME = "dev"
WORKSPACE_VOLUME_NAME = "workspace"
IDLE_COMMAND = ["sleep", "infinity"]

RUN_AS_USER = 1000
RUN_AS_GROUP = 1000
