import os
from pathlib import Path
from typing import Optional

from kubernetes import client, config
from kubernetes.config import ConfigException

from ..errors import KubeConfigError

DEFAULT_KUBECONFIG_PATH = Path.home() / ".kube" / "config"


def resolve_kubeconfig_path(kubeconfig: Optional[str] = None) -> Path:
    """
    Resolves the kubeconfig file to use.

    An explicit path wins, then the KUBECONFIG environment variable (first
    entry if it lists several), then ~/.kube/config.
    """
    if kubeconfig:
        return Path(kubeconfig).expanduser()
    env_value = os.environ.get("KUBECONFIG")
    if env_value:
        first = env_value.split(os.pathsep)[0]
        if first:
            return Path(first).expanduser()
    return DEFAULT_KUBECONFIG_PATH


def load_core_v1(
    kubeconfig: Optional[str] = None, context: Optional[str] = None
) -> client.CoreV1Api:
    """
    Builds a CoreV1Api from kubeconfig credentials.

    The client owns its own ApiClient, so the kubernetes package's global
    default configuration is left untouched.
    """
    path = resolve_kubeconfig_path(kubeconfig)
    if not path.is_file():
        raise KubeConfigError(f"Kubernetes configuration not found at '{path}'")
    try:
        api_client = config.new_client_from_config(
            config_file=str(path), context=context
        )
    except (ConfigException, ValueError, TypeError) as e:
        raise KubeConfigError(
            f"Could not load Kubernetes configuration from '{path}': {e}"
        ) from e
    return client.CoreV1Api(api_client)
