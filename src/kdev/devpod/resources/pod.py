from typing import Any, Dict, List

from ...const import (
    CONTAINER_NAME,
    IDLE_COMMAND,
    RUN_AS_GROUP,
    RUN_AS_USER,
    WORKSPACE_VOLUME_NAME,
)
from ..spec import DevpodSpec


def _build_resources(spec: DevpodSpec) -> Dict[str, Any]:
    """Requests and limits are set to the same quantities."""
    quantities = {}
    if spec.cpu_limit:
        quantities["cpu"] = spec.cpu_limit
    if spec.mem_limit:
        quantities["memory"] = spec.mem_limit
    if not quantities:
        return {}
    return {"requests": dict(quantities), "limits": dict(quantities)}


def _build_env(spec: DevpodSpec) -> List[Dict[str, str]]:
    return [{"name": key, "value": value} for key, value in spec.env]


def build_pod(spec: DevpodSpec, labels: Dict[str, str]) -> Dict[str, Any]:
    """Builds the long-lived Pod for the devpod."""
    container: Dict[str, Any] = {
        "name": CONTAINER_NAME,
        "image": spec.image,
        "command": list(IDLE_COMMAND),
        "workingDir": spec.workdir,
        "env": _build_env(spec),
        "resources": _build_resources(spec),
        "securityContext": {
            "runAsNonRoot": True,
            "allowPrivilegeEscalation": False,
            "capabilities": {"drop": ["ALL"]},
        },
        "volumeMounts": [
            {"name": WORKSPACE_VOLUME_NAME, "mountPath": spec.workdir},
        ],
    }

    pod_spec: Dict[str, Any] = {
        "serviceAccountName": spec.service_account,
        "securityContext": {
            "runAsNonRoot": True,
            "runAsUser": RUN_AS_USER,
            "runAsGroup": RUN_AS_GROUP,
            "fsGroup": RUN_AS_GROUP,
            "seccompProfile": {"type": "RuntimeDefault"},
        },
        "nodeSelector": dict(spec.node_selector),
        "containers": [container],
        "volumes": [
            {
                "name": WORKSPACE_VOLUME_NAME,
                "persistentVolumeClaim": {"claimName": spec.claim_name},
            }
        ],
    }

    # Remove nodeSelector if it is empty
    if not pod_spec["nodeSelector"]:
        del pod_spec["nodeSelector"]

    return {
        "apiVersion": "v1",
        "kind": "Pod",
        "metadata": {
            "name": spec.name,
            "namespace": spec.namespace,
            "labels": dict(labels),
        },
        "spec": pod_spec,
    }
