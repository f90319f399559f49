from typing import Any, Dict

from ..spec import DevpodSpec


def build_service_account(spec: DevpodSpec, labels: Dict[str, str]) -> Dict[str, Any]:
    """Builds the ServiceAccount the devpod runs as."""
    return {
        "apiVersion": "v1",
        "kind": "ServiceAccount",
        "metadata": {
            "name": spec.service_account,
            "namespace": spec.namespace,
            "labels": dict(labels),
        },
    }
