from typing import Any, Dict

from ..spec import DevpodSpec


def build_persistent_volume_claim(
    spec: DevpodSpec, labels: Dict[str, str]
) -> Dict[str, Any]:
    """Builds the PersistentVolumeClaim backing the devpod's workspace."""
    return {
        "apiVersion": "v1",
        "kind": "PersistentVolumeClaim",
        "metadata": {
            "name": spec.claim_name,
            "namespace": spec.namespace,
            "labels": dict(labels),
        },
        "spec": {
            "accessModes": ["ReadWriteOnce"],
            "storageClassName": spec.storage_class,
            "resources": {"requests": {"storage": spec.storage_size}},
        },
    }
