"""
Turns a DevpodSpec into the manifests that make up a devpod.
"""
from dataclasses import dataclass
from typing import Any, Dict

from ..const import MARKER_LABEL_KEY, MARKER_LABEL_VALUE, NAME_LABEL_KEY
from .resources import build_persistent_volume_claim, build_pod, build_service_account
from .spec import DevpodSpec


@dataclass(frozen=True)
class DevpodResources:
    storage_claim: Dict[str, Any]
    identity: Dict[str, Any]
    workload: Dict[str, Any]


def build_labels(spec: DevpodSpec) -> Dict[str, str]:
    """User labels, with the marker and name labels always taking precedence."""
    labels = dict(spec.labels)
    labels[MARKER_LABEL_KEY] = MARKER_LABEL_VALUE
    labels[NAME_LABEL_KEY] = spec.name
    return labels


def build_resources(spec: DevpodSpec) -> DevpodResources:
    """
    Builds the StorageClaim, Identity and Workload manifests for a devpod.

    Args:
        spec: The devpod parameters. Only name, image and namespace are required.

    Returns:
        Freshly built manifests; the input spec is left untouched.

    Raises:
        ValidationError: If name, image or namespace is missing.
        InvalidResourceQuantity: If a cpu, memory or storage quantity is malformed.
    """
    spec = spec.with_defaults()
    spec.validate()

    labels = build_labels(spec)
    # The service account may be shared between devpods, so it only carries the marker.
    identity_labels = {MARKER_LABEL_KEY: MARKER_LABEL_VALUE}

    return DevpodResources(
        storage_claim=build_persistent_volume_claim(spec, labels),
        identity=build_service_account(spec, identity_labels),
        workload=build_pod(spec, labels),
    )
