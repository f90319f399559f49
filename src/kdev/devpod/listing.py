from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from kubernetes import client
from kubernetes.client import ApiException

from ..const import DEVPOD_SELECTOR
from ..errors import from_api_exception
from ..utils.time import age_since


@dataclass
class DevpodSummary:
    name: str
    ready: str
    phase: str
    node: str
    age: str


def _summarize(pod: client.V1Pod, now: Optional[datetime]) -> DevpodSummary:
    container_statuses = pod.status.container_statuses or []
    total = len(pod.spec.containers) if pod.spec and pod.spec.containers else len(container_statuses)
    ready = sum(1 for c in container_statuses if c.ready)
    return DevpodSummary(
        name=pod.metadata.name,
        ready=f"{ready}/{total}",
        phase=pod.status.phase or "Unknown",
        node=(pod.spec.node_name if pod.spec else None) or "<none>",
        age=age_since(pod.metadata.creation_timestamp, now),
    )


def list_devpods(
    core_v1: client.CoreV1Api, namespace: str, now: Optional[datetime] = None
) -> List[DevpodSummary]:
    """Lists devpods in a namespace in the order the API returns them."""
    try:
        pods = core_v1.list_namespaced_pod(
            namespace=namespace, label_selector=DEVPOD_SELECTOR
        )
    except ApiException as e:
        raise from_api_exception(e, "Pod", DEVPOD_SELECTOR, namespace) from e
    return [_summarize(pod, now) for pod in pods.items]
