from typing import Optional

from kubernetes import client, watch
from kubernetes.client import ApiException
from rich.status import Status

from ..errors import ClusterError, KdevTimeoutError, from_api_exception


def get_pod_status_message(pod_name: str, pod_status: client.V1PodStatus) -> str:
    """Generates a human-readable status message from a pod's status."""
    if pod_status.container_statuses:
        for container in pod_status.container_statuses:
            if container.state is None:
                continue
            if container.state.waiting:
                return f"Pod '{pod_name}': Container '{container.name}' is {container.state.waiting.reason}..."
            if container.state.terminated:
                reason = (
                    f" ({container.state.terminated.reason})"
                    if container.state.terminated.reason
                    else ""
                )
                return f"Pod '{pod_name}': Container '{container.name}' terminated{reason}."
    if pod_status.phase:
        return f"Pod '{pod_name}' is in phase: {pod_status.phase}"
    return f"Pod '{pod_name}' is in an unknown state."


def _is_ready(pod_status: client.V1PodStatus) -> bool:
    return bool(
        pod_status.phase == "Running"
        and pod_status.container_statuses
        and all(c.ready for c in pod_status.container_statuses)
    )


def wait_for_pod_ready(
    core_v1: client.CoreV1Api,
    name: str,
    namespace: str,
    timeout: int = 300,
    status: Optional[Status] = None,
) -> None:
    """Watches the devpod until it is running and ready."""
    w = watch.Watch()
    try:
        for event in w.stream(
            core_v1.list_namespaced_pod,
            namespace=namespace,
            field_selector=f"metadata.name={name}",
            timeout_seconds=timeout,
        ):
            pod = event["object"]
            pod_status = pod.status

            if _is_ready(pod_status):
                w.stop()
                return

            if pod_status.phase in ("Failed", "Succeeded"):
                w.stop()
                raise ClusterError(
                    "Pod", name, namespace, get_pod_status_message(name, pod_status)
                )

            if status is not None:
                status.update(get_pod_status_message(name, pod_status))
    except ApiException as e:
        raise from_api_exception(e, "Pod", name, namespace) from e

    raise KdevTimeoutError(
        f"Pod '{name}' in namespace '{namespace}' was not ready after {timeout}s"
    )
