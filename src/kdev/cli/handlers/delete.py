import sys

from kubernetes import client
from rich.console import Console

from ...devpod.reconciler import DevpodReconciler
from ...errors import KdevError
from ..output import print_error


def delete_devpod(
    core_v1: client.CoreV1Api, name: str, namespace: str, with_storage: bool = False
) -> None:
    """
    Delete a devpod's pod and, optionally, its PersistentVolumeClaim.

    The claim is deleted in a second request after the pod is gone, so a
    failure there leaves the pod deleted.
    """
    console = Console()
    reconciler = DevpodReconciler(core_v1)

    try:
        reconciler.delete_pod(name, namespace)
        console.print(f"Pod '{name}' in namespace '{namespace}' deleted.")

        if with_storage:
            reconciler.delete_storage_claim(name, namespace)
            console.print(
                f"PersistentVolumeClaim '{name}' in namespace '{namespace}' deleted."
            )
    except KdevError as e:
        print_error(e)
        sys.exit(1)
