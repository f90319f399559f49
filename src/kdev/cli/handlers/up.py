import sys

from kubernetes import client
from rich.console import Console
from rich.status import Status

from ...devpod.builder import build_resources
from ...devpod.reconciler import DevpodReconciler
from ...devpod.spec import DevpodSpec
from ...devpod.wait import wait_for_pod_ready
from ...errors import KdevError
from ..output import print_error


def up_devpod(
    core_v1: client.CoreV1Api,
    spec: DevpodSpec,
    wait: bool = False,
    timeout: int = 300,
) -> None:
    """Creates the claim, service account and pod for a devpod."""
    console = Console()

    try:
        resources = build_resources(spec)
        DevpodReconciler(core_v1).apply(resources)

        console.print(
            f"\nPod {spec.name} applied in ns/{spec.namespace}. "
            f"Use 'kdev attach --name {spec.name} -n {spec.namespace}' to enter."
        )

        if wait:
            with Status(
                f"Waiting for pod '{spec.name}' to be ready...", console=console
            ) as status:
                wait_for_pod_ready(
                    core_v1, spec.name, spec.namespace, timeout=timeout, status=status
                )
            console.print(f"✅ Pod '{spec.name}' is ready.")
    except KdevError as e:
        print_error(e)
        sys.exit(1)
