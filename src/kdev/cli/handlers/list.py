import sys

from kubernetes import client
from rich.console import Console

from ...devpod.listing import list_devpods
from ...errors import KdevError
from ..output import create_devpod_table, print_error


def list_devpods_in_namespace(core_v1: client.CoreV1Api, namespace: str) -> None:
    """Lists all devpods in a given namespace."""
    console = Console()
    console.print(f"Namespace: {namespace}")

    try:
        devpods = list_devpods(core_v1, namespace)
    except KdevError as e:
        print_error(e)
        sys.exit(1)

    if not devpods:
        console.print(f"No pods found in namespace '{namespace}'.")
        return

    console.print(create_devpod_table(devpods))
