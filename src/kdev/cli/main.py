import sys
from pathlib import Path
from typing import Optional

import click
from kubernetes import client

from .. import __version__
from ..const import CONTAINER_NAME
from ..devpod.spec import DevpodSpec
from ..errors import KdevError
from . import handlers
from .config import get_default_config_path, load_config
from .output import configure_logging, print_error
from .utils import load_core_v1


def _core_v1(ctx: click.Context) -> client.CoreV1Api:
    """Builds the cluster client once per invocation."""
    if ctx.obj.get("CORE_V1") is None:
        try:
            ctx.obj["CORE_V1"] = load_core_v1(
                ctx.obj["KUBECONFIG"], ctx.obj["CONTEXT"]
            )
        except KdevError as e:
            print_error(e)
            sys.exit(1)
    return ctx.obj["CORE_V1"]


@click.group()
@click.version_option(version=__version__)
@click.option(
    "-n", "--namespace", type=str, default=None, help="Kubernetes namespace (default dev)."
)
@click.option(
    "--kubeconfig",
    type=str,
    default=None,
    help="Path to the kubeconfig file (default $KUBECONFIG or ~/.kube/config).",
)
@click.option("--context", type=str, default=None, help="Kubeconfig context to use.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to the kdev config file.",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output.")
@click.pass_context
def main(
    ctx: click.Context,
    namespace: Optional[str],
    kubeconfig: Optional[str],
    context: Optional[str],
    config_path: Optional[Path],
    verbose: bool,
) -> None:
    """Spin up, attach to, and clean up dev pods in Kubernetes."""
    ctx.ensure_object(dict)
    configure_logging(verbose)

    try:
        configuration = load_config(config_path or get_default_config_path())
    except KdevError as e:
        print_error(e)
        sys.exit(1)

    ctx.obj["CONFIG"] = configuration
    ctx.obj["NAMESPACE"] = namespace or configuration.namespace
    ctx.obj["KUBECONFIG"] = kubeconfig
    ctx.obj["CONTEXT"] = context
    ctx.obj.setdefault("CORE_V1", None)


@main.command(help="Create a dev pod with its PVC and service account.")
@click.option("--name", type=str, required=True, help="Pod name.")
@click.option("--image", type=str, required=True, help="Container image.")
@click.option(
    "--service-account", type=str, default=None, help="ServiceAccount name (default dev-vscode)."
)
@click.option("--pvc", type=str, default=None, help="PVC name to mount (default: same as name).")
@click.option("--workdir", type=str, default=None, help="Workspace directory inside the container.")
@click.option("--label", "labels", multiple=True, help="Extra labels key=value (repeatable).")
@click.option("--env", "envs", multiple=True, help="Env vars KEY=VALUE (repeatable).")
@click.option("--cpu", type=str, default=None, help="CPU request/limit, e.g. 500m.")
@click.option("--memory", type=str, default=None, help="Memory request/limit, e.g. 1Gi.")
@click.option("--node", "node_selector", multiple=True, help="Node selector key=value (repeatable).")
@click.option("--shell", type=str, default=None, help="Login shell inside the container.")
@click.option("--storage-class", type=str, default=None, help="StorageClass for the PVC.")
@click.option("--storage-size", type=str, default=None, help="Size of the PVC, e.g. 10Gi.")
@click.option("--wait", is_flag=True, help="Wait for the pod to be ready.")
@click.option("--timeout", type=int, default=300, help="Seconds to wait with --wait.")
@click.pass_context
def up(
    ctx: click.Context,
    name: str,
    image: str,
    service_account: Optional[str],
    pvc: Optional[str],
    workdir: Optional[str],
    labels: tuple[str, ...],
    envs: tuple[str, ...],
    cpu: Optional[str],
    memory: Optional[str],
    node_selector: tuple[str, ...],
    shell: Optional[str],
    storage_class: Optional[str],
    storage_size: Optional[str],
    wait: bool,
    timeout: int,
) -> None:
    configuration = ctx.obj["CONFIG"]
    spec = DevpodSpec.from_options(
        name=name,
        image=image,
        namespace=ctx.obj["NAMESPACE"],
        service_account=service_account or configuration.service_account,
        claim_name=pvc,
        workdir=workdir or configuration.workdir,
        cpu_limit=cpu,
        mem_limit=memory,
        labels=labels,
        env=envs,
        node_selector=node_selector,
        shell=shell or configuration.shell,
        storage_class=storage_class or configuration.storage_class,
        storage_size=storage_size or configuration.storage_size,
    )
    handlers.up_devpod(_core_v1(ctx), spec, wait=wait, timeout=timeout)


@main.command(help="Attach an interactive shell to the dev pod.")
@click.option("--name", type=str, required=True, help="Pod name.")
@click.option("--shell", type=str, default=None, help="Shell to start inside the container.")
@click.option(
    "--container", type=str, default=CONTAINER_NAME, help="Container to attach to."
)
@click.pass_context
def attach(ctx: click.Context, name: str, shell: Optional[str], container: str) -> None:
    handlers.attach_devpod(
        _core_v1(ctx),
        name=name,
        namespace=ctx.obj["NAMESPACE"],
        shell=shell or ctx.obj["CONFIG"].shell,
        container=container,
    )


@main.command(name="ls", help="List dev pods in the namespace.")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    handlers.list_devpods_in_namespace(_core_v1(ctx), ctx.obj["NAMESPACE"])


@main.command(help="Delete a dev pod (optionally its PVC).")
@click.option("--name", type=str, required=True, help="Pod name.")
@click.option("--with-pvc", is_flag=True, help="Also delete the PVC named like the pod.")
@click.pass_context
def rm(ctx: click.Context, name: str, with_pvc: bool) -> None:
    handlers.delete_devpod(
        _core_v1(ctx), name=name, namespace=ctx.obj["NAMESPACE"], with_storage=with_pvc
    )


if __name__ == "__main__":
    main()
