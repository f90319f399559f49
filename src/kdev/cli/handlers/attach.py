import sys
from typing import Optional

from kubernetes import client

from ...attach.session import AttachSession
from ...errors import KdevError
from ..output import print_error

# 128 + SIGINT, as a shell reports it.
INTERRUPTED_EXIT_CODE = 130


def attach_devpod(
    core_v1: client.CoreV1Api,
    name: str,
    namespace: str,
    shell: str,
    container: Optional[str] = None,
) -> None:
    """Attach an interactive shell to a devpod, exiting with the shell's exit code."""
    session = AttachSession(
        core_v1, name, namespace, shell=shell, container=container
    )
    try:
        exit_code = session.run()
    except KdevError as e:
        print_error(e)
        sys.exit(1)
    except KeyboardInterrupt:
        # The session has already closed the connection.
        sys.exit(INTERRUPTED_EXIT_CODE)

    if exit_code:
        sys.exit(exit_code)
