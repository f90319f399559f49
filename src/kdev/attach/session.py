"""
Interactive exec sessions against a running devpod.

The session upgrades a request to the pod's exec subresource into a
multiplexed websocket (one logical channel each for stdin, stdout, stderr,
the exit status and terminal resizes) and pumps bytes between the channels
and the local standard streams until either side closes.
"""
import enum
import functools
import json
import logging
import os
import select
import sys
import threading
import time
from typing import Any, BinaryIO, Callable, List, Optional

import yaml
from kubernetes import client
from kubernetes.client import ApiException
from kubernetes.stream import ws_client
from kubernetes.stream.stream import _websocket_request
from kubernetes.stream.ws_client import (
    ERROR_CHANNEL,
    RESIZE_CHANNEL,
    STDERR_CHANNEL,
    STDOUT_CHANNEL,
)

from ..const import CONTAINER_NAME, DEFAULT_SHELL
from ..errors import AttachError, TransportError, from_api_exception
from . import terminal

POLL_INTERVAL = 0.1
READ_SIZE = 4096
STATUS_GRACE_POLLS = 10

# Same as kubernetes.stream.stream, except the client does not keep its own copy
# of every stdout and stderr byte for the lifetime of the session.
exec_websocket_call = functools.partial(ws_client.websocket_call, capture_all=False)
stream = functools.partial(_websocket_request, exec_websocket_call, None)


class SessionState(enum.Enum):
    REQUESTING = "Requesting"
    CONNECTING = "Connecting"
    STREAMING = "Streaming"
    CLOSED = "Closed"


def parse_exit_status(raw: Any) -> int:
    """
    Parses the status document the API server sends on the error channel.

    Returns the remote exit code. Raises AttachError when the command could
    not be run at all (for example, the shell does not exist in the image).
    """
    status = yaml.safe_load(raw)
    if not isinstance(status, dict):
        raise AttachError(f"Unexpected exec status: {raw!r}")

    if status.get("status") == "Success":
        return 0

    if status.get("reason") == "NonZeroExitCode":
        causes = (status.get("details") or {}).get("causes") or []
        for cause in causes:
            if cause.get("reason") == "ExitCode":
                return int(cause["message"])

    raise AttachError(status.get("message") or "Remote command failed to start")


class AttachSession:
    """A single interactive shell session inside a devpod's container."""

    def __init__(
        self,
        core_v1: client.CoreV1Api,
        name: str,
        namespace: str,
        shell: str = DEFAULT_SHELL,
        container: Optional[str] = CONTAINER_NAME,
        stdin: Optional[BinaryIO] = None,
        stdout: Optional[BinaryIO] = None,
        stderr: Optional[BinaryIO] = None,
        logger: Optional[logging.Logger] = None,
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        self.core_v1 = core_v1
        self.name = name
        self.namespace = namespace
        self.shell = shell
        self.container = container
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.stdout = stdout if stdout is not None else sys.stdout.buffer
        self.stderr = stderr if stderr is not None else sys.stderr.buffer
        self.logger = logger or logging.getLogger(__name__)
        self.poll_interval = poll_interval

        self.state = SessionState.REQUESTING
        self._ws: Any = None
        self._stop = threading.Event()
        # stdout and stderr pumps both drive the websocket reader
        self._read_lock = threading.Lock()
        self._failures: List[BaseException] = []
        self._remote_closed = False

    def run(self) -> int:
        """
        Runs the session to completion.

        Returns:
            The exit code of the remote shell.

        Raises:
            NotFound: If the pod does not exist.
            AttachError: If the pod is not running, the upgrade is rejected or
                the shell cannot be started.
            TransportError: If the connection drops while streaming.
        """
        try:
            self._check_pod()
            self._connect()
            stdin_fd = self.stdin.fileno()
            with terminal.raw_mode(stdin_fd), terminal.on_resize(self._send_terminal_size):
                self._send_terminal_size()
                self._stream()
            return self._exit_code()
        finally:
            self.close()

    def close(self) -> None:
        self._stop.set()
        if self._ws is not None:
            self._ws.close()
        self._transition(SessionState.CLOSED)

    def _transition(self, state: SessionState) -> None:
        if self.state is not state:
            self.logger.debug(
                "Attach session to pod '%s': %s -> %s",
                self.name,
                self.state.value,
                state.value,
            )
            self.state = state

    def _check_pod(self) -> None:
        self._transition(SessionState.REQUESTING)
        try:
            pod = self.core_v1.read_namespaced_pod(
                name=self.name, namespace=self.namespace
            )
        except ApiException as e:
            raise from_api_exception(e, "Pod", self.name, self.namespace) from e

        phase = pod.status.phase if pod.status else None
        if phase != "Running":
            raise AttachError(
                f"Pod '{self.name}' in namespace '{self.namespace}' is not running "
                f"(phase: {phase or 'Unknown'})"
            )

    def _connect(self) -> None:
        self._transition(SessionState.CONNECTING)
        kwargs = dict(
            command=[self.shell],
            stdin=True,
            stdout=True,
            stderr=True,
            tty=True,
            _preload_content=False,
            binary=True,
        )
        if self.container:
            kwargs["container"] = self.container

        try:
            self._ws = stream(
                self.core_v1.connect_get_namespaced_pod_exec,
                self.name,
                self.namespace,
                **kwargs,
            )
        except ApiException as e:
            raise AttachError(
                f"Could not open a session to pod '{self.name}' in namespace "
                f"'{self.namespace}': {e.reason or e}"
            ) from e
        self.logger.info(
            "Exec session to pod '%s' opened with shell '%s'", self.name, self.shell
        )

    def _send_terminal_size(self) -> None:
        size = terminal.terminal_size(self.stdin.fileno())
        if size is None or self._ws is None or not self._ws.is_open():
            return
        columns, lines = size
        self._ws.write_channel(
            RESIZE_CHANNEL, json.dumps({"Width": columns, "Height": lines})
        )

    def _stream(self) -> None:
        self._transition(SessionState.STREAMING)
        pumps = [
            ("stdin", self._pump_input),
            ("stdout", lambda: self._pump_channel(STDOUT_CHANNEL, self.stdout)),
            ("stderr", lambda: self._pump_channel(STDERR_CHANNEL, self.stderr)),
        ]
        threads = [
            threading.Thread(
                target=self._run_pump,
                args=(pump,),
                name=f"kdev-attach-{label}",
                daemon=True,
            )
            for label, pump in pumps
        ]
        for thread in threads:
            thread.start()

        try:
            while not self._stop.wait(self.poll_interval):
                pass
        finally:
            self._stop.set()
            for thread in threads:
                thread.join(timeout=self.poll_interval * 10)
            self._remote_closed = not self._ws.is_open()

    def _run_pump(self, pump: Callable[[], None]) -> None:
        """Runs one pump; the first one to return or fail stops the others."""
        try:
            pump()
        except Exception as e:
            self.logger.debug("Attach pump failed: %s", e)
            self._failures.append(e)
        finally:
            self._stop.set()

    def _pump_input(self) -> None:
        fd = self.stdin.fileno()
        while not self._stop.is_set():
            readable, _, _ = select.select([fd], [], [], self.poll_interval)
            if not readable:
                continue
            data = os.read(fd, READ_SIZE)
            if not data:
                self.logger.debug("Local stdin reached EOF")
                return
            self._ws.write_stdin(data)

    def _pump_channel(self, channel: int, sink: BinaryIO) -> None:
        while not self._stop.is_set():
            with self._read_lock:
                data = self._ws.read_channel(channel)
                if not data:
                    if not self._ws.is_open():
                        return
                    self._ws.update(timeout=self.poll_interval)
                    data = self._ws.read_channel(channel)
            if data:
                self._write(sink, data)

    def _read_buffered(self, channel: int) -> Any:
        """Reads a channel after streaming; a broken transport counts as a failure."""
        try:
            return self._ws.read_channel(channel)
        except Exception as e:
            self._failures.append(e)
            return ""

    def _await_status(self) -> None:
        """Gives the status frame a short grace period to arrive after a failure."""
        deadline = time.monotonic() + self.poll_interval * STATUS_GRACE_POLLS
        while self._ws.is_open() and time.monotonic() < deadline:
            try:
                if self._ws.peek_channel(ERROR_CHANNEL):
                    return
                self._ws.update(timeout=self.poll_interval)
            except Exception as e:
                self._failures.append(e)
                return

    def _drain(self, channel: int, sink: BinaryIO) -> None:
        data = self._read_buffered(channel)
        if data:
            self._write(sink, data)

    @staticmethod
    def _write(sink: BinaryIO, data: Any) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        sink.write(data)
        sink.flush()

    def _exit_code(self) -> int:
        """
        Resolves the session's outcome once the pumps have stopped.

        A reported exit status always wins, including over a failed write
        that raced the remote shell exiting.
        """
        with self._read_lock:
            if self._failures:
                self._await_status()
            raw = self._read_buffered(ERROR_CHANNEL)
            self._drain(STDOUT_CHANNEL, self.stdout)
            self._drain(STDERR_CHANNEL, self.stderr)

        if raw:
            if self._failures:
                self.logger.debug(
                    "Ignoring transport failure after exit status: %s", self._failures[0]
                )
            return parse_exit_status(raw)
        if self._failures:
            failure = self._failures[0]
            raise TransportError(
                f"Connection to pod '{self.name}' in namespace '{self.namespace}' "
                f"was lost: {failure}"
            ) from failure
        if self._remote_closed:
            raise TransportError(
                f"Connection to pod '{self.name}' in namespace '{self.namespace}' "
                "closed before the remote shell reported an exit status"
            )
        # The local side ended the session (stdin closed) while the shell was still running.
        return 0
