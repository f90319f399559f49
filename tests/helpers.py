import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from kubernetes import client

POLL_INTERVAL = 0.01

CREATED_AT = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def api_exception(status: int, reason: str = "") -> client.ApiException:
    """A real ApiException with the given HTTP status."""
    reasons = {404: "Not Found", 409: "Conflict", 403: "Forbidden", 500: "Internal Server Error"}
    return client.ApiException(status=status, reason=reason or reasons.get(status, "Error"))


def make_pod(
    name: str,
    phase: str = "Running",
    ready: Iterable[bool] = (True,),
    node: Optional[str] = "node-1",
    created: Optional[datetime] = CREATED_AT,
) -> client.V1Pod:
    ready = list(ready)
    return client.V1Pod(
        metadata=client.V1ObjectMeta(
            name=name,
            namespace="dev",
            labels={"app": "kdev", "kdev/name": name},
            creation_timestamp=created,
        ),
        spec=client.V1PodSpec(
            containers=[client.V1Container(name="dev", image="registry.local/img:latest")],
            node_name=node,
        ),
        status=client.V1PodStatus(
            phase=phase,
            container_statuses=[
                client.V1ContainerStatus(
                    name="dev",
                    image="registry.local/img:latest",
                    image_id="",
                    ready=r,
                    restart_count=0,
                )
                for r in ready
            ],
        ),
    )


class FakeWSClient:
    """
    Stands in for kubernetes.stream.ws_client.WSClient.

    Each update() delivers one pending (channel, data) frame. Once the frames
    run out the connection closes, unless stay_open is set, in which case
    update() just waits out its timeout like an idle socket. Writes to a closed
    connection raise. With close_on_write, the server hangs up as the first
    write arrives; frames it already sent stay readable.
    """

    def __init__(
        self,
        frames: Iterable[Tuple[int, Any]] = (),
        stay_open: bool = False,
        fail_with: Optional[Exception] = None,
        close_on_write: bool = False,
    ) -> None:
        self._pending: List[Tuple[int, Any]] = list(frames)
        self._channels: Dict[int, Any] = {}
        self._open = True
        self.stay_open = stay_open
        self.fail_with = fail_with
        self.close_on_write = close_on_write
        self.written: List[Tuple[int, Any]] = []
        self.closed = False

    def is_open(self) -> bool:
        return self._open

    def update(self, timeout: float = 0) -> None:
        if not self._open:
            return
        if self.fail_with is not None:
            raise self.fail_with
        if self._pending:
            channel, data = self._pending.pop(0)
            self._channels[channel] = self._channels.get(channel, b"") + data
        elif self.stay_open:
            time.sleep(timeout)
        else:
            self._open = False

    def peek_channel(self, channel: int, timeout: float = 0) -> Any:
        if channel not in self._channels:
            self.update(timeout)
        return self._channels.get(channel, "")

    def read_channel(self, channel: int, timeout: float = 0) -> Any:
        if channel not in self._channels:
            self.update(timeout)
        return self._channels.pop(channel, "")

    def write_channel(self, channel: int, data: Any) -> None:
        if self.close_on_write:
            while self._pending:
                pending_channel, pending_data = self._pending.pop(0)
                self._channels[pending_channel] = (
                    self._channels.get(pending_channel, b"") + pending_data
                )
            self._open = False
        if not self._open:
            raise ConnectionResetError("socket is already closed.")
        self.written.append((channel, data))

    def write_stdin(self, data: Any) -> None:
        self.write_channel(0, data)

    def close(self, **kwargs: Any) -> None:
        self._open = False
        self.closed = True


class Pipe:
    """An OS pipe standing in for the caller's stdin."""

    def __init__(self) -> None:
        read_fd, self.write_fd = os.pipe()
        self.reader = os.fdopen(read_fd, "rb", buffering=0)

    def feed(self, data: bytes) -> None:
        os.write(self.write_fd, data)

    def close_writer(self) -> None:
        if self.write_fd is not None:
            os.close(self.write_fd)
            self.write_fd = None

    def close(self) -> None:
        self.close_writer()
        self.reader.close()
