"""
Custom exception types for kdev.
"""
from typing import Optional

from kubernetes.client.exceptions import ApiException


class KdevError(Exception):
    """Base exception for all kdev errors."""
    pass


class ValidationError(KdevError):
    """Raised when required identifying fields of a devpod are missing."""
    pass


class InvalidResourceQuantity(KdevError):
    """Raised when a cpu, memory or storage quantity cannot be parsed."""

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"invalid {field} quantity '{value}'")


class KubeConfigError(KdevError):
    """Raised when the Kubernetes configuration cannot be loaded."""
    pass


class ResourceError(KdevError):
    """A failed request against a single cluster resource."""

    def __init__(
        self,
        kind: str,
        name: str,
        namespace: str,
        cause: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.namespace = namespace
        self.cause = cause
        super().__init__(self._format())

    def _describe(self) -> str:
        return "request failed"

    def _format(self) -> str:
        message = f"{self.kind} '{self.name}' in namespace '{self.namespace}': {self._describe()}"
        if self.cause:
            message += f" ({self.cause})"
        return message


class AlreadyExists(ResourceError):
    def _describe(self) -> str:
        return "already exists"


class NotFound(ResourceError):
    def _describe(self) -> str:
        return "not found"


class ClusterError(ResourceError):
    pass


class AttachError(KdevError):
    """Raised when an exec session cannot be established or the remote command fails to start."""
    pass


class TransportError(KdevError):
    """Raised when the exec connection drops while streaming."""
    pass


class KdevTimeoutError(KdevError):
    """Raised when waiting for a devpod exceeds its deadline."""
    pass


def from_api_exception(
    exc: ApiException, kind: str, name: str, namespace: str
) -> ResourceError:
    """Maps an ApiException onto the kdev error taxonomy."""
    cause = exc.reason or str(exc)
    if exc.status == 409:
        return AlreadyExists(kind, name, namespace, cause)
    if exc.status == 404:
        return NotFound(kind, name, namespace, cause)
    return ClusterError(kind, name, namespace, f"HTTP {exc.status}: {cause}")
