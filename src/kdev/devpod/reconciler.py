"""
Creation and deletion of the Kubernetes resources that make up a devpod.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from kubernetes import client
from kubernetes.client import ApiException

from ..errors import from_api_exception
from .builder import DevpodResources


def _name_and_namespace(manifest: Dict[str, Any]) -> Tuple[str, str]:
    metadata = manifest["metadata"]
    return metadata["name"], metadata["namespace"]


class DevpodReconciler:
    """
    Submits devpod manifests to the cluster.

    Resources are created in dependency order (PersistentVolumeClaim,
    ServiceAccount, Pod). An existing ServiceAccount is reused; an existing
    claim or pod is an error. Nothing is rolled back when a later step fails.
    """

    def __init__(
        self, core_v1: client.CoreV1Api, logger: Optional[logging.Logger] = None
    ) -> None:
        self.core_v1 = core_v1
        self.logger = logger or logging.getLogger(__name__)

    def apply(self, resources: DevpodResources) -> None:
        self._create_persistent_volume_claim(resources.storage_claim)
        self._create_service_account(resources.identity)
        self._create_pod(resources.workload)

    def delete_pod(self, name: str, namespace: str) -> None:
        try:
            self.core_v1.delete_namespaced_pod(name=name, namespace=namespace)
        except ApiException as e:
            raise from_api_exception(e, "Pod", name, namespace) from e
        self.logger.info("Deleted Pod '%s' in namespace '%s'", name, namespace)

    def delete_storage_claim(self, name: str, namespace: str) -> None:
        try:
            self.core_v1.delete_namespaced_persistent_volume_claim(
                name=name, namespace=namespace
            )
        except ApiException as e:
            raise from_api_exception(e, "PersistentVolumeClaim", name, namespace) from e
        self.logger.info(
            "Deleted PersistentVolumeClaim '%s' in namespace '%s'", name, namespace
        )

    def _create_persistent_volume_claim(self, pvc: Dict[str, Any]) -> None:
        name, namespace = _name_and_namespace(pvc)
        try:
            self.core_v1.create_namespaced_persistent_volume_claim(
                namespace=namespace, body=pvc
            )
        except ApiException as e:
            raise from_api_exception(e, "PersistentVolumeClaim", name, namespace) from e
        self.logger.info("PersistentVolumeClaim '%s' created.", name)

    def _create_service_account(self, service_account: Dict[str, Any]) -> None:
        """Create a ServiceAccount, ignoring if it already exists."""
        name, namespace = _name_and_namespace(service_account)
        try:
            self.core_v1.create_namespaced_service_account(
                namespace=namespace, body=service_account
            )
            self.logger.info("ServiceAccount '%s' created.", name)
        except ApiException as e:
            if e.status != 409:
                raise from_api_exception(e, "ServiceAccount", name, namespace) from e
            self.logger.info("ServiceAccount '%s' already exists, skipping.", name)

    def _create_pod(self, pod: Dict[str, Any]) -> None:
        name, namespace = _name_and_namespace(pod)
        try:
            self.core_v1.create_namespaced_pod(namespace=namespace, body=pod)
        except ApiException as e:
            raise from_api_exception(e, "Pod", name, namespace) from e
        self.logger.info("Pod '%s' created.", name)
