"""
Cluster client - Access to namespaces and release intent objects.

The Kubernetes implementation wraps the official (blocking) client and runs
each call in a worker thread so the update loop stays on the event loop.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, List

from kubernetes import client, config
from kubernetes.client.rest import ApiException

from config import KubeConfig
from intents import ReleaseIntent
from patch import StatusPatch

logger = logging.getLogger(__name__)


class ClusterAPIError(Exception):
    """Raised when a call to the cluster API fails."""


class ClusterClient(ABC):
    """Abstract interface for the cluster API."""

    @abstractmethod
    async def list_namespaces(self) -> List[str]:
        """Return the names of all namespaces in the cluster."""
        pass

    @abstractmethod
    async def list_release_intents(self, namespace: str) -> List[ReleaseIntent]:
        """Return the release intents in a namespace, in listing order."""
        pass

    @abstractmethod
    async def patch_release_intent_status(
        self, namespace: str, name: str, patch: StatusPatch
    ) -> None:
        """
        Apply a status patch to one release intent.

        Args:
            namespace: Namespace of the intent.
            name: Name of the intent.
            patch: The status patch, applied with merge-patch semantics.

        Raises:
            ClusterAPIError: If the patch could not be applied.
        """
        pass


class KubernetesClusterClient(ClusterClient):
    """ClusterClient backed by the Kubernetes API."""

    def __init__(
        self,
        core_api: client.CoreV1Api,
        custom_api: client.CustomObjectsApi,
        group: str = "flux.weave.works",
        version: str = "v1beta1",
        plural: str = "helmreleases",
        use_status_subresource: bool = False,
    ):
        self.core_api = core_api
        self.custom_api = custom_api
        self.group = group
        self.version = version
        self.plural = plural
        self.use_status_subresource = use_status_subresource

    @classmethod
    def from_config(cls, kube_config: KubeConfig) -> "KubernetesClusterClient":
        """Load credentials and build a client for the configured resource."""
        if kube_config.in_cluster:
            config.load_incluster_config()
        else:
            config.load_kube_config(
                config_file=kube_config.kubeconfig, context=kube_config.context
            )
        logger.info(
            f"Using intent resource {kube_config.plural}."
            f"{kube_config.group}/{kube_config.version}"
        )
        return cls(
            core_api=client.CoreV1Api(),
            custom_api=client.CustomObjectsApi(),
            group=kube_config.group,
            version=kube_config.version,
            plural=kube_config.plural,
            use_status_subresource=kube_config.use_status_subresource,
        )

    async def _call(self, description: str, fn: Any, *args: Any) -> Any:
        try:
            return await asyncio.to_thread(fn, *args)
        except ApiException as e:
            raise ClusterAPIError(
                f"Failed to {description}: {e.status} {e.reason}"
            ) from e

    async def list_namespaces(self) -> List[str]:
        result = await self._call("list namespaces", self.core_api.list_namespace)
        return [ns.metadata.name for ns in result.items]

    async def list_release_intents(self, namespace: str) -> List[ReleaseIntent]:
        result = await self._call(
            f"list {self.plural} in namespace {namespace}",
            self.custom_api.list_namespaced_custom_object,
            self.group,
            self.version,
            namespace,
            self.plural,
        )
        intents = []
        for item in result.get("items", []):
            intent = ReleaseIntent.from_object(item)
            # Some API servers omit namespace on list items
            if not intent.namespace:
                intent.namespace = namespace
            intents.append(intent)
        return intents

    async def patch_release_intent_status(
        self, namespace: str, name: str, patch: StatusPatch
    ) -> None:
        if self.use_status_subresource:
            fn = self.custom_api.patch_namespaced_custom_object_status
        else:
            fn = self.custom_api.patch_namespaced_custom_object

        await self._call(
            f"patch status of {namespace}/{name}",
            fn,
            self.group,
            self.version,
            namespace,
            self.plural,
            name,
            patch.to_merge_patch(),
        )
