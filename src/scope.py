"""
Namespace scope - Which namespaces a sweep covers.
"""

from typing import List, Optional

from cluster import ClusterClient


class ScopeResolutionFailed(Exception):
    """
    Raised when namespaces or release intents cannot be enumerated.

    This is fatal to the whole update run, not just the current object.
    """

    def __init__(self, message: str, namespace: Optional[str] = None):
        super().__init__(message)
        self.namespace = namespace


class NamespaceScope:
    """Resolves either a single fixed namespace or every namespace."""

    def __init__(self, cluster: ClusterClient, namespace: str = ""):
        self._cluster = cluster
        self.namespace = namespace

    @property
    def all_namespaces(self) -> bool:
        return not self.namespace

    async def resolve(self) -> List[str]:
        """
        Resolve the namespaces to scan this tick.

        A fixed namespace is returned as-is without checking that it exists.

        Raises:
            ScopeResolutionFailed: If listing all namespaces fails.
        """
        if not self.all_namespaces:
            return [self.namespace]

        try:
            return await self._cluster.list_namespaces()
        except Exception as e:
            raise ScopeResolutionFailed(f"Failed to list namespaces: {e}") from e
