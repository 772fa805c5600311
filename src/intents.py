"""
Release intents - the declarative records whose status this updater maintains.

A release intent is a HelmRelease-style custom object. Its spec describes a
desired Helm release; its status records the release name and the last
status code observed for it.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict

DEFAULT_NAMESPACE = "default"


@dataclass
class IntentStatus:
    """The status sub-record written back by the updater."""

    release_name: str = ""
    release_status: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IntentStatus":
        return cls(
            release_name=data.get("releaseName") or "",
            release_status=data.get("releaseStatus") or "",
        )


@dataclass
class ReleaseIntent:
    """A release intent object as listed from the cluster."""

    namespace: str
    name: str
    spec: Dict[str, Any] = field(default_factory=dict)
    status: IntentStatus = field(default_factory=IntentStatus)

    @property
    def key(self) -> str:
        """Namespaced identity, e.g. ``default/podinfo``."""
        return f"{self.namespace}/{self.name}"

    @classmethod
    def from_object(cls, obj: Dict[str, Any]) -> "ReleaseIntent":
        """
        Build an intent from a raw custom object dict.

        Args:
            obj: Object as returned by the Kubernetes custom objects API.

        Returns:
            A new ReleaseIntent instance.
        """
        metadata = obj.get("metadata") or {}
        return cls(
            namespace=metadata.get("namespace") or "",
            name=metadata["name"],
            spec=obj.get("spec") or {},
            status=IntentStatus.from_dict(obj.get("status") or {}),
        )


NamingRule = Callable[[ReleaseIntent], str]


def get_release_name(intent: ReleaseIntent) -> str:
    """
    Derive the Helm release name an intent refers to.

    Uses ``spec.releaseName`` when set, otherwise ``<namespace>-<name>``.
    """
    release_name = intent.spec.get("releaseName") or ""
    if release_name:
        return release_name
    namespace = intent.namespace or DEFAULT_NAMESPACE
    return f"{namespace}-{intent.name}"


def get_release_namespace(intent: ReleaseIntent) -> str:
    """Namespace the release lives in: ``spec.targetNamespace`` or the intent's own."""
    return intent.spec.get("targetNamespace") or intent.namespace or DEFAULT_NAMESPACE
