"""
Status Probe - Observes the current status of an external release.

The probe deliberately collapses "release not found" and "backend failed"
into one outcome, ``ProbeOutcome.NO_DATA``: either way there is nothing to
report this tick and the release is looked up again on the next one.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ReleaseBackendError(Exception):
    """Raised by a release backend when a lookup fails."""


class ReleaseBackend(ABC):
    """
    Abstract interface for release-management backends.

    Implementations look up the current status of a release by name.
    """

    @abstractmethod
    async def get_release_status(
        self, name: str, namespace: Optional[str] = None
    ) -> Optional[str]:
        """
        Get the status code of a release.

        Args:
            name: The release name.
            namespace: Namespace hint for backends that scope releases.

        Returns:
            The canonical status code string, or None if no such release exists.

        Raises:
            ReleaseBackendError: If the backend could not be queried.
        """
        pass


class ProbeOutcome(Enum):
    """Outcome of probing a release."""

    OBSERVED = "observed"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class ExternalReleaseStatus:
    """Snapshot of a release's status as reported by the backend."""

    release_name: str
    status_code: str


@dataclass(frozen=True)
class ProbeResult:
    """Result of a single probe."""

    release_name: str
    outcome: ProbeOutcome
    status: Optional[ExternalReleaseStatus] = None

    @property
    def has_data(self) -> bool:
        return self.outcome is ProbeOutcome.OBSERVED

    @classmethod
    def observed(cls, release_name: str, status_code: str) -> "ProbeResult":
        return cls(
            release_name=release_name,
            outcome=ProbeOutcome.OBSERVED,
            status=ExternalReleaseStatus(release_name, status_code),
        )

    @classmethod
    def no_data(cls, release_name: str) -> "ProbeResult":
        return cls(release_name=release_name, outcome=ProbeOutcome.NO_DATA)


class StatusProbe:
    """Looks up release status through a backend, never raising."""

    def __init__(self, backend: ReleaseBackend):
        self._backend = backend

    @property
    def backend(self) -> ReleaseBackend:
        return self._backend

    async def probe(
        self, release_name: str, namespace: Optional[str] = None
    ) -> ProbeResult:
        """
        Probe the current status of a release.

        Args:
            release_name: Name of the release to look up.
            namespace: Optional namespace hint passed to the backend.

        Returns:
            A ProbeResult that is either OBSERVED or NO_DATA.
        """
        try:
            status_code = await self._backend.get_release_status(
                release_name, namespace
            )
        except Exception as e:
            logger.debug(f"No data for release {release_name}: {e}")
            return ProbeResult.no_data(release_name)

        if not status_code:
            return ProbeResult.no_data(release_name)
        return ProbeResult.observed(release_name, status_code)
