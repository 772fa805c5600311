"""
Correlator - Decides whether a release intent's recorded status is stale.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from intents import NamingRule, ReleaseIntent, get_release_name, get_release_namespace
from probe import StatusProbe

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusUpdate:
    """New status to record on an intent."""

    release_name: str
    release_status: str


class Correlator:
    """
    Correlates one release intent with the observed release status.

    The intent and the release are joined purely by release name.
    """

    def __init__(self, probe: StatusProbe, naming_rule: NamingRule = get_release_name):
        self._probe = probe
        self._naming_rule = naming_rule

    def release_name_for(self, intent: ReleaseIntent) -> str:
        return self._naming_rule(intent)

    async def correlate(
        self, intent: ReleaseIntent, release_name: Optional[str] = None
    ) -> Optional[StatusUpdate]:
        """
        Compute the status update an intent needs, if any.

        Args:
            intent: The intent to check.
            release_name: Release name already derived for the intent. Derived
                with the naming rule when omitted.

        Returns:
            A StatusUpdate when the observed status differs from the recorded
            one, otherwise None (including when the release has no data).
        """
        if release_name is None:
            release_name = self.release_name_for(intent)
        result = await self._probe.probe(release_name, get_release_namespace(intent))

        if not result.has_data:
            return None

        observed = result.status.status_code
        if observed == intent.status.release_status:
            return None

        logger.debug(
            f"Release {release_name} for {intent.key} changed: "
            f"{intent.status.release_status or '<none>'} -> {observed}"
        )
        return StatusUpdate(release_name=release_name, release_status=observed)
