"""
Status Updater - Main reconciliation loop.

On every tick, lists the release intents in scope, probes the Helm release
each one refers to, and patches the intent's status when the observed
release status has changed.

Failures are stratified by blast radius: a failed status patch is logged and
the sweep moves on to the next object, while a failure to enumerate
namespaces or intents stops the loop for good.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from cluster import ClusterClient
from config import UpdaterConfig
from correlator import Correlator
from intents import NamingRule, get_release_name
from patch import build_status_patch
from probe import ReleaseBackend, StatusProbe
from scope import NamespaceScope, ScopeResolutionFailed
from ticker import IntervalTicker, Ticker

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """Lifecycle states of the update loop."""

    IDLE = "idle"
    SCANNING = "scanning"
    STOPPED = "stopped"


@dataclass
class SweepReport:
    """Counters for one sweep."""

    namespaces: int = 0
    examined: int = 0
    updated: int = 0
    unchanged: int = 0
    failed: int = 0


class StatusUpdater:
    """
    Keeps release intent statuses in line with their Helm releases.

    Owns references to the cluster and release backend clients. Sweeps never
    overlap: the next tick is only awaited once the current sweep finishes.
    """

    def __init__(
        self,
        cluster: ClusterClient,
        backend: ReleaseBackend,
        config: Optional[UpdaterConfig] = None,
        ticker: Optional[Ticker] = None,
        naming_rule: NamingRule = get_release_name,
    ):
        self._cluster = cluster
        self._backend = backend
        self.config = config or UpdaterConfig()
        self.ticker = ticker or IntervalTicker(self.config.tick_interval)
        self.scope = NamespaceScope(cluster, self.config.namespace)
        self.correlator = Correlator(StatusProbe(backend), naming_rule)

        self._state = LoopState.IDLE
        self._stop_event = asyncio.Event()
        self.last_error: Optional[Exception] = None
        self.sweeps = 0

    @property
    def cluster(self) -> ClusterClient:
        return self._cluster

    @property
    def backend(self) -> ReleaseBackend:
        return self._backend

    @property
    def state(self) -> LoopState:
        return self._state

    def stop(self) -> None:
        """Signal the loop to stop. Takes effect between sweeps."""
        self._stop_event.set()

    async def run(self) -> Optional[Exception]:
        """
        Run the update loop until stopped or a scope-level failure occurs.

        Returns:
            The error that terminated the loop, or None on a requested stop.

        Raises:
            RuntimeError: If the loop has already stopped.
        """
        if self._state is LoopState.STOPPED:
            raise RuntimeError("Status updater has stopped and cannot be restarted")

        logger.info(
            f"Starting status updater: namespace="
            f"{self.config.namespace or '<all>'}, "
            f"interval={self.config.tick_interval}s"
        )

        try:
            while await self.ticker.wait(self._stop_event):
                self._state = LoopState.SCANNING
                try:
                    await self.sweep()
                except ScopeResolutionFailed as e:
                    self.last_error = e
                    break
                self._state = LoopState.IDLE
        except Exception as e:
            logger.error(f"Status updater loop stopping: err={e!r}", exc_info=True)
            raise
        finally:
            self._state = LoopState.STOPPED

        if self.last_error is not None:
            logger.error(f"Status updater loop stopping: err={self.last_error}")
        else:
            logger.info("Status updater loop stopping: err=None")
        return self.last_error

    async def sweep(self) -> SweepReport:
        """
        Run one pass over every release intent in scope.

        Returns:
            Counters describing the sweep.

        Raises:
            ScopeResolutionFailed: If namespaces or intents could not be listed.
                Remaining namespaces are not processed.
        """
        report = SweepReport()
        claimed: Dict[str, str] = {}

        namespaces = await self.scope.resolve()
        for namespace in namespaces:
            try:
                intents = await self._cluster.list_release_intents(namespace)
            except Exception as e:
                raise ScopeResolutionFailed(
                    f"Failed to list release intents in namespace {namespace}: {e}",
                    namespace=namespace,
                ) from e
            report.namespaces += 1

            for intent in intents:
                report.examined += 1

                release_name = self.correlator.release_name_for(intent)
                owner = claimed.setdefault(release_name, intent.key)
                if owner != intent.key:
                    logger.warning(
                        f"Release name collision: {intent.key} and {owner} "
                        f"both refer to release {release_name}"
                    )

                update = await self.correlator.correlate(intent, release_name)
                if update is None:
                    report.unchanged += 1
                    continue

                patch = build_status_patch(update.release_name, update.release_status)
                try:
                    await self._cluster.patch_release_intent_status(
                        intent.namespace, intent.name, patch
                    )
                except Exception as e:
                    report.failed += 1
                    logger.error(
                        f"Failed to update status: namespace={namespace}, "
                        f"resource={intent.name}, err={e}"
                    )
                    continue

                report.updated += 1
                logger.info(
                    f"Updated {intent.key}: release {update.release_name} "
                    f"is {update.release_status}"
                )

        self.sweeps += 1
        logger.debug(f"Sweep complete: {report}")
        return report
