"""
Main entry point for the Release Status Updater.

Wires configuration, the Kubernetes cluster client and the Helm backend into
a StatusUpdater and runs it until it is signalled to stop or fails.
"""

import asyncio
import logging
import signal
import sys
from typing import Optional

import click

from cluster import KubernetesClusterClient
from config import Config, get_config
from helm import HelmReleaseBackend
from updater import StatusUpdater

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


class Application:
    """Main application that owns the status updater."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or get_config()
        self.updater: Optional[StatusUpdater] = None

    def initialize(self) -> None:
        """Initialize all components."""
        logger.info("Initializing Release Status Updater")

        cluster = KubernetesClusterClient.from_config(self.config.kube)
        helm_config = self.config.helm
        backend = HelmReleaseBackend(
            binary=helm_config.binary,
            kube_context=helm_config.kube_context,
            timeout=helm_config.timeout,
        )
        self.updater = StatusUpdater(
            cluster=cluster,
            backend=backend,
            config=self.config.updater,
        )

    async def start(self) -> Optional[Exception]:
        """Run the updater until it stops. Returns its terminal error, if any."""
        if self.updater is None:
            try:
                self.initialize()
            except Exception as e:
                logger.error(f"Failed to initialize Release Status Updater: {e}")
                return e
        return await self.updater.run()

    def stop(self) -> None:
        """Ask the updater to stop after the current sweep."""
        logger.info("Stopping Release Status Updater")
        if self.updater is not None:
            self.updater.stop()


async def run_application(app: Application) -> Optional[Exception]:
    """Run an application with SIGINT/SIGTERM wired to a graceful stop."""
    loop = asyncio.get_running_loop()

    def signal_handler():
        logger.info("Received shutdown signal")
        app.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, signal_handler)

    return await app.start()


@click.command()
@click.option("--namespace", "-n", default=None, help="Only scan this namespace")
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between sweeps",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
)
def main(namespace, interval, log_level):
    """Keep HelmRelease statuses in sync with their Helm releases."""
    config = get_config()
    if namespace is not None:
        config.updater.namespace = namespace
    if interval is not None:
        config.updater.tick_interval = interval
    if log_level is not None:
        config.logging.level = log_level

    configure_logging(config.logging.level)

    error = asyncio.run(run_application(Application(config)))
    if error is not None:
        sys.exit(1)


if __name__ == "__main__":
    main()
