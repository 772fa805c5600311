"""
Helm release backend - Looks up release status with the helm CLI.
"""

import asyncio
import json
import logging
from typing import List, Optional

from probe import ReleaseBackend, ReleaseBackendError

logger = logging.getLogger(__name__)


def canonical_status_code(raw: str) -> str:
    """
    Convert a Helm status to its canonical code string.

    ``deployed`` becomes ``DEPLOYED`` and ``pending-install`` becomes
    ``PENDING_INSTALL``, matching the enum names Helm's release API uses.
    """
    return raw.strip().upper().replace("-", "_")


class HelmReleaseBackend(ReleaseBackend):
    """ReleaseBackend that shells out to ``helm status``."""

    def __init__(
        self,
        binary: str = "helm",
        kube_context: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self.binary = binary
        self.kube_context = kube_context
        self.timeout = timeout

    def _build_command(self, name: str, namespace: Optional[str]) -> List[str]:
        cmd = [self.binary, "status", name, "--output", "json"]
        if namespace:
            cmd.extend(["--namespace", namespace])
        if self.kube_context:
            cmd.extend(["--kube-context", self.kube_context])
        return cmd

    async def _run(self, cmd: List[str]) -> tuple[int, str, str]:
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ReleaseBackendError(f"Could not run {self.binary}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise ReleaseBackendError(
                f"{self.binary} timed out after {self.timeout}s"
            ) from e

        return (
            proc.returncode,
            stdout.decode(errors="replace"),
            stderr.decode(errors="replace"),
        )

    async def get_release_status(
        self, name: str, namespace: Optional[str] = None
    ) -> Optional[str]:
        returncode, stdout, stderr = await self._run(
            self._build_command(name, namespace)
        )

        if returncode != 0:
            if "not found" in stderr.lower():
                return None
            raise ReleaseBackendError(
                f"helm status {name} failed ({returncode}): {stderr.strip()}"
            )

        try:
            release = json.loads(stdout)
            status = release["info"]["status"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise ReleaseBackendError(
                f"Unexpected helm status output for {name}: {e}"
            ) from e

        if not status:
            return None
        return canonical_status_code(status)
