"""Pytest configuration and fixtures."""

import pytest
from unittest.mock import AsyncMock

from probe import ReleaseBackend, ReleaseBackendError
from ticker import Ticker


class FakeReleaseBackend(ReleaseBackend):
    """In-memory release backend with injectable failures."""

    def __init__(self):
        self.statuses = {}
        self.failing = set()
        self.calls = []

    async def get_release_status(self, name, namespace=None):
        self.calls.append((name, namespace))
        if name in self.failing:
            raise ReleaseBackendError(f"backend unavailable for {name}")
        return self.statuses.get(name)


class ScriptedTicker(Ticker):
    """Ticker that fires a fixed number of ticks, then reports stop."""

    def __init__(self, ticks):
        self.remaining = ticks
        self.waits = 0

    async def wait(self, stop_event):
        self.waits += 1
        if stop_event.is_set() or self.remaining <= 0:
            return False
        self.remaining -= 1
        return True


@pytest.fixture
def fake_backend():
    """Release backend with no releases."""
    return FakeReleaseBackend()


@pytest.fixture
def scripted_ticker():
    """Factory for tickers firing a given number of ticks."""
    return ScriptedTicker


@pytest.fixture
def mock_cluster():
    """Create a mock cluster client with one empty namespace."""
    cluster = AsyncMock()
    cluster.list_namespaces = AsyncMock(return_value=["default"])
    cluster.list_release_intents = AsyncMock(return_value=[])
    cluster.patch_release_intent_status = AsyncMock()
    return cluster


@pytest.fixture
def make_intent_object():
    """Factory for raw HelmRelease objects as returned by the cluster API."""

    def _make(name="podinfo", namespace="default", spec=None, status=None):
        obj = {
            "apiVersion": "flux.weave.works/v1beta1",
            "kind": "HelmRelease",
            "metadata": {"name": name, "namespace": namespace},
            "spec": spec if spec is not None else {"chart": {"name": name}},
        }
        if status is not None:
            obj["status"] = status
        return obj

    return _make
