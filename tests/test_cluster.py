"""Unit tests for the Kubernetes cluster client."""

import pytest
from unittest.mock import MagicMock, patch

from kubernetes.client.rest import ApiException

from cluster import ClusterAPIError, ClusterClient, KubernetesClusterClient
from config import KubeConfig
from intents import IntentStatus
from patch import build_status_patch


def make_namespace(name):
    ns = MagicMock()
    ns.metadata.name = name
    return ns


class TestClusterClient:
    """Tests for the ClusterClient abstract base class."""

    def test_cannot_instantiate_abstract(self):
        """Test cannot instantiate abstract."""
        with pytest.raises(TypeError):
            ClusterClient()


class TestFromConfig:
    """Tests for KubernetesClusterClient.from_config."""

    @patch("cluster.client")
    @patch("cluster.config")
    def test_kubeconfig(self, mock_config, mock_client):
        """Test kubeconfig."""
        kube_config = KubeConfig(kubeconfig="/tmp/kubeconfig", context="dev")

        cluster = KubernetesClusterClient.from_config(kube_config)

        mock_config.load_kube_config.assert_called_once_with(
            config_file="/tmp/kubeconfig", context="dev"
        )
        mock_config.load_incluster_config.assert_not_called()
        assert cluster.core_api is mock_client.CoreV1Api.return_value
        assert cluster.custom_api is mock_client.CustomObjectsApi.return_value
        assert cluster.plural == "helmreleases"

    @patch("cluster.client")
    @patch("cluster.config")
    def test_in_cluster(self, mock_config, mock_client):
        """Test in cluster."""
        kube_config = KubeConfig(
            in_cluster=True, group="helm.fluxcd.io", use_status_subresource=True
        )

        cluster = KubernetesClusterClient.from_config(kube_config)

        mock_config.load_incluster_config.assert_called_once()
        mock_config.load_kube_config.assert_not_called()
        assert cluster.group == "helm.fluxcd.io"
        assert cluster.use_status_subresource is True


@pytest.mark.asyncio
class TestKubernetesClusterClient:
    """Tests for KubernetesClusterClient API calls."""

    @pytest.fixture
    def core_api(self):
        return MagicMock()

    @pytest.fixture
    def custom_api(self):
        return MagicMock()

    @pytest.fixture
    def cluster(self, core_api, custom_api):
        return KubernetesClusterClient(core_api, custom_api)

    async def test_list_namespaces(self, cluster, core_api):
        """Test list namespaces."""
        core_api.list_namespace.return_value = MagicMock(
            items=[make_namespace("default"), make_namespace("apps")]
        )

        assert await cluster.list_namespaces() == ["default", "apps"]

    async def test_list_namespaces_error(self, cluster, core_api):
        """Test list namespaces error."""
        core_api.list_namespace.side_effect = ApiException(
            status=403, reason="Forbidden"
        )

        with pytest.raises(ClusterAPIError, match="403 Forbidden"):
            await cluster.list_namespaces()

    async def test_list_release_intents(self, cluster, custom_api, make_intent_object):
        """Test list release intents."""
        custom_api.list_namespaced_custom_object.return_value = {
            "items": [
                make_intent_object("a", "apps"),
                make_intent_object(
                    "b",
                    "apps",
                    status={"releaseName": "apps-b", "releaseStatus": "DEPLOYED"},
                ),
            ]
        }

        intents = await cluster.list_release_intents("apps")

        custom_api.list_namespaced_custom_object.assert_called_once_with(
            "flux.weave.works", "v1beta1", "apps", "helmreleases"
        )
        assert [i.name for i in intents] == ["a", "b"]
        assert intents[1].status == IntentStatus("apps-b", "DEPLOYED")

    async def test_list_release_intents_fills_namespace(self, cluster, custom_api):
        """Test list release intents fills namespace."""
        custom_api.list_namespaced_custom_object.return_value = {
            "items": [{"metadata": {"name": "a"}, "spec": {}}]
        }

        intents = await cluster.list_release_intents("apps")

        assert intents[0].namespace == "apps"

    async def test_list_release_intents_empty(self, cluster, custom_api):
        """Test list release intents empty."""
        custom_api.list_namespaced_custom_object.return_value = {}
        assert await cluster.list_release_intents("apps") == []

    async def test_list_release_intents_error(self, cluster, custom_api):
        """Test list release intents error."""
        custom_api.list_namespaced_custom_object.side_effect = ApiException(
            status=404, reason="Not Found"
        )

        with pytest.raises(ClusterAPIError, match="namespace apps"):
            await cluster.list_release_intents("apps")

    async def test_patch_status(self, cluster, custom_api):
        """Test patch status."""
        await cluster.patch_release_intent_status(
            "apps", "a", build_status_patch("apps-a", "DEPLOYED")
        )

        custom_api.patch_namespaced_custom_object.assert_called_once_with(
            "flux.weave.works",
            "v1beta1",
            "apps",
            "helmreleases",
            "a",
            {"status": {"releaseName": "apps-a", "releaseStatus": "DEPLOYED"}},
        )
        custom_api.patch_namespaced_custom_object_status.assert_not_called()

    async def test_patch_status_subresource(self, core_api, custom_api):
        """Test patch status subresource."""
        cluster = KubernetesClusterClient(
            core_api, custom_api, use_status_subresource=True
        )

        await cluster.patch_release_intent_status(
            "apps", "a", build_status_patch("apps-a", "DEPLOYED")
        )

        custom_api.patch_namespaced_custom_object_status.assert_called_once()
        custom_api.patch_namespaced_custom_object.assert_not_called()

    async def test_patch_status_error(self, cluster, custom_api):
        """Test patch status error."""
        custom_api.patch_namespaced_custom_object.side_effect = ApiException(
            status=409, reason="Conflict"
        )

        with pytest.raises(ClusterAPIError) as exc_info:
            await cluster.patch_release_intent_status(
                "apps", "a", build_status_patch("apps-a", "DEPLOYED")
            )

        assert "apps/a" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ApiException)
