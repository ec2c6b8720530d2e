"""Tests for MappingOrchestrator."""

import pytest

from microlens.core.exceptions import NamespaceNotFoundException, ResourceFetchException
from microlens.reporting.orchestrator import MappingOrchestrator
from tests.factories import make_namespace, make_node


@pytest.fixture
def orchestrator(k8s_client, formatter):
    return MappingOrchestrator(k8s_client, formatter)


class TestResolveNamespaces:

    def test_explicit_namespace_is_verified(self, orchestrator, k8s_client):
        assert orchestrator.resolve_namespaces("shop") == ["shop"]
        k8s_client.read_namespace.assert_called_once_with("shop")
        k8s_client.list_namespaces.assert_not_called()

    def test_explicit_namespace_missing(self, orchestrator, k8s_client):
        k8s_client.read_namespace.side_effect = NamespaceNotFoundException("nope")

        with pytest.raises(NamespaceNotFoundException):
            orchestrator.resolve_namespaces("nope")

    def test_all_namespaces_minus_excluded(self, orchestrator, k8s_client):
        k8s_client.list_namespaces.return_value = [
            make_namespace(name) for name in ("default", "kube-system", "shop", "kube-public")
        ]

        namespaces = orchestrator.resolve_namespaces(exclude=("kube-system", "kube-public"))

        assert namespaces == ["default", "shop"]

    def test_listing_failure_propagates(self, orchestrator, k8s_client):
        k8s_client.list_namespaces.side_effect = ResourceFetchException("namespaces", "unauthorized")

        with pytest.raises(ResourceFetchException):
            orchestrator.resolve_namespaces()


class TestRun:

    def test_failed_namespace_does_not_stop_run(self, orchestrator, k8s_client, capsys):
        def list_deployments(namespace):
            if namespace == "locked":
                raise ResourceFetchException("deployments", "forbidden")
            return []

        k8s_client.list_deployments.side_effect = list_deployments

        summary = orchestrator.run(["locked", "shop"])

        out = capsys.readouterr().out
        assert [report.namespace for report in summary.namespaces] == ["locked", "shop"]
        assert summary.failed_count == 1
        assert summary.succeeded_count == 1
        assert "Error processing namespace locked: error getting deployments: forbidden" in out
        assert "Analyzing namespace: shop" in out
        assert out.rstrip().endswith("Resource mapping complete!")

    def test_crashing_namespace_does_not_stop_run(self, orchestrator, k8s_client, capsys):
        def list_services(namespace):
            if namespace == "broken":
                raise ValueError("invalid port")
            return []

        k8s_client.list_services.side_effect = list_services

        summary = orchestrator.run(["broken", "shop"])

        out = capsys.readouterr().out
        assert summary.failed_count == 1
        assert summary.namespaces[1].namespace == "shop"
        assert summary.namespaces[1].succeeded
        assert "Error processing namespace broken: unexpected error in resource_relationships: invalid port" in out
        assert out.rstrip().endswith("Resource mapping complete!")

    def test_node_metrics_before_namespaces(self, orchestrator, k8s_client, capsys):
        k8s_client.list_nodes.return_value = [make_node(
            "node-a", capacity={'cpu': "4", 'memory': "8Gi", 'pods': "110"},
            allocatable={'cpu': "4", 'memory': "8Gi", 'pods': "110"})]

        orchestrator.run(["shop"], show_nodes=True)

        out = capsys.readouterr().out
        assert out.index("[Node Metrics]") < out.index("Analyzing namespace: shop")

    def test_node_metrics_failure_is_not_fatal(self, orchestrator, k8s_client, capsys):
        k8s_client.list_nodes.side_effect = ResourceFetchException("nodes", "forbidden")

        summary = orchestrator.run(["shop"], show_nodes=True)

        out = capsys.readouterr().out
        assert summary.node_errors == ["error getting nodes: forbidden"]
        assert "Error getting node metrics" in out
        assert summary.succeeded_count == 1

    def test_utilization_flag_adds_stage(self, k8s_client, formatter):
        orchestrator = MappingOrchestrator(k8s_client, formatter, show_utilization=True)

        summary = orchestrator.run(["shop"])

        assert summary.namespaces[0].stages[-1].stage == "resource_utilization"

    def test_banner(self, orchestrator, capsys):
        orchestrator.print_banner()

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Kubernetes MicroLens"
        assert lines[1].startswith("Generated at: ")
        assert lines[2] == "-" * 80

    def test_context_manager_disconnects(self, k8s_client, formatter):
        k8s_client.is_connected = False

        with MappingOrchestrator(k8s_client, formatter):
            k8s_client.connect.assert_called_once_with()

        k8s_client.disconnect.assert_called_once_with()
