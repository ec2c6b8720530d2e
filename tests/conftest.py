"""Shared fixtures: a formatter and a mocked KubernetesClient."""

from unittest.mock import MagicMock

import pytest

from microlens.clients.kubernetes.k8s_client import KubernetesClient
from microlens.core.utils import setup_logging
from microlens.reporting.formatter import Formatter


@pytest.fixture(scope="session", autouse=True)
def stderr_logging():
    """Route structlog through stdlib logging on stderr so stdout holds only the report."""
    setup_logging(log_level="WARNING")


@pytest.fixture
def formatter():
    return Formatter()


@pytest.fixture
def k8s_client():
    """KubernetesClient stand-in returning empty listings unless a test says otherwise."""
    mock = MagicMock(spec=KubernetesClient)
    mock.is_connected = True
    mock.list_namespaces.return_value = []
    mock.list_nodes.return_value = []
    mock.list_pods.return_value = []
    mock.list_deployments.return_value = []
    mock.list_horizontal_pod_autoscalers.return_value = []
    mock.list_services.return_value = []
    mock.list_ingresses.return_value = []
    mock.list_config_maps.return_value = []
    mock.list_secrets.return_value = []
    mock.read_endpoints.return_value = None
    return mock
