"""Node capacity and namespace request/limit reporting."""

from typing import List
import structlog

from microlens.clients.kubernetes.k8s_client import KubernetesClient
from microlens.core.exceptions import ResourceFetchException
from microlens.core.utils import (
    cpu_millicores,
    format_cpu,
    format_memory,
    memory_bytes,
    resource_totals,
    tree_prefix,
)
from microlens.reporting.formatter import Formatter

logger = structlog.get_logger(__name__)


def _percent(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100


class MetricsReporter:
    """Prints node allocation and namespace resource totals from pod specs."""

    def __init__(self, k8s_client: KubernetesClient, formatter: Formatter):
        self.client = k8s_client
        self.formatter = formatter
        self.logger = logger.bind(reporter=self.__class__.__name__)

    @staticmethod
    def format_cpu(millicores: int) -> str:
        return format_cpu(millicores)

    @staticmethod
    def format_memory(num_bytes: int) -> str:
        return format_memory(num_bytes)

    def show_node_metrics(self) -> List[str]:
        """Print capacity, allocatable and requested resources for every node.

        Raises ResourceFetchException when nodes cannot be listed. A pod list
        failure for one node skips that node's usage section; the errors are
        returned so the caller can summarize them.
        """
        out = self.formatter
        out.print_section("Node Metrics")

        nodes = self.client.list_nodes()
        node_errors: List[str] = []

        for i, node in enumerate(nodes):
            name = node.metadata.name
            out.print_resource(tree_prefix(i, len(nodes)), "Node", name)

            with out.indented():
                status = node.status
                capacity = (status.capacity if status else None) or {}
                allocatable = (status.allocatable if status else None) or {}

                out.print_info("", "Capacity:")
                out.print_info("", "  CPU: %s", capacity.get('cpu', "0"))
                out.print_info("", "  Memory: %s", format_memory(memory_bytes(capacity.get('memory'))))
                out.print_info("", "  Pods: %s", capacity.get('pods', "0"))

                out.print_info("", "Allocatable:")
                out.print_info("", "  CPU: %s", allocatable.get('cpu', "0"))
                out.print_info("", "  Memory: %s", format_memory(memory_bytes(allocatable.get('memory'))))
                out.print_info("", "  Pods: %s", allocatable.get('pods', "0"))

                try:
                    pods = self.client.list_pods(field_selector=f"spec.nodeName={name}")
                except ResourceFetchException as e:
                    self.logger.warning("Failed to list pods on node", node=name, error=str(e))
                    out.print_info("", "Error getting pod list: %s", e)
                    node_errors.append(f"{name}: {e}")
                    continue

                total_cpu_requests = 0
                total_memory_requests = 0
                for pod in pods:
                    for container in pod.spec.containers or []:
                        if container.resources and container.resources.requests:
                            requests = resource_totals(container.resources.requests)
                            total_cpu_requests += requests['cpu']
                            total_memory_requests += requests['memory']

                allocatable_cpu = cpu_millicores(allocatable.get('cpu'))
                allocatable_memory = memory_bytes(allocatable.get('memory'))

                out.print_info("", "Current State:")
                out.print_info("", "  Running Pods: %d", len(pods))
                out.print_info("", "  CPU Usage: %.2f%% (%s/%s)",
                               _percent(total_cpu_requests, allocatable_cpu),
                               format_cpu(total_cpu_requests),
                               allocatable.get('cpu', "0"))
                out.print_info("", "  Memory Usage: %.2f%% (%s/%s)",
                               _percent(total_memory_requests, allocatable_memory),
                               format_memory(total_memory_requests),
                               format_memory(allocatable_memory))

        return node_errors

    def show_resource_utilization(self, namespace: str) -> None:
        """Print summed container requests and limits for all pods in a namespace."""
        out = self.formatter
        out.print_section(f"Resource Utilization: {namespace}")

        pods = self.client.list_pods(namespace=namespace)

        totals = {'request_cpu': 0, 'request_memory': 0, 'limit_cpu': 0, 'limit_memory': 0}
        for pod in pods:
            for container in pod.spec.containers or []:
                if not container.resources:
                    continue
                if container.resources.requests:
                    requests = resource_totals(container.resources.requests)
                    totals['request_cpu'] += requests['cpu']
                    totals['request_memory'] += requests['memory']
                if container.resources.limits:
                    limits = resource_totals(container.resources.limits)
                    totals['limit_cpu'] += limits['cpu']
                    totals['limit_memory'] += limits['memory']

        out.print_info("", "Namespace Summary:")
        out.print_info("", "CPU:")
        out.print_info("", "  Requests: %s", format_cpu(totals['request_cpu']))
        out.print_info("", "  Limits: %s", format_cpu(totals['limit_cpu']))

        out.print_info("", "Memory:")
        out.print_info("", "  Requests: %s", format_memory(totals['request_memory']))
        out.print_info("", "  Limits: %s", format_memory(totals['limit_memory']))
