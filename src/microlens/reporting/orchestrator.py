"""Drives one mapping run: namespace resolution, node metrics and namespace reports."""

from datetime import datetime
from typing import Iterable, List, Optional
import structlog

from microlens.clients.kubernetes.k8s_client import KubernetesClient
from microlens.core.exceptions import MicroLensException
from microlens.models.report_models import RunSummary
from microlens.reporting.formatter import Formatter
from microlens.reporting.metrics import MetricsReporter
from microlens.reporting.processor import ResourceProcessor

logger = structlog.get_logger(__name__)

BANNER = "Kubernetes MicroLens"


class MappingOrchestrator:
    """
    Coordinates a complete mapping run against one cluster.

    Namespaces are processed one after another; a namespace that fails is
    reported and the run moves on to the next one.
    """

    def __init__(self,
                 k8s_client: KubernetesClient,
                 formatter: Optional[Formatter] = None,
                 show_utilization: bool = False):
        self.client = k8s_client
        self.formatter = formatter or Formatter()
        self.metrics = MetricsReporter(k8s_client, self.formatter)
        self.processor = ResourceProcessor(
            k8s_client,
            self.formatter,
            metrics=self.metrics if show_utilization else None,
        )
        self.logger = logger.bind(orchestrator="mapping")

    def __enter__(self):
        if not self.client.is_connected:
            self.client.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.client.disconnect()

    def resolve_namespaces(self, namespace: Optional[str] = None,
                           exclude: Iterable[str] = ()) -> List[str]:
        """Return the namespaces to process.

        An explicit namespace is verified to exist; otherwise every namespace
        except the excluded ones is returned in list order.
        """
        if namespace:
            self.client.read_namespace(namespace)
            return [namespace]

        excluded = set(exclude)
        return [
            ns.metadata.name
            for ns in self.client.list_namespaces()
            if ns.metadata.name not in excluded
        ]

    def print_banner(self) -> None:
        self.formatter.print_header(BANNER)
        self.formatter.print_text(f"Generated at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        self.formatter.print_line()

    def run(self, namespaces: List[str], show_nodes: bool = False) -> RunSummary:
        """Print node metrics if requested, then a report for every namespace."""
        summary = RunSummary()

        if show_nodes:
            try:
                summary.node_errors.extend(self.metrics.show_node_metrics())
            except MicroLensException as e:
                self.logger.error("Node metrics failed", error=str(e))
                self.formatter.print_error(f"Error getting node metrics: {e}")
                summary.node_errors.append(str(e))

        for namespace in namespaces:
            report = self.processor.process_namespace(namespace)
            summary.add(report)
            if not report.succeeded:
                self.formatter.print_error(f"Error processing namespace {namespace}: {report.error}")

        self.formatter.print_success("Resource mapping complete!")
        self.logger.info(
            "Mapping run finished",
            namespaces=len(summary.namespaces),
            failed=summary.failed_count,
            node_errors=len(summary.node_errors),
        )
        return summary
