"""Per-namespace resource relationship reports."""

from typing import Callable, List, Optional, Tuple
import structlog

from microlens.clients.kubernetes.k8s_client import KubernetesClient
from microlens.core.exceptions import MicroLensException
from microlens.core.utils import format_label_selector, tree_prefix
from microlens.models.report_models import NamespaceReport, StageResult, StageStatus
from microlens.reporting.formatter import Formatter
from microlens.reporting.metrics import MetricsReporter
from microlens.reporting.usage import find_config_map_usage, find_secret_usage

logger = structlog.get_logger(__name__)

RESOURCE_METRIC = "Resource"
PODS_METRIC = "Pods"
ROLLING_UPDATE = "RollingUpdate"
DEFAULT_ROLLOUT_BUDGET = "25%"


class ResourceProcessor:
    """Walks one namespace at a time through a fixed sequence of report stages.

    Stages run in order: resource relationships, deployments, HPAs, config map
    usage and secret usage, followed by namespace resource totals when a
    ``MetricsReporter`` is attached. The first stage that fails ends the
    namespace; later stages are recorded as skipped.
    """

    def __init__(self,
                 k8s_client: KubernetesClient,
                 formatter: Optional[Formatter] = None,
                 metrics: Optional[MetricsReporter] = None):
        self.client = k8s_client
        self.formatter = formatter or Formatter()
        self.metrics = metrics
        self.logger = logger.bind(processor=self.__class__.__name__)

    def stages(self) -> List[Tuple[str, Callable[[str], None]]]:
        stages = [
            ("resource_relationships", self.show_resource_relationships),
            ("deployment_details", self.show_deployment_details),
            ("hpa_details", self.show_hpa_details),
            ("config_map_usage", self.show_config_map_usage),
            ("secret_usage", self.show_secret_usage),
        ]
        if self.metrics is not None:
            stages.append(("resource_utilization", self.metrics.show_resource_utilization))
        return stages

    def process_namespace(self, namespace: str) -> NamespaceReport:
        """Run every stage for the namespace and record how each one ended."""
        self.formatter.print_header(f"Analyzing namespace: {namespace}")
        self.formatter.print_line()

        report = NamespaceReport(namespace=namespace)
        failed = False

        for stage_name, stage in self.stages():
            if failed:
                report.stages.append(StageResult(
                    stage=stage_name, namespace=namespace, status=StageStatus.SKIPPED
                ))
                continue

            try:
                stage(namespace)
            except MicroLensException as e:
                self.logger.error("Stage failed", namespace=namespace, stage=stage_name, error=str(e))
                report.stages.append(StageResult(
                    stage=stage_name, namespace=namespace, status=StageStatus.FAILED, error=str(e)
                ))
                failed = True
                continue
            except Exception as e:
                self.logger.exception("Stage crashed", namespace=namespace, stage=stage_name)
                report.stages.append(StageResult(
                    stage=stage_name, namespace=namespace, status=StageStatus.FAILED,
                    error=f"unexpected error in {stage_name}: {e}"
                ))
                failed = True
                continue

            report.stages.append(StageResult(
                stage=stage_name, namespace=namespace, status=StageStatus.SUCCESS
            ))

        if not failed:
            self.formatter.print_line()
        return report

    def show_resource_relationships(self, namespace: str) -> None:
        """Print ingress → service → pod routing and service endpoints."""
        out = self.formatter
        out.print_text("External Traffic")
        out.print_text("│")

        out.print_text("[Ingress Layer]")
        ingresses = self.client.list_ingresses(namespace)

        for i, ingress in enumerate(ingresses):
            out.print_resource(tree_prefix(i, len(ingresses)), "Ingress", ingress.metadata.name)
            with out.indented():
                self._print_ingress(ingress)

        out.print_section("Service Layer")
        services = self.client.list_services(namespace)

        for i, service in enumerate(services):
            out.print_resource(tree_prefix(i, len(services)), "Service", service.metadata.name)
            with out.indented():
                self._print_service(service, namespace)

    def _print_ingress(self, ingress) -> None:
        out = self.formatter
        spec = ingress.spec

        if spec.tls:
            out.print_status("TLS Enabled", True)
            for tls in spec.tls:
                out.print_info("", "Hosts: %s", ", ".join(tls.hosts or []))
                if tls.secret_name:
                    out.print_info("", "TLS Secret: %s", tls.secret_name)

        for rule in spec.rules or []:
            if rule.http is None:
                continue
            for path in rule.http.paths or []:
                backend = path.backend.service if path.backend else None
                if backend is None:
                    continue

                out.print_relation(
                    "Service", backend.name,
                    f"via host: {rule.host or '*'}",
                    f"path: {path.path or '/'}",
                    f"pathType: {path.path_type}",
                )
                port = backend.port
                if port is not None and port.number:
                    out.print_info("", "  Port: %d", port.number)
                elif port is not None and port.name:
                    out.print_info("", "  Port: %s", port.name)

    def _print_service(self, service, namespace: str) -> None:
        out = self.formatter
        spec = service.spec

        out.print_info("", "Type: %s", spec.type)
        if spec.cluster_ip:
            out.print_info("", "ClusterIP: %s", spec.cluster_ip)
        if spec.external_i_ps:
            out.print_info("", "External IPs: %s", ", ".join(spec.external_i_ps))

        for port in spec.ports or []:
            target_port = port.target_port if port.target_port is not None else port.port
            port_info = f"Port: {port.port}→{target_port}/{port.protocol or 'TCP'}"
            if port.node_port:
                port_info += f" (NodePort: {port.node_port})"
            out.print_info("", port_info)

        if spec.selector:
            label_selector = format_label_selector(spec.selector)
            out.print_info("", "Selector: %s", label_selector)

            pods = self.client.list_pods(namespace=namespace, label_selector=label_selector)
            if pods:
                out.print_info("", "Connected Pods:")
                for pod in pods:
                    details = [
                        f"Status: {pod.status.phase if pod.status else 'Unknown'}",
                        f"Node: {pod.spec.node_name or '<unscheduled>'}",
                    ]
                    if pod.status and pod.status.pod_ip:
                        details.append(f"PodIP: {pod.status.pod_ip}")
                    out.print_relation("Pod", pod.metadata.name, *details)
            else:
                out.print_status("No pods found matching selector", False)

        endpoints = self.client.read_endpoints(service.metadata.name, namespace)
        if endpoints is not None and endpoints.subsets:
            out.print_info("", "Endpoints:")
            for subset in endpoints.subsets:
                for address in subset.addresses or []:
                    target = ""
                    if address.target_ref is not None:
                        target = f" ({address.target_ref.kind}: {address.target_ref.name})"
                    out.print_info("", "  %s%s", address.ip, target)

    def show_deployment_details(self, namespace: str) -> None:
        """Print replica counts, rollout strategy and container specs per deployment."""
        out = self.formatter
        out.print_section("Deployment Layer")
        deployments = self.client.list_deployments(namespace)

        for i, deploy in enumerate(deployments):
            out.print_resource(tree_prefix(i, len(deployments)), "Deployment", deploy.metadata.name)

            with out.indented():
                spec = deploy.spec
                available = (deploy.status.available_replicas if deploy.status else None) or 0
                desired = spec.replicas if spec.replicas is not None else 1
                out.print_info("", "Replicas: %d/%d", available, desired)

                strategy = spec.strategy
                out.print_info("", "Strategy: %s", (strategy.type if strategy else None) or ROLLING_UPDATE)
                if strategy is not None and strategy.rolling_update is not None:
                    rolling = strategy.rolling_update
                    max_surge = rolling.max_surge if rolling.max_surge is not None else DEFAULT_ROLLOUT_BUDGET
                    max_unavailable = (rolling.max_unavailable if rolling.max_unavailable is not None
                                       else DEFAULT_ROLLOUT_BUDGET)
                    out.print_info("", "Max Surge: %s", max_surge)
                    out.print_info("", "Max Unavailable: %s", max_unavailable)

                for container in spec.template.spec.containers or []:
                    self._print_container(container)

    def _print_container(self, container) -> None:
        out = self.formatter
        out.print_info("", "Container: %s (Image: %s)", container.name, container.image)
        for port in container.ports or []:
            out.print_info("", "  Port: %d/%s", port.container_port, port.protocol or "TCP")

        resources = container.resources
        if resources is None or not (resources.limits or resources.requests):
            return

        out.print_info("", "  Resources:")
        if resources.limits:
            out.print_info("", "    Limits: CPU: %s, Memory: %s",
                           resources.limits.get('cpu', "0"), resources.limits.get('memory', "0"))
        if resources.requests:
            out.print_info("", "    Requests: CPU: %s, Memory: %s",
                           resources.requests.get('cpu', "0"), resources.requests.get('memory', "0"))

    def show_hpa_details(self, namespace: str) -> None:
        """Print scale target, replica bounds and metric targets per HPA."""
        out = self.formatter
        out.print_section("HPA Layer")
        hpas = self.client.list_horizontal_pod_autoscalers(namespace)

        for i, hpa in enumerate(hpas):
            out.print_resource(tree_prefix(i, len(hpas)), "HPA", hpa.metadata.name)

            with out.indented():
                spec = hpa.spec
                out.print_info("", "Target: %s/%s", spec.scale_target_ref.kind, spec.scale_target_ref.name)
                out.print_info("", "Min Replicas: %d", spec.min_replicas if spec.min_replicas is not None else 1)
                out.print_info("", "Max Replicas: %d", spec.max_replicas)

                for metric in spec.metrics or []:
                    if metric.type == RESOURCE_METRIC and metric.resource is not None:
                        out.print_info("", "Resource Metric: %s", metric.resource.name)
                        target = metric.resource.target
                        if target is not None and target.average_utilization is not None:
                            out.print_info("", "  Target Utilization: %d%%", target.average_utilization)
                        if target is not None and target.average_value is not None:
                            out.print_info("", "  Target Value: %s", target.average_value)
                    elif metric.type == PODS_METRIC and metric.pods is not None:
                        out.print_info("", "Pods Metric: %s", metric.pods.metric.name)
                        out.print_info("", "  Target Average Value: %s", metric.pods.target.average_value)

                current = (hpa.status.current_replicas if hpa.status else None) or 0
                if current > 0:
                    out.print_info("", "Current Replicas: %d", current)
                    out.print_info("", "Desired Replicas: %d", hpa.status.desired_replicas or 0)

    def show_config_map_usage(self, namespace: str) -> None:
        """Print each config map and the pods consuming it."""
        out = self.formatter
        out.print_section("ConfigMap Layer")
        config_maps = self.client.list_config_maps(namespace)

        for i, cm in enumerate(config_maps):
            out.print_resource(tree_prefix(i, len(config_maps)), "ConfigMap", cm.metadata.name)

            with out.indented():
                out.print_info("", "Data Keys: %d", len(cm.data or {}))
                self._print_users(namespace, cm.metadata.name, find_config_map_usage)

    def show_secret_usage(self, namespace: str) -> None:
        """Print each secret and the pods consuming it."""
        out = self.formatter
        out.print_section("Secret Layer")
        secrets = self.client.list_secrets(namespace)

        for i, secret in enumerate(secrets):
            out.print_resource(tree_prefix(i, len(secrets)), "Secret", secret.metadata.name)

            with out.indented():
                out.print_info("", "Type: %s", secret.type)
                out.print_info("", "Data Keys: %d", len(secret.data or {}))
                self._print_users(namespace, secret.metadata.name, find_secret_usage)

    def _print_users(self, namespace: str, name: str, find_usage) -> None:
        pods = self.client.list_pods(namespace=namespace)

        found = False
        for pod in pods:
            usages = find_usage(pod, name)
            if not usages:
                continue
            if not found:
                self.formatter.print_info("", "Used by:")
                found = True
            self.formatter.print_relation("Pod", pod.metadata.name, *(usage.description for usage in usages))
