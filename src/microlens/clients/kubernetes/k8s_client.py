"""Read-only Kubernetes client exposing the list/get calls the reports need."""

from typing import Dict, Any, List, Optional
import structlog
from kubernetes import client, config
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from microlens.core.base_client import BaseClient
from microlens.core.exceptions import (
    ClientConnectionException,
    NamespaceNotFoundException,
    ResourceFetchException,
)

logger = structlog.get_logger(__name__)

DEFAULT_REQUEST_TIMEOUT = 30

API_ERRORS = (ApiException, HTTPError)


class KubernetesClient(BaseClient):
    """Kubernetes client wrapping the typed API groups used for reporting."""

    def __init__(self,
                 config_dict: Dict[str, Any],
                 kubeconfig_path: Optional[str] = None,
                 context: Optional[str] = None,
                 request_timeout: Optional[int] = None):
        super().__init__(config_dict, "KubernetesClient")
        self.kubeconfig_path = kubeconfig_path
        self.context = context
        self.request_timeout = request_timeout or config_dict.get(
            "request_timeout_seconds", DEFAULT_REQUEST_TIMEOUT
        )

        # API clients
        self.v1 = None
        self.apps_v1 = None
        self.networking_v1 = None
        self.autoscaling_v2 = None

    def connect(self) -> None:
        """Load kubeconfig and build the API group clients."""
        try:
            config.load_kube_config(config_file=self.kubeconfig_path, context=self.context)
            self.logger.info("Loaded kubeconfig", path=self.kubeconfig_path, context=self.context)

            # one attempt per call, no urllib3 retries
            configuration = client.Configuration.get_default_copy()
            configuration.retries = False
            api_client = client.ApiClient(configuration)

            self.v1 = client.CoreV1Api(api_client)
            self.apps_v1 = client.AppsV1Api(api_client)
            self.networking_v1 = client.NetworkingV1Api(api_client)
            self.autoscaling_v2 = client.AutoscalingV2Api(api_client)

            self._connected = True

        except Exception as e:
            raise ClientConnectionException("Kubernetes", f"error building kubeconfig: {e}")

    def disconnect(self) -> None:
        """Drop the API group clients."""
        self.v1 = None
        self.apps_v1 = None
        self.networking_v1 = None
        self.autoscaling_v2 = None
        self._connected = False
        self.logger.info("Kubernetes client disconnected")

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise ClientConnectionException("Kubernetes", "Client not connected")

    def list_namespaces(self) -> List[client.V1Namespace]:
        """List all namespaces."""
        self._ensure_connected()
        try:
            return self.v1.list_namespace(_request_timeout=self.request_timeout).items
        except API_ERRORS as e:
            raise ResourceFetchException("namespaces", str(e))

    def read_namespace(self, name: str) -> client.V1Namespace:
        """Get a single namespace, raising NamespaceNotFoundException when it is absent."""
        self._ensure_connected()
        try:
            return self.v1.read_namespace(name, _request_timeout=self.request_timeout)
        except ApiException as e:
            if e.status == 404:
                raise NamespaceNotFoundException(name)
            raise ResourceFetchException("namespace", str(e))
        except HTTPError as e:
            raise ResourceFetchException("namespace", str(e))

    def list_nodes(self) -> List[client.V1Node]:
        """List cluster nodes."""
        self._ensure_connected()
        try:
            return self.v1.list_node(_request_timeout=self.request_timeout).items
        except API_ERRORS as e:
            raise ResourceFetchException("nodes", str(e))

    def list_pods(self,
                  namespace: Optional[str] = None,
                  label_selector: Optional[str] = None,
                  field_selector: Optional[str] = None) -> List[client.V1Pod]:
        """List pods in a namespace, or across all namespaces when none is given."""
        self._ensure_connected()
        kwargs = {'_request_timeout': self.request_timeout}
        if label_selector:
            kwargs['label_selector'] = label_selector
        if field_selector:
            kwargs['field_selector'] = field_selector
        try:
            if namespace:
                return self.v1.list_namespaced_pod(namespace, **kwargs).items
            return self.v1.list_pod_for_all_namespaces(**kwargs).items
        except API_ERRORS as e:
            raise ResourceFetchException("pods", str(e))

    def list_deployments(self, namespace: str) -> List[client.V1Deployment]:
        """List deployments in a namespace."""
        self._ensure_connected()
        try:
            return self.apps_v1.list_namespaced_deployment(
                namespace, _request_timeout=self.request_timeout
            ).items
        except API_ERRORS as e:
            raise ResourceFetchException("deployments", str(e))

    def list_horizontal_pod_autoscalers(self, namespace: str) -> List[client.V2HorizontalPodAutoscaler]:
        """List autoscaling/v2 horizontal pod autoscalers in a namespace."""
        self._ensure_connected()
        try:
            return self.autoscaling_v2.list_namespaced_horizontal_pod_autoscaler(
                namespace, _request_timeout=self.request_timeout
            ).items
        except API_ERRORS as e:
            raise ResourceFetchException("HPAs", str(e))

    def list_services(self, namespace: str) -> List[client.V1Service]:
        """List services in a namespace."""
        self._ensure_connected()
        try:
            return self.v1.list_namespaced_service(
                namespace, _request_timeout=self.request_timeout
            ).items
        except API_ERRORS as e:
            raise ResourceFetchException("services", str(e))

    def read_endpoints(self, name: str, namespace: str) -> Optional[client.V1Endpoints]:
        """Get the Endpoints object backing a service, or None if it cannot be read."""
        self._ensure_connected()
        try:
            return self.v1.read_namespaced_endpoints(
                name, namespace, _request_timeout=self.request_timeout
            )
        except API_ERRORS as e:
            self.logger.debug("Endpoints unavailable", service=name, namespace=namespace, error=str(e))
            return None

    def list_ingresses(self, namespace: str) -> List[client.V1Ingress]:
        """List ingresses in a namespace."""
        self._ensure_connected()
        try:
            return self.networking_v1.list_namespaced_ingress(
                namespace, _request_timeout=self.request_timeout
            ).items
        except API_ERRORS as e:
            raise ResourceFetchException("ingresses", str(e))

    def list_config_maps(self, namespace: str) -> List[client.V1ConfigMap]:
        """List config maps in a namespace."""
        self._ensure_connected()
        try:
            return self.v1.list_namespaced_config_map(
                namespace, _request_timeout=self.request_timeout
            ).items
        except API_ERRORS as e:
            raise ResourceFetchException("configmaps", str(e))

    def list_secrets(self, namespace: str) -> List[client.V1Secret]:
        """List secrets in a namespace."""
        self._ensure_connected()
        try:
            return self.v1.list_namespaced_secret(
                namespace, _request_timeout=self.request_timeout
            ).items
        except API_ERRORS as e:
            raise ResourceFetchException("secrets", str(e))
