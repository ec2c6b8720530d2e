"""Kubernetes client factory."""

from typing import Optional
import structlog

from microlens.config.settings import KubernetesSettings
from .k8s_client import KubernetesClient

logger = structlog.get_logger(__name__)


class KubernetesClientFactory:
    """Factory for creating Kubernetes clients from settings."""
    
    def __init__(self, settings: KubernetesSettings):
        self.settings = settings
        self.context = settings.context
        self.request_timeout = settings.request_timeout_seconds
        
        self.logger = logger.bind(factory="kubernetes")
    
    def create_client(self, context: Optional[str] = None) -> KubernetesClient:
        """Create an unconnected Kubernetes client; resolves the kubeconfig path."""
        kubeconfig_path = self.settings.resolve_kubeconfig_path()
        self.logger.debug("Creating Kubernetes client", kubeconfig=kubeconfig_path)
        return KubernetesClient(
            config_dict=self.settings.model_dump(),
            kubeconfig_path=kubeconfig_path,
            context=context or self.context,
            request_timeout=self.request_timeout,
        )
