"""MicroLens CLI - map Kubernetes resources and their relationships."""

import click
import structlog
from pydantic import ValidationError

from microlens import __author__, __repository__, __version__
from microlens.clients.kubernetes.client_factory import KubernetesClientFactory
from microlens.config.settings import Settings
from microlens.core.exceptions import MicroLensException
from microlens.core.utils import setup_logging
from microlens.reporting.formatter import Formatter
from microlens.reporting.orchestrator import MappingOrchestrator

logger = structlog.get_logger(__name__)

VERSION_MESSAGE = (
    "Kubernetes MicroLens v%(version)s\n"
    "A lightweight Kubernetes resource visualization tool\n"
    f"\nAuthor: {__author__}\n"
    f"Repository: {__repository__}"
)


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--namespace', '-n', default=None, help='Process only the specified namespace')
@click.option('--exclude-ns', 'exclude_ns', multiple=True,
              help='Exclude specified namespaces (can be specified multiple times)')
@click.option('--nodes', is_flag=True, help='Show node capacity and requested resources first')
@click.option('--utilization', is_flag=True, help='Show request/limit totals for each namespace')
@click.option('--context', default=None, help='Kubeconfig context to use')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.version_option(__version__, '-v', '--version', prog_name='k8s-microlens', message=VERSION_MESSAGE)
@click.pass_context
def main(ctx, namespace, exclude_ns, nodes, utilization, context, debug):
    """
    Kubernetes MicroLens - A lightweight Kubernetes resource visualization tool.

    Prints ingresses, services, pods, deployments, HPAs, config maps and
    secrets per namespace, and how they reference each other.

    The kubeconfig is read from $KUBECONFIG, or ~/.kube/config when unset.

    \b
    Examples:
      k8s-microlens                  # all namespaces
      k8s-microlens -n default       # a single namespace
      k8s-microlens --exclude-ns kube-system --exclude-ns kube-public
    """
    formatter = Formatter()

    try:
        settings = Settings.create_from_env()
    except ValidationError as e:
        formatter.print_error(f"Error loading settings: {e}")
        ctx.exit(1)

    if debug:
        settings.debug = True
    setup_logging(log_level=settings.effective_log_level.value)

    try:
        factory = KubernetesClientFactory(settings.kubernetes)
        k8s_client = factory.create_client(context=context)
        k8s_client.connect()
    except MicroLensException as e:
        logger.error("Client initialization failed", error=str(e))
        formatter.print_error(f"Error initializing resource mapper: {e}")
        ctx.exit(1)

    with MappingOrchestrator(k8s_client, formatter, show_utilization=utilization) as orchestrator:
        orchestrator.print_banner()

        try:
            namespaces = orchestrator.resolve_namespaces(namespace, exclude_ns)
        except MicroLensException as e:
            logger.error("Namespace resolution failed", error=str(e))
            formatter.print_error(f"Error getting namespaces: {e}")
            ctx.exit(1)

        orchestrator.run(namespaces, show_nodes=nodes)

    ctx.exit(0)


if __name__ == '__main__':
    main()
