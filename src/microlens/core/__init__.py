from .exceptions import *
from .base_client import BaseClient
from .utils import *

__all__ = [
    "BaseClient",
    "MicroLensException",
    "ConfigurationException",
    "ClientConnectionException",
    "ResourceFetchException",
    "NamespaceNotFoundException",
    "setup_logging",
    "format_cpu",
    "format_memory",
    "cpu_millicores",
    "memory_bytes",
    "tree_prefix",
    "format_label_selector",
]
