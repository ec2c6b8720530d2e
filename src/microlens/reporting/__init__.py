from .formatter import Formatter
from .metrics import MetricsReporter
from .processor import ResourceProcessor
from .orchestrator import MappingOrchestrator

__all__ = [
    "Formatter",
    "MetricsReporter",
    "ResourceProcessor",
    "MappingOrchestrator",
]
