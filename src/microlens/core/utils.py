"""Utility functions for logging and resource quantities."""

import logging
import math
import sys
from decimal import Decimal
from typing import Any, Dict, Optional, Union

import structlog
from kubernetes.utils import parse_quantity

MEMORY_UNITS = ["B", "Ki", "Mi", "Gi", "Ti"]

BRANCH_PREFIX = "├──"
LAST_BRANCH_PREFIX = "└──"

QuantityValue = Union[str, int, float, Decimal]


def setup_logging(log_level: str = "WARNING") -> None:
    """Setup structured logging configuration."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(message)s',
        stream=sys.stderr,
    )

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def cpu_millicores(quantity: Optional[QuantityValue]) -> int:
    """Parse a Kubernetes CPU quantity (e.g. '250m', '2') to millicores, rounding up."""
    if quantity is None or quantity == "":
        return 0
    return int(math.ceil(parse_quantity(quantity) * 1000))


def memory_bytes(quantity: Optional[QuantityValue]) -> int:
    """Parse a Kubernetes memory quantity (e.g. '128Mi', '1G') to bytes, rounding up."""
    if quantity is None or quantity == "":
        return 0
    return int(math.ceil(parse_quantity(quantity)))


def resource_totals(resources: Optional[Dict[str, Any]]) -> Dict[str, int]:
    """Return CPU millicores and memory bytes declared in a requests/limits map."""
    resources = resources or {}
    return {
        'cpu': cpu_millicores(resources.get('cpu')),
        'memory': memory_bytes(resources.get('memory')),
    }


def format_cpu(millicores: int) -> str:
    """Format millicores to human readable format."""
    if millicores < 1000:
        return f"{millicores}m"
    return f"{millicores / 1000:.2f}"


def format_memory(num_bytes: int) -> str:
    """Format bytes using the largest binary unit up to Ti."""
    if num_bytes == 0:
        return "0B"

    # floor(log1024(bytes)) clamped to the last unit
    index = 0
    while index < len(MEMORY_UNITS) - 1 and abs(num_bytes) >= 1024 ** (index + 1):
        index += 1

    return f"{num_bytes / 1024 ** index:.2f}{MEMORY_UNITS[index]}"


def tree_prefix(index: int, total: int) -> str:
    """Return the tree branch glyph for the item at index in a listing of total items."""
    if index == total - 1:
        return LAST_BRANCH_PREFIX
    return BRANCH_PREFIX


def format_label_selector(selector: Optional[Dict[str, str]]) -> str:
    """Build an equality-based label selector string from a selector map."""
    if not selector:
        return ""
    return ",".join(f"{key}={value}" for key, value in sorted(selector.items()))
