from .report_models import *

__all__ = [
    "UsageKind",
    "UsageSite",
    "StageStatus",
    "StageResult",
    "NamespaceReport",
    "RunSummary",
]
