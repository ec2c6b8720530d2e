"""Models describing what a mapping run found and how each stage ended."""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from enum import Enum


class UsageKind(str, Enum):
    VOLUME = "volume"
    ENV_FROM = "envFrom"
    ENV = "env"


class UsageSite(BaseModel):
    """One place in a pod spec that references a config map or secret."""

    model_config = ConfigDict(frozen=True)

    kind: UsageKind
    source: str  # volume name for VOLUME, container name otherwise
    env_var: Optional[str] = None

    @property
    def description(self) -> str:
        if self.kind == UsageKind.VOLUME:
            return f"Mounted as volume: {self.source}"
        if self.kind == UsageKind.ENV_FROM:
            return f"Used in envFrom by container: {self.source}"
        return f"Used as env var '{self.env_var}' in container: {self.source}"


class StageStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class StageResult(BaseModel):
    stage: str
    namespace: str
    status: StageStatus
    error: Optional[str] = None


class NamespaceReport(BaseModel):
    """Outcome of processing a single namespace."""

    namespace: str
    stages: List[StageResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(stage.status != StageStatus.FAILED for stage in self.stages)

    @property
    def failed_stage(self) -> Optional[StageResult]:
        for stage in self.stages:
            if stage.status == StageStatus.FAILED:
                return stage
        return None

    @property
    def error(self) -> Optional[str]:
        failed = self.failed_stage
        return failed.error if failed else None


class RunSummary(BaseModel):
    """Namespace reports and node metric errors collected over one run."""

    namespaces: List[NamespaceReport] = Field(default_factory=list)
    node_errors: List[str] = Field(default_factory=list)

    def add(self, report: NamespaceReport) -> None:
        self.namespaces.append(report)

    @property
    def succeeded_count(self) -> int:
        return sum(1 for report in self.namespaces if report.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.namespaces) - self.succeeded_count
