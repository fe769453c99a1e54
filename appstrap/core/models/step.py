"""
Step models — severity, pipeline states and per-step results.

A StepResult is the pipeline's I/O contract with each step: the step
reports what happened and hands back the configuration it leaves
behind. The severity tag on the result, not the exception that caused
it, decides whether the run continues.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

from appstrap.core.models.config import Configuration


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Severity(StrEnum):
    """How a step failure affects the run."""

    FATAL = "fatal"
    BEST_EFFORT = "best_effort"


class PipelineState(StrEnum):
    """Linear lifecycle of one bootstrap run."""

    CREATED = "created"
    REQUIREMENTS_CHECKED = "requirements_checked"
    PROJECT_PROVISIONED = "project_provisioned"
    CONFIGURATION_RESOLVED = "configuration_resolved"
    ENVIRONMENT_WRITTEN = "environment_written"
    DATABASE_HANDLED = "database_handled"
    DOCKER_HANDLED = "docker_handled"
    VERSION_CONTROL_HANDLED = "version_control_handled"
    FINALIZED = "finalized"
    SUCCEEDED = "succeeded"
    ROLLED_BACK = "rolled_back"


class StepResult(BaseModel):
    """Outcome of one pipeline step."""

    step: str
    severity: Severity
    status: Literal["ok", "skipped", "warning", "failed"] = "ok"
    message: str = ""
    error: str | None = None
    warnings: list[str] = Field(default_factory=list)
    config: Configuration | None = None

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status in ("ok", "skipped", "warning")

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def aborts_pipeline(self) -> bool:
        """Fatal failures stop the run; best-effort ones never do."""
        return self.failed and self.severity is Severity.FATAL

    @classmethod
    def success(
        cls,
        step: str,
        severity: Severity,
        message: str = "",
        config: Configuration | None = None,
    ) -> StepResult:
        return cls(step=step, severity=severity, status="ok", message=message, config=config)

    @classmethod
    def skip(cls, step: str, severity: Severity, reason: str = "") -> StepResult:
        return cls(step=step, severity=severity, status="skipped", message=reason)

    @classmethod
    def warning(cls, step: str, severity: Severity, error: str) -> StepResult:
        return cls(step=step, severity=severity, status="warning", error=error)

    @classmethod
    def failure(cls, step: str, severity: Severity, error: str) -> StepResult:
        return cls(step=step, severity=severity, status="failed", error=error)
