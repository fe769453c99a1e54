"""
Step pipeline — the central orchestration loop.

Runs a fixed, linear sequence of steps against one pipeline context.
Each step reports a ``StepResult`` tagged with its severity; the
pipeline looks only at that tag:

    FATAL + failed        → roll back every registered action, stop
    BEST_EFFORT + failed  → downgraded to a warning, continue
    disabled              → skipped, continue

Flow:
    CREATED → REQUIREMENTS_CHECKED → PROJECT_PROVISIONED → CONFIGURATION_RESOLVED
    → ENVIRONMENT_WRITTEN → DATABASE_HANDLED → DOCKER_HANDLED
    → VERSION_CONTROL_HANDLED → FINALIZED → (SUCCEEDED | ROLLED_BACK)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from appstrap.adapters.shell.command import ProcessRunner
from appstrap.core.config.prompts import DefaultsPrompter, Prompter
from appstrap.core.config.resolver import DEFAULTS, ConfigResolver
from appstrap.core.config.settings import InstallerSettings
from appstrap.core.engine.rollback import RollbackManager, RollbackReport
from appstrap.core.errors import ProvisionWarning
from appstrap.core.models.config import Configuration
from appstrap.core.models.step import PipelineState, Severity, StepResult

logger = logging.getLogger(__name__)


@dataclass
class StepOutput:
    """What a step function hands back on success."""

    message: str = ""
    config: Configuration | None = None
    warnings: list[str] = field(default_factory=list)


StepFunction = Callable[["PipelineContext", "Configuration | None"], StepOutput]


@dataclass
class Step:
    """One named unit of work in the pipeline."""

    name: str
    label: str
    state: PipelineState
    severity: Severity
    run: StepFunction
    enabled: Callable[[Configuration], bool] | None = None

    def is_enabled(self, config: Configuration | None) -> bool:
        # Steps before configuration resolution are unconditional.
        if self.enabled is None or config is None:
            return True
        return self.enabled(config)


@dataclass
class PipelineContext:
    """Everything a step may read during one run.

    The configuration is deliberately absent: it is owned by the
    pipeline and passed to each step explicitly.
    """

    project_name: str
    base_dir: Path
    runner: ProcessRunner
    settings: InstallerSettings = field(default_factory=InstallerSettings)
    stability: str = "dev"
    config_path: Path | None = None
    prompter: Prompter = field(default_factory=DefaultsPrompter)
    resolver: ConfigResolver = field(default_factory=ConfigResolver)
    defaults: dict[str, Any] = field(default_factory=lambda: dict(DEFAULTS))
    rollback: RollbackManager = field(default_factory=RollbackManager)

    def __post_init__(self) -> None:
        self.base_dir = self.base_dir.resolve()
        self._project_path = (self.base_dir / self.project_name).resolve()

    @property
    def project_path(self) -> Path:
        """Absolute target directory, fixed for the whole run."""
        return self._project_path


@dataclass
class PipelineReport:
    """Result of one pipeline run."""

    project_path: Path
    state: PipelineState = PipelineState.CREATED
    results: list[StepResult] = field(default_factory=list)
    states: list[PipelineState] = field(default_factory=lambda: [PipelineState.CREATED])
    config: Configuration | None = None
    failed_step: str | None = None
    error: str | None = None
    rollback: RollbackReport | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is PipelineState.SUCCEEDED

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1

    @property
    def executed_steps(self) -> list[str]:
        return [r.step for r in self.results if r.status != "skipped"]

    @property
    def warnings(self) -> list[StepResult]:
        return [r for r in self.results if r.status == "warning" or r.warnings]

    def to_dict(self) -> dict:
        return {
            "project_path": str(self.project_path),
            "state": str(self.state),
            "failed_step": self.failed_step,
            "error": self.error,
            "steps": [r.model_dump(mode="json", exclude={"config"}) for r in self.results],
            "config": self.config.to_flat() if self.config else None,
            "rollback": self.rollback.to_dict() if self.rollback else None,
        }


class StepPipeline:
    """Run steps in order; fail fast on fatal steps, roll back on failure."""

    def __init__(
        self,
        context: PipelineContext,
        steps: list[Step] | None = None,
        progress: Callable[[Step, StepResult], None] | None = None,
    ):
        if steps is None:
            from appstrap.core.engine.steps import default_steps

            steps = default_steps()
        self.context = context
        self.steps = steps
        self.progress = progress
        self.state = PipelineState.CREATED

    def run(self) -> PipelineReport:
        report = PipelineReport(project_path=self.context.project_path)
        config: Configuration | None = None

        for step in self.steps:
            if step.is_enabled(config):
                result = self._run_step(step, config)
            else:
                result = StepResult.skip(step.name, step.severity, "disabled by configuration")

            report.results.append(result)
            self._notify(step, result)

            if result.aborts_pipeline:
                logger.error("Step '%s' failed: %s", step.name, result.error)
                report.failed_step = step.name
                report.error = result.error
                report.rollback = self.context.rollback.execute_all()
                self._advance(report, PipelineState.ROLLED_BACK)
                report.config = config
                return report

            if result.config is not None:
                config = result.config
            self._advance(report, step.state)

        self.context.rollback.clear()
        report.config = config
        self._advance(report, PipelineState.SUCCEEDED)
        return report

    def _run_step(self, step: Step, config: Configuration | None) -> StepResult:
        logger.info("→ %s", step.label)
        start = time.monotonic()
        try:
            output = step.run(self.context, config)
        except Exception as e:
            elapsed_ms = int((time.monotonic() - start) * 1000)
            logger.debug("Step '%s' raised", step.name, exc_info=True)
            if step.severity is Severity.BEST_EFFORT:
                warning = ProvisionWarning(step.label, e)
                logger.warning("%s", warning)
                result = StepResult.warning(step.name, step.severity, str(warning))
            else:
                result = StepResult.failure(step.name, step.severity, str(e))
            result.duration_ms = elapsed_ms
            return result

        for message in output.warnings:
            logger.warning("%s: %s", step.label, message)

        result = StepResult.success(step.name, step.severity, output.message, output.config)
        result.warnings = list(output.warnings)
        result.duration_ms = int((time.monotonic() - start) * 1000)
        return result

    def _advance(self, report: PipelineReport, state: PipelineState) -> None:
        self.state = state
        report.state = state
        report.states.append(state)

    def _notify(self, step: Step, result: StepResult) -> None:
        if self.progress is not None:
            self.progress(step, result)
