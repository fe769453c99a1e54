"""
New project use case — bootstrap one application from the template.

Builds the pipeline context from caller inputs and runs the default
step sequence. Never raises for step failures: the outcome (including
the failing step and what was rolled back) is in the returned report.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from appstrap.adapters.shell.command import ProcessRunner
from appstrap.core.config.prompts import DefaultsPrompter, Prompter
from appstrap.core.config.settings import STABILITY_LEVELS, InstallerSettings
from appstrap.core.engine.pipeline import PipelineContext, PipelineReport, Step, StepPipeline
from appstrap.core.errors import ConfigError
from appstrap.core.models.step import StepResult

logger = logging.getLogger(__name__)


def create_project(
    name: str,
    *,
    base_dir: Path | None = None,
    config_path: Path | None = None,
    stability: str = "dev",
    prompter: Prompter | None = None,
    runner: ProcessRunner | None = None,
    settings: InstallerSettings | None = None,
    progress: Callable[[Step, StepResult], None] | None = None,
) -> PipelineReport:
    """Create a new project called *name* under *base_dir*.

    Args:
        name: Project directory name; also used as the application name.
        base_dir: Parent directory (default: current working directory).
        config_path: Optional configuration document (JSON or YAML).
        stability: Minimum package stability passed to the template tool.
        prompter: Answer source for unset options (default: non-interactive).
        runner: Process runner (default: a real ``ProcessRunner``).
        settings: Installer settings (default: PocketFrame template).
        progress: Called once per step with its result.

    Raises:
        ConfigError: If *name* or *stability* is unusable. Nothing has
            been touched at that point.
    """
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ConfigError(f"Invalid project name: {name!r}")
    if stability not in STABILITY_LEVELS:
        raise ConfigError(
            f"Invalid stability '{stability}' (expected one of: {', '.join(STABILITY_LEVELS)})"
        )

    context = PipelineContext(
        project_name=name,
        base_dir=base_dir or Path.cwd(),
        runner=runner or ProcessRunner(),
        settings=settings or InstallerSettings(),
        stability=stability,
        config_path=config_path,
        prompter=prompter or DefaultsPrompter(),
    )

    logger.info("Creating project '%s' in %s", name, context.base_dir)
    report = StepPipeline(context, progress=progress).run()
    logger.info("Project '%s' finished in state %s", name, report.state)
    return report
