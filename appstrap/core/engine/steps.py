"""
Bootstrap steps — the fixed sequence that turns a name into a project.

Each function receives the pipeline context and the current
configuration (None until the ``configure`` step has run) and returns a
``StepOutput``. Steps raise on failure; the pipeline decides what the
failure means from the step's severity.
"""

from __future__ import annotations

import logging

from appstrap.adapters.shell.filesystem import is_writable_dir
from appstrap.core.engine.pipeline import PipelineContext, Step, StepOutput
from appstrap.core.engine.rollback import RollbackAction
from appstrap.core.errors import ProcessError, RequirementError
from appstrap.core.models.config import Configuration
from appstrap.core.models.step import PipelineState, Severity
from appstrap.core.services.database import provision_database
from appstrap.core.services.docker_manifest import write_docker_files
from appstrap.core.services.env_template import env_values, write_env_file
from appstrap.core.services.git_init import initialize_repository
from appstrap.core.services.telemetry import send_telemetry

logger = logging.getLogger(__name__)


def _require(config: Configuration | None) -> Configuration:
    if config is None:
        raise RuntimeError("configuration has not been resolved yet")
    return config


# ── Steps ───────────────────────────────────────────────────────


def check_requirements(ctx: PipelineContext, config: Configuration | None) -> StepOutput:
    """Target must be new, parent writable, document valid, tools present."""
    target = ctx.project_path
    if target.exists():
        raise RequirementError(f"Target directory already exists: {target}")

    if not is_writable_dir(target.parent):
        raise RequirementError(f"Cannot create projects in {target.parent}: not a writable directory")

    if ctx.config_path is not None:
        ctx.resolver.load_document(ctx.config_path)

    missing = [t for t in ctx.settings.required_tools if ctx.runner.which(t) is None]
    if missing:
        raise RequirementError(f"Missing required tools: {', '.join(missing)}")

    warnings: list[str] = []
    for tool in ctx.settings.optional_tools:
        if ctx.runner.which(tool) is None:
            warnings.append(f"{tool} is not installed — some features might not work")
            continue
        try:
            ctx.runner.run([tool, "--version"], timeout=ctx.settings.quick_timeout)
        except ProcessError as e:
            warnings.append(f"{tool} is not usable ({e}) — some features might not work")

    return StepOutput(message="System requirements met", warnings=warnings)


def provision_project(ctx: PipelineContext, config: Configuration | None) -> StepOutput:
    """Materialise the template into the target directory."""
    # Registered before the command runs: a half-finished create must go too.
    ctx.rollback.register(RollbackAction.remove(ctx.project_path, name="remove project directory"))

    command = ctx.settings.render_create_command(ctx.project_name, ctx.stability)
    ctx.runner.run(command, cwd=ctx.base_dir, timeout=ctx.settings.mandatory_timeout)

    if not ctx.project_path.is_dir():
        raise RequirementError(f"Template did not produce {ctx.project_path}")

    return StepOutput(message=f"Created {ctx.project_path}")


def resolve_configuration(ctx: PipelineContext, config: Configuration | None) -> StepOutput:
    resolved = ctx.resolver.resolve(ctx.defaults, ctx.config_path, ctx.prompter)
    return StepOutput(message=f"Database driver: {resolved.driver}", config=resolved)


def write_environment(ctx: PipelineContext, config: Configuration | None) -> StepOutput:
    config = _require(config)
    values = env_values(config, ctx.project_path.name)
    path = write_env_file(
        ctx.project_path,
        values,
        env_file=ctx.settings.env_file,
        example_file=ctx.settings.env_example_file,
    )
    return StepOutput(message=f"Wrote {path.name}")


def handle_database(ctx: PipelineContext, config: Configuration | None) -> StepOutput:
    config = _require(config)
    message = provision_database(
        ctx.project_path, config, ctx.runner, timeout=ctx.settings.mandatory_timeout
    )
    return StepOutput(message=message)


def handle_docker(ctx: PipelineContext, config: Configuration | None) -> StepOutput:
    config = _require(config)
    written = write_docker_files(ctx.project_path, config, ctx.rollback)
    return StepOutput(message=f"Generated {', '.join(p.name for p in written)}")


def handle_git(ctx: PipelineContext, config: Configuration | None) -> StepOutput:
    initialize_repository(
        ctx.project_path, ctx.runner, ctx.settings.commit_message, ctx.rollback
    )
    return StepOutput(message="Created initial commit")


def finalize(ctx: PipelineContext, config: Configuration | None) -> StepOutput:
    """Post-install commands, then the optional telemetry ping."""
    config = _require(config)
    settings = ctx.settings
    done = []

    ctx.runner.run(settings.key_command, cwd=ctx.project_path, timeout=settings.mandatory_timeout)
    done.append("Application key generated")

    if (ctx.project_path / "package.json").is_file():
        ctx.runner.run(
            settings.node_install_command,
            cwd=ctx.project_path,
            timeout=settings.mandatory_timeout,
        )
        done.append("Node.js dependencies installed")

    if config.telemetry:
        send_telemetry(config, ctx.runner, settings.telemetry_url, settings.quick_timeout)
        done.append("telemetry sent")

    return StepOutput(message=", ".join(done))


# ── Catalogue ───────────────────────────────────────────────────


def default_steps() -> list[Step]:
    """The bootstrap sequence, in its only valid order."""
    return [
        Step(
            "requirements",
            "Checking system requirements",
            PipelineState.REQUIREMENTS_CHECKED,
            Severity.FATAL,
            check_requirements,
        ),
        Step(
            "provision",
            "Creating project structure",
            PipelineState.PROJECT_PROVISIONED,
            Severity.FATAL,
            provision_project,
        ),
        Step(
            "configure",
            "Resolving configuration",
            PipelineState.CONFIGURATION_RESOLVED,
            Severity.FATAL,
            resolve_configuration,
        ),
        Step(
            "environment",
            "Configuring environment",
            PipelineState.ENVIRONMENT_WRITTEN,
            Severity.FATAL,
            write_environment,
        ),
        Step(
            "database",
            "Creating database",
            PipelineState.DATABASE_HANDLED,
            Severity.BEST_EFFORT,
            handle_database,
            enabled=lambda c: not c.skip_database,
        ),
        Step(
            "docker",
            "Generating Docker configuration",
            PipelineState.DOCKER_HANDLED,
            Severity.FATAL,
            handle_docker,
            enabled=lambda c: c.with_docker,
        ),
        Step(
            "git",
            "Initializing Git repository",
            PipelineState.VERSION_CONTROL_HANDLED,
            Severity.BEST_EFFORT,
            handle_git,
            enabled=lambda c: c.init_git,
        ),
        Step(
            "finalize",
            "Finalizing setup",
            PipelineState.FINALIZED,
            Severity.FATAL,
            finalize,
        ),
    ]
