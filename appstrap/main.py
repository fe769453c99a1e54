"""
appstrap — CLI entrypoint.

Usage:
    appstrap --help
    appstrap new blog
    appstrap new blog --config appstrap.json --no-interaction
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from appstrap import __version__
from appstrap.core.config.settings import STABILITY_LEVELS
from appstrap.core.observability.logging_config import (
    ENV_LOG_FILE,
    ENV_LOG_FILE_LEVEL,
    ENV_LOG_LEVEL,
    setup_logging,
)


def _build_runner():
    """Process runner used by ``new`` (replaced in tests)."""
    from appstrap.adapters.shell.command import ProcessRunner

    return ProcessRunner()


@click.group()
@click.version_option(version=__version__, prog_name="appstrap")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """appstrap — bootstrap new framework applications."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get(ENV_LOG_LEVEL, "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get(ENV_LOG_FILE),
        log_file_level=os.environ.get(ENV_LOG_FILE_LEVEL),
        quiet_third_party=not debug,
    )


@cli.command()
@click.argument("name")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration document (JSON, or YAML for .yml/.yaml).",
)
@click.option(
    "--stability",
    "-s",
    type=click.Choice(STABILITY_LEVELS),
    default="dev",
    show_default=True,
    help="Minimum stability of the template package.",
)
@click.option(
    "--no-interaction",
    "-n",
    is_flag=True,
    help="Never prompt; unset options take their defaults.",
)
@click.option(
    "--directory",
    "-d",
    "base_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Parent directory for the project (default: current directory).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output the report as JSON.")
@click.pass_context
def new(
    ctx: click.Context,
    name: str,
    config_path: Path | None,
    stability: str,
    no_interaction: bool,
    base_dir: Path | None,
    as_json: bool,
) -> None:
    """Create a new application called NAME."""
    from appstrap.core.config.prompts import ClickPrompter, DefaultsPrompter
    from appstrap.core.config.settings import InstallerSettings
    from appstrap.core.errors import ConfigError
    from appstrap.core.use_cases.new_project import create_project

    quiet = ctx.obj.get("quiet", False) or as_json
    settings = InstallerSettings()
    prompter = DefaultsPrompter() if no_interaction or as_json else ClickPrompter()

    if not quiet:
        click.secho(f"\n🚀 {settings.framework_name} installer", fg="cyan", bold=True)
        click.echo(f"   Creating '{name}' from {settings.template_package} ({stability})")
        click.echo()

    def progress(step, result) -> None:
        if quiet:
            return
        if result.status == "ok":
            click.secho(f"   ✓ {step.label}", fg="green", nl=False)
            click.echo(f"  {result.message}" if result.message else "")
            for warning in result.warnings:
                click.secho(f"     ⚠️  {warning}", fg="yellow")
        elif result.status == "skipped":
            click.secho(f"   ⊘ {step.label} (skipped)", fg="bright_black")
        elif result.status == "warning":
            click.secho(f"   ⚠️  {step.label}", fg="yellow", nl=False)
            click.echo(f"  {result.error}")
        else:
            click.secho(f"   ✗ {step.label}", fg="red")

    try:
        report = create_project(
            name,
            base_dir=base_dir,
            config_path=config_path,
            stability=stability,
            prompter=prompter,
            runner=_build_runner(),
            settings=settings,
            progress=progress,
        )
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(report.exit_code)

    if not report.succeeded:
        click.echo()
        click.secho(f"❌ Installation failed at '{report.failed_step}'", fg="red", bold=True)
        click.echo(f"   {report.error}")
        if report.rollback is not None:
            if report.rollback.complete:
                click.secho("   ↩ All changes were rolled back", fg="yellow")
            else:
                click.secho("   ⚠️  Rollback was incomplete:", fg="yellow")
                for warning in report.rollback.warnings:
                    click.echo(f"     • {warning}")
        sys.exit(1)

    if quiet:
        return

    click.echo()
    click.secho(f"✅ {name} is ready!", fg="green", bold=True)
    click.echo()
    click.secho("   Next steps:", fg="white", bold=True)
    click.echo(f"     cd {report.project_path}")
    click.echo(f"     {settings.serve_command}")
    click.echo()
    click.echo(f"   📖 Documentation: {settings.docs_url}")


if __name__ == "__main__":
    cli()
