"""Docker artifacts — write the Dockerfile and compose manifest into the project."""

from __future__ import annotations

import logging
from pathlib import Path

from appstrap.adapters.shell.filesystem import write_text
from appstrap.core.engine.rollback import RollbackAction, RollbackManager
from appstrap.core.models.config import Configuration
from appstrap.core.models.template import GeneratedFile
from appstrap.core.services.generators.compose import generate_compose
from appstrap.core.services.generators.dockerfile import generate_dockerfile

logger = logging.getLogger(__name__)


def docker_files(config: Configuration) -> list[GeneratedFile]:
    """Artifacts produced when Docker support is enabled."""
    return [generate_dockerfile(), generate_compose(config)]


def write_docker_files(
    project_path: Path,
    config: Configuration,
    rollback: RollbackManager | None = None,
) -> list[Path]:
    """Write every Docker artifact, registering a removal for each.

    Raises:
        OSError: If a file cannot be written.
    """
    written: list[Path] = []
    for generated in docker_files(config):
        target = generated.target(project_path)
        if rollback is not None:
            rollback.register(RollbackAction.remove(target, name=f"remove {generated.path}"))
        write_text(target, generated.content)
        logger.info("Generated %s — %s", generated.path, generated.reason)
        written.append(target)
    return written
