"""Version control — initial repository for the new project."""

from __future__ import annotations

import logging
from pathlib import Path

from appstrap.adapters.shell.command import ProcessRunner
from appstrap.adapters.vcs.git import GitRepository
from appstrap.core.engine.rollback import RollbackAction, RollbackManager

logger = logging.getLogger(__name__)


def initialize_repository(
    project_path: Path,
    runner: ProcessRunner,
    message: str,
    rollback: RollbackManager | None = None,
) -> str:
    """Run init → stage → commit and return the commit output.

    Raises:
        ProcessError: Any git command failed.
    """
    repo = GitRepository(project_path, runner)
    if rollback is not None:
        rollback.register(RollbackAction.remove(repo.git_dir, name="remove .git"))

    repo.init()
    repo.stage_all()
    result = repo.commit(message)
    logger.info("Initialized git repository in %s", project_path)
    return result.stdout
