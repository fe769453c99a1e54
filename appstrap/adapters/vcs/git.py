"""
Git adapter — version control operations for a freshly created project.

Uses the git CLI through a process runner, never a library binding.
Every operation raises ``ProcessError`` on failure; callers decide
whether that is fatal.
"""

from __future__ import annotations

import logging
from pathlib import Path

from appstrap.adapters.shell.command import ProcessResult, ProcessRunner
from appstrap.core.errors import ProcessError

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 30

# Used only when the user has no git identity configured, so the
# initial commit does not fail on a bare CI machine.
_FALLBACK_IDENTITY = {
    "GIT_AUTHOR_NAME": "appstrap",
    "GIT_AUTHOR_EMAIL": "appstrap@localhost",
    "GIT_COMMITTER_NAME": "appstrap",
    "GIT_COMMITTER_EMAIL": "appstrap@localhost",
}


class GitRepository:
    """Git operations rooted at one working tree."""

    def __init__(self, root: Path, runner: ProcessRunner, timeout: int = GIT_TIMEOUT):
        self.root = root
        self.runner = runner
        self.timeout = timeout

    @property
    def git_dir(self) -> Path:
        return self.root / ".git"

    def is_available(self) -> bool:
        return self.runner.which("git") is not None

    def init(self) -> ProcessResult:
        return self._git(["init"])

    def stage_all(self) -> ProcessResult:
        return self._git(["add", "."])

    def commit(self, message: str) -> ProcessResult:
        env = None if self._has_identity() else _FALLBACK_IDENTITY
        return self._git(["commit", "-m", message], env=env)

    # ── Helpers ─────────────────────────────────────────────────

    def _has_identity(self) -> bool:
        try:
            email = self._git(["config", "user.email"])
        except ProcessError:
            return False
        return bool(email.stdout.strip())

    def _git(self, args: list[str], env: dict[str, str] | None = None) -> ProcessResult:
        logger.debug("git %s (cwd=%s)", " ".join(args), self.root)
        return self.runner.run(["git", *args], cwd=self.root, timeout=self.timeout, env=env)
