"""
Process runner — execute one external command and capture its output.

This is the most fundamental adapter: every step that touches an
external tool (composer, git, mysql, npm, ...) goes through here.
Unlike receipt-style adapters, a failed command raises ``ProcessError``
so that the pipeline step boundary can classify it by severity.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from pathlib import Path

from pydantic import BaseModel

from appstrap.core.errors import ProcessError

logger = logging.getLogger(__name__)

# Probes (``node --version``) must answer quickly; mandatory steps such as
# ``composer create-project`` may legitimately take minutes.
QUICK_TIMEOUT = 10
MANDATORY_TIMEOUT = 300


class ProcessResult(BaseModel):
    """Outcome of a successful command."""

    command: list[str] | str
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class ProcessRunner:
    """Run external commands synchronously with a timeout.

    ``command`` may be an argv list (executed directly) or a string
    (executed through ``/bin/sh``, for driver-specific shell syntax).
    No retries: retry policy belongs to the caller.
    """

    name = "shell"

    def which(self, tool: str) -> str | None:
        """Return the resolved path of *tool*, or None if not on PATH."""
        return shutil.which(tool)

    def run(
        self,
        command: list[str] | str,
        cwd: Path | str | None = None,
        timeout: float = MANDATORY_TIMEOUT,
        env: dict[str, str] | None = None,
    ) -> ProcessResult:
        """Run *command* and return its result.

        Raises:
            ProcessError: non-zero exit, timeout, or the executable
                could not be started.
        """
        use_shell = isinstance(command, str)
        logger.debug("Executing: %s (cwd=%s, timeout=%ss)", command, cwd, timeout)

        full_env = None
        if env:
            full_env = os.environ.copy()
            full_env.update(env)

        start = time.monotonic()
        try:
            result = subprocess.run(
                command,
                shell=use_shell,
                cwd=str(cwd) if cwd else None,
                capture_output=True,
                text=True,
                timeout=timeout,
                env=full_env,
            )
        except subprocess.TimeoutExpired as e:
            stderr = e.stderr.decode() if isinstance(e.stderr, bytes) else (e.stderr or "")
            raise ProcessError(
                command, None, stderr.strip(), timed_out=True, timeout=timeout
            ) from e
        except OSError as e:
            raise ProcessError(command, None, str(e)) from e

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = result.stdout.strip()
        stderr = result.stderr.strip()

        if result.returncode != 0:
            logger.debug("Command failed (exit %d): %s", result.returncode, stderr)
            raise ProcessError(command, result.returncode, stderr)

        return ProcessResult(
            command=command,
            exit_code=result.returncode,
            stdout=stdout,
            stderr=stderr,
            duration_ms=elapsed_ms,
        )
