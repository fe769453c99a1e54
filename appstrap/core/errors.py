"""
Error taxonomy — every failure the bootstrap engine knows how to classify.

Two families:

    BootstrapError    — fatal unless raised inside a best-effort step
        ConfigError       unreadable / malformed configuration document
        RequirementError  missing platform capability or unusable target
        ProcessError      external command failed or timed out

    BootstrapWarning  — recoverable, logged, never escapes a step
        ProvisionWarning  database / version-control best-effort failure
        RollbackWarning   a rollback action itself failed

Whether an error aborts the run is decided by the severity tag of the
step it was raised in, not by the class it belongs to.
"""

from __future__ import annotations


class BootstrapError(Exception):
    """Base class for errors raised by bootstrap steps and adapters."""


class ConfigError(BootstrapError):
    """Raised when the configuration document is missing or invalid."""


class RequirementError(BootstrapError):
    """Raised when a mandatory platform capability is missing."""


class ProcessError(BootstrapError):
    """Raised when an external command exits non-zero or times out."""

    def __init__(
        self,
        command: list[str] | str,
        exit_code: int | None,
        stderr: str = "",
        *,
        timed_out: bool = False,
        timeout: float | None = None,
    ) -> None:
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        self.timed_out = timed_out
        self.timeout = timeout

        if timed_out:
            detail = f"timed out after {timeout}s"
        elif exit_code is None:
            detail = "could not be started"
        else:
            detail = f"failed with exit code {exit_code}"

        message = f"Command '{self.command_line}' {detail}"
        if stderr:
            message = f"{message}: {stderr}"
        super().__init__(message)

    @property
    def command_line(self) -> str:
        """The command as a single display string."""
        if isinstance(self.command, str):
            return self.command
        return " ".join(self.command)


class BootstrapWarning(Exception):
    """Base class for recoverable conditions."""


class ProvisionWarning(BootstrapWarning):
    """A best-effort provisioning step did not complete."""

    def __init__(self, step: str, cause: BaseException | str) -> None:
        self.step = step
        self.cause = cause
        super().__init__(f"{step} skipped: {cause}")


class RollbackWarning(BootstrapWarning):
    """A rollback action failed; remaining actions are still attempted."""

    def __init__(self, action: str, cause: BaseException) -> None:
        self.action = action
        self.cause = cause
        super().__init__(f"Rollback action '{action}' failed: {cause}")
