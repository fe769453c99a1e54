"""
Rollback manager — undo what a failed run created.

Actions are recorded at the moment an external effect is about to
happen and replayed newest-first only when a fatal step fails. Replay
is best-effort: a failing action is logged as a ``RollbackWarning`` and
the remaining actions are still attempted, since stopping early leaves
a worse partial state than continuing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from appstrap.adapters.shell.filesystem import remove_path
from appstrap.core.errors import RollbackWarning

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RollbackAction:
    """A named, idempotent reversal of one committed effect."""

    name: str
    undo: Callable[[], object]

    @classmethod
    def remove(cls, target: Path, name: str | None = None) -> RollbackAction:
        """Reversal that deletes *target* if it is still present."""
        return cls(name=name or f"remove {target}", undo=lambda: remove_path(target))


@dataclass
class RollbackReport:
    """What happened during ``execute_all``."""

    attempted: list[str] = field(default_factory=list)
    succeeded: list[str] = field(default_factory=list)
    warnings: list[RollbackWarning] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.warnings

    def to_dict(self) -> dict:
        return {
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "warnings": [str(w) for w in self.warnings],
        }


class RollbackManager:
    """Ordered record of reversible actions for one run."""

    def __init__(self) -> None:
        self._actions: list[RollbackAction] = []

    def __len__(self) -> int:
        return len(self._actions)

    @property
    def actions(self) -> tuple[RollbackAction, ...]:
        """Registered actions in registration order."""
        return tuple(self._actions)

    def register(self, action: RollbackAction) -> None:
        logger.debug("Rollback registered: %s", action.name)
        self._actions.append(action)

    def register_callable(self, name: str, undo: Callable[[], object]) -> None:
        self.register(RollbackAction(name=name, undo=undo))

    def clear(self) -> None:
        """Discard all actions (the run succeeded)."""
        self._actions.clear()

    def execute_all(self) -> RollbackReport:
        """Run every action newest-first, continuing past failures."""
        report = RollbackReport()

        for action in reversed(self._actions):
            report.attempted.append(action.name)
            try:
                action.undo()
            except Exception as e:
                warning = RollbackWarning(action.name, e)
                logger.warning("%s", warning)
                report.warnings.append(warning)
            else:
                logger.info("Rolled back: %s", action.name)
                report.succeeded.append(action.name)

        self._actions.clear()
        return report
