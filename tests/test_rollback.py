"""
Tests for the rollback manager.
"""

from pathlib import Path

from appstrap.core.engine.rollback import RollbackAction, RollbackManager
from appstrap.core.errors import RollbackWarning


class TestRollbackManager:
    def test_lifo_order(self):
        calls = []
        manager = RollbackManager()
        for name in ("first", "second", "third"):
            manager.register_callable(name, lambda n=name: calls.append(n))
        report = manager.execute_all()
        assert calls == ["third", "second", "first"]
        assert report.attempted == ["third", "second", "first"]
        assert report.complete

    def test_continues_after_failure(self):
        calls = []

        def explode():
            raise OSError("disk on fire")

        manager = RollbackManager()
        manager.register_callable("a", lambda: calls.append("a"))
        manager.register_callable("broken", explode)
        manager.register_callable("c", lambda: calls.append("c"))

        report = manager.execute_all()

        assert calls == ["c", "a"]
        assert report.succeeded == ["c", "a"]
        assert not report.complete
        assert len(report.warnings) == 1
        warning = report.warnings[0]
        assert isinstance(warning, RollbackWarning)
        assert warning.action == "broken"
        assert "disk on fire" in str(warning)

    def test_execute_all_empties_the_list(self):
        manager = RollbackManager()
        manager.register_callable("a", lambda: None)
        manager.execute_all()
        assert len(manager) == 0
        assert manager.execute_all().attempted == []

    def test_clear(self):
        calls = []
        manager = RollbackManager()
        manager.register_callable("a", lambda: calls.append("a"))
        manager.clear()
        manager.execute_all()
        assert calls == []

    def test_remove_action_is_idempotent(self, tmp_path: Path):
        target = tmp_path / "project"
        (target / "src").mkdir(parents=True)
        action = RollbackAction.remove(target, name="remove project")
        action.undo()
        action.undo()
        assert not target.exists()
        assert action.name == "remove project"

    def test_actions_snapshot(self):
        manager = RollbackManager()
        manager.register(RollbackAction("a", lambda: None))
        assert [a.name for a in manager.actions] == ["a"]

    def test_report_to_dict(self):
        manager = RollbackManager()
        manager.register_callable("a", lambda: None)
        assert manager.execute_all().to_dict() == {
            "attempted": ["a"],
            "succeeded": ["a"],
            "warnings": [],
        }
