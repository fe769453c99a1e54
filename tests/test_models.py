"""
Tests for domain models — configuration variants and step results.
"""

import pytest
from pydantic import ValidationError

from appstrap.core.models import (
    Configuration,
    MysqlDatabase,
    PostgresDatabase,
    Severity,
    SkippedDatabase,
    SqliteDatabase,
    StepResult,
)


class TestConfiguration:
    def test_defaults(self):
        config = Configuration()
        assert isinstance(config.database, SqliteDatabase)
        assert config.driver == "sqlite"
        assert not config.is_server_database

    def test_from_flat_mysql_port_default(self):
        config = Configuration.from_flat({"db_driver": "mysql", "db_name": "a", "db_user": "u"})
        assert isinstance(config.database, MysqlDatabase)
        assert config.database.port == 3306
        assert config.is_server_database

    def test_from_flat_pgsql_port_default(self):
        config = Configuration.from_flat({"db_driver": "pgsql", "db_name": "a", "db_user": "u"})
        assert isinstance(config.database, PostgresDatabase)
        assert config.database.port == 5432

    def test_server_driver_requires_name_and_user(self):
        with pytest.raises(ValidationError):
            Configuration.from_flat({"db_driver": "mysql"})

    def test_skip_database_wins(self):
        config = Configuration.from_flat({"db_driver": "pgsql", "skip_database": True})
        assert isinstance(config.database, SkippedDatabase)

    def test_null_password_becomes_empty(self):
        config = Configuration.from_flat(
            {"db_driver": "mysql", "db_name": "a", "db_user": "u", "db_password": None}
        )
        assert config.database.password == ""

    def test_frozen(self):
        config = Configuration()
        with pytest.raises(ValidationError):
            config.with_docker = True

    def test_to_flat_round_trip(self):
        flat = {
            "db_driver": "pgsql",
            "db_host": "h",
            "db_port": 6543,
            "db_name": "n",
            "db_user": "u",
            "db_password": "p",
            "create_database": True,
            "with_docker": True,
            "telemetry": False,
            "init_git": True,
            "skip_database": False,
        }
        assert Configuration.from_flat(flat).to_flat() == flat


class TestStepResult:
    def test_fatal_failure_aborts(self):
        result = StepResult.failure("provision", Severity.FATAL, "boom")
        assert result.failed
        assert result.aborts_pipeline

    def test_best_effort_failure_does_not_abort(self):
        result = StepResult.failure("git", Severity.BEST_EFFORT, "boom")
        assert not result.aborts_pipeline

    def test_warning_and_skip_are_ok(self):
        assert StepResult.warning("database", Severity.BEST_EFFORT, "x").ok
        assert StepResult.skip("docker", Severity.FATAL, "disabled").ok

    def test_success_carries_config(self):
        config = Configuration()
        result = StepResult.success("configure", Severity.FATAL, "done", config)
        assert result.config is config
        assert result.status == "ok"
