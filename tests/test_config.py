"""
Tests for configuration resolution — documents, prompts and precedence.
"""

import json
from pathlib import Path

import pytest

from appstrap.core.config.prompts import DefaultsPrompter, ScriptedPrompter
from appstrap.core.config.resolver import DEFAULTS, ConfigResolver
from appstrap.core.config.settings import InstallerSettings
from appstrap.core.errors import ConfigError
from appstrap.core.models.config import (
    MysqlDatabase,
    PostgresDatabase,
    SkippedDatabase,
    SqliteDatabase,
)

FULL_MYSQL = {
    "db_driver": "mysql",
    "db_host": "db.internal",
    "db_port": 3307,
    "db_name": "blog",
    "db_user": "blogger",
    "db_password": "s3cret",
    "create_database": True,
    "with_docker": True,
    "telemetry": False,
    "init_git": True,
}


def _resolve(path, prompter=None):
    return ConfigResolver().resolve(dict(DEFAULTS), path, prompter or DefaultsPrompter())


# ── Documents ────────────────────────────────────────────────────────


class TestLoadDocument:
    def test_json(self, write_document):
        path = write_document({"db_driver": "sqlite"})
        assert ConfigResolver().load_document(path) == {"db_driver": "sqlite"}

    def test_yaml(self, tmp_path: Path):
        path = tmp_path / "appstrap.yml"
        path.write_text("db_driver: pgsql\nwith_docker: false\n")
        assert ConfigResolver().load_document(path) == {
            "db_driver": "pgsql",
            "with_docker": False,
        }

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{invalid json}")
        with pytest.raises(ConfigError, match="Invalid config file"):
            ConfigResolver().load_document(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            ConfigResolver().load_document(tmp_path / "nope.json")

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError, match="Expected a mapping"):
            ConfigResolver().load_document(path)


# ── Resolution ───────────────────────────────────────────────────────


class TestResolve:
    def test_full_document_asks_nothing(self, write_document):
        prompter = ScriptedPrompter()
        config = _resolve(write_document(FULL_MYSQL), prompter)
        assert prompter.asked == []
        assert isinstance(config.database, MysqlDatabase)
        assert config.database.host == "db.internal"
        assert config.database.port == 3307
        assert config.database.create is True
        assert config.with_docker and config.init_git and not config.telemetry

    def test_document_overrides_defaults(self, write_document):
        config = _resolve(write_document({**FULL_MYSQL, "db_host": "10.0.0.5"}))
        assert config.database.host == "10.0.0.5"

    def test_default_host_used_when_absent(self, write_document):
        doc = {k: v for k, v in FULL_MYSQL.items() if k != "db_host"}
        config = _resolve(write_document(doc))
        assert config.database.host == "127.0.0.1"

    def test_question_order_without_document(self):
        prompter = ScriptedPrompter()
        config = _resolve(None, prompter)
        assert prompter.asked == ["db_driver", "with_docker", "telemetry", "init_git"]
        assert isinstance(config.database, SqliteDatabase)

    def test_server_driver_asks_for_credentials(self):
        prompter = ScriptedPrompter(
            {"db_driver": "PostgreSQL server", "db_password": "pw", "with_docker": False}
        )
        config = _resolve(None, prompter)
        assert prompter.asked == [
            "db_driver",
            "db_name",
            "db_user",
            "db_password",
            "create_database",
            "with_docker",
            "telemetry",
            "init_git",
        ]
        db = config.database
        assert isinstance(db, PostgresDatabase)
        assert (db.name, db.user, db.password, db.port) == ("appstrap", "postgres", "pw", 5432)

    def test_partial_document_only_asks_missing(self, write_document):
        prompter = ScriptedPrompter({"init_git": False})
        config = _resolve(write_document({"db_driver": "sqlite", "with_docker": False}), prompter)
        assert prompter.asked == ["telemetry", "init_git"]
        assert config.init_git is False

    def test_skip_database(self, write_document):
        prompter = ScriptedPrompter()
        config = _resolve(write_document({"skip_database": True, "db_driver": "mysql"}), prompter)
        assert isinstance(config.database, SkippedDatabase)
        assert config.skip_database
        assert "db_name" not in prompter.asked
        assert "db_driver" not in prompter.asked

    def test_unknown_keys_ignored(self, write_document):
        config = _resolve(write_document({"db_driver": "sqlite", "colour": "blue"}))
        assert "colour" not in config.to_flat()

    def test_wrong_type_is_config_error(self, write_document):
        with pytest.raises(ConfigError, match="Invalid configuration"):
            _resolve(write_document({"db_driver": "sqlite", "with_docker": "maybe"}))

    def test_empty_database_name_is_config_error(self, write_document):
        with pytest.raises(ConfigError):
            _resolve(write_document({**FULL_MYSQL, "db_name": ""}))

    def test_unknown_driver_is_config_error(self, write_document):
        with pytest.raises(ConfigError):
            _resolve(write_document({"db_driver": "oracle"}))

    def test_deterministic(self, write_document):
        path = write_document(FULL_MYSQL)
        first = _resolve(path)
        second = _resolve(path)
        assert first == second
        assert json.dumps(first.to_flat()) == json.dumps(second.to_flat())


# ── Settings ─────────────────────────────────────────────────────────


class TestInstallerSettings:
    def test_render_create_command(self):
        command = InstallerSettings().render_create_command("blog", "beta")
        assert command == [
            "composer",
            "create-project",
            "pocketframe/application",
            "blog",
            "--stability=beta",
            "--no-interaction",
            "--remove-vcs",
        ]

    def test_custom_template_package(self):
        settings = InstallerSettings(template_package="acme/skeleton")
        assert "acme/skeleton" in settings.render_create_command("x", "dev")
