"""
Configuration resolver — merge defaults, a document and interactive answers.

Precedence, lowest to highest:

    built-in defaults  <  configuration document  <  interactive answers

Interactive answers are only requested for keys that are still unset
after the document is applied, so a complete document gives a fully
non-interactive run.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from appstrap.core.config.prompts import Prompter
from appstrap.core.errors import ConfigError
from appstrap.core.models.config import RECOGNIZED_KEYS, Configuration

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "db_host": "127.0.0.1",
    "skip_database": False,
}

DEFAULT_DB_NAME = "appstrap"

# Human label → driver for the database location question.
DATABASE_LOCATIONS = {
    "SQLite file": "sqlite",
    "MySQL server": "mysql",
    "PostgreSQL server": "pgsql",
}

_DEFAULT_DB_USERS = {"mysql": "root", "pgsql": "postgres"}

_YAML_SUFFIXES = (".yml", ".yaml")


class ConfigResolver:
    """Build one ``Configuration`` from all configuration sources."""

    def load_document(self, path: Path) -> dict[str, Any]:
        """Read and parse a configuration document.

        ``.yml`` / ``.yaml`` files are parsed as YAML, everything else
        as JSON.

        Raises:
            ConfigError: If the file is missing, unreadable, unparseable,
                or not a mapping.
        """
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")

        logger.debug("Loading configuration document from %s", path)

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

        try:
            if path.suffix.lower() in _YAML_SUFFIXES:
                data = yaml.safe_load(raw)
            else:
                data = json.loads(raw)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")

        return data

    def resolve(
        self,
        defaults: dict[str, Any],
        config_path: Path | None,
        prompter: Prompter,
    ) -> Configuration:
        """Resolve the configuration for one run.

        Raises:
            ConfigError: If the document is invalid or the merged values
                do not form a valid configuration.
        """
        values = dict(defaults)

        if config_path is not None:
            document = self.load_document(config_path)
            ignored = sorted(k for k in document if k not in RECOGNIZED_KEYS)
            if ignored:
                logger.debug("Ignoring unknown config keys: %s", ", ".join(ignored))
            values.update({k: v for k, v in document.items() if k in RECOGNIZED_KEYS})

        self._ask_missing(values, prompter)

        try:
            config = Configuration.from_flat(values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        logger.info("Resolved configuration (driver=%s)", config.driver)
        return config

    def _ask_missing(self, values: dict[str, Any], prompter: Prompter) -> None:
        """Fill unset keys from the prompter, in question order."""
        if values.get("skip_database"):
            values.setdefault("db_driver", "skipped")

        if "db_driver" not in values:
            location = prompter.choose(
                "db_driver",
                "Where should the database be created?",
                list(DATABASE_LOCATIONS),
                "SQLite file",
            )
            values["db_driver"] = DATABASE_LOCATIONS.get(location, location)

        driver = values["db_driver"]
        if driver in _DEFAULT_DB_USERS and not values.get("skip_database"):
            if "db_name" not in values:
                values["db_name"] = prompter.ask("db_name", "Database name", DEFAULT_DB_NAME)
            if "db_user" not in values:
                values["db_user"] = prompter.ask(
                    "db_user", "Database user", _DEFAULT_DB_USERS[driver]
                )
            if "db_password" not in values:
                values["db_password"] = prompter.ask(
                    "db_password", "Database password", "", hidden=True
                )
            if "create_database" not in values:
                values["create_database"] = prompter.confirm(
                    "create_database", "Create the database now?", True
                )

        if "with_docker" not in values:
            values["with_docker"] = prompter.confirm("with_docker", "Enable Docker support?", True)
        if "telemetry" not in values:
            values["telemetry"] = prompter.confirm(
                "telemetry", "Send anonymous usage statistics?", True
            )
        if "init_git" not in values:
            values["init_git"] = prompter.confirm("init_git", "Initialize Git repository?", True)
