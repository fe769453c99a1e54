"""
Database provisioning — best-effort creation of the project's database.

sqlite:  create the database file and a schema-version tracking table.
mysql:   ``mysql -e 'CREATE DATABASE IF NOT EXISTS ...'`` (only if requested).
pgsql:   ``createdb ...`` (only if requested).

Server commands are shell strings with every argument quoted; passwords
travel through the client's environment variable rather than argv, so
they never appear in a process listing.

Everything here raises on failure. The pipeline runs this as a
best-effort step, so a failure becomes a warning, never an abort —
many environments provision databases out-of-band.
"""

from __future__ import annotations

import logging
import shlex
import sqlite3
from contextlib import closing
from pathlib import Path

from appstrap.adapters.shell.command import MANDATORY_TIMEOUT, ProcessRunner
from appstrap.adapters.shell.filesystem import touch
from appstrap.core.models.config import (
    Configuration,
    MysqlDatabase,
    PostgresDatabase,
    SqliteDatabase,
)

logger = logging.getLogger(__name__)

SCHEMA_TABLE = "schema_migrations"

_SCHEMA_SQL = (
    f"CREATE TABLE IF NOT EXISTS {SCHEMA_TABLE} ("
    "version TEXT PRIMARY KEY, "
    "applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP)"
)


def mysql_identifier(name: str) -> str:
    """Quote a MySQL identifier (backticks, embedded backticks doubled)."""
    return "`" + name.replace("`", "``") + "`"


def mysql_create_command(db: MysqlDatabase) -> tuple[str, dict[str, str]]:
    """Shell command and environment creating a MySQL database."""
    sql = f"CREATE DATABASE IF NOT EXISTS {mysql_identifier(db.name)};"
    command = " ".join(
        [
            "mysql",
            "--host", shlex.quote(db.host),
            "--port", str(db.port),
            "--user", shlex.quote(db.user),
            "-e", shlex.quote(sql),
        ]
    )
    return command, {"MYSQL_PWD": db.password}


def postgres_create_command(db: PostgresDatabase) -> tuple[str, dict[str, str]]:
    """Shell command and environment creating a PostgreSQL database."""
    command = " ".join(
        [
            "createdb",
            "--host", shlex.quote(db.host),
            "--port", str(db.port),
            "--username", shlex.quote(db.user),
            "--no-password",
            shlex.quote(db.name),
        ]
    )
    return command, {"PGPASSWORD": db.password}


def create_sqlite_database(project_path: Path, db: SqliteDatabase) -> Path:
    """Create the database file and the schema tracking table."""
    path = touch(project_path / db.path)
    with closing(sqlite3.connect(path)) as conn:
        with conn:
            conn.execute(_SCHEMA_SQL)
    logger.info("Created sqlite database %s", path)
    return path


def provision_database(
    project_path: Path,
    config: Configuration,
    runner: ProcessRunner,
    timeout: float = MANDATORY_TIMEOUT,
) -> str:
    """Provision the configured database and describe what was done.

    Raises:
        ProcessError: The database client failed or timed out.
        sqlite3.Error / OSError: The sqlite file could not be prepared.
    """
    db = config.database

    if isinstance(db, SqliteDatabase):
        path = create_sqlite_database(project_path, db)
        return f"Created {path.relative_to(project_path)}"

    if isinstance(db, (MysqlDatabase, PostgresDatabase)):
        if not db.create:
            return f"Using existing {db.driver} database '{db.name}'"

        if isinstance(db, MysqlDatabase):
            command, env = mysql_create_command(db)
        else:
            command, env = postgres_create_command(db)

        runner.run(command, cwd=project_path, timeout=timeout, env=env)
        logger.info("Created %s database %s on %s:%s", db.driver, db.name, db.host, db.port)
        return f"Created {db.driver} database '{db.name}'"

    return "Database provisioning skipped"
