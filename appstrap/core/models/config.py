"""
Configuration model — the resolved answers that drive every feature step.

The flat document keys (``db_driver``, ``db_name``, ...) are validated
once, at resolution time, into a tagged variant over the database
driver. Feature steps pattern-match on the variant instead of probing
a string-keyed bag, so a network driver can never reach the database
step without a name and a user.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# Keys accepted in a configuration document. Anything else is ignored.
RECOGNIZED_KEYS = (
    "db_driver",
    "db_host",
    "db_port",
    "db_name",
    "db_user",
    "db_password",
    "with_docker",
    "telemetry",
    "init_git",
    "create_database",
    "skip_database",
)

SQLITE_DATABASE_PATH = "database/database.sqlite"

DEFAULT_PORTS = {"mysql": 3306, "pgsql": 5432}


class SqliteDatabase(BaseModel):
    """File-based database inside the project tree."""

    model_config = ConfigDict(frozen=True)

    driver: Literal["sqlite"] = "sqlite"
    path: str = SQLITE_DATABASE_PATH


class _ServerDatabase(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    name: str = Field(min_length=1)
    user: str = Field(min_length=1)
    password: str = ""
    create: bool = False


class MysqlDatabase(_ServerDatabase):
    """MySQL server database."""

    driver: Literal["mysql"] = "mysql"
    port: int = DEFAULT_PORTS["mysql"]


class PostgresDatabase(_ServerDatabase):
    """PostgreSQL server database."""

    driver: Literal["pgsql"] = "pgsql"
    port: int = DEFAULT_PORTS["pgsql"]


class SkippedDatabase(BaseModel):
    """No database provisioning for this project."""

    model_config = ConfigDict(frozen=True)

    driver: Literal["skipped"] = "skipped"


Database = Annotated[
    Union[SqliteDatabase, MysqlDatabase, PostgresDatabase, SkippedDatabase],
    Field(discriminator="driver"),
]


class Configuration(BaseModel):
    """Resolved project configuration.

    Immutable: steps that need to change it return an updated copy
    (``model_copy(update=...)``) which the pipeline adopts.
    """

    model_config = ConfigDict(frozen=True)

    database: Database = Field(default_factory=SqliteDatabase)
    with_docker: bool = False
    telemetry: bool = False
    init_git: bool = False

    @property
    def driver(self) -> str:
        return self.database.driver

    @property
    def skip_database(self) -> bool:
        return isinstance(self.database, SkippedDatabase)

    @property
    def is_server_database(self) -> bool:
        return isinstance(self.database, (MysqlDatabase, PostgresDatabase))

    @classmethod
    def from_flat(cls, values: dict[str, Any]) -> Configuration:
        """Build a configuration from flat document keys.

        Raises:
            pydantic.ValidationError: on wrong types or a network driver
                without ``db_name`` / ``db_user``.
        """
        driver = values.get("db_driver", "sqlite")
        if values.get("skip_database"):
            driver = "skipped"

        database: dict[str, Any] = {"driver": driver}
        if driver in DEFAULT_PORTS:
            database.update(
                host=values.get("db_host", "127.0.0.1"),
                port=values.get("db_port", DEFAULT_PORTS[driver]),
                name=values.get("db_name", ""),
                user=values.get("db_user", ""),
                password=values.get("db_password") or "",
                create=values.get("create_database", False),
            )

        return cls.model_validate(
            {
                "database": database,
                "with_docker": values.get("with_docker", False),
                "telemetry": values.get("telemetry", False),
                "init_git": values.get("init_git", False),
            }
        )

    def to_flat(self) -> dict[str, Any]:
        """Flatten back to recognised document keys (stable key order)."""
        db = self.database
        flat: dict[str, Any] = {"db_driver": db.driver}
        if isinstance(db, (MysqlDatabase, PostgresDatabase)):
            flat.update(
                db_host=db.host,
                db_port=db.port,
                db_name=db.name,
                db_user=db.user,
                db_password=db.password,
                create_database=db.create,
            )
        flat.update(
            with_docker=self.with_docker,
            telemetry=self.telemetry,
            init_git=self.init_git,
            skip_database=self.skip_database,
        )
        return flat
