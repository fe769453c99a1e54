"""
Compose generator — deterministic service manifest for local development.

Three services when a server database is configured:

    app         the application container (built from the Dockerfile)
    db          mysql:8.0 or postgres:15, selected by driver
    phpmyadmin  administration UI

Everything except the database port, image and data directory is a
fixed constant. A file-based (or skipped) database has no server to
run, so only the ``app`` service is produced.
"""

from __future__ import annotations

import logging
from typing import Any

import yaml

from appstrap.core.models.config import Configuration, MysqlDatabase, PostgresDatabase
from appstrap.core.models.template import GeneratedFile

logger = logging.getLogger(__name__)

COMPOSE_FILE = "compose.yml"

DB_IMAGES = {"mysql": "mysql:8.0", "pgsql": "postgres:15"}
DB_PORTS = {"mysql": "3306", "pgsql": "5432"}
DB_DATA_DIRS = {"mysql": "/var/lib/mysql", "pgsql": "/var/lib/postgresql/data"}

DB_ROOT_PASSWORD = "secret"
APP_PORTS = ["8000:80"]
ADMIN_PORTS = ["8080:80"]


def _app_service(driver: str | None) -> dict[str, Any]:
    service: dict[str, Any] = {
        "build": ".",
        "ports": list(APP_PORTS),
        "volumes": ["./:/var/www/html"],
    }
    if driver is not None:
        service["depends_on"] = ["db"]
        service["environment"] = {
            "DB_HOST": "db",
            "DB_PORT": DB_PORTS[driver],
        }
    return service


def _db_service(driver: str) -> dict[str, Any]:
    return {
        "image": DB_IMAGES[driver],
        "environment": {
            "MYSQL_ROOT_PASSWORD": DB_ROOT_PASSWORD,
            "POSTGRES_PASSWORD": DB_ROOT_PASSWORD,
        },
        "volumes": [f"db_data:{DB_DATA_DIRS[driver]}"],
    }


def _admin_service() -> dict[str, Any]:
    return {
        "image": "phpmyadmin/phpmyadmin",
        "ports": list(ADMIN_PORTS),
        "environment": {
            "PMA_HOST": "db",
            "PMA_USER": "root",
            "PMA_PASSWORD": DB_ROOT_PASSWORD,
        },
        "depends_on": ["db"],
    }


def build_compose_manifest(config: Configuration) -> dict[str, Any]:
    """Build the compose document for *config* as a plain dict."""
    db = config.database
    if not isinstance(db, (MysqlDatabase, PostgresDatabase)):
        logger.warning(
            "Docker requested with %s database — generating the app service only",
            db.driver,
        )
        return {"services": {"app": _app_service(None)}}

    return {
        "services": {
            "app": _app_service(db.driver),
            "db": _db_service(db.driver),
            "phpmyadmin": _admin_service(),
        },
        "volumes": {"db_data": {}},
    }


def generate_compose(config: Configuration, *, output_path: str = COMPOSE_FILE) -> GeneratedFile:
    """Render the compose manifest as YAML."""
    manifest = build_compose_manifest(config)
    content = yaml.safe_dump(manifest, default_flow_style=False, sort_keys=False)
    return GeneratedFile(
        path=output_path,
        content=content,
        reason=f"Compose manifest ({', '.join(manifest['services'])})",
    )
