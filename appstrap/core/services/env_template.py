"""
Environment template writer — rewrite a ``.env`` template from configuration.

Line-oriented key substitution, nothing more:

- ``KEY=old``          → ``KEY=new``
- ``# KEY=example``    → ``KEY=new``   (only when no active line exists)
- anything else        → untouched

Values are quoted deterministically, so rendering an already rendered
file with the same values changes nothing.
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path

from appstrap.adapters.shell.filesystem import write_text
from appstrap.core.errors import RequirementError
from appstrap.core.models.config import (
    Configuration,
    MysqlDatabase,
    PostgresDatabase,
    SqliteDatabase,
)

logger = logging.getLogger(__name__)

_NEEDS_QUOTES = re.compile(r"[\s#\"'$\\`]")


def format_env_value(value: object) -> str:
    """Render one value for a ``KEY=VALUE`` line.

    Newlines are dropped; values with whitespace, quotes, ``#`` or ``$``
    are double-quoted with ``\\`` and ``"`` escaped.
    """
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)

    text = text.replace("\r", "").replace("\n", "")
    if not text or not _NEEDS_QUOTES.search(text):
        return text

    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def env_values(config: Configuration, project_name: str) -> dict[str, str]:
    """Map a configuration onto the env keys it controls.

    Only keys returned here are rewritten; everything else keeps the
    template's default.
    """
    values: dict[str, str] = {"APP_NAME": project_name}

    db = config.database
    if isinstance(db, SqliteDatabase):
        values["DB_CONNECTION"] = db.driver
        values["DB_DATABASE"] = db.path
    elif isinstance(db, (MysqlDatabase, PostgresDatabase)):
        values["DB_CONNECTION"] = db.driver
        values["DB_HOST"] = db.host
        values["DB_PORT"] = str(db.port)
        values["DB_DATABASE"] = db.name
        values["DB_USERNAME"] = db.user
        values["DB_PASSWORD"] = db.password

    return values


def _line_patterns(key: str) -> tuple[re.Pattern[str], re.Pattern[str]]:
    name = re.escape(key)
    active = re.compile(rf"^\s*(?:export\s+)?{name}\s*=")
    commented = re.compile(rf"^\s*#\s*{name}\s*=")
    return active, commented


def render(template_text: str, values: dict[str, object]) -> str:
    """Rewrite placeholder lines of *template_text* using *values*."""
    lines = template_text.splitlines(keepends=True)

    for key, value in values.items():
        active, commented = _line_patterns(key)
        index = next((i for i, line in enumerate(lines) if active.match(line)), None)
        if index is None:
            index = next((i for i, line in enumerate(lines) if commented.match(line)), None)
        if index is None:
            continue

        line = lines[index]
        ending = line[len(line.rstrip("\r\n")):]
        lines[index] = f"{key}={format_env_value(value)}{ending}"

    return "".join(lines)


def write_env_file(
    project_path: Path,
    values: dict[str, object],
    *,
    env_file: str = ".env",
    example_file: str = ".env.example",
) -> Path:
    """Create ``.env`` from the example if needed, then render it in place.

    Raises:
        RequirementError: If neither ``.env`` nor the example exists.
    """
    env_path = project_path / env_file
    example_path = project_path / example_file

    if not env_path.is_file():
        if not example_path.is_file():
            raise RequirementError(
                f"Template has no {example_file} to derive {env_file} from"
            )
        shutil.copyfile(example_path, env_path)
        logger.debug("Copied %s → %s", example_path, env_path)

    content = env_path.read_text(encoding="utf-8")
    write_text(env_path, render(content, values))
    logger.info("Wrote %s (%d keys)", env_path, len(values))
    return env_path
